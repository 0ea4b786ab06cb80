from __future__ import annotations

from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from petshop.core.settings import settings

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db() -> Iterator[Session]:
    # uma sessão por request; commit fica a cargo de cada handler
    with SessionLocal() as db:
        yield db


__all__ = ["engine", "SessionLocal", "get_db"]
