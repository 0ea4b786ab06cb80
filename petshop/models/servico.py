from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petshop.db.base_class import Base


class Servico(Base):
    __tablename__ = "servicos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nome: Mapped[str] = mapped_column(String(120), nullable=False)
    observacoes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        onupdate=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )

    # ordem de inserção importa: o fallback de preço usa o primeiro da lista
    precos = relationship(
        "Preco",
        back_populates="servico",
        cascade="all, delete-orphan",
        order_by="Preco.id",
    )
    agendamentos = relationship(
        "AgendamentoServico", back_populates="servico", cascade="all, delete-orphan"
    )


class Preco(Base):
    """Faixa de preço. raca/peso nulos funcionam como curinga; ambos nulos = preço base."""

    __tablename__ = "precos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    servico_id: Mapped[int] = mapped_column(
        ForeignKey("servicos.id", ondelete="CASCADE"), index=True, nullable=False
    )
    raca: Mapped[str | None] = mapped_column(String(120))
    peso: Mapped[int | None] = mapped_column(Integer)  # kg, arredondado
    preco: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    servico = relationship("Servico", back_populates="precos")
