from __future__ import annotations

from datetime import UTC, datetime

from fastapi import Request
from sqlalchemy.orm import Session

from petshop.core.logging import get_logger
from petshop.models.audit_log import AuditLog


def get_client_ip(request: Request) -> str | None:
    # atrás de proxy: 1º IP do X-Forwarded-For
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    xri = request.headers.get("x-real-ip")
    if xri:
        return xri.strip()
    return request.client.host if request.client else None


def record_audit(
    db: Session,
    *,
    request: Request,
    user_id: int | None,
    action: str,
    entity: str,
    entity_id: int | None,
    detail: str | None = None,
    autocommit: bool = False,
) -> None:
    """
    Com autocommit=False (padrão) o registro entra na mesma transação da
    alteração e só é gravado no commit do handler.
    Com autocommit=True grava isolado (login).
    """
    db.add(
        AuditLog(
            user_id=user_id,
            action=action,
            entity=entity,
            entity_id=entity_id,
            detail=detail,
            timestamp_utc=datetime.now(UTC),
            ip=get_client_ip(request),
        )
    )
    if autocommit:
        try:
            db.commit()
        except Exception as exc:
            db.rollback()  # falha em log não deve derrubar o request
            get_logger().warning("audit.commit_failed", entity=entity, error=str(exc))
