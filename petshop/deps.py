from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from petshop.core.logging import set_user_id
from petshop.core.security import decode_token
from petshop.core.settings import settings
from petshop.db import get_db
from petshop.models.user import User


def _extract_token_from_request(request: Request) -> str | None:
    # Prioridade: header Authorization, depois cookie (se habilitado)
    auth = request.headers.get("Authorization")
    if auth and auth.lower().startswith("bearer "):
        return auth.split(" ", 1)[1]
    if settings.USE_COOKIE_AUTH:
        return request.cookies.get("access_token")
    return None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:  # noqa: B008
    token = _extract_token_from_request(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Não autorizado"
        )

    try:
        payload = decode_token(token, expected_type="access")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido ou expirado",
        ) from ValueError

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Token malformado"
        )

    user: User | None = db.get(User, int(user_id))
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuário inativo ou inexistente",
        )

    set_user_id(str(user.id))
    return user
