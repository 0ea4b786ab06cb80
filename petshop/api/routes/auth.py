from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from petshop.audit.helpers import record_audit
from petshop.core.logging import get_logger
from petshop.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from petshop.core.settings import settings
from petshop.db import get_db
from petshop.deps import get_current_user
from petshop.models.user import User
from petshop.schemas.auth import LoginIn, LoginOut, RegisterIn, UserOut

router = APIRouter(prefix="/auth", tags=["auth"])
register_router = APIRouter(tags=["auth"])


def _set_auth_cookies(resp: Response, access: str, refresh: str) -> None:
    cookie_kwargs = dict(
        httponly=True,
        secure=bool(settings.SECURE_COOKIES),
        samesite="lax",
        path="/",
        domain=settings.COOKIE_DOMAIN or None,
    )
    resp.set_cookie(
        key="access_token",
        value=access,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        **cookie_kwargs,
    )
    resp.set_cookie(
        key="refresh_token",
        value=refresh,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        **cookie_kwargs,
    )


@register_router.post("/register", response_model=UserOut, status_code=201)
def register(payload: RegisterIn, request: Request, db: Session = Depends(get_db)):
    email = payload.email.lower()
    conds = [User.email == email]
    if payload.username:
        conds.append(User.username == payload.username)
    existing = db.query(User).filter(or_(*conds)).first()
    if existing:
        if existing.email == email:
            raise HTTPException(status.HTTP_409_CONFLICT, "Email já cadastrado")
        raise HTTPException(status.HTTP_409_CONFLICT, "Nome de usuário já cadastrado")

    user = User(
        name=payload.name,
        email=email,
        username=payload.username,
        password_hash=hash_password(payload.password),
        is_active=True,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError:
        # corrida entre dois cadastros com o mesmo email/usuário
        db.rollback()
        raise HTTPException(
            status.HTTP_409_CONFLICT, "Email ou nome de usuário já cadastrado"
        ) from IntegrityError

    record_audit(
        db,
        request=request,
        user_id=user.id,
        action="REGISTER",
        entity="user",
        entity_id=user.id,
    )
    db.commit()
    db.refresh(user)
    get_logger().info("user.registered", user_id=user.id)
    return UserOut(id=user.id, name=user.name, email=user.email, username=user.username)


@router.post("/login", response_model=LoginOut)
def api_login(
    payload: LoginIn, request: Request, response: Response, db: Session = Depends(get_db)
) -> LoginOut:
    user: User | None = (
        db.query(User).filter(User.email == payload.email.lower()).one_or_none()
    )
    if not user or not user.is_active or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciais inválidas")

    access = create_access_token(str(user.id))
    refresh = create_refresh_token(str(user.id))

    if settings.USE_COOKIE_AUTH:
        _set_auth_cookies(response, access, refresh)

    record_audit(
        db,
        request=request,
        user_id=user.id,
        action="LOGIN",
        entity="user",
        entity_id=user.id,
        autocommit=True,
    )
    return LoginOut(access_token=access, refresh_token=refresh, token_type="bearer")


@router.get("/me", response_model=UserOut)
def api_me(user: User = Depends(get_current_user)):
    return UserOut(id=user.id, name=user.name, email=user.email, username=user.username)


@router.post("/logout")
def api_logout(response: Response):
    # JWT é stateless; só limpa os cookies
    for k in ("access_token", "refresh_token"):
        response.delete_cookie(k, path="/")
    return {"ok": True}


@router.post("/refresh", response_model=LoginOut)
def api_refresh(request: Request) -> LoginOut:
    # refresh token no Authorization: Bearer <token> ou cookie
    auth = request.headers.get("Authorization")
    token: str | None = None
    if auth and auth.lower().startswith("bearer "):
        token = auth.split(" ", 1)[1]
    if not token:
        token = request.cookies.get("refresh_token")
    if not token:
        raise HTTPException(status_code=401, detail="Refresh token ausente")

    try:
        payload = decode_token(token, expected_type="refresh")
    except ValueError:
        raise HTTPException(status_code=401, detail="Refresh token inválido") from ValueError

    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Refresh token malformado")

    access = create_access_token(str(sub))
    refresh = create_refresh_token(str(sub))
    return LoginOut(access_token=access, refresh_token=refresh)
