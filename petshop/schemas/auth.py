from __future__ import annotations

from pydantic import BaseModel, EmailStr, constr


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class LoginOut(BaseModel):
    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str = "bearer"


class RegisterIn(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=120)
    email: EmailStr
    password: constr(min_length=1)
    username: constr(strip_whitespace=True, min_length=1, max_length=60) | None = None


class UserOut(BaseModel):
    id: int
    name: str
    email: EmailStr
    username: str | None = None
