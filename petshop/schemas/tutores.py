from __future__ import annotations

from pydantic import constr

from petshop.schemas.common import CamelIn, CamelOut, OptionalStr


class TutorIn(CamelIn):
    nome: constr(strip_whitespace=True, min_length=1, max_length=120)
    telefone: constr(strip_whitespace=True, min_length=1, max_length=30)
    email: OptionalStr = None
    cep: OptionalStr = None
    rua: OptionalStr = None
    numero: OptionalStr = None
    complemento: OptionalStr = None
    bairro: OptionalStr = None
    cidade: OptionalStr = None
    estado: OptionalStr = None


class TutorOut(CamelOut):
    id: int
    nome: str
    email: str | None = None
    telefone: str
    cep: str | None = None
    rua: str | None = None
    numero: str | None = None
    complemento: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    estado: str | None = None
    created_at: str
    updated_at: str


class TutorSummaryOut(CamelOut):
    id: int
    nome: str
    email: str | None = None
    telefone: str
