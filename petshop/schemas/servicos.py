from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BeforeValidator, Field, conint, constr

from petshop.schemas.common import CamelIn, CamelOut, OptionalStr


def _weight_or_none(value):
    # vazio ou 0 = faixa sem peso
    if value in (None, "", 0, "0"):
        return None
    return value


class PrecoIn(CamelIn):
    raca: OptionalStr = None
    peso: Annotated[conint(ge=1) | None, BeforeValidator(_weight_or_none)] = None
    preco: Decimal = Field(..., ge=0)


class ServicoIn(CamelIn):
    nome: constr(strip_whitespace=True, min_length=1, max_length=120)
    observacoes: str | None = None
    precos: list[PrecoIn] = Field(default_factory=list)


class PrecoOut(CamelOut):
    id: int
    raca: str | None = None
    peso: int | None = None
    preco: float


class ServicoOut(CamelOut):
    id: int
    nome: str
    observacoes: str | None = None
    precos: list[PrecoOut]
    created_at: str
    updated_at: str
