from __future__ import annotations

from typing import Annotated

from pydantic import BeforeValidator, Field, confloat, constr

from petshop.models.pet import Sexo
from petshop.schemas.common import (
    CamelIn,
    CamelOut,
    OptionalDate,
    OptionalStr,
    blank_to_none,
)


class TutorLinkIn(CamelIn):
    id: int = Field(..., ge=1)
    is_primario: bool = False


class PetIn(CamelIn):
    nome: constr(strip_whitespace=True, min_length=1, max_length=120)
    foto: OptionalStr = None
    data_nascimento: OptionalDate = None
    raca: OptionalStr = None
    peso: Annotated[confloat(ge=0) | None, BeforeValidator(blank_to_none)] = None
    sexo: Annotated[Sexo | None, BeforeValidator(blank_to_none)] = None
    alergias: str | None = None
    observacoes: str | None = None
    usa_taxi_dog: bool = False
    tutores: list[TutorLinkIn] = Field(default_factory=list)


class PetTutorOut(CamelOut):
    id: int
    nome: str
    email: str | None = None
    is_primario: bool


class PetOut(CamelOut):
    id: int
    nome: str
    foto: str | None = None
    data_nascimento: str | None = None
    raca: str | None = None
    peso: float | None = None
    sexo: Sexo | None = None
    alergias: str | None = None
    observacoes: str | None = None
    usa_taxi_dog: bool
    tutores: list[PetTutorOut]
    created_at: str
    updated_at: str
