from __future__ import annotations

from datetime import date
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# formulários mandam "" para campos não preenchidos
OptionalStr = Annotated[str | None, BeforeValidator(blank_to_none)]
OptionalDate = Annotated[date | None, BeforeValidator(blank_to_none)]


class CamelIn(BaseModel):
    """Corpo de requisição: chaves em camelCase, campos desconhecidos rejeitados."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


class CamelOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
