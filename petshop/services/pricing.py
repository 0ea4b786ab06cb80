"""
Resolução de preço de serviços por raça/peso do pet.

Cada serviço tem uma lista de faixas (Preco) onde raça e peso nulos são
curingas. A busca segue esta precedência, parando no primeiro acerto:

1. raça + peso exatos (só se o pet tem os dois)
2. só raça (faixa sem peso)
3. só peso (faixa sem raça)
4. preço base (faixa sem raça e sem peso)
5. primeira faixa cadastrada
6. zero, se o serviço não tem faixas
"""
from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol

ZERO = Decimal("0")


class PriceTier(Protocol):
    raca: str | None
    peso: int | None
    preco: Decimal


@dataclass(frozen=True)
class QuotedService:
    id: int
    nome: str
    preco: Decimal


@dataclass
class PriceQuote:
    servicos: list[QuotedService] = field(default_factory=list)
    valor_total: Decimal = ZERO


def round_weight(peso: float | None) -> int | None:
    """Arredonda para o kg inteiro mais próximo (meio para cima: 8.5 -> 9)."""
    if not peso:
        return None
    return math.floor(peso + 0.5)


def _first(tiers: Iterable[PriceTier], raca: str | None, peso: int | None):
    return next((t for t in tiers if t.raca == raca and t.peso == peso), None)


def find_tier(
    tiers: Sequence[PriceTier], raca: str | None, peso: float | None
) -> PriceTier | None:
    raca = raca or None
    peso_kg = round_weight(peso)

    if raca and peso_kg is not None:
        tier = _first(tiers, raca, peso_kg)
        if tier:
            return tier
    if raca:
        tier = _first(tiers, raca, None)
        if tier:
            return tier
    if peso_kg is not None:
        tier = _first(tiers, None, peso_kg)
        if tier:
            return tier

    tier = _first(tiers, None, None)
    if tier:
        return tier

    # nenhuma regra casou: primeira faixa na ordem de cadastro
    return tiers[0] if tiers else None


def resolve_price(
    tiers: Sequence[PriceTier], raca: str | None, peso: float | None
) -> Decimal:
    tier = find_tier(tiers, raca, peso)
    if tier is None:
        return ZERO
    return Decimal(tier.preco)


def quote_services(pet, servicos: Iterable) -> PriceQuote:
    """Calcula o preço de cada serviço para o pet e o total. Não acessa o banco."""
    quote = PriceQuote()
    for servico in servicos:
        preco = resolve_price(list(servico.precos), pet.raca, pet.peso)
        quote.servicos.append(QuotedService(id=servico.id, nome=servico.nome, preco=preco))
        quote.valor_total += preco
    return quote
