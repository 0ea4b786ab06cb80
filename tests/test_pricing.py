from decimal import Decimal
from types import SimpleNamespace

import pytest

from petshop.services.pricing import find_tier, quote_services, resolve_price, round_weight


def tier(raca, peso, preco):
    return SimpleNamespace(raca=raca, peso=peso, preco=Decimal(preco))


TIERS = [
    tier("Poodle", 9, "70"),
    tier("Poodle", None, "60"),
    tier(None, 9, "55"),
    tier(None, None, "50"),
]


@pytest.mark.parametrize(
    "peso,esperado",
    [(8.5, 9), (8.49, 8), (8.7, 9), (9.0, 9), (0.6, 1), (None, None), (0, None)],
)
def test_round_weight_half_up(peso, esperado):
    assert round_weight(peso) == esperado


def test_fractional_weight_matches_nearest_tier():
    # 8.7kg vira 9, não 8
    tiers = [tier(None, 9, "90"), tier(None, 8, "80")]
    assert resolve_price(tiers, None, 8.7) == Decimal("90")
    assert resolve_price(tiers, None, 8.2) == Decimal("80")


@pytest.mark.parametrize(
    "raca,peso,esperado",
    [
        ("Poodle", 8.5, "70"),  # raça + peso
        ("Poodle", 20, "60"),  # só raça
        ("Poodle", None, "60"),
        ("Beagle", 9.2, "55"),  # só peso
        (None, 9, "55"),
        ("Beagle", 30, "50"),  # base
        ("", 0, "50"),  # vazio conta como ausente
    ],
)
def test_precedence(raca, peso, esperado):
    assert resolve_price(TIERS, raca, peso) == Decimal(esperado)


def test_breed_match_is_exact():
    assert resolve_price(TIERS, "poodle", 9) == Decimal("55")


def test_falls_back_to_first_tier_without_base():
    tiers = [tier("Shih Tzu", None, "80"), tier(None, 30, "90")]
    assert resolve_price(tiers, "Beagle", 10) == Decimal("80")


def test_first_matching_tier_wins():
    tiers = [tier(None, None, "50"), tier(None, None, "45")]
    assert find_tier(tiers, None, None).preco == Decimal("50")


def test_service_without_tiers_costs_zero():
    assert find_tier([], "Poodle", 9) is None
    assert resolve_price([], "Poodle", 9) == Decimal("0")


def test_quote_services_sums_in_order():
    pet = SimpleNamespace(raca="Poodle", peso=8.5)
    banho = SimpleNamespace(id=1, nome="Banho", precos=TIERS)
    unhas = SimpleNamespace(id=2, nome="Unhas", precos=[tier(None, None, "20")])
    vazio = SimpleNamespace(id=3, nome="Avaliação", precos=[])

    quote = quote_services(pet, [unhas, banho, vazio])

    assert [(s.id, s.preco) for s in quote.servicos] == [
        (2, Decimal("20")),
        (1, Decimal("70")),
        (3, Decimal("0")),
    ]
    assert quote.valor_total == Decimal("90")
