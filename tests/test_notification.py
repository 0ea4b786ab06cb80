from types import SimpleNamespace
from urllib.parse import unquote

import pytest

from petshop.services.notification import (
    NotificationError,
    build_whatsapp_link,
    digits_only,
    notify_pickup,
    primary_tutor,
)


def _pet(*links, nome="Rex"):
    return SimpleNamespace(
        nome=nome,
        tutores=[
            SimpleNamespace(is_primario=p, tutor=SimpleNamespace(nome=n, telefone=t))
            for n, t, p in links
        ],
    )


def test_digits_only():
    assert digits_only("(11) 98765-4321") == "11987654321"
    assert digits_only(None) == ""


def test_link_has_country_code_and_encoded_message():
    url = build_whatsapp_link("(11) 98765-4321", "Ana", "Rex")

    assert url.startswith("https://wa.me/5511987654321?text=")
    text = url.split("?text=", 1)[1]
    assert " " not in text
    assert "Ana" in unquote(text)
    assert "Rex" in unquote(text)


def test_short_phone_is_rejected():
    with pytest.raises(NotificationError):
        build_whatsapp_link("9876-4321", "Ana", "Rex")


def test_primary_tutor_picks_flagged_link():
    pet = _pet(("Secundário", "11911112222", False), ("Principal", "11933334444", True))
    assert primary_tutor(pet).nome == "Principal"
    assert primary_tutor(_pet(("Só", "11911112222", False))) is None


def test_notify_pickup_marks_appointment():
    ag = SimpleNamespace(
        pet=_pet(("Ana", "11 98765-4321", True)), enviar_notificacao=False
    )
    link = notify_pickup(ag)

    assert ag.enviar_notificacao is True
    assert link.tutor_nome == "Ana"
    assert link.telefone == "11 98765-4321"


def test_notify_pickup_without_phone():
    ag = SimpleNamespace(pet=_pet(("Ana", "", True)), enviar_notificacao=False)
    with pytest.raises(NotificationError, match="telefone"):
        notify_pickup(ag)
    assert ag.enviar_notificacao is False


def test_link_keeps_unreserved_punctuation():
    url = build_whatsapp_link("11987654321", "Ana", "Rex")
    text = url.split("?text=", 1)[1]

    assert "Obrigado!" in text
    assert "%21" not in text
    assert "%28" not in build_whatsapp_link("11987654321", "Ana", "Rex (mini)")
