from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote

from petshop.core.settings import settings
from petshop.models.agendamento import Agendamento
from petshop.models.pet import Pet
from petshop.models.tutor import Tutor

MIN_PHONE_DIGITS = 10

_NON_DIGITS = re.compile(r"\D")


class NotificationError(Exception):
    pass


@dataclass(frozen=True)
class NotificationLink:
    whatsapp_url: str
    tutor_nome: str
    pet_nome: str
    telefone: str


def primary_tutor(pet: Pet) -> Tutor | None:
    """Tutor marcado como principal; se houver mais de um, o primeiro."""
    link = next((pt for pt in pet.tutores if pt.is_primario), None)
    return link.tutor if link else None


def digits_only(phone: str | None) -> str:
    return _NON_DIGITS.sub("", phone or "")


def build_whatsapp_link(phone: str, tutor_nome: str, pet_nome: str) -> str:
    digits = digits_only(phone)
    if len(digits) < MIN_PHONE_DIGITS:
        raise NotificationError("Número de telefone inválido")
    message = settings.NOTIFICATION_TEMPLATE.format(tutor=tutor_nome, pet=pet_nome)
    base = settings.WHATSAPP_BASE_URL.rstrip("/")
    # mesmo conjunto reservado do encodeURIComponent
    text = quote(message, safe="!'()*~")
    return f"{base}/{settings.WHATSAPP_COUNTRY_CODE}{digits}?text={text}"


def notify_pickup(ag: Agendamento) -> NotificationLink:
    """
    Monta o link de WhatsApp avisando o tutor principal que o pet pode ser
    buscado e marca o agendamento como notificado. Chamar de novo é permitido.
    """
    tutor = primary_tutor(ag.pet)
    if tutor is None or not tutor.telefone:
        raise NotificationError("Tutor principal não possui telefone cadastrado")

    url = build_whatsapp_link(tutor.telefone, tutor.nome, ag.pet.nome)
    ag.enviar_notificacao = True
    return NotificationLink(
        whatsapp_url=url,
        tutor_nome=tutor.nome,
        pet_nome=ag.pet.nome,
        telefone=tutor.telefone,
    )
