import warnings
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.orm import Session

from petshop.models.agendamento import (
    Agendamento,
    MetodoPagamento,
    StatusAgendamento,
    StatusPagamento,
)
from petshop.services import lifecycle
from petshop.services.lifecycle import TransitionError


def _ag(**kw) -> Agendamento:
    kw.setdefault("status", StatusAgendamento.AGENDADO)
    kw.setdefault("status_pagamento", StatusPagamento.PENDENTE)
    return Agendamento(**kw)


def test_start_only_from_scheduled():
    ag = _ag()
    lifecycle.start(ag)
    assert ag.status == StatusAgendamento.EM_ANDAMENTO

    with pytest.raises(TransitionError):
        lifecycle.start(ag)


@pytest.mark.parametrize(
    "inicial", [StatusAgendamento.AGENDADO, StatusAgendamento.EM_ANDAMENTO]
)
def test_cancel_from_open_states(inicial):
    ag = _ag(status=inicial)
    lifecycle.cancel(ag)
    assert ag.status == StatusAgendamento.CANCELADO


@pytest.mark.parametrize(
    "inicial", [StatusAgendamento.CONCLUIDO, StatusAgendamento.CANCELADO]
)
def test_cancel_rejects_terminal_states(inicial):
    with pytest.raises(TransitionError):
        lifecycle.cancel(_ag(status=inicial))


def test_payment_does_not_change_status():
    ag = _ag(status=StatusAgendamento.EM_ANDAMENTO)
    lifecycle.record_payment(ag, MetodoPagamento.DEBIT_CARD)

    assert ag.status_pagamento == StatusPagamento.PAGO
    assert ag.metodo_pagamento == MetodoPagamento.DEBIT_CARD
    assert ag.status == StatusAgendamento.EM_ANDAMENTO

    with pytest.raises(TransitionError):
        lifecycle.record_payment(ag, MetodoPagamento.PIX)
    assert ag.metodo_pagamento == MetodoPagamento.DEBIT_CARD


def test_submit_checklist_completes_from_any_status(
    db_session: Session, test_agendamento
):
    ag = db_session.get(Agendamento, test_agendamento.id)
    ag.status = StatusAgendamento.CANCELADO

    checklist, created = lifecycle.submit_checklist(
        db_session, ag, {"tem_pulgas": 1, "outros_problemas": "Otite"}
    )

    assert created is True
    assert ag.status == StatusAgendamento.CONCLUIDO
    assert checklist.tem_pulgas is True
    assert checklist.tem_carrapatos is False
    assert checklist.outros_problemas == "Otite"


def test_submit_checklist_twice_updates_same_row(db_session: Session, test_agendamento):
    ag = db_session.get(Agendamento, test_agendamento.id)
    first, _ = lifecycle.submit_checklist(db_session, ag, {"tem_pulgas": True})
    db_session.commit()

    ag.status = StatusAgendamento.EM_ANDAMENTO
    second, created = lifecycle.submit_checklist(db_session, ag, {"problema_dentes": True})
    db_session.commit()

    assert created is False
    assert second.id == first.id
    assert second.problema_dentes is True
    assert second.tem_pulgas is False
    assert ag.status == StatusAgendamento.EM_ANDAMENTO


def test_replace_services(db_session: Session, test_agendamento, test_servico):
    ag = db_session.get(Agendamento, test_agendamento.id)
    lifecycle.replace_services(
        db_session, ag, [(test_servico.id, Decimal("10")), (test_servico.id, Decimal("15"))]
    )
    db_session.commit()
    db_session.refresh(ag)

    assert [s.preco for s in ag.servicos] == [Decimal("10"), Decimal("15")]


def test_module_source_has_no_escape_warnings():
    path = Path(lifecycle.__file__)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(path.read_text(encoding="utf-8"), str(path), "exec")
