r"""
Regras de ciclo de vida do agendamento.

    AGENDADO -> EM_ANDAMENTO -> CONCLUIDO
         \            \
          +------------+--> CANCELADO

Pagamento é independente do status: PENDENTE -> PAGO (sem estorno).
"""
from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy.orm import Session

from petshop.core.logging import get_logger
from petshop.models.agendamento import (
    TERMINAL_STATUSES,
    Agendamento,
    AgendamentoServico,
    Checklist,
    MetodoPagamento,
    StatusAgendamento,
    StatusPagamento,
)

CHECKLIST_FIELDS = (
    "tem_carrapatos",
    "tem_pulgas",
    "problema_pele",
    "problema_dentes",
    "outros_problemas",
    "observacoes",
)


class TransitionError(Exception):
    """Transição de status não permitida a partir do estado atual."""


def start(ag: Agendamento) -> None:
    if ag.status != StatusAgendamento.AGENDADO:
        raise TransitionError("Só é possível iniciar um agendamento com status AGENDADO")
    ag.status = StatusAgendamento.EM_ANDAMENTO


def cancel(ag: Agendamento) -> None:
    if ag.status in TERMINAL_STATUSES:
        raise TransitionError("Agendamento já foi concluído ou cancelado")
    ag.status = StatusAgendamento.CANCELADO


def record_payment(ag: Agendamento, metodo: MetodoPagamento) -> None:
    if ag.status_pagamento == StatusPagamento.PAGO:
        raise TransitionError("Pagamento já registrado")
    ag.status_pagamento = StatusPagamento.PAGO
    ag.metodo_pagamento = metodo


def submit_checklist(
    db: Session, ag: Agendamento, values: dict
) -> tuple[Checklist, bool]:
    """
    Cria ou atualiza o checklist do agendamento.

    Só a primeira submissão conclui o agendamento; edições posteriores
    alteram apenas o checklist, para não reverter um agendamento
    cancelado ou alterado manualmente.
    """
    fields = {k: values.get(k) for k in CHECKLIST_FIELDS}
    for flag in ("tem_carrapatos", "tem_pulgas", "problema_pele", "problema_dentes"):
        fields[flag] = bool(fields[flag])

    checklist = ag.checklist
    if checklist is not None:
        for k, v in fields.items():
            setattr(checklist, k, v)
        return checklist, False

    checklist = Checklist(**fields)
    ag.checklist = checklist
    ag.status = StatusAgendamento.CONCLUIDO
    db.add(checklist)
    get_logger().info("agendamento.concluido", agendamento_id=ag.id)
    return checklist, True


def replace_services(
    db: Session, ag: Agendamento, itens: Iterable[tuple[int, Decimal]]
) -> None:
    """Remove todos os serviços do agendamento e recria com os preços enviados."""
    ag.servicos.clear()
    db.flush()
    for servico_id, preco in itens:
        ag.servicos.append(AgendamentoServico(servico_id=servico_id, preco=preco))
