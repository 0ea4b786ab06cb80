from __future__ import annotations

from datetime import date, time
from decimal import Decimal

from pydantic import Field

from petshop.models.agendamento import (
    MetodoPagamento,
    StatusAgendamento,
    StatusPagamento,
    TransporteEntrada,
    TransporteSaida,
)
from petshop.schemas.common import CamelIn, CamelOut


class ServicoItemIn(CamelIn):
    id: int = Field(..., ge=1)
    preco: Decimal = Field(Decimal("0"), ge=0)


class AgendamentoCreateIn(CamelIn):
    pet_id: int = Field(..., ge=1)
    data: date = Field(..., description="YYYY-MM-DD")
    hora_inicio: time = Field(..., description="HH:MM")
    hora_fim: time | None = None
    observacoes: str | None = None
    status: StatusAgendamento = StatusAgendamento.AGENDADO
    status_pagamento: StatusPagamento = StatusPagamento.PENDENTE
    metodo_pagamento: MetodoPagamento | None = None
    valor_total: Decimal | None = Field(None, ge=0)
    transporte_entrada: TransporteEntrada = TransporteEntrada.OWNER_BRINGS
    transporte_saida: TransporteSaida = TransporteSaida.OWNER_PICKS_UP
    enviar_notificacao: bool = False
    servicos: list[ServicoItemIn] = Field(default_factory=list)


class AgendamentoUpdateIn(CamelIn):
    """PATCH: só os campos presentes no corpo são substituídos."""

    pet_id: int | None = Field(None, ge=1)
    data: date | None = None
    hora_inicio: time | None = None
    hora_fim: time | None = None
    observacoes: str | None = None
    status: StatusAgendamento | None = None
    status_pagamento: StatusPagamento | None = None
    metodo_pagamento: MetodoPagamento | None = None
    valor_total: Decimal | None = Field(None, ge=0)
    transporte_entrada: TransporteEntrada | None = None
    transporte_saida: TransporteSaida | None = None
    enviar_notificacao: bool | None = None
    servicos: list[ServicoItemIn] | None = None


class PagamentoIn(CamelIn):
    metodo_pagamento: MetodoPagamento = MetodoPagamento.CASH


class ChecklistIn(CamelIn):
    tem_carrapatos: bool | None = None
    tem_pulgas: bool | None = None
    problema_pele: bool | None = None
    problema_dentes: bool | None = None
    outros_problemas: str | None = None
    observacoes: str | None = None


class ChecklistOut(CamelOut):
    id: int
    agendamento_id: int
    tem_carrapatos: bool
    tem_pulgas: bool
    problema_pele: bool
    problema_dentes: bool
    outros_problemas: str | None = None
    observacoes: str | None = None
    created_at: str
    updated_at: str


class TutorPrincipalOut(CamelOut):
    id: int
    nome: str
    telefone: str


class PetResumoOut(CamelOut):
    id: int
    nome: str
    foto: str | None = None
    raca: str | None = None
    peso: float | None = None
    tutor_principal: TutorPrincipalOut | None = None


class ServicoPrecoOut(CamelOut):
    id: int
    nome: str
    preco: float


class AgendamentoOut(CamelOut):
    id: int
    pet: PetResumoOut
    data: str
    hora_inicio: str
    hora_fim: str | None = None
    observacoes: str | None = None
    status: StatusAgendamento
    status_pagamento: StatusPagamento
    metodo_pagamento: MetodoPagamento | None = None
    valor_total: float
    transporte_entrada: TransporteEntrada
    transporte_saida: TransporteSaida
    enviar_notificacao: bool
    servicos: list[ServicoPrecoOut]
    checklist: ChecklistOut | None = None
    created_at: str
    updated_at: str


class CalcularPrecoIn(CamelIn):
    pet_id: int | None = None
    servico_ids: list[int] | None = None


class CalcularPrecoOut(CamelOut):
    servicos: list[ServicoPrecoOut]
    valor_total: float


class NotificacaoOut(CamelOut):
    success: bool = True
    whatsapp_url: str
    pet_nome: str
    tutor_nome: str
    telefone: str
