from __future__ import annotations

import datetime as dt
import enum
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petshop.db.base_class import Base


class StatusAgendamento(str, enum.Enum):
    AGENDADO = "AGENDADO"
    EM_ANDAMENTO = "EM_ANDAMENTO"
    CONCLUIDO = "CONCLUIDO"
    CANCELADO = "CANCELADO"


TERMINAL_STATUSES = (StatusAgendamento.CONCLUIDO, StatusAgendamento.CANCELADO)


class StatusPagamento(str, enum.Enum):
    PENDENTE = "PENDENTE"
    PAGO = "PAGO"


class MetodoPagamento(str, enum.Enum):
    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    PIX = "PIX"
    BANK_TRANSFER = "BANK_TRANSFER"


class TransporteEntrada(str, enum.Enum):
    OWNER_BRINGS = "OWNER_BRINGS"
    PICKUP_SERVICE = "PICKUP_SERVICE"


class TransporteSaida(str, enum.Enum):
    OWNER_PICKS_UP = "OWNER_PICKS_UP"
    DROPOFF_SERVICE = "DROPOFF_SERVICE"


class Agendamento(Base):
    __tablename__ = "agendamentos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    pet_id: Mapped[int] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"), nullable=False
    )
    # datas "de parede" (horário local da loja), sem fuso
    data: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False)
    hora_inicio: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False)
    hora_fim: Mapped[dt.datetime | None] = mapped_column(DateTime)
    observacoes: Mapped[str | None] = mapped_column(Text)

    status: Mapped[StatusAgendamento] = mapped_column(
        Enum(StatusAgendamento, name="status_agendamento_enum"),
        nullable=False,
        default=StatusAgendamento.AGENDADO,
    )
    status_pagamento: Mapped[StatusPagamento] = mapped_column(
        Enum(StatusPagamento, name="status_pagamento_enum"),
        nullable=False,
        default=StatusPagamento.PENDENTE,
    )
    metodo_pagamento: Mapped[MetodoPagamento | None] = mapped_column(
        Enum(MetodoPagamento, name="metodo_pagamento_enum")
    )
    valor_total: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    transporte_entrada: Mapped[TransporteEntrada] = mapped_column(
        Enum(TransporteEntrada, name="transporte_entrada_enum"),
        nullable=False,
        default=TransporteEntrada.OWNER_BRINGS,
    )
    transporte_saida: Mapped[TransporteSaida] = mapped_column(
        Enum(TransporteSaida, name="transporte_saida_enum"),
        nullable=False,
        default=TransporteSaida.OWNER_PICKS_UP,
    )
    enviar_notificacao: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(tz=dt.UTC),
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(tz=dt.UTC),
        onupdate=lambda: dt.datetime.now(tz=dt.UTC),
    )

    pet = relationship("Pet", back_populates="agendamentos")
    servicos = relationship(
        "AgendamentoServico",
        back_populates="agendamento",
        cascade="all, delete-orphan",
        order_by="AgendamentoServico.id",
    )
    checklist = relationship(
        "Checklist",
        back_populates="agendamento",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_agendamento_pet_id", "pet_id"),
        Index("ix_agendamento_data_hora", "data", "hora_inicio"),
    )


class AgendamentoServico(Base):
    """Serviço de um agendamento com o preço congelado no momento da marcação."""

    __tablename__ = "agendamento_servicos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    agendamento_id: Mapped[int] = mapped_column(
        ForeignKey("agendamentos.id", ondelete="CASCADE"), index=True, nullable=False
    )
    servico_id: Mapped[int] = mapped_column(
        ForeignKey("servicos.id", ondelete="CASCADE"), index=True, nullable=False
    )
    preco: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    agendamento = relationship("Agendamento", back_populates="servicos")
    servico = relationship("Servico", back_populates="agendamentos", lazy="joined")


class Checklist(Base):
    __tablename__ = "checklists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    agendamento_id: Mapped[int] = mapped_column(
        ForeignKey("agendamentos.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    tem_carrapatos: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tem_pulgas: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    problema_pele: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    problema_dentes: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    outros_problemas: Mapped[str | None] = mapped_column(Text)
    observacoes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(tz=dt.UTC),
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(tz=dt.UTC),
        onupdate=lambda: dt.datetime.now(tz=dt.UTC),
    )

    agendamento = relationship("Agendamento", back_populates="checklist")
