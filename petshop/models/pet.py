from __future__ import annotations

import datetime as dt
import enum

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petshop.db.base_class import Base


class Sexo(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class Pet(Base):
    __tablename__ = "pets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nome: Mapped[str] = mapped_column(String(120), nullable=False)
    foto: Mapped[str | None] = mapped_column(Text)  # data URI ou URL
    data_nascimento: Mapped[dt.date | None] = mapped_column(Date)
    raca: Mapped[str | None] = mapped_column(String(120))
    peso: Mapped[float | None] = mapped_column(Float)  # kg
    sexo: Mapped[Sexo | None] = mapped_column(Enum(Sexo, name="sexo_enum"))
    alergias: Mapped[str | None] = mapped_column(Text)
    observacoes: Mapped[str | None] = mapped_column(Text)
    usa_taxi_dog: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        onupdate=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )

    tutores = relationship(
        "PetTutor",
        back_populates="pet",
        cascade="all, delete-orphan",
        order_by="PetTutor.id",
    )
    agendamentos = relationship(
        "Agendamento", back_populates="pet", cascade="all, delete-orphan"
    )


class PetTutor(Base):
    """Vínculo pet ↔ tutor. Reescrito por inteiro a cada atualização do pet."""

    __tablename__ = "pet_tutores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    pet_id: Mapped[int] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"), index=True, nullable=False
    )
    tutor_id: Mapped[int] = mapped_column(
        ForeignKey("tutores.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    is_primario: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    pet = relationship("Pet", back_populates="tutores")
    tutor = relationship("Tutor", back_populates="pets", lazy="joined")
