# scripts/seed.py
from __future__ import annotations

import os
import random
from datetime import time, timedelta
from decimal import Decimal

from sqlalchemy import select, text
from sqlalchemy.exc import ProgrammingError
from sqlalchemy.orm import Session

from petshop.core.security import hash_password
from petshop.db import SessionLocal
from petshop.models.agendamento import (
    Agendamento,
    AgendamentoServico,
    StatusAgendamento,
)
from petshop.models.pet import Pet, PetTutor, Sexo
from petshop.models.servico import Preco, Servico
from petshop.models.tutor import Tutor
from petshop.models.user import User
from petshop.services.pricing import resolve_price
from petshop.utils.tz import combine, today_local

# ---------------- Configuráveis por ENV ----------------
SEED_DAYS = int(os.getenv("SEED_DAYS", "7"))
SEED_PASSWORD = os.getenv("SEED_PASSWORD", "secret")

# ---------------- Dados de Exemplo ----------------
TUTORES_DATA = [
    {"nome": "Marcos Lima", "email": "marcos@example.com", "telefone": "(11) 98765-4321"},
    {"nome": "Patrícia Alves", "email": "patricia@example.com", "telefone": "(21) 99876-5432"},
    {"nome": "Roberta Dias", "email": "roberta@example.com", "telefone": "(31) 98888-1234"},
]

# (nome, raça, peso, sexo, índice do tutor primário)
PETS_DATA = [
    ("Thor", "Golden Retriever", 32.4, Sexo.MALE, 0),
    ("Mel", "Shih Tzu", 6.5, Sexo.FEMALE, 1),
    ("Bidu", "SRD", 12.0, Sexo.MALE, 2),
    ("Luna", "Shih Tzu", 5.2, Sexo.FEMALE, 0),
]

# (nome, [(raça, peso, preço)])
SERVICOS_DATA = [
    (
        "Banho",
        [
            (None, None, "50.00"),
            ("Shih Tzu", None, "55.00"),
            ("Golden Retriever", 32, "95.00"),
            (None, 12, "65.00"),
        ],
    ),
    ("Tosa", [(None, None, "70.00"), ("Shih Tzu", None, "80.00")]),
    ("Corte de unhas", [(None, None, "20.00")]),
]


def ensure_user(db: Session) -> User:
    email = "loja@example.com"
    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if user:
        return user

    user = User(
        name="Equipe da Loja",
        email=email,
        password_hash=hash_password(SEED_PASSWORD),
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    print(f"[Seed] User criado: {user.name} ({user.email})")
    return user


def ensure_tutores(db: Session, owner: User) -> list[Tutor]:
    tutores = []
    for data in TUTORES_DATA:
        tutor = db.execute(
            select(Tutor).where(Tutor.email == data["email"])
        ).scalar_one_or_none()
        if not tutor:
            tutor = Tutor(**data, cidade="São Paulo", estado="SP", user_id=owner.id)
            db.add(tutor)
            db.commit()
            db.refresh(tutor)
            print(f"[Seed] Tutor criado: {tutor.nome}")
        tutores.append(tutor)
    return tutores


def ensure_pets(db: Session, tutores: list[Tutor]) -> list[Pet]:
    pets = []
    for nome, raca, peso, sexo, primario in PETS_DATA:
        pet = db.execute(select(Pet).where(Pet.nome == nome)).scalar_one_or_none()
        if not pet:
            pet = Pet(nome=nome, raca=raca, peso=peso, sexo=sexo)
            pet.tutores = [PetTutor(tutor_id=tutores[primario].id, is_primario=True)]
            db.add(pet)
            db.commit()
            db.refresh(pet)
            print(f"[Seed] Pet criado: {pet.nome} ({pet.raca})")
        pets.append(pet)
    return pets


def ensure_servicos(db: Session) -> list[Servico]:
    servicos = []
    for nome, faixas in SERVICOS_DATA:
        servico = db.execute(
            select(Servico).where(Servico.nome == nome)
        ).scalar_one_or_none()
        if not servico:
            servico = Servico(
                nome=nome,
                precos=[
                    Preco(raca=raca, peso=peso, preco=Decimal(preco))
                    for raca, peso, preco in faixas
                ],
            )
            db.add(servico)
            db.commit()
            db.refresh(servico)
            print(f"[Seed] Serviço criado: {servico.nome} ({len(faixas)} faixas)")
        servicos.append(servico)
    return servicos


def ensure_agendamentos(
    db: Session, pets: list[Pet], servicos: list[Servico], days_to_seed: int
) -> None:
    if db.execute(select(Agendamento.id).limit(1)).first():
        print("[Seed] Agendamentos já existem, pulando.")
        return

    print("[Seed] Gerando agendamentos...")
    start = today_local()
    total = 0
    for offset in range(days_to_seed):
        dia = start + timedelta(days=offset)
        if dia.weekday() == 6:  # domingo fechado
            continue
        for hora in (9, 11, 14, 16):
            if random.random() < 0.4:
                continue
            pet = random.choice(pets)
            escolhidos = random.sample(servicos, k=random.randint(1, len(servicos)))
            itens = [
                AgendamentoServico(
                    servico_id=s.id, preco=resolve_price(s.precos, pet.raca, pet.peso)
                )
                for s in escolhidos
            ]
            db.add(
                Agendamento(
                    pet_id=pet.id,
                    data=combine(dia, time.min),
                    hora_inicio=combine(dia, time(hora)),
                    hora_fim=combine(dia, time(hora + 1)),
                    status=StatusAgendamento.AGENDADO,
                    valor_total=sum((i.preco for i in itens), Decimal("0")),
                    servicos=itens,
                )
            )
            total += 1
    db.commit()
    print(f"[Seed] {total} agendamentos criados.")


def check_tables_exist(db: Session) -> bool:
    required_tables = ["users", "tutores", "pets", "servicos", "agendamentos"]
    try:
        for table in required_tables:
            db.execute(text(f"SELECT 1 FROM {table} LIMIT 1"))
        return True
    except ProgrammingError as e:
        if "does not exist" in str(e):
            return False
        raise


def main():
    print("[Seed] Iniciando seed do banco de dados...")
    db = SessionLocal()
    try:
        if not check_tables_exist(db):
            print("[Seed] Erro: as tabelas ainda não foram criadas.")
            print("  Execute as migrações antes: alembic upgrade head")
            return

        owner = ensure_user(db)
        tutores = ensure_tutores(db, owner)
        pets = ensure_pets(db, tutores)
        servicos = ensure_servicos(db)
        ensure_agendamentos(db, pets, servicos, SEED_DAYS)

        print("\n[Seed] Concluído!")
        print(f"Login: loja@example.com (senha: '{SEED_PASSWORD}')")
    finally:
        db.close()


if __name__ == "__main__":
    main()
