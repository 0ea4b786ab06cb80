import os

# precisa vir antes de qualquer import de petshop (settings/engine são criados no import)
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, time
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import petshop.db.base  # noqa: F401
from petshop.core.security import create_access_token, hash_password
from petshop.db.base_class import Base
from petshop.models.agendamento import Agendamento, AgendamentoServico
from petshop.models.pet import Pet, PetTutor, Sexo
from petshop.models.servico import Preco, Servico
from petshop.models.tutor import Tutor
from petshop.models.user import User


# Create an in-memory SQLite database for testing
@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="session")
def TestingSessionLocal(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture(autouse=True)
def clean_tables(engine):
    """Cada teste começa com o banco vazio."""
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def override_get_db(TestingSessionLocal):
    def _override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    return _override_get_db


@pytest.fixture
def db_session(TestingSessionLocal):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(override_get_db):
    from fastapi.testclient import TestClient

    from petshop.db import get_db
    from petshop.main import app

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db_session):
    user = User(
        name="Test User",
        email="test@example.com",
        password_hash=hash_password("TestPass123!"),
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user):
    token = create_access_token(str(test_user.id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_tutor(db_session):
    tutor = Tutor(
        nome="Maria Souza",
        email="maria@example.com",
        telefone="(11) 98765-4321",
        cidade="São Paulo",
        estado="SP",
    )
    db_session.add(tutor)
    db_session.commit()
    db_session.refresh(tutor)
    return tutor


@pytest.fixture
def test_pet(db_session, test_tutor):
    pet = Pet(nome="Rex", raca="Poodle", peso=8.5, sexo=Sexo.MALE)
    pet.tutores = [PetTutor(tutor_id=test_tutor.id, is_primario=True)]
    db_session.add(pet)
    db_session.commit()
    db_session.refresh(pet)
    return pet


@pytest.fixture
def test_servico(db_session):
    servico = Servico(
        nome="Banho",
        precos=[
            Preco(raca=None, peso=None, preco=Decimal("50.00")),
            Preco(raca="Poodle", peso=9, preco=Decimal("70.00")),
            Preco(raca="Poodle", peso=None, preco=Decimal("60.00")),
        ],
    )
    db_session.add(servico)
    db_session.commit()
    db_session.refresh(servico)
    return servico


@pytest.fixture
def test_agendamento(db_session, test_pet, test_servico):
    ag = Agendamento(
        pet_id=test_pet.id,
        data=datetime(2024, 1, 1),
        hora_inicio=datetime.combine(datetime(2024, 1, 1).date(), time(10, 0)),
        valor_total=Decimal("70.00"),
        servicos=[AgendamentoServico(servico_id=test_servico.id, preco=Decimal("70.00"))],
    )
    db_session.add(ag)
    db_session.commit()
    db_session.refresh(ag)
    return ag
