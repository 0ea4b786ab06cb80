from fastapi import status
from sqlalchemy.orm import Session

from petshop.models.agendamento import Agendamento
from petshop.models.pet import PetTutor
from petshop.models.tutor import Tutor


def _segundo_tutor(db_session: Session) -> Tutor:
    tutor = Tutor(nome="Pedro Lima", telefone="11977776666")
    db_session.add(tutor)
    db_session.commit()
    db_session.refresh(tutor)
    return tutor


def test_create_pet(client, auth_headers, test_tutor):
    response = client.post(
        "/api/pets",
        headers=auth_headers,
        json={
            "nome": "Bolt",
            "raca": "Labrador",
            "peso": 28.3,
            "sexo": "MALE",
            "dataNascimento": "2021-05-04",
            "usaTaxiDog": True,
            "tutores": [{"id": test_tutor.id, "isPrimario": True}],
        },
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["nome"] == "Bolt"
    assert data["dataNascimento"] == "2021-05-04"
    assert data["usaTaxiDog"] is True
    assert data["tutores"] == [
        {
            "id": test_tutor.id,
            "nome": "Maria Souza",
            "email": "maria@example.com",
            "isPrimario": True,
        }
    ]


def test_create_pet_blank_optional_fields(client, auth_headers, test_tutor):
    response = client.post(
        "/api/pets",
        headers=auth_headers,
        json={
            "nome": "Nina",
            "raca": "",
            "peso": "",
            "sexo": "",
            "dataNascimento": "",
            "tutores": [{"id": test_tutor.id, "isPrimario": True}],
        },
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["raca"] is None
    assert data["peso"] is None
    assert data["sexo"] is None


def test_create_pet_requires_tutor(client, auth_headers):
    response = client.post(
        "/api/pets", headers=auth_headers, json={"nome": "Bolt", "tutores": []}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.text == "Pelo menos um tutor é obrigatório"


def test_create_pet_requires_one_primary(client, auth_headers, test_tutor, db_session):
    outro = _segundo_tutor(db_session)

    response = client.post(
        "/api/pets",
        headers=auth_headers,
        json={"nome": "Bolt", "tutores": [{"id": test_tutor.id, "isPrimario": False}]},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.text == "Deve haver um tutor primário"

    response = client.post(
        "/api/pets",
        headers=auth_headers,
        json={
            "nome": "Bolt",
            "tutores": [
                {"id": test_tutor.id, "isPrimario": True},
                {"id": outro.id, "isPrimario": True},
            ],
        },
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.text == "Apenas um tutor pode ser primário"


def test_create_pet_unknown_tutor(client, auth_headers):
    response = client.post(
        "/api/pets",
        headers=auth_headers,
        json={"nome": "Bolt", "tutores": [{"id": 999, "isPrimario": True}]},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.text == "Um ou mais tutores não existem"


def test_list_pets_search(client, auth_headers, test_pet):
    response = client.get("/api/pets", headers=auth_headers, params={"search": "pood"})
    assert response.status_code == status.HTTP_200_OK
    assert [p["nome"] for p in response.json()] == ["Rex"]

    response = client.get("/api/pets", headers=auth_headers, params={"search": "gato"})
    assert response.json() == []


def test_update_pet_replaces_tutor_links(
    client, auth_headers, test_pet, test_tutor, db_session: Session
):
    outro = _segundo_tutor(db_session)

    response = client.patch(
        f"/api/pets/{test_pet.id}",
        headers=auth_headers,
        json={
            "nome": "Rex",
            "peso": 9.1,
            "tutores": [
                {"id": test_tutor.id, "isPrimario": False},
                {"id": outro.id, "isPrimario": True},
            ],
        },
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["peso"] == 9.1
    assert [(t["id"], t["isPrimario"]) for t in data["tutores"]] == [
        (test_tutor.id, False),
        (outro.id, True),
    ]
    assert db_session.query(PetTutor).filter(PetTutor.pet_id == test_pet.id).count() == 2


def test_update_pet_invalid_links_keep_previous(
    client, auth_headers, test_pet, test_tutor, db_session: Session
):
    response = client.patch(
        f"/api/pets/{test_pet.id}",
        headers=auth_headers,
        json={"nome": "Rex", "tutores": [{"id": 999, "isPrimario": True}]},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    links = db_session.query(PetTutor).filter(PetTutor.pet_id == test_pet.id).all()
    assert [(pt.tutor_id, pt.is_primario) for pt in links] == [(test_tutor.id, True)]


def test_get_pet_not_found(client, auth_headers):
    response = client.get("/api/pets/999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.text == "Pet não encontrado"


def test_delete_pet_cascades_appointments(
    client, auth_headers, test_pet, test_agendamento, db_session: Session
):
    response = client.delete(f"/api/pets/{test_pet.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert db_session.query(Agendamento).count() == 0
    assert db_session.query(PetTutor).count() == 0
