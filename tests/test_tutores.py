from fastapi import status
from sqlalchemy.orm import Session

from petshop.models.audit_log import AuditLog
from petshop.models.tutor import Tutor


def test_requires_authentication(client):
    response = client.get("/api/tutores")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_tutor(client, auth_headers, test_user, db_session: Session):
    response = client.post(
        "/api/tutores",
        headers=auth_headers,
        json={
            "nome": "João Pereira",
            "telefone": "(11) 91234-5678",
            "email": "joao@example.com",
            "cep": "",
            "cidade": "Campinas",
            "estado": "SP",
        },
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["nome"] == "João Pereira"
    assert data["cep"] is None
    assert "createdAt" in data

    tutor = db_session.get(Tutor, data["id"])
    assert tutor.user_id == test_user.id
    assert (
        db_session.query(AuditLog)
        .filter(AuditLog.entity == "tutor", AuditLog.action == "CREATE")
        .count()
        == 1
    )


def test_create_tutor_requires_nome(client, auth_headers):
    response = client.post(
        "/api/tutores", headers=auth_headers, json={"telefone": "11999999999"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.text == "nome é obrigatório"


def test_create_tutor_rejects_unknown_field(client, auth_headers):
    response = client.post(
        "/api/tutores",
        headers=auth_headers,
        json={"nome": "X", "telefone": "11999999999", "apelido": "Y"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.text == "Campo não permitido: apelido"


def test_list_tutores_search_and_order(client, auth_headers, db_session: Session):
    db_session.add_all(
        [
            Tutor(nome="Carla", telefone="11911110000", email="carla@example.com"),
            Tutor(nome="Ana", telefone="11922220000"),
            Tutor(nome="Bruno", telefone="11933330000"),
        ]
    )
    db_session.commit()

    response = client.get("/api/tutores", headers=auth_headers)
    assert [t["nome"] for t in response.json()] == ["Ana", "Bruno", "Carla"]

    response = client.get("/api/tutores", headers=auth_headers, params={"search": "CARLA"})
    assert [t["nome"] for t in response.json()] == ["Carla"]

    response = client.get("/api/tutores", headers=auth_headers, params={"search": "2222"})
    assert [t["nome"] for t in response.json()] == ["Ana"]


def test_get_tutor_not_found(client, auth_headers):
    response = client.get("/api/tutores/999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.text == "Tutor não encontrado"


def test_update_tutor(client, auth_headers, test_tutor):
    response = client.patch(
        f"/api/tutores/{test_tutor.id}",
        headers=auth_headers,
        json={"nome": "Maria S. Souza", "telefone": "11900001111", "bairro": "Centro"},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["nome"] == "Maria S. Souza"
    assert data["bairro"] == "Centro"


def test_selected_tutores(client, auth_headers, test_tutor, db_session: Session):
    outro = Tutor(nome="Outro", telefone="11955554444")
    db_session.add(outro)
    db_session.commit()

    response = client.get(
        "/api/tutores/selected",
        headers=auth_headers,
        params={"ids": f"{test_tutor.id},{outro.id}"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert {t["nome"] for t in response.json()} == {"Maria Souza", "Outro"}


def test_selected_tutores_requires_ids(client, auth_headers):
    response = client.get("/api/tutores/selected", headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.text == "IDs não fornecidos"

    response = client.get(
        "/api/tutores/selected", headers=auth_headers, params={"ids": "1,abc"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.text == "IDs inválidos"


def test_delete_tutor_linked_to_pet_conflicts(client, auth_headers, test_tutor, test_pet):
    response = client.delete(f"/api/tutores/{test_tutor.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_409_CONFLICT

    response = client.get(f"/api/tutores/{test_tutor.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK


def test_delete_tutor(client, auth_headers, test_tutor):
    response = client.delete(f"/api/tutores/{test_tutor.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert response.content == b""

    response = client.get(f"/api/tutores/{test_tutor.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
