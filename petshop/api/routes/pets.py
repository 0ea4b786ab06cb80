from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from petshop.audit.helpers import record_audit
from petshop.core.logging import get_logger
from petshop.db import get_db
from petshop.deps import get_current_user
from petshop.models.pet import Pet, PetTutor
from petshop.models.tutor import Tutor
from petshop.models.user import User
from petshop.schemas.pets import PetIn, PetOut, PetTutorOut, TutorLinkIn
from petshop.utils.tz import iso

router = APIRouter(prefix="/pets", tags=["pets"])

PET_FIELDS = (
    "nome",
    "foto",
    "data_nascimento",
    "raca",
    "peso",
    "sexo",
    "alergias",
    "observacoes",
    "usa_taxi_dog",
)


def _pet_out(p: Pet) -> PetOut:
    return PetOut(
        id=p.id,
        nome=p.nome,
        foto=p.foto,
        data_nascimento=p.data_nascimento.isoformat() if p.data_nascimento else None,
        raca=p.raca,
        peso=p.peso,
        sexo=p.sexo,
        alergias=p.alergias,
        observacoes=p.observacoes,
        usa_taxi_dog=p.usa_taxi_dog,
        tutores=[
            PetTutorOut(
                id=pt.tutor.id,
                nome=pt.tutor.nome,
                email=pt.tutor.email,
                is_primario=pt.is_primario,
            )
            for pt in p.tutores
        ],
        created_at=iso(p.created_at),
        updated_at=iso(p.updated_at),
    )


def _validate_tutores(db: Session, links: list[TutorLinkIn]) -> None:
    """Exige ao menos um tutor, exatamente um primário, e que todos existam."""
    if not links:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST, "Pelo menos um tutor é obrigatório"
        )

    primarios = sum(1 for t in links if t.is_primario)
    if primarios == 0:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Deve haver um tutor primário")
    if primarios > 1:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST, "Apenas um tutor pode ser primário"
        )

    ids = {t.id for t in links}
    if len(ids) != len(links):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Tutor repetido na lista")
    found = db.query(Tutor.id).filter(Tutor.id.in_(ids)).count()
    if found != len(ids):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Um ou mais tutores não existem")


def _load_pet(db: Session, pet_id: int) -> Pet:
    pet = db.get(Pet, pet_id)
    if not pet:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Pet não encontrado")
    return pet


@router.get("", response_model=list[PetOut])
def list_pets(
    current_user: Annotated[User, Depends(get_current_user)],
    search: str | None = Query(None, description="Busca por nome ou raça"),
    db: Session = Depends(get_db),
):
    qs = db.query(Pet).options(selectinload(Pet.tutores))
    if search and search.strip():
        like = f"%{search.strip()}%"
        qs = qs.filter(or_(Pet.nome.ilike(like), Pet.raca.ilike(like)))
    return [_pet_out(p) for p in qs.order_by(Pet.nome.asc()).all()]


@router.post("", response_model=PetOut, status_code=201)
def create_pet(
    payload: PetIn,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    _validate_tutores(db, payload.tutores)

    pet = Pet(**payload.model_dump(include=set(PET_FIELDS)))
    pet.tutores = [
        PetTutor(tutor_id=t.id, is_primario=t.is_primario) for t in payload.tutores
    ]
    db.add(pet)
    db.flush()
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        action="CREATE",
        entity="pet",
        entity_id=pet.id,
    )
    db.commit()
    db.refresh(pet)
    get_logger().info("pet.created", pet_id=pet.id, tutores=len(payload.tutores))
    return _pet_out(pet)


@router.get("/{pet_id}", response_model=PetOut)
def get_pet(
    pet_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return _pet_out(_load_pet(db, pet_id))


@router.patch("/{pet_id}", response_model=PetOut)
def update_pet(
    pet_id: int,
    payload: PetIn,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    pet = _load_pet(db, pet_id)
    _validate_tutores(db, payload.tutores)

    for k, v in payload.model_dump(include=set(PET_FIELDS)).items():
        setattr(pet, k, v)

    # vínculos são recriados por inteiro, na mesma transação
    pet.tutores.clear()
    db.flush()
    for t in payload.tutores:
        pet.tutores.append(PetTutor(tutor_id=t.id, is_primario=t.is_primario))

    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        action="UPDATE",
        entity="pet",
        entity_id=pet.id,
    )
    db.commit()
    db.refresh(pet)
    return _pet_out(pet)


@router.delete("/{pet_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pet(
    pet_id: int,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    pet = _load_pet(db, pet_id)
    db.delete(pet)
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        action="DELETE",
        entity="pet",
        entity_id=pet_id,
    )
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
