from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from petshop.audit.helpers import record_audit
from petshop.core.logging import get_logger
from petshop.db import get_db
from petshop.deps import get_current_user
from petshop.models.pet import PetTutor
from petshop.models.tutor import Tutor
from petshop.models.user import User
from petshop.schemas.tutores import TutorIn, TutorOut, TutorSummaryOut
from petshop.utils.tz import iso

router = APIRouter(prefix="/tutores", tags=["tutores"])


def _tutor_out(t: Tutor) -> TutorOut:
    return TutorOut(
        id=t.id,
        nome=t.nome,
        email=t.email,
        telefone=t.telefone,
        cep=t.cep,
        rua=t.rua,
        numero=t.numero,
        complemento=t.complemento,
        bairro=t.bairro,
        cidade=t.cidade,
        estado=t.estado,
        created_at=iso(t.created_at),
        updated_at=iso(t.updated_at),
    )


def _load_tutor(db: Session, tutor_id: int) -> Tutor:
    tutor = db.get(Tutor, tutor_id)
    if not tutor:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Tutor não encontrado")
    return tutor


@router.get("", response_model=list[TutorOut])
def list_tutores(
    current_user: Annotated[User, Depends(get_current_user)],
    search: str | None = Query(None, description="Busca por nome, email ou telefone"),
    db: Session = Depends(get_db),
):
    qs = db.query(Tutor)
    if search and search.strip():
        like = f"%{search.strip()}%"
        qs = qs.filter(
            or_(Tutor.nome.ilike(like), Tutor.email.ilike(like), Tutor.telefone.like(like))
        )
    return [_tutor_out(t) for t in qs.order_by(Tutor.nome.asc()).all()]


@router.post("", response_model=TutorOut, status_code=201)
def create_tutor(
    payload: TutorIn,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    tutor = Tutor(**payload.model_dump(), user_id=current_user.id)
    db.add(tutor)
    db.flush()
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        action="CREATE",
        entity="tutor",
        entity_id=tutor.id,
    )
    db.commit()
    db.refresh(tutor)
    get_logger().info("tutor.created", tutor_id=tutor.id)
    return _tutor_out(tutor)


@router.get("/selected", response_model=list[TutorSummaryOut])
def list_selected_tutores(
    current_user: Annotated[User, Depends(get_current_user)],
    ids: str | None = Query(None, description="IDs separados por vírgula"),
    db: Session = Depends(get_db),
):
    if not ids:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "IDs não fornecidos")
    try:
        wanted = [int(part) for part in ids.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "IDs inválidos") from ValueError
    if not wanted:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "IDs não fornecidos")

    rows = db.query(Tutor).filter(Tutor.id.in_(wanted)).all()
    return [
        TutorSummaryOut(id=t.id, nome=t.nome, email=t.email, telefone=t.telefone)
        for t in rows
    ]


@router.get("/{tutor_id}", response_model=TutorOut)
def get_tutor(
    tutor_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return _tutor_out(_load_tutor(db, tutor_id))


@router.patch("/{tutor_id}", response_model=TutorOut)
def update_tutor(
    tutor_id: int,
    payload: TutorIn,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    tutor = _load_tutor(db, tutor_id)
    for k, v in payload.model_dump().items():
        setattr(tutor, k, v)
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        action="UPDATE",
        entity="tutor",
        entity_id=tutor.id,
    )
    db.commit()
    db.refresh(tutor)
    return _tutor_out(tutor)


@router.delete("/{tutor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tutor(
    tutor_id: int,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    tutor = _load_tutor(db, tutor_id)

    # vínculo com pet impede exclusão (checado aqui, não pelo banco)
    in_use = db.query(PetTutor.id).filter(PetTutor.tutor_id == tutor.id).first()
    if in_use:
        raise HTTPException(
            status.HTTP_409_CONFLICT,
            "Este tutor está associado a um ou mais pets e não pode ser excluído",
        )

    db.delete(tutor)
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        action="DELETE",
        entity="tutor",
        entity_id=tutor_id,
    )
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
