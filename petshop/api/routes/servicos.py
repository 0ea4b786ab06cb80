from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session, selectinload

from petshop.audit.helpers import record_audit
from petshop.core.logging import get_logger
from petshop.db import get_db
from petshop.deps import get_current_user
from petshop.models.servico import Preco, Servico
from petshop.models.user import User
from petshop.schemas.servicos import PrecoIn, PrecoOut, ServicoIn, ServicoOut
from petshop.utils.tz import iso

router = APIRouter(prefix="/servicos", tags=["servicos"])


def _servico_out(s: Servico) -> ServicoOut:
    return ServicoOut(
        id=s.id,
        nome=s.nome,
        observacoes=s.observacoes,
        precos=[
            PrecoOut(id=p.id, raca=p.raca, peso=p.peso, preco=float(p.preco))
            for p in s.precos
        ],
        created_at=iso(s.created_at),
        updated_at=iso(s.updated_at),
    )


def _precos(items: list[PrecoIn]) -> list[Preco]:
    if not items:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Adicione pelo menos um preço")
    return [Preco(raca=p.raca, peso=p.peso, preco=p.preco) for p in items]


def _load_servico(db: Session, servico_id: int) -> Servico:
    servico = db.get(Servico, servico_id)
    if not servico:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Serviço não encontrado")
    return servico


@router.get("", response_model=list[ServicoOut])
def list_servicos(
    current_user: Annotated[User, Depends(get_current_user)],
    search: str | None = Query(None, description="Busca por nome"),
    db: Session = Depends(get_db),
):
    qs = db.query(Servico).options(selectinload(Servico.precos))
    if search and search.strip():
        qs = qs.filter(Servico.nome.ilike(f"%{search.strip()}%"))
    return [_servico_out(s) for s in qs.order_by(Servico.nome.asc()).all()]


@router.post("", response_model=ServicoOut, status_code=201)
def create_servico(
    payload: ServicoIn,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    servico = Servico(
        nome=payload.nome,
        observacoes=payload.observacoes,
        precos=_precos(payload.precos),
    )
    db.add(servico)
    db.flush()
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        action="CREATE",
        entity="servico",
        entity_id=servico.id,
    )
    db.commit()
    db.refresh(servico)
    get_logger().info(
        "servico.created", servico_id=servico.id, faixas=len(payload.precos)
    )
    return _servico_out(servico)


@router.get("/{servico_id}", response_model=ServicoOut)
def get_servico(
    servico_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return _servico_out(_load_servico(db, servico_id))


@router.patch("/{servico_id}", response_model=ServicoOut)
def update_servico(
    servico_id: int,
    payload: ServicoIn,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    servico = _load_servico(db, servico_id)
    novos = _precos(payload.precos)

    servico.nome = payload.nome
    servico.observacoes = payload.observacoes
    # tabela de preços substituída inteira; falha em qualquer linha desfaz tudo
    servico.precos.clear()
    db.flush()
    servico.precos.extend(novos)

    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        action="UPDATE",
        entity="servico",
        entity_id=servico.id,
    )
    db.commit()
    db.refresh(servico)
    return _servico_out(servico)


@router.delete("/{servico_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_servico(
    servico_id: int,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    servico = _load_servico(db, servico_id)
    db.delete(servico)
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        action="DELETE",
        entity="servico",
        entity_id=servico_id,
    )
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
