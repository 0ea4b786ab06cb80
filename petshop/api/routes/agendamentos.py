from collections.abc import Callable
from datetime import time
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from petshop.audit.helpers import record_audit
from petshop.core.logging import get_logger
from petshop.db import get_db
from petshop.deps import get_current_user
from petshop.models.agendamento import (
    Agendamento,
    AgendamentoServico,
    Checklist,
    StatusAgendamento,
)
from petshop.models.pet import Pet, PetTutor
from petshop.models.servico import Servico
from petshop.models.tutor import Tutor
from petshop.models.user import User
from petshop.schemas.agendamentos import (
    AgendamentoCreateIn,
    AgendamentoOut,
    AgendamentoUpdateIn,
    CalcularPrecoIn,
    CalcularPrecoOut,
    ChecklistIn,
    ChecklistOut,
    NotificacaoOut,
    PagamentoIn,
    PetResumoOut,
    ServicoItemIn,
    ServicoPrecoOut,
    TutorPrincipalOut,
)
from petshop.services import lifecycle
from petshop.services.lifecycle import TransitionError
from petshop.services.notification import NotificationError, notify_pickup, primary_tutor
from petshop.services.pricing import quote_services
from petshop.utils.tz import (
    combine,
    day_bounds,
    end_of_day,
    iso,
    parse_date,
    start_of_day,
    today_local,
)

router = APIRouter(prefix="/agendamentos", tags=["agendamentos"])

# campos copiados direto do PATCH; os de data/hora e serviços têm regra própria
SIMPLE_FIELDS = (
    "observacoes",
    "status",
    "status_pagamento",
    "metodo_pagamento",
    "valor_total",
    "transporte_entrada",
    "transporte_saida",
    "enviar_notificacao",
)
NULLABLE_FIELDS = {"observacoes", "metodo_pagamento"}


def _checklist_out(c: Checklist) -> ChecklistOut:
    return ChecklistOut(
        id=c.id,
        agendamento_id=c.agendamento_id,
        tem_carrapatos=c.tem_carrapatos,
        tem_pulgas=c.tem_pulgas,
        problema_pele=c.problema_pele,
        problema_dentes=c.problema_dentes,
        outros_problemas=c.outros_problemas,
        observacoes=c.observacoes,
        created_at=iso(c.created_at),
        updated_at=iso(c.updated_at),
    )


def _agendamento_out(ag: Agendamento) -> AgendamentoOut:
    pet = ag.pet
    tutor = primary_tutor(pet)
    return AgendamentoOut(
        id=ag.id,
        pet=PetResumoOut(
            id=pet.id,
            nome=pet.nome,
            foto=pet.foto,
            raca=pet.raca,
            peso=pet.peso,
            tutor_principal=(
                TutorPrincipalOut(id=tutor.id, nome=tutor.nome, telefone=tutor.telefone)
                if tutor
                else None
            ),
        ),
        data=iso(ag.data),
        hora_inicio=iso(ag.hora_inicio),
        hora_fim=iso(ag.hora_fim),
        observacoes=ag.observacoes,
        status=ag.status,
        status_pagamento=ag.status_pagamento,
        metodo_pagamento=ag.metodo_pagamento,
        valor_total=float(ag.valor_total or 0),
        transporte_entrada=ag.transporte_entrada,
        transporte_saida=ag.transporte_saida,
        enviar_notificacao=ag.enviar_notificacao,
        servicos=[
            ServicoPrecoOut(id=s.servico_id, nome=s.servico.nome, preco=float(s.preco))
            for s in ag.servicos
        ],
        checklist=_checklist_out(ag.checklist) if ag.checklist else None,
        created_at=iso(ag.created_at),
        updated_at=iso(ag.updated_at),
    )


def _base_query(db: Session):
    return db.query(Agendamento).options(
        selectinload(Agendamento.pet).selectinload(Pet.tutores),
        selectinload(Agendamento.servicos),
        selectinload(Agendamento.checklist),
    )


def _load_agendamento(db: Session, agendamento_id: int) -> Agendamento:
    ag = db.get(Agendamento, agendamento_id)
    if not ag:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Agendamento não encontrado")
    return ag


def _load_pet(db: Session, pet_id: int) -> Pet:
    pet = db.get(Pet, pet_id)
    if not pet:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Pet não encontrado")
    return pet


def _check_servicos(db: Session, itens: list[ServicoItemIn]) -> None:
    ids = {i.id for i in itens}
    found = db.query(Servico.id).filter(Servico.id.in_(ids)).count()
    if found != len(ids):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Um ou mais serviços não existem")


def _audit(db: Session, request: Request, user: User, action: str, ag_id: int) -> None:
    record_audit(
        db,
        request=request,
        user_id=user.id,
        action=action,
        entity="agendamento",
        entity_id=ag_id,
    )


@router.get("", response_model=list[AgendamentoOut])
def list_agendamentos(
    current_user: Annotated[User, Depends(get_current_user)],
    pet_id: int | None = Query(None, alias="petId"),
    status_: StatusAgendamento | None = Query(None, alias="status"),
    data_inicio: str | None = Query(None, alias="dataInicio"),
    data_fim: str | None = Query(None, alias="dataFim"),
    search: str | None = Query(None, description="Nome do pet ou do tutor"),
    db: Session = Depends(get_db),
):
    qs = _base_query(db)
    if pet_id:
        qs = qs.filter(Agendamento.pet_id == pet_id)
    if status_:
        qs = qs.filter(Agendamento.status == status_)

    # datas inválidas não derrubam a listagem: o filtro é só ignorado
    inicio = parse_date(data_inicio)
    if inicio:
        qs = qs.filter(Agendamento.data >= start_of_day(inicio))
    fim = parse_date(data_fim)
    if fim:
        qs = qs.filter(Agendamento.data <= end_of_day(fim))

    if search and search.strip():
        like = f"%{search.strip()}%"
        qs = qs.join(Agendamento.pet).filter(
            or_(
                Pet.nome.ilike(like),
                Pet.tutores.any(PetTutor.tutor.has(Tutor.nome.ilike(like))),
            )
        )

    rows = qs.order_by(Agendamento.data.asc(), Agendamento.hora_inicio.asc()).all()
    return [_agendamento_out(ag) for ag in rows]


@router.get("/dia", response_model=list[AgendamentoOut])
def list_agendamentos_dia(
    current_user: Annotated[User, Depends(get_current_user)],
    data: str | None = Query(None, description="YYYY-MM-DD; padrão: hoje"),
    db: Session = Depends(get_db),
):
    dia = parse_date(data) or today_local()
    inicio, fim = day_bounds(dia)
    rows = (
        _base_query(db)
        .filter(Agendamento.data >= inicio, Agendamento.data <= fim)
        .order_by(Agendamento.hora_inicio.asc())
        .all()
    )
    return [_agendamento_out(ag) for ag in rows]


@router.post("/calcular-preco", response_model=CalcularPrecoOut)
def calcular_preco(
    payload: CalcularPrecoIn,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    if not payload.pet_id or not payload.servico_ids:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST, "Dados inválidos. Pet e serviços são obrigatórios"
        )

    pet = _load_pet(db, payload.pet_id)
    servicos = (
        db.query(Servico)
        .options(selectinload(Servico.precos))
        .filter(Servico.id.in_(payload.servico_ids))
        .all()
    )
    if len(servicos) != len(payload.servico_ids):
        raise HTTPException(
            status.HTTP_404_NOT_FOUND, "Um ou mais serviços não foram encontrados"
        )

    by_id = {s.id: s for s in servicos}
    quote = quote_services(pet, [by_id[i] for i in payload.servico_ids])
    return CalcularPrecoOut(
        servicos=[
            ServicoPrecoOut(id=q.id, nome=q.nome, preco=float(q.preco))
            for q in quote.servicos
        ],
        valor_total=float(quote.valor_total),
    )


@router.post("", response_model=AgendamentoOut, status_code=201)
def create_agendamento(
    payload: AgendamentoCreateIn,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    pet = _load_pet(db, payload.pet_id)
    if not payload.servicos:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST, "Pelo menos um serviço é obrigatório"
        )
    _check_servicos(db, payload.servicos)

    valor_total = payload.valor_total
    if valor_total is None:
        valor_total = sum((i.preco for i in payload.servicos), Decimal("0"))

    ag = Agendamento(
        pet=pet,
        data=combine(payload.data, time.min),
        hora_inicio=combine(payload.data, payload.hora_inicio),
        hora_fim=combine(payload.data, payload.hora_fim),
        observacoes=payload.observacoes,
        status=payload.status,
        status_pagamento=payload.status_pagamento,
        metodo_pagamento=payload.metodo_pagamento,
        valor_total=valor_total,
        transporte_entrada=payload.transporte_entrada,
        transporte_saida=payload.transporte_saida,
        enviar_notificacao=payload.enviar_notificacao,
        servicos=[
            AgendamentoServico(servico_id=i.id, preco=i.preco) for i in payload.servicos
        ],
    )
    db.add(ag)
    db.flush()
    _audit(db, request, current_user, "CREATE", ag.id)
    db.commit()
    db.refresh(ag)
    get_logger().info(
        "agendamento.created",
        agendamento_id=ag.id,
        pet_id=pet.id,
        servicos=len(payload.servicos),
    )
    return _agendamento_out(ag)


@router.get("/{agendamento_id}", response_model=AgendamentoOut)
def get_agendamento(
    agendamento_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return _agendamento_out(_load_agendamento(db, agendamento_id))


@router.patch("/{agendamento_id}", response_model=AgendamentoOut)
def update_agendamento(
    agendamento_id: int,
    payload: AgendamentoUpdateIn,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    ag = _load_agendamento(db, agendamento_id)
    sent = payload.model_fields_set

    if "pet_id" in sent and payload.pet_id is not None:
        ag.pet = _load_pet(db, payload.pet_id)

    for field in SIMPLE_FIELDS:
        if field not in sent:
            continue
        value = getattr(payload, field)
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(ag, field, value)

    if payload.data is not None:
        ag.data = combine(payload.data, time.min)
        if payload.hora_inicio is not None:
            ag.hora_inicio = combine(payload.data, payload.hora_inicio)
    if "data" in sent or "hora_fim" in sent:
        ag.hora_fim = combine(payload.data, payload.hora_fim)

    if payload.servicos:
        _check_servicos(db, payload.servicos)
        lifecycle.replace_services(db, ag, ((i.id, i.preco) for i in payload.servicos))

    _audit(db, request, current_user, "UPDATE", ag.id)
    db.commit()
    db.refresh(ag)
    return _agendamento_out(ag)


@router.delete("/{agendamento_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_agendamento(
    agendamento_id: int,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    ag = _load_agendamento(db, agendamento_id)
    db.delete(ag)
    _audit(db, request, current_user, "DELETE", agendamento_id)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _transition(
    db: Session,
    request: Request,
    user: User,
    agendamento_id: int,
    action: str,
    apply: Callable[[Agendamento], None],
) -> AgendamentoOut:
    ag = _load_agendamento(db, agendamento_id)
    previous = ag.status
    try:
        apply(ag)
    except TransitionError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc

    _audit(db, request, user, action, ag.id)
    db.commit()
    db.refresh(ag)
    get_logger().info(
        "agendamento.transition",
        agendamento_id=ag.id,
        action=action,
        de=previous.value,
        para=ag.status.value,
    )
    return _agendamento_out(ag)


@router.post("/{agendamento_id}/iniciar", response_model=AgendamentoOut)
def iniciar_agendamento(
    agendamento_id: int,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return _transition(db, request, current_user, agendamento_id, "START", lifecycle.start)


@router.post("/{agendamento_id}/cancelar", response_model=AgendamentoOut)
def cancelar_agendamento(
    agendamento_id: int,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return _transition(
        db, request, current_user, agendamento_id, "CANCEL", lifecycle.cancel
    )


@router.post("/{agendamento_id}/pagamento", response_model=AgendamentoOut)
def registrar_pagamento(
    agendamento_id: int,
    payload: PagamentoIn,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    return _transition(
        db,
        request,
        current_user,
        agendamento_id,
        "PAYMENT",
        lambda ag: lifecycle.record_payment(ag, payload.metodo_pagamento),
    )


@router.post("/{agendamento_id}/checklist", response_model=ChecklistOut)
def salvar_checklist(
    agendamento_id: int,
    payload: ChecklistIn,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    ag = _load_agendamento(db, agendamento_id)
    checklist, created = lifecycle.submit_checklist(db, ag, payload.model_dump())
    _audit(db, request, current_user, "CHECKLIST", ag.id)
    db.commit()
    db.refresh(checklist)
    get_logger().info(
        "checklist.created" if created else "checklist.updated",
        agendamento_id=ag.id,
        checklist_id=checklist.id,
    )
    return _checklist_out(checklist)


@router.get("/{agendamento_id}/checklist", response_model=ChecklistOut)
def get_checklist(
    agendamento_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    ag = _load_agendamento(db, agendamento_id)
    if ag.checklist is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Checklist não encontrado")
    return _checklist_out(ag.checklist)


@router.post("/{agendamento_id}/notificar", response_model=NotificacaoOut)
def notificar_tutor(
    agendamento_id: int,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Session = Depends(get_db),
):
    ag = _load_agendamento(db, agendamento_id)
    try:
        link = notify_pickup(ag)
    except NotificationError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc

    _audit(db, request, current_user, "NOTIFY", ag.id)
    db.commit()
    get_logger().info("notificacao.link_built", agendamento_id=ag.id)
    return NotificacaoOut(
        whatsapp_url=link.whatsapp_url,
        pet_nome=link.pet_nome,
        tutor_nome=link.tutor_nome,
        telefone=link.telefone,
    )
