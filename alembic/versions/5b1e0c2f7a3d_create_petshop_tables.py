"""create petshop tables

Revision ID: 5b1e0c2f7a3d
Revises:
Create Date: 2026-10-19 10:12:44.301512

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5b1e0c2f7a3d"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade():
    # 1) Enums
    sexo_enum = sa.Enum("MALE", "FEMALE", name="sexo_enum")
    status_enum = sa.Enum(
        "AGENDADO", "EM_ANDAMENTO", "CONCLUIDO", "CANCELADO",
        name="status_agendamento_enum",
    )
    pagamento_enum = sa.Enum("PENDENTE", "PAGO", name="status_pagamento_enum")
    metodo_enum = sa.Enum(
        "CASH", "CREDIT_CARD", "DEBIT_CARD", "PIX", "BANK_TRANSFER",
        name="metodo_pagamento_enum",
    )
    entrada_enum = sa.Enum(
        "OWNER_BRINGS", "PICKUP_SERVICE", name="transporte_entrada_enum"
    )
    saida_enum = sa.Enum(
        "OWNER_PICKS_UP", "DROPOFF_SERVICE", name="transporte_saida_enum"
    )

    # 2) users
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("username", sa.String(length=60), nullable=True),
        sa.Column("password_hash", sa.String(length=512), nullable=False),
        sa.Column(
            "is_active", sa.Boolean(), nullable=False, server_default=sa.text("TRUE")
        ),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # 3) tutores
    op.create_table(
        "tutores",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("telefone", sa.String(length=30), nullable=False),
        sa.Column("cep", sa.String(length=9), nullable=True),
        sa.Column("rua", sa.String(length=160), nullable=True),
        sa.Column("numero", sa.String(length=20), nullable=True),
        sa.Column("complemento", sa.String(length=120), nullable=True),
        sa.Column("bairro", sa.String(length=120), nullable=True),
        sa.Column("cidade", sa.String(length=120), nullable=True),
        sa.Column("estado", sa.String(length=2), nullable=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_tutores_user_id", "tutores", ["user_id"])

    # 4) pets + vínculo com tutores
    op.create_table(
        "pets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(length=120), nullable=False),
        sa.Column("foto", sa.Text(), nullable=True),
        sa.Column("data_nascimento", sa.Date(), nullable=True),
        sa.Column("raca", sa.String(length=120), nullable=True),
        sa.Column("peso", sa.Float(), nullable=True),
        sa.Column("sexo", sexo_enum, nullable=True),
        sa.Column("alergias", sa.Text(), nullable=True),
        sa.Column("observacoes", sa.Text(), nullable=True),
        sa.Column(
            "usa_taxi_dog", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")
        ),
        *_timestamps(),
    )
    op.create_table(
        "pet_tutores",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "pet_id",
            sa.Integer(),
            sa.ForeignKey("pets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "tutor_id",
            sa.Integer(),
            sa.ForeignKey("tutores.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "is_primario", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")
        ),
    )
    op.create_index("ix_pet_tutores_pet_id", "pet_tutores", ["pet_id"])
    op.create_index("ix_pet_tutores_tutor_id", "pet_tutores", ["tutor_id"])

    # 5) serviços + faixas de preço
    op.create_table(
        "servicos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(length=120), nullable=False),
        sa.Column("observacoes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "precos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "servico_id",
            sa.Integer(),
            sa.ForeignKey("servicos.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("raca", sa.String(length=120), nullable=True),
        sa.Column("peso", sa.Integer(), nullable=True),
        sa.Column("preco", sa.Numeric(10, 2), nullable=False),
    )
    op.create_index("ix_precos_servico_id", "precos", ["servico_id"])

    # 6) agendamentos
    op.create_table(
        "agendamentos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "pet_id",
            sa.Integer(),
            sa.ForeignKey("pets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("data", sa.DateTime(), nullable=False),
        sa.Column("hora_inicio", sa.DateTime(), nullable=False),
        sa.Column("hora_fim", sa.DateTime(), nullable=True),
        sa.Column("observacoes", sa.Text(), nullable=True),
        sa.Column("status", status_enum, nullable=False, server_default="AGENDADO"),
        sa.Column(
            "status_pagamento", pagamento_enum, nullable=False, server_default="PENDENTE"
        ),
        sa.Column("metodo_pagamento", metodo_enum, nullable=True),
        sa.Column(
            "valor_total", sa.Numeric(10, 2), nullable=False, server_default="0"
        ),
        sa.Column(
            "transporte_entrada",
            entrada_enum,
            nullable=False,
            server_default="OWNER_BRINGS",
        ),
        sa.Column(
            "transporte_saida",
            saida_enum,
            nullable=False,
            server_default="OWNER_PICKS_UP",
        ),
        sa.Column(
            "enviar_notificacao",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("FALSE"),
        ),
        *_timestamps(),
    )
    op.create_index("ix_agendamento_pet_id", "agendamentos", ["pet_id"])
    op.create_index(
        "ix_agendamento_data_hora", "agendamentos", ["data", "hora_inicio"]
    )

    op.create_table(
        "agendamento_servicos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "agendamento_id",
            sa.Integer(),
            sa.ForeignKey("agendamentos.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "servico_id",
            sa.Integer(),
            sa.ForeignKey("servicos.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("preco", sa.Numeric(10, 2), nullable=False),
    )
    op.create_index(
        "ix_agendamento_servicos_agendamento_id",
        "agendamento_servicos",
        ["agendamento_id"],
    )
    op.create_index(
        "ix_agendamento_servicos_servico_id", "agendamento_servicos", ["servico_id"]
    )

    op.create_table(
        "checklists",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "agendamento_id",
            sa.Integer(),
            sa.ForeignKey("agendamentos.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column(
            "tem_carrapatos", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")
        ),
        sa.Column(
            "tem_pulgas", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")
        ),
        sa.Column(
            "problema_pele", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")
        ),
        sa.Column(
            "problema_dentes",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("FALSE"),
        ),
        sa.Column("outros_problemas", sa.Text(), nullable=True),
        sa.Column("observacoes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    # 7) trilha de auditoria
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("action", sa.String(length=40), nullable=False),
        sa.Column("entity", sa.String(length=40), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=True),
        sa.Column("detail", sa.Text(), nullable=True),
        sa.Column("timestamp_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "ip",
            sa.String(length=45).with_variant(postgresql.INET(), "postgresql"),
            nullable=True,
        ),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_timestamp_utc", "audit_logs", ["timestamp_utc"])
    op.create_index("ix_audit_entity", "audit_logs", ["entity", "entity_id"])


def downgrade():
    op.drop_table("audit_logs")
    op.drop_table("checklists")
    op.drop_table("agendamento_servicos")
    op.drop_table("agendamentos")
    op.drop_table("precos")
    op.drop_table("servicos")
    op.drop_table("pet_tutores")
    op.drop_table("pets")
    op.drop_table("tutores")
    op.drop_table("users")

    bind = op.get_bind()
    for name in (
        "transporte_saida_enum",
        "transporte_entrada_enum",
        "metodo_pagamento_enum",
        "status_pagamento_enum",
        "status_agendamento_enum",
        "sexo_enum",
    ):
        sa.Enum(name=name).drop(bind, checkfirst=True)
