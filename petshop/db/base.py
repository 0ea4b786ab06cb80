# Garante o registro de TODAS as models no mesmo registry
from petshop.db.base_class import Base # noqa
from petshop.models.agendamento import Agendamento, AgendamentoServico, Checklist # noqa
from petshop.models.audit_log import AuditLog # noqa
from petshop.models.pet import Pet, PetTutor # noqa
from petshop.models.servico import Preco, Servico # noqa
from petshop.models.tutor import Tutor # noqa

# IMPORTS com efeito colateral (não remova)
from petshop.models.user import User # noqa
