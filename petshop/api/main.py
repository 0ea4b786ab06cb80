"""API router setup."""
from fastapi import APIRouter

from petshop.api.routes import agendamentos, auth, pets, servicos, tutores

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.register_router)
api_router.include_router(auth.router)
api_router.include_router(tutores.router)
api_router.include_router(pets.router)
api_router.include_router(servicos.router)
api_router.include_router(agendamentos.router)
