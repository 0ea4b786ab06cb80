"""
Conversão de erros em respostas texto puro.

Toda resposta de erro da API é `text/plain` com o status HTTP da categoria:
400 validação, 401 não autenticado, 404 não encontrado, 409 conflito,
500 inesperado.
"""
from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from petshop.core.logging import log_error

_DEFAULT_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Não encontrado",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Método não permitido",
}


def validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Dados inválidos"
    err = errors[0]
    if err.get("type") == "json_invalid":
        return "JSON inválido"
    loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
    field = ".".join(loc)
    if err.get("type") == "missing":
        return f"{field} é obrigatório" if field else "Corpo da requisição é obrigatório"
    if err.get("type") == "extra_forbidden":
        return f"Campo não permitido: {field}"
    if field:
        return f"{field} inválido: {err.get('msg')}"
    return f"Dados inválidos: {err.get('msg')}"


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if not isinstance(detail, str) or detail in ("Not Found", "Method Not Allowed"):
        detail = _DEFAULT_MESSAGES.get(exc.status_code, str(detail))
    return PlainTextResponse(detail, status_code=exc.status_code, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return PlainTextResponse(
        validation_message(exc), status_code=status.HTTP_400_BAD_REQUEST
    )


def _handler_tag(request: Request) -> str:
    route = request.scope.get("route")
    name = getattr(route, "name", None)
    return name.upper() if name else f"{request.method} {request.url.path}"


async def unexpected_error_handler(request: Request, exc: Exception):
    # a sessão é fechada (rollback implícito) pelo get_db
    log_error(_handler_tag(request), exc)
    return PlainTextResponse(
        "Erro interno", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
