from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware

import petshop.db.base  # noqa: F401  registra os models no metadata
from petshop.api.main import api_router
from petshop.core.errors import install_error_handlers
from petshop.core.logging import configure_logging, get_logger
from petshop.core.settings import Env, settings
from petshop.middlewares.telemetry import RequestContextMiddleware
from petshop.version import APP_VERSION, BUILD_TIME_UTC, GIT_SHA

configure_logging(json=settings.LOG_JSON, level=settings.LOG_LEVEL)

app = FastAPI(title="Pet Shop", version=APP_VERSION, debug=settings.DEBUG)

# --- Middlewares de contexto/log
app.add_middleware(RequestContextMiddleware)

# --- CORS
allowed_origins = []
for host in settings.ALLOWED_HOSTS.split(","):
    _host = host.strip()
    if not _host:
        continue
    if _host.startswith("http"):
        allowed_origins.append(_host)
    else:
        allowed_origins.append(f"http://{_host}")
        allowed_origins.append(f"https://{_host}")

if settings.DEBUG and not allowed_origins:
    allowed_origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- HTTPS only em prod
if settings.APP_ENV == Env.PROD:
    app.add_middleware(HTTPSRedirectMiddleware)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)

    if settings.APP_ENV == Env.PROD:
        response.headers["Strict-Transport-Security"] = (
            "max-age=15552000; includeSubDomains"
        )

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "no-referrer"
    return response


install_error_handlers(app)

app.include_router(api_router)


# --- Endpoints
@app.get("/healthz", tags=["ops"])
def healthz():
    get_logger().info("health.check")
    return {"status": "ok", "env": settings.APP_ENV, "version": APP_VERSION}


@app.get("/version", tags=["ops"])
def version():
    return {
        "version": APP_VERSION,
        "git_sha": GIT_SHA,
        "build_time_utc": BUILD_TIME_UTC,
        "env": settings.APP_ENV,
        "debug": settings.DEBUG,
    }
