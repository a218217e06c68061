"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Endpoints:
- dashboard, bots, templates, knowledge-base, fine-tuning, conversations, settings
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from emailbots.application.store import StoreOperationError
from emailbots.config.logging_config import correlation_id_var, setup_logging
from emailbots.config.settings import Config
from emailbots.domain.exceptions import (
    DomainValidationError,
    SettingsValidationError,
    UnauthenticatedError,
)
from emailbots.presentation.api import (
    bots_router,
    conversations_router,
    dashboard_router,
    fine_tuning_router,
    knowledge_base_router,
    settings_router,
    templates_router,
)

logger = logging.getLogger(__name__)

# error code → HTTP status; unknown codes are treated as gateway failures
STATUS_BY_CODE = {
    "unauthenticated": 401,
    "not_found": 404,
    "duplicate_email": 409,
    "duplicate_source": 409,
    "conflict": 409,
    "invalid_url": 422,
    "invalid_input": 422,
    "invalid_import": 422,
    "validation_error": 422,
    "gateway_error": 502,
    "provisioning_error": 502,
}


def status_for(code: Optional[str]) -> int:
    return STATUS_BY_CODE.get(code or "", 502)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", "NO Correlation ID")

        # Set in contextvars (propagates to async tasks and logging)
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info(f"[VALIDATION ERROR] {request.url.path}: {errors}")
        return JSONResponse(
            status_code=422,
            content={
                "error": "Validation error",
                "code": "validation_error",
                "details": [
                    {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in errors
                ],
            },
        )

    @app.exception_handler(SettingsValidationError)
    async def settings_exception_handler(request: Request, exc: SettingsValidationError):
        logger.info(f"[SETTINGS ERROR] {exc.messages}")
        return JSONResponse(
            status_code=422,
            content={"error": exc.message, "code": exc.code, "details": exc.messages},
        )

    @app.exception_handler(DomainValidationError)
    async def domain_validation_handler(request: Request, exc: DomainValidationError):
        logger.info(f"[INPUT ERROR] {exc.code}: {exc.message}")
        return JSONResponse(
            status_code=status_for(exc.code),
            content={"error": exc.message, "code": exc.code},
        )

    @app.exception_handler(UnauthenticatedError)
    async def unauthenticated_handler(request: Request, exc: UnauthenticatedError):
        return JSONResponse(
            status_code=401,
            content={"error": exc.message, "code": exc.code},
        )

    @app.exception_handler(StoreOperationError)
    async def store_exception_handler(request: Request, exc: StoreOperationError):
        status_code = status_for(exc.code)
        log = logger.warning if status_code >= 500 else logger.info
        log(f"[STORE ERROR {status_code}] {exc.code}: {exc.message}")
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.message, "code": exc.code},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.info(f"[HTTP ERROR {exc.status_code}] {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[GLOBAL ERROR] {type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )


def create_fastapi_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """
    Application factory for creating the FastAPI app.

    Args:
        container: Dishka container to wire in. Defaults to the production
            container (Prisma, OpenAI, background provisioning), in which
            case logging is configured too.
    """
    if container is None:
        setup_logging(Config.LOG_LEVEL, Config.LOG_PATH)
        from emailbots.setup.ioc.container import create_container

        container = create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("FastAPI application started. DI container initialized.")
        yield
        # Shutdown: waits for in-flight provisioning, disconnects Prisma
        await container.close()
        logger.info("FastAPI application shutdown. DI container closed.")

    app = FastAPI(
        title="EmailBots Dashboard API",
        description="Manage AI email bots, templates, knowledge base and fine-tuning data",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Setup Dishka BEFORE app starts (must add middleware before startup)
    setup_dishka(container, app)

    # Correlation ID middleware (must be added before CORS)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(dashboard_router)
    app.include_router(bots_router)
    app.include_router(templates_router)
    app.include_router(knowledge_base_router)
    app.include_router(fine_tuning_router)
    app.include_router(conversations_router)
    app.include_router(settings_router)

    return app
