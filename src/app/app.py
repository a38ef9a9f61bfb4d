"""Entrypoint do gateway de decriptação de Flows.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from app.bootstrap import (
    create_decryption_pipeline,
    create_relay_coordinator,
    initialize_app,
    validate_runtime_settings,
)
from app.infra.relay import drain_relay_tasks
from config.logging import get_logger
from config.settings import get_base_settings, get_flow_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Carrega a chave privada (uma vez, somente leitura)
    - Monta pipeline e coordinator de relay

    Shutdown:
    - Aguarda entregas pendentes ao relay
    """
    logger.info("app_starting", extra={"service": "flow-gateway"})
    validate_runtime_settings()

    flow_settings = get_flow_settings()
    app.state.decryption_pipeline = create_decryption_pipeline(flow_settings)
    app.state.relay_coordinator = create_relay_coordinator(flow_settings)

    yield

    logger.info("app_shutting_down", extra={"service": "flow-gateway"})
    await drain_relay_tasks(timeout_seconds=30.0)
    app.state.decryption_pipeline = None


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="Flow Gateway",
        description="Gateway de decriptação de WhatsApp Flows com relay downstream",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": "flow-gateway"})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    settings = get_base_settings()
    logger.info("Starting flow gateway", extra={"port": settings.port})
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
