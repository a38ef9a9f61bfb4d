"""Endpoints de liveness e readiness."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "flow-gateway"


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed"]
    error: str | None = None
    detail: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "error": self.error,
            "detail": self.detail,
        }


@router.get("/", response_class=PlainTextResponse)
async def alive() -> PlainTextResponse:
    """Checagem simples de que o processo responde."""
    return PlainTextResponse("Service is running")


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe: verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: chave privada carregada é crítica, relay é informativo."""
    state = request.app.state
    private_key_check = _check_private_key(getattr(state, "decryption_pipeline", None))
    relay_check = _check_relay(getattr(state, "relay_coordinator", None))

    ready = private_key_check.status == "ok"
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "private_key": private_key_check.as_dict(),
            "relay": relay_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


def _check_private_key(pipeline: Any | None) -> DependencyCheck:
    if pipeline is None:
        return DependencyCheck(status="failed", error="not_configured")
    return DependencyCheck(status="ok")


def _check_relay(coordinator: Any | None) -> DependencyCheck:
    if coordinator is None or not coordinator.enabled:
        return DependencyCheck(status="degraded", error="not_configured")
    return DependencyCheck(status="ok", detail=coordinator.mode)
