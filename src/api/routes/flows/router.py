"""Endpoints de Flows: verificação (eco base64) e submissão (relay JSON).

Ambos recebem o mesmo envelope criptografado:
- POST /: decripta e devolve o plaintext em base64 (text/plain)
- POST /flow: decripta, valida JSON e encaminha ao relay configurado
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from api.connectors.flows import parse_envelope_body
from app.domain.envelope import DecryptionFailure, FailureKind
from app.domain.errors import MalformedPlaintextError, RelayDeliveryError, ValidationError
from app.observability import correlation_scope
from app.use_cases.flows import decode_structured_relay, encode_verification_echo

if TYPE_CHECKING:
    from app.coordinators.flows import RelayCoordinator
    from app.use_cases.flows import DecryptionPipeline

logger = logging.getLogger(__name__)

router = APIRouter()

VERIFICATION_MISSING_FIELDS = "Missing fields"
SUBMISSION_MISSING_FIELDS = "Missing required fields"
MISCONFIGURED = "Flow endpoint misconfigured"


@router.post("/")
async def handle_verification(request: Request) -> PlainTextResponse:
    """Recebe envelope criptografado e devolve o plaintext em base64."""
    with correlation_scope(request.headers.get("x-correlation-id")):
        pipeline = _get_pipeline(request)
        if pipeline is None:
            return PlainTextResponse(MISCONFIGURED, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

        try:
            envelope = parse_envelope_body(await request.body())
        except ValidationError as exc:
            _log_rejected("verification", exc)
            return PlainTextResponse(
                VERIFICATION_MISSING_FIELDS, status_code=status.HTTP_400_BAD_REQUEST
            )

        outcome = pipeline.process(envelope)
        if isinstance(outcome, DecryptionFailure):
            if outcome.kind is FailureKind.VALIDATION:
                return PlainTextResponse(
                    VERIFICATION_MISSING_FIELDS, status_code=status.HTTP_400_BAD_REQUEST
                )
            return PlainTextResponse(
                f"Error: {outcome.message}",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return PlainTextResponse(encode_verification_echo(outcome.plaintext), status_code=200)


@router.post("/flow")
async def handle_submission(request: Request) -> JSONResponse:
    """Decripta envelope, valida JSON e encaminha ao relay."""
    with correlation_scope(request.headers.get("x-correlation-id")):
        pipeline = _get_pipeline(request)
        if pipeline is None:
            return _error(MISCONFIGURED, status.HTTP_503_SERVICE_UNAVAILABLE)

        try:
            envelope = parse_envelope_body(await request.body())
        except ValidationError as exc:
            _log_rejected("submission", exc)
            return _error(SUBMISSION_MISSING_FIELDS, status.HTTP_400_BAD_REQUEST)

        outcome = pipeline.process(envelope)
        if isinstance(outcome, DecryptionFailure):
            if outcome.kind is FailureKind.VALIDATION:
                return _error(SUBMISSION_MISSING_FIELDS, status.HTTP_400_BAD_REQUEST)
            return _error(outcome.message, status.HTTP_500_INTERNAL_SERVER_ERROR)

        try:
            data = decode_structured_relay(outcome.plaintext)
        except MalformedPlaintextError as exc:
            logger.error(
                "flow_plaintext_malformed",
                extra={"component": "flow_submission", "error_type": exc.kind},
            )
            return _error(exc.message, exc.http_status, raw=exc.raw)

        coordinator = _get_relay_coordinator(request)
        if coordinator is not None:
            try:
                await coordinator.relay(data)
            except RelayDeliveryError as exc:
                logger.error(
                    "flow_relay_failed",
                    extra={"component": "flow_submission", "status_code": exc.status_code},
                )
                return _error(exc.message, exc.http_status)

        return JSONResponse(content={"status": "ok", "data": data}, status_code=200)


def _get_pipeline(request: Request) -> DecryptionPipeline | None:
    pipeline = getattr(request.app.state, "decryption_pipeline", None)
    if pipeline is None:
        logger.error(
            "flow_endpoint_misconfigured",
            extra={"component": "flow_endpoint", "missing": "private_key"},
        )
    return pipeline


def _get_relay_coordinator(request: Request) -> RelayCoordinator | None:
    return getattr(request.app.state, "relay_coordinator", None)


def _log_rejected(endpoint: str, exc: ValidationError) -> None:
    logger.warning(
        "flow_envelope_rejected",
        extra={"component": f"flow_{endpoint}", "reason": exc.message},
    )


def _error(message: str, status_code: int, **context: Any) -> JSONResponse:
    return JSONResponse(content={"error": message, **context}, status_code=status_code)
