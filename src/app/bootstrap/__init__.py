"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, carrega a chave
privada uma única vez e conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, create_decryption_pipeline

    initialize_app()
    pipeline = create_decryption_pipeline(get_flow_settings())
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from app.coordinators.flows import RelayCoordinator
from app.infra.crypto import FlowCryptoError, load_private_key
from app.infra.relay import create_relay_forwarder
from app.observability import get_correlation_id
from app.use_cases.flows import DecryptionPipeline, PipelineConfig
from config.logging import configure_logging
from config.settings import RELAY_DISPATCH_MODES, get_base_settings, get_flow_settings

if TYPE_CHECKING:
    from config.settings import FlowSettings

SERVICE_NAME = "flow_gateway"

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging estruturado JSON com correlation_id.

    Deve ser chamada uma vez no início do serviço.
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    errors: list[str] = []
    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"flows: {error}" for error in get_flow_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if base.is_strict:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


def create_decryption_pipeline(settings: FlowSettings) -> DecryptionPipeline | None:
    """Carrega a chave privada e monta o pipeline.

    Returns:
        Pipeline pronto, ou None se a chave não estiver configurada ou
        for inválida (endpoints respondem 503).
    """
    try:
        private_key_pem = settings.resolve_private_key_pem()
    except OSError as exc:
        logger.error(
            "flow_private_key_unreadable",
            extra={"component": "bootstrap", "error_type": type(exc).__name__},
        )
        return None

    if not private_key_pem:
        logger.error("flow_private_key_missing", extra={"component": "bootstrap"})
        return None

    try:
        private_key = load_private_key(
            private_key_pem, settings.private_key_passphrase or None
        )
    except FlowCryptoError as exc:
        logger.error(
            "flow_private_key_invalid",
            extra={"component": "bootstrap", "error_type": exc.kind},
        )
        return None

    config = PipelineConfig(private_key=private_key, strict_padding=settings.strict_padding)
    logger.info(
        "flow_pipeline_ready",
        extra={
            "component": "bootstrap",
            "key_size_bits": private_key.key_size,
            "strict_padding": settings.strict_padding,
        },
    )
    return DecryptionPipeline(config)


def create_relay_coordinator(settings: FlowSettings) -> RelayCoordinator:
    """Monta o coordinator de relay (sem forwarder quando não configurado)."""
    mode = settings.relay_dispatch_mode
    if mode not in RELAY_DISPATCH_MODES:
        logger.warning(
            "relay_dispatch_mode_invalid",
            extra={"component": "bootstrap", "mode": mode, "fallback": "inline"},
        )
        mode = "inline"
    return RelayCoordinator(
        create_relay_forwarder(settings),
        mode=mode,
        deadline_seconds=settings.relay_deadline_seconds,
    )
