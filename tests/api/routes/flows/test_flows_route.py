"""Testes dos endpoints de verificação (POST /) e submissão (POST /flow)."""

from __future__ import annotations

import base64
import json
from types import SimpleNamespace

import pytest
from starlette.requests import Request

from api.routes.flows import router as flows
from app.coordinators.flows import RelayCoordinator
from app.use_cases.flows import DecryptionPipeline, PipelineConfig
from tests.fakes.fake_flow_envelope import (
    FakeRelayForwarder,
    build_envelope,
    generate_private_key,
)


@pytest.fixture(scope="module")
def private_key():
    return generate_private_key()


def _build_request(
    *,
    body: bytes,
    state: SimpleNamespace,
    path: str = "/flow",
    headers: dict[str, str] | None = None,
) -> Request:
    header_items = headers or {}
    raw_headers = [(k.lower().encode("utf-8"), v.encode("utf-8")) for k, v in header_items.items()]
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": b"",
        "headers": raw_headers,
        "app": SimpleNamespace(state=state),
    }
    sent = False

    async def _receive() -> dict[str, object]:
        nonlocal sent
        if sent:
            return {"type": "http.request", "body": b"", "more_body": False}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, _receive)


def _state(private_key, forwarder: FakeRelayForwarder | None = None) -> SimpleNamespace:
    return SimpleNamespace(
        decryption_pipeline=DecryptionPipeline(PipelineConfig(private_key=private_key)),
        relay_coordinator=RelayCoordinator(forwarder),
    )


def _ping_body(private_key, *, truncate: bool = False) -> bytes:
    built = build_envelope(private_key, b'{"ping":true}', key_size=32, iv=bytes(16))
    transport = built.to_transport()
    if truncate:
        payload = built.envelope.encrypted_payload[:-1]
        transport["encrypted_flow_data"] = base64.b64encode(payload).decode("utf-8")
    return json.dumps(transport).encode("utf-8")


def _json(response) -> object:
    return json.loads(response.body.decode("utf-8"))


class TestVerificationEndpoint:
    """POST /: eco base64 do plaintext."""

    @pytest.mark.asyncio
    async def test_returns_base64_of_plaintext(self, private_key) -> None:
        request = _build_request(body=_ping_body(private_key), state=_state(private_key), path="/")

        response = await flows.handle_verification(request)

        assert response.status_code == 200
        assert response.media_type == "text/plain"
        assert base64.b64decode(response.body) == b'{"ping":true}'

    @pytest.mark.asyncio
    async def test_missing_fields_returns_400(self, private_key) -> None:
        body = json.dumps({"initial_vector": "AAAA"}).encode("utf-8")
        request = _build_request(body=body, state=_state(private_key), path="/")

        response = await flows.handle_verification(request)

        assert response.status_code == 400
        assert response.body == b"Missing fields"

    @pytest.mark.asyncio
    async def test_decrypt_failure_returns_500_with_message(self, private_key) -> None:
        request = _build_request(
            body=_ping_body(private_key, truncate=True), state=_state(private_key), path="/"
        )

        response = await flows.handle_verification(request)

        assert response.status_code == 500
        assert response.body == b"Error: Payload decryption failed"

    @pytest.mark.asyncio
    async def test_without_pipeline_returns_503(self, private_key) -> None:
        request = _build_request(
            body=_ping_body(private_key),
            state=SimpleNamespace(decryption_pipeline=None),
            path="/",
        )

        response = await flows.handle_verification(request)

        assert response.status_code == 503


class TestSubmissionEndpoint:
    """POST /flow: JSON decriptado encaminhado ao relay."""

    @pytest.mark.asyncio
    async def test_ping_roundtrip_returns_data(self, private_key) -> None:
        request = _build_request(body=_ping_body(private_key), state=_state(private_key))

        response = await flows.handle_submission(request)

        assert response.status_code == 200
        assert _json(response) == {"status": "ok", "data": {"ping": True}}

    @pytest.mark.asyncio
    async def test_relays_decrypted_json(self, private_key) -> None:
        forwarder = FakeRelayForwarder()
        request = _build_request(
            body=_ping_body(private_key),
            state=_state(private_key, forwarder),
            headers={"X-Correlation-Id": "corr-1"},
        )

        response = await flows.handle_submission(request)

        assert response.status_code == 200
        assert forwarder.delivered == [{"ping": True}]

    @pytest.mark.asyncio
    async def test_relay_failure_returns_502(self, private_key) -> None:
        request = _build_request(
            body=_ping_body(private_key),
            state=_state(private_key, FakeRelayForwarder(fail=True)),
        )

        response = await flows.handle_submission(request)

        assert response.status_code == 502
        assert _json(response) == {"error": "Relay delivery failed"}

    @pytest.mark.asyncio
    async def test_truncated_payload_returns_500(self, private_key) -> None:
        forwarder = FakeRelayForwarder()
        request = _build_request(
            body=_ping_body(private_key, truncate=True),
            state=_state(private_key, forwarder),
        )

        response = await flows.handle_submission(request)

        assert response.status_code == 500
        assert _json(response) == {"error": "Payload decryption failed"}
        assert forwarder.delivered == []

    @pytest.mark.asyncio
    async def test_foreign_key_returns_500(self, private_key) -> None:
        built = build_envelope(generate_private_key(), b'{"ping":true}')
        request = _build_request(
            body=json.dumps(built.to_transport()).encode("utf-8"),
            state=_state(private_key),
        )

        response = await flows.handle_submission(request)

        assert response.status_code == 500
        assert _json(response) == {"error": "Key unwrap failed"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            b"{}",
            b"not json",
            json.dumps(
                {"initial_vector": "", "encrypted_flow_data": "", "encrypted_aes_key": ""}
            ).encode(),
        ],
    )
    async def test_missing_fields_returns_400(self, private_key, body: bytes) -> None:
        forwarder = FakeRelayForwarder()
        request = _build_request(body=body, state=_state(private_key, forwarder))

        response = await flows.handle_submission(request)

        assert response.status_code == 400
        assert _json(response) == {"error": "Missing required fields"}
        assert forwarder.delivered == []

    @pytest.mark.asyncio
    async def test_non_json_plaintext_returns_500_with_raw(self, private_key) -> None:
        built = build_envelope(private_key, b"plain text")
        forwarder = FakeRelayForwarder()
        request = _build_request(
            body=json.dumps(built.to_transport()).encode("utf-8"),
            state=_state(private_key, forwarder),
        )

        response = await flows.handle_submission(request)

        assert response.status_code == 500
        assert _json(response) == {
            "error": "Decrypted payload is not valid JSON",
            "raw": "plain text",
        }
        assert forwarder.delivered == []

    @pytest.mark.asyncio
    async def test_without_pipeline_returns_503(self, private_key) -> None:
        request = _build_request(
            body=_ping_body(private_key),
            state=SimpleNamespace(decryption_pipeline=None, relay_coordinator=None),
        )

        response = await flows.handle_submission(request)

        assert response.status_code == 503
        assert _json(response) == {"error": "Flow endpoint misconfigured"}
