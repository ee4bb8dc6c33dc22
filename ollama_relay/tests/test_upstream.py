import asyncio
import json

import httpx
import pytest

from ollama_relay.adapters.ollama import upstream
from ollama_relay.adapters.ollama.upstream import (
    BackendReply,
    build_backend_url,
    build_outbound_payload,
    decode_reply,
    resolve_backend_base,
    send_bounded,
)
from ollama_relay.config.settings import settings
from ollama_relay.core.errors import BackendRejectedError, DeadlineExceededError, TransportFailureError
from ollama_relay.core.models import RelayRequest


def _install_transport(monkeypatch, handler) -> None:
    def fake_build_client(timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=httpx.Timeout(timeout))

    monkeypatch.setattr(upstream, "_build_client", fake_build_client)


def test_resolve_backend_base_order():
    original = settings.ollama_url
    try:
        settings.ollama_url = ""
        assert resolve_backend_base(None) == "http://localhost:11434"
        settings.ollama_url = "http://gpu-box:11434"
        assert resolve_backend_base(None) == "http://gpu-box:11434"
        assert resolve_backend_base("") == "http://gpu-box:11434"
        assert resolve_backend_base("http://override:9999/") == "http://override:9999/"
    finally:
        settings.ollama_url = original


def test_build_backend_url_does_not_normalise_slashes():
    assert build_backend_url("http://localhost:11434", "/api/chat") == "http://localhost:11434/api/chat"
    assert build_backend_url("http://host/", "/api/chat") == "http://host//api/chat"


def test_outbound_payload_preserves_messages_and_disables_streaming():
    request = RelayRequest.model_validate(
        {
            "model": "llama3",
            "messages": [
                {"role": "system", "content": "be brief"},
                {"role": "custom-role", "content": "<b>raw</b>"},
                {"role": "user", "content": "hi"},
            ],
        }
    )
    payload = build_outbound_payload(request)
    assert payload == {
        "model": "llama3",
        "messages": [
            {"role": "system", "content": "be brief"},
            {"role": "custom-role", "content": "<b>raw</b>"},
            {"role": "user", "content": "hi"},
        ],
        "stream": False,
    }


@pytest.mark.asyncio
async def test_send_bounded_posts_json(monkeypatch):
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content.decode("utf-8"))
        captured["content_type"] = request.headers.get("content-type")
        return httpx.Response(200, json={"message": {"content": "ok"}})

    _install_transport(monkeypatch, handler)
    reply = await send_bounded("POST", "http://localhost:11434/api/chat", {"model": "m", "stream": False}, 5.0)
    assert reply.is_success
    assert captured == {
        "method": "POST",
        "url": "http://localhost:11434/api/chat",
        "body": {"model": "m", "stream": False},
        "content_type": "application/json",
    }
    assert decode_reply(reply) == {"message": {"content": "ok"}}


@pytest.mark.asyncio
async def test_send_bounded_maps_slow_backend_to_deadline(monkeypatch):
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json={})

    _install_transport(monkeypatch, handler)
    with pytest.raises(DeadlineExceededError) as exc_info:
        await send_bounded("POST", "http://localhost:11434/api/chat", {}, 0.05)
    assert exc_info.value.status_code == 504
    assert exc_info.value.to_payload() == {"error": "Ollama request timed out", "provider": "ollama", "code": 504}


@pytest.mark.asyncio
async def test_send_bounded_maps_httpx_timeout_to_deadline(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    _install_transport(monkeypatch, handler)
    with pytest.raises(DeadlineExceededError):
        await send_bounded("POST", "http://localhost:11434/api/chat", {}, 5.0)


@pytest.mark.asyncio
async def test_send_bounded_maps_connection_error_to_transport_failure(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _install_transport(monkeypatch, handler)
    with pytest.raises(TransportFailureError) as exc_info:
        await send_bounded("POST", "http://localhost:11434/api/chat", {}, 5.0)
    assert exc_info.value.status_code == 500
    assert exc_info.value.to_payload() == {"error": "connection refused", "provider": "ollama"}


def test_decode_reply_rejects_non_success_status():
    reply = BackendReply(status_code=404, reason_phrase="Not Found", text='{"error":"model \\"phi\\" not found"}')
    with pytest.raises(BackendRejectedError) as exc_info:
        decode_reply(reply)
    exc = exc_info.value
    assert exc.status_code == 502
    assert exc.to_payload() == {
        "error": "Ollama API error: 404 Not Found",
        "details": '{"error":"model \\"phi\\" not found"}',
        "provider": "ollama",
        "code": 404,
    }


def test_decode_reply_invalid_json_is_transport_failure():
    with pytest.raises(TransportFailureError) as exc_info:
        decode_reply(BackendReply(status_code=200, reason_phrase="OK", text="<html>"))
    assert "Invalid JSON" in str(exc_info.value)


def test_decode_reply_accepts_any_json_shape():
    assert decode_reply(BackendReply(status_code=200, reason_phrase="OK", text='[{"name": "llama3"}]')) == [
        {"name": "llama3"}
    ]


@pytest.mark.asyncio
async def test_send_bounded_maps_invalid_url_to_transport_failure(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    _install_transport(monkeypatch, handler)
    with pytest.raises(TransportFailureError) as exc_info:
        await send_bounded("POST", "http://[::1/api/chat", {}, 5.0)
    assert exc_info.value.to_payload()["provider"] == "ollama"
    assert str(exc_info.value)


def test_decode_reply_rejects_non_finite_numbers():
    for text in ('{"message": {"content": "hi"}, "x": NaN}', '{"x": Infinity}', "[-Infinity]"):
        with pytest.raises(TransportFailureError) as exc_info:
            decode_reply(BackendReply(status_code=200, reason_phrase="OK", text=text))
        assert "Invalid JSON" in str(exc_info.value)
