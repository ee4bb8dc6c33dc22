"""
Backend endpoint resolution and the bounded outbound exchange.

Each call opens its own client inside the deadline scope; nothing is pooled or
reused across requests, and the scope is released on every exit path.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any

import httpx

from ollama_relay.config.settings import DEFAULT_OLLAMA_URL, settings
from ollama_relay.core.errors import BackendRejectedError, DeadlineExceededError, TransportFailureError
from ollama_relay.core.models import ChatMessage, OutboundCompletionRequest, RelayRequest

CHAT_PATH = "/api/chat"
TAGS_PATH = "/api/tags"


@dataclass(slots=True)
class BackendReply:
    status_code: int
    reason_phrase: str
    text: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def resolve_backend_base(base_url: str | None) -> str:
    # request body -> environment -> local daemon; used verbatim
    return base_url or settings.ollama_url or DEFAULT_OLLAMA_URL


def build_backend_url(base: str, path: str) -> str:
    return f"{base}{path}"


def build_outbound_payload(request: RelayRequest) -> dict[str, Any]:
    outbound = OutboundCompletionRequest(
        model=request.model,
        messages=[ChatMessage(role=m.role, content=m.content) for m in request.messages],
    )
    return outbound.model_dump()


def _build_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout))


async def _exchange(method: str, url: str, payload: dict[str, Any] | None, timeout: float) -> BackendReply:
    async with _build_client(timeout) as client:
        if payload is None:
            response = await client.request(method, url)
        else:
            response = await client.request(
                method,
                url,
                content=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
        return BackendReply(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            text=response.text,
        )


async def send_bounded(
    method: str,
    url: str,
    payload: dict[str, Any] | None,
    timeout: float,
) -> BackendReply:
    """Run one exchange under `timeout` seconds, mapping failures onto the relay error classes."""
    try:
        return await asyncio.wait_for(_exchange(method, url, payload, timeout), timeout=timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise DeadlineExceededError(timeout) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        detail = (str(exc) or "").strip() or exc.__class__.__name__
        raise TransportFailureError(detail) from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not valid JSON")


def decode_reply(reply: BackendReply) -> Any:
    if not reply.is_success:
        raise BackendRejectedError(reply.status_code, reply.reason_phrase, reply.text)
    try:
        return json.loads(reply.text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise TransportFailureError(f"Invalid JSON in Ollama response: {exc}") from exc
