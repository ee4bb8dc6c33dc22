"""Relay handler: one inbound chat request, one bounded outbound call, one normalised reply."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from ollama_relay.adapters.ollama.upstream import (
    CHAT_PATH,
    TAGS_PATH,
    build_backend_url,
    build_outbound_payload,
    decode_reply,
    resolve_backend_base,
    send_bounded,
)
from ollama_relay.config.settings import settings
from ollama_relay.core.errors import DeadlineExceededError, RelayError, TransportFailureError
from ollama_relay.core.extraction import available_models_hint, extract_model_descriptors, extract_text
from ollama_relay.core.models import ModelListing, RelayRequest, RelayResult
from ollama_relay.observability.logging import RelayEventLog


def parse_relay_request(payload: Any) -> RelayRequest:
    try:
        return RelayRequest.model_validate(payload)
    except ValidationError as exc:
        raise TransportFailureError(str(exc)) from exc


class RelayHandler:
    def __init__(self, events: RelayEventLog | None = None) -> None:
        self.events = events or RelayEventLog()

    async def _call_backend(self, method: str, url: str, payload: dict[str, Any] | None) -> Any:
        timeout = settings.request_timeout_seconds
        self.events.outbound_request(url, payload)
        try:
            reply = await send_bounded(method, url, payload, timeout)
            self.events.backend_result(url, reply.status_code)
            body = decode_reply(reply)
        except DeadlineExceededError:
            self.events.timeout(url, timeout)
            raise
        except RelayError as exc:
            self.events.relay_error(url, exc)
            raise
        self.events.backend_body(body)
        return body

    async def handle(self, request: RelayRequest) -> RelayResult:
        """
        Forward `request` to the backend's chat endpoint and normalise the answer.

        Raises a RelayError subclass on backend rejection, deadline or transport failure.
        An unknown model is not an error: the answer is still returned, with the
        backend's model names attached as `available_models`.
        """
        base = resolve_backend_base(request.base_url)
        url = build_backend_url(base, CHAT_PATH)
        self.events.request_start(model=request.model, base_url=base, message_count=len(request.messages))

        body = await self._call_backend("POST", url, build_outbound_payload(request))

        text = extract_text(body)
        hint = available_models_hint(
            request.model,
            body,
            limit=settings.max_available_models,
            fold_candidates=settings.fold_model_name_case,
        )
        if hint is not None:
            self.events.model_unresolved(request.model, hint)
        self.events.completed(model=request.model, status_code=200, text_chars=len(text))
        return RelayResult(text=text, raw=body, available_models=hint)

    async def list_models(self, base_url: str | None = None) -> ModelListing:
        base = resolve_backend_base(base_url)
        url = build_backend_url(base, TAGS_PATH)
        body = await self._call_backend("GET", url, None)
        return ModelListing(models=[d.name for d in extract_model_descriptors(body)], raw=body)
