"""Structured logging bridge."""

from __future__ import annotations

import logging
from typing import Any

from ollama_relay.config.settings import settings
from ollama_relay.core.errors import BackendRejectedError, RelayError
from ollama_relay.util.debug_excerpt import dump_for_debug
from ollama_relay.util.logger import logger


class RelayEventLog:
    """
    The relay's only logging collaborator.

    The handler calls one method per extension point; full bodies are dumped only
    when DEBUG is enabled (RELAY_LOG_LEVEL=debug or DEBUG_OLLAMA=1).
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    def _verbose(self) -> bool:
        return self._logger.isEnabledFor(logging.DEBUG)

    def _dump(self, value: Any) -> str:
        return dump_for_debug(value, max_len=settings.debug_body_excerpt_chars)

    def request_start(self, *, model: str, base_url: str, message_count: int) -> None:
        self._logger.info("relay start model=%s base=%s messages=%d", model, base_url, message_count)

    def outbound_request(self, url: str, payload: dict[str, Any] | None) -> None:
        if not self._verbose():
            return
        self._logger.debug("relay outbound url=%s body=%s", url, self._dump(payload))

    def backend_result(self, url: str, status_code: int) -> None:
        self._logger.debug("relay backend status url=%s status=%s", url, status_code)

    def backend_body(self, body: Any) -> None:
        if not self._verbose():
            return
        self._logger.debug("relay backend body=%s", self._dump(body))

    def model_unresolved(self, requested: str, candidates: list[str]) -> None:
        self._logger.info("relay model unresolved requested=%s candidates=%s", requested, candidates)

    def timeout(self, url: str, timeout_seconds: float) -> None:
        self._logger.warning("relay timeout url=%s after=%.1fs", url, timeout_seconds)

    def relay_error(self, url: str, exc: RelayError) -> None:
        if isinstance(exc, BackendRejectedError):
            self._logger.warning("relay backend rejected url=%s status=%s", url, exc.backend_status)
            if self._verbose():
                self._logger.debug("relay backend error body=%s", self._dump(exc.body_text))
            return
        self._logger.error("relay failed url=%s error=%s", url, exc)

    def completed(self, *, model: str, status_code: int, text_chars: int) -> None:
        self._logger.info(
            "event=%s payload=%s",
            "relay_completed",
            {"model": model, "status": status_code, "text_chars": text_chars},
        )
