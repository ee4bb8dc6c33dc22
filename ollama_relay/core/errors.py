"""Project error hierarchy."""

from __future__ import annotations

from typing import Any

PROVIDER = "ollama"


class RelayError(Exception):
    """Base error. Carries the HTTP status reported to the caller."""

    status_code: int = 500

    def to_payload(self) -> dict[str, Any]:
        return {"error": str(self) or "Unknown error", "provider": PROVIDER}


class BackendRejectedError(RelayError):
    """Raised when the backend answers with a non-2xx status."""

    # backend's own status is kept in the body, callers always see 502
    status_code = 502

    def __init__(self, backend_status: int, status_text: str, body_text: str) -> None:
        self.backend_status = backend_status
        self.status_text = status_text
        self.body_text = body_text
        super().__init__(f"Ollama API error: {backend_status} {status_text}")

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": str(self),
            "details": self.body_text,
            "provider": PROVIDER,
            "code": self.backend_status,
        }


class DeadlineExceededError(RelayError):
    """Raised when the outbound call does not finish within the deadline."""

    status_code = 504

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__("Ollama request timed out")

    def to_payload(self) -> dict[str, Any]:
        return {"error": str(self), "provider": PROVIDER, "code": self.status_code}


class TransportFailureError(RelayError):
    """Any other failure building, sending or decoding the exchange."""

    status_code = 500
