"""Ollama relay routes."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ollama_relay.core.errors import RelayError, TransportFailureError
from ollama_relay.core.relay import RelayHandler, parse_relay_request
from ollama_relay.util.logger import logger


router = APIRouter()
handler = RelayHandler()


def _error_response(exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


def _unexpected_error_response(exc: Exception) -> JSONResponse:
    logger.error("relay unexpected error: %s", exc, exc_info=True)
    return _error_response(TransportFailureError(str(exc) or "Unknown error"))


@router.post("/ollama")
async def relay_chat(request: Request) -> JSONResponse:
    try:
        try:
            payload = await request.json()
        except ValueError as exc:
            raise TransportFailureError(f"Invalid JSON in request body: {exc}") from exc
        relay_request = parse_relay_request(payload)
        result = await handler.handle(relay_request)
    except RelayError as exc:
        return _error_response(exc)
    except Exception as exc:
        return _unexpected_error_response(exc)
    return JSONResponse(status_code=200, content=result.to_payload())


@router.get("/ollama/models")
async def relay_models(request: Request) -> JSONResponse:
    base_url = (request.query_params.get("baseUrl") or "").strip() or None
    try:
        listing = await handler.list_models(base_url)
    except RelayError as exc:
        return _error_response(exc)
    except Exception as exc:
        return _unexpected_error_response(exc)
    return JSONResponse(status_code=200, content=listing.to_payload())
