"""FastAPI app entry."""

from __future__ import annotations

from fastapi import FastAPI

from ollama_relay.adapters.ollama.router import router as ollama_router
from ollama_relay.config.settings import settings
from ollama_relay.util.logger import logger

app = FastAPI(title=settings.app_name)
app.include_router(ollama_router, prefix="/api")


@app.get("/health")
def health() -> dict:
    logger.debug("health check")
    return {"status": "ok"}


@app.on_event("startup")
async def log_startup() -> None:
    logger.info(
        "%s started default_backend=%s timeout=%.1fs debug_ollama=%s",
        settings.app_name,
        settings.ollama_url or "(unset)",
        settings.request_timeout_seconds,
        settings.debug_ollama,
    )


@app.on_event("shutdown")
async def log_shutdown() -> None:
    logger.info("%s shutting down", settings.app_name)
