"""Run the relay with uvicorn: python -m ollama_relay"""

from __future__ import annotations

import uvicorn

from ollama_relay.config.settings import settings


def main() -> None:
    uvicorn.run(
        "ollama_relay.core.gateway:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
