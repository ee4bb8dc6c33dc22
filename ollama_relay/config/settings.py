"""Runtime settings."""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_OLLAMA_URL = "http://localhost:11434"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RELAY_", extra="ignore")

    app_name: str = "ollama-relay"
    log_level: str = "info"
    # empty string keeps logging on stderr only
    log_dir: str = "logs"
    host: str = "127.0.0.1"
    port: int = 18081

    # Both names are honoured so an existing OLLAMA_URL / DEBUG_OLLAMA deployment keeps working.
    ollama_url: str = Field(default="", validation_alias=AliasChoices("OLLAMA_URL", "RELAY_OLLAMA_URL"))
    debug_ollama: bool = Field(default=False, validation_alias=AliasChoices("DEBUG_OLLAMA", "RELAY_DEBUG_OLLAMA"))

    request_timeout_seconds: float = Field(default=45.0, gt=0.0)
    max_available_models: int = Field(default=10, ge=0)
    # False compares the lowercased request model against descriptor names exactly as reported.
    fold_model_name_case: bool = True
    debug_body_excerpt_chars: int = 2000

    @field_validator("debug_ollama", mode="before")
    @classmethod
    def debug_flag_is_one(cls, value: object) -> object:
        # only "1" switches diagnostics on; any other string leaves them off
        if isinstance(value, str):
            return value.strip() == "1"
        return value


settings = Settings()
