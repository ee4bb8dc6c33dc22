"""Request-scoped transport models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    role: str
    content: str


class RelayRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage]
    model: str
    base_url: str | None = Field(default=None, alias="baseUrl")


class OutboundCompletionRequest(BaseModel):
    model: str
    messages: list[ChatMessage] = Field(default_factory=list)
    stream: Literal[False] = False


class ModelDescriptor(BaseModel):
    name: str


class RelayResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    raw: Any = None
    available_models: list[str] | None = Field(default=None, alias="availableModels")

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"text": self.text, "raw": self.raw}
        if self.available_models is not None:
            payload["availableModels"] = list(self.available_models)
        return payload


class ModelListing(BaseModel):
    models: list[str] = Field(default_factory=list)
    raw: Any = None

    def to_payload(self) -> dict[str, Any]:
        return {"models": list(self.models), "raw": self.raw}
