"""
Backend body interpretation.

The backend schema is not fixed across its versions, so every rule here degrades to
a safe default instead of raising. Answer text comes from an ordered match over
the known shapes; the model list is probed independently of the answer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

from ollama_relay.core.models import ModelDescriptor

NO_RESPONSE_PLACEHOLDER = "No response from Ollama"
_MODEL_LIST_KEYS = ("models", "data")


@dataclass(slots=True, frozen=True)
class NestedMessage:
    """`{"message": {"content": "..."}}` as returned by /api/chat."""

    content: str

    @property
    def text(self) -> str:
        return self.content


@dataclass(slots=True, frozen=True)
class FlatResponse:
    """`{"response": "..."}` as returned by /api/generate."""

    response: str

    @property
    def text(self) -> str:
        return self.response


@dataclass(slots=True, frozen=True)
class Unrecognized:
    @property
    def text(self) -> str:
        return NO_RESPONSE_PLACEHOLDER


BackendShape = Union[NestedMessage, FlatResponse, Unrecognized]


def _non_empty_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def classify_body(body: Any) -> BackendShape:
    if not isinstance(body, Mapping):
        return Unrecognized()
    message = body.get("message")
    if isinstance(message, Mapping):
        content = _non_empty_str(message.get("content"))
        if content is not None:
            return NestedMessage(content)
    response = _non_empty_str(body.get("response"))
    if response is not None:
        return FlatResponse(response)
    return Unrecognized()


def extract_text(body: Any) -> str:
    return classify_body(body).text


def _raw_model_list(body: Any) -> list[Any]:
    if isinstance(body, list):
        return body
    if isinstance(body, Mapping):
        for key in _MODEL_LIST_KEYS:
            candidate = body.get(key)
            if isinstance(candidate, list):
                return candidate
    return []


def extract_model_descriptors(body: Any) -> list[ModelDescriptor]:
    """Model descriptors in backend order; entries without a string name are dropped."""
    descriptors: list[ModelDescriptor] = []
    for entry in _raw_model_list(body):
        if not isinstance(entry, Mapping):
            continue
        name = entry.get("name")
        if isinstance(name, str):
            descriptors.append(ModelDescriptor(name=name))
    return descriptors


def resolve_model(
    requested: str,
    descriptors: list[ModelDescriptor],
    *,
    fold_candidates: bool = True,
) -> ModelDescriptor | None:
    slug = requested.lower()
    for descriptor in descriptors:
        candidate = descriptor.name.lower() if fold_candidates else descriptor.name
        if candidate == slug:
            return descriptor
    return None


def available_models_hint(
    requested: str,
    body: Any,
    *,
    limit: int = 10,
    fold_candidates: bool = True,
) -> list[str] | None:
    """
    Advisory list of model names when `requested` is not among the reported models.

    Returns None when the model resolves or the backend reported no usable models.
    """
    descriptors = extract_model_descriptors(body)
    if not descriptors:
        return None
    if resolve_model(requested, descriptors, fold_candidates=fold_candidates) is not None:
        return None
    return [descriptor.name for descriptor in descriptors[: max(0, limit)]]
