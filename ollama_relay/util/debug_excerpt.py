"""
Truncated excerpts of request/response bodies for debug logs.

Callers only log these when DEBUG is enabled (RELAY_LOG_LEVEL=debug or DEBUG_OLLAMA=1);
this module only trims and formats, it never mutates the original value.
"""

from __future__ import annotations

import json
from typing import Any

DEFAULT_EXCERPT_MAX_LEN = 500


def excerpt_for_debug(text: str, max_len: int = DEFAULT_EXCERPT_MAX_LEN) -> str:
    if not text:
        return ""
    s = str(text).strip()
    if max_len <= 0 or len(s) <= max_len:
        return s
    return f"{s[:max_len]} ... [truncated, total {len(s)} chars]"


def dump_for_debug(value: Any, max_len: int = DEFAULT_EXCERPT_MAX_LEN) -> str:
    """Pretty-print a JSON-like value, then trim it with excerpt_for_debug."""
    if isinstance(value, str):
        return excerpt_for_debug(value, max_len=max_len)
    try:
        rendered = json.dumps(value, ensure_ascii=False, indent=2)
    except (TypeError, ValueError):
        rendered = str(value)
    return excerpt_for_debug(rendered, max_len=max_len)
