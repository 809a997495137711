"""Scrubbing of geocoder credentials and precise device positions from logs.

Both external services take their inputs as query parameters, so httpx error
messages embed the full request URL: the Google API key and the device's
``latlng`` end up in exception text unless scrubbed here.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

REDACTED = "[REDACTED]"

# Two decimals is roughly one kilometre.
LOGGED_COORDINATE_DECIMALS = 2

_CREDENTIAL_PARAM_RE = re.compile(r"(?i)([?&](?:key|api_?key|appid|client_secret)=)[^&\s#\"']+")
_LATLNG_PARAM_RE = re.compile(
    r"(?i)([?&]latlng=)(-?\d+(?:\.\d+)?)(?:,|%2C)(-?\d+(?:\.\d+)?)"
)
_CREDENTIAL_ASSIGNMENT_RE = re.compile(
    r"(?i)\b(geocoder_api_key|api_?key|client_secret)\s*[:=]\s*[^\s,;&]+"
)
_CREDENTIAL_FIELDS = frozenset({"key", "apikey", "api_key", "appid", "geocoder_api_key"})
_COORDINATE_FIELDS = frozenset({"latitude", "longitude", "lat", "lon"})


def _coarse(value: str) -> str:
    return f"{round(float(value), LOGGED_COORDINATE_DECIMALS):.{LOGGED_COORDINATE_DECIMALS}f}"


_TEXT_RULES: tuple[tuple[re.Pattern[str], Callable[[re.Match[str]], str]], ...] = (
    (_CREDENTIAL_PARAM_RE, lambda m: m.group(1) + REDACTED),
    (_LATLNG_PARAM_RE, lambda m: f"{m.group(1)}{_coarse(m.group(2))},{_coarse(m.group(3))}"),
    (_CREDENTIAL_ASSIGNMENT_RE, lambda m: f"{m.group(1)}={REDACTED}"),
)


def sanitize_text(text: str) -> str:
    """Redact credentials and coarsen coordinates embedded in plain text."""
    for pattern, replace in _TEXT_RULES:
        text = pattern.sub(replace, text)
    return text


def sanitize_for_logging(value: Any) -> Any:
    """Apply the same scrubbing to request params and other nested payloads."""
    if isinstance(value, Mapping):
        scrubbed: dict[Any, Any] = {}
        for field, child in value.items():
            name = str(field).lower()
            if name in _CREDENTIAL_FIELDS:
                scrubbed[field] = REDACTED
            elif name in _COORDINATE_FIELDS and isinstance(child, (int, float)):
                scrubbed[field] = round(child, LOGGED_COORDINATE_DECIMALS)
            elif name == "latlng" and isinstance(child, str):
                scrubbed[field] = sanitize_text(f"?latlng={child}")[len("?latlng="):]
            else:
                scrubbed[field] = sanitize_for_logging(child)
        return scrubbed
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_for_logging(item) for item in value)
    if isinstance(value, str):
        return sanitize_text(value)
    return value
