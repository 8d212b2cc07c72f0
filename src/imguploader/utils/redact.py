"""Payload redaction for safe logging and debug dumps.

Custom upload headers routinely carry API keys, so every request/response
dump goes through :func:`redact` first:

* Values under **sensitive keys** (``authorization``, ``token``,
  ``api-key``, ...) are masked, keeping the last four characters.
* **Byte payloads** are replaced with ``<binary:N_bytes>``.
* Any explicitly supplied **secret** string is scrubbed wherever it occurs.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from typing import Any

# A key is sensitive when any of these substrings appears in it
# (case-insensitive).
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "cookie",
    "api_key",
    "api-key",
    "apikey",
})


def _mask(value: str) -> str:
    if len(value) >= 8:
        return f"<redacted:...{value[-4:]}>"
    return "<redacted>"


def _scrub(value: str, secrets: tuple[str, ...]) -> str:
    for secret in secrets:
        if secret and secret in value:
            value = value.replace(secret, "<redacted>")
    return value


def _redact_value(value: Any, secrets: tuple[str, ...]) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, secrets)
    if isinstance(value, (list, tuple)):
        return [_redact_value(item, secrets) for item in value]
    if isinstance(value, (bytes, bytearray)):
        return f"<binary:{len(value)}_bytes>"
    if isinstance(value, str):
        return _scrub(value, secrets)
    return value


def _redact_dict(d: dict, secrets: tuple[str, ...]) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            result[key] = _mask(value) if isinstance(value, str) else "<redacted>"
        else:
            result[key] = _redact_value(value, secrets)
    return result


def redact(payload: dict, secrets: Iterable[str] = ()) -> dict:
    """Return a deep copy of *payload* with sensitive data redacted.

    Parameters
    ----------
    payload:
        Dictionary to sanitise (headers, request metadata, response body).
    secrets:
        Literal strings (e.g. configured header values) to scrub from every
        string in the tree.

    Examples
    --------
    >>> redact({"Authorization": "Bearer abcdefgh1234"})
    {'Authorization': '<redacted:...1234>'}
    >>> redact({"body": b"\\x89PNG"})
    {'body': '<binary:4_bytes>'}
    """
    safe = copy.deepcopy(payload)
    return _redact_dict(safe, tuple(s for s in secrets if s))
