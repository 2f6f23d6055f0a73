"""Masking of Vault request and response bodies for debug logs.

Two kinds of values never reach a log record: AppRole credentials and
tokens, and the values of a KV v2 secret document.  Secret key names are
kept so a debug trace still shows which keys were read or written.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from vaultpatch._constants import TOKEN_HEADER

MASK = "<redacted>"

_CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {
        "role_id",
        "secret_id",
        "client_token",
        "accessor",
        "token",
        "wrapping_token",
    }
)

_SENSITIVE_HEADERS: frozenset[str] = frozenset({TOKEN_HEADER.lower(), "authorization"})


def mask_document(document: Mapping[str, Any]) -> dict[str, str]:
    """Key names of a secret document with every value masked."""
    return {str(key): MASK for key in document}


def _is_kv_envelope(node: Mapping[str, Any]) -> bool:
    # A KV v2 read wraps the document as {"data": {...}, "metadata": {...}}.
    return "metadata" in node


def redact_for_log(body: Any) -> Any:
    """Copy of a decoded Vault JSON body that is safe to log.

    Credential fields are masked wherever they appear.  A mapping under a
    ``data`` key is treated as a secret document (its values masked, its
    key names kept) unless it is the KV v2 read envelope, which is walked
    so that ``metadata`` stays visible.
    """
    if isinstance(body, Mapping):
        redacted: dict[str, Any] = {}
        for key, value in body.items():
            name = str(key)
            if name.lower() in _CREDENTIAL_KEYS:
                redacted[name] = MASK
            elif name == "data" and isinstance(value, Mapping):
                redacted[name] = redact_for_log(value) if _is_kv_envelope(value) else mask_document(value)
            elif name == "data" and value is not None:
                redacted[name] = MASK
            else:
                redacted[name] = redact_for_log(value)
        return redacted

    if isinstance(body, list):
        return [redact_for_log(item) for item in body]

    return body


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Request headers with the Vault token masked."""
    return {name: MASK if name.lower() in _SENSITIVE_HEADERS else value for name, value in headers.items()}
