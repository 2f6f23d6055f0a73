"""KV v2 secret endpoints.

Endpoints:
  - GET  /v1/{mount}/data/{path}   read the latest version
  - POST /v1/{mount}/data/{path}   write a new version (full replace)

Vault stores arbitrary JSON values, but this library manages flat string
documents.  On read, non-string values are coerced to their JSON text so
``true`` stays ``"true"`` and ``{"a": 1}`` becomes ``'{"a":1}'``; writes
always send strings.  A key read as a coerced string and written back
therefore changes type in Vault.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from vaultpatch._api._common import raise_for_status
from vaultpatch._constants import WRITE_OK_STATUSES, kv_data_endpoint
from vaultpatch._transport import Transport, VaultResponse
from vaultpatch.exceptions import VaultTransportError
from vaultpatch.models.document import RemoteDocument
from vaultpatch.models.location import SecretLocation
from vaultpatch.session import Session

_logger = logging.getLogger(__name__)


def stringify_value(value: Any) -> str:
    """Coerce a KV value to ``str``: strings unchanged, anything else as compact JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), sort_keys=True)


def parse_secret_response(response: VaultResponse, *, endpoint: str) -> RemoteDocument:
    """Turn a KV v2 read response into a :class:`RemoteDocument`.

    A 404, or a 200 whose ``data.data`` is null (latest version deleted or
    destroyed), is an absent document rather than an error.
    """
    if response.status == 404:
        return RemoteDocument.absent()
    raise_for_status(response, endpoint=endpoint)

    outer = response.body.get("data")
    if outer is None:
        return RemoteDocument.absent()
    if not isinstance(outer, dict):
        raise VaultTransportError(
            f"Unexpected 'data' field from {endpoint}",
            status_code=response.status,
            endpoint=endpoint,
        )

    inner = outer.get("data")
    if inner is None:
        return RemoteDocument.absent()
    if not isinstance(inner, dict):
        raise VaultTransportError(
            f"Unexpected 'data.data' field from {endpoint}",
            status_code=response.status,
            endpoint=endpoint,
        )

    coerced = [key for key, value in inner.items() if not isinstance(value, str)]
    if coerced:
        _logger.debug("Coerced non-string values to JSON text at %s: %s", endpoint, ", ".join(sorted(coerced)))
    return RemoteDocument(data={str(k): stringify_value(v) for k, v in inner.items()}, exists=True)


async def read_secret(
    session: Session,
    transport: Transport,
    location: SecretLocation,
) -> RemoteDocument:
    """Fetch the latest version of the secret at *location*."""
    endpoint = kv_data_endpoint(location.mount, location.path)
    response = await transport.request("GET", endpoint, token=session.token)
    return parse_secret_response(response, endpoint=endpoint)


async def write_secret(
    session: Session,
    transport: Transport,
    location: SecretLocation,
    data: Mapping[str, str],
) -> None:
    """Replace the whole secret at *location* with *data*."""
    endpoint = kv_data_endpoint(location.mount, location.path)
    response = await transport.request(
        "POST",
        endpoint,
        token=session.token,
        payload={"data": dict(data)},
    )
    raise_for_status(response, endpoint=endpoint, ok=WRITE_OK_STATUSES)
