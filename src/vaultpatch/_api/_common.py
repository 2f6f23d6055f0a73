"""Shared helpers for Vault endpoint modules.

It is internal to vaultpatch and may change at any time.
"""

from __future__ import annotations

from vaultpatch._transport import VaultResponse
from vaultpatch.exceptions import VaultPermissionDeniedError, VaultTransportError


def raise_for_status(
    response: VaultResponse,
    *,
    endpoint: str,
    ok: frozenset[int] = frozenset({200}),
) -> None:
    """Raise the matching transport error unless ``response.status`` is in *ok*."""
    if response.status in ok:
        return
    detail = response.error_detail()
    if response.status == 403:
        raise VaultPermissionDeniedError(
            f"Vault denied {endpoint} (HTTP 403): {detail}",
            status_code=403,
            endpoint=endpoint,
        )
    raise VaultTransportError(
        f"Vault returned status {response.status} for {endpoint}: {detail}",
        status_code=response.status,
        endpoint=endpoint,
    )
