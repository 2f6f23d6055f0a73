"""Custom exception hierarchy for vaultpatch."""

from __future__ import annotations


class VaultPatchError(Exception):
    """Base exception for all vaultpatch errors."""


class VaultConfigError(VaultPatchError):
    """Invalid or missing configuration."""


class InvalidLocationError(VaultConfigError, ValueError):
    """A ``mount/path`` identifier could not be parsed.

    Both halves must be non-empty; the mount ends at the first ``/``.
    """


class VaultTransportError(VaultPatchError):
    """HTTP-level failure talking to Vault (network, non-2xx, invalid JSON).

    A failed fetch must abort the operation: no patch is ever computed
    against a document that could not be read completely.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class VaultAuthenticationError(VaultTransportError):
    """AppRole login failed or returned no client token."""


class VaultPermissionDeniedError(VaultAuthenticationError):
    """Vault answered 403 to an authenticated call.

    Usually the client token expired or was revoked.  The client catches
    this once to re-authenticate and retry; a second 403 propagates.
    """
