"""High-level async client for Vault KV v2 secrets."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

import aiohttp

from vaultpatch._api import kv as _kv_api
from vaultpatch._api.login import login as _approle_login
from vaultpatch._transport import HttpTransport, Transport
from vaultpatch.config import VaultPatchConfig
from vaultpatch.exceptions import VaultPatchError, VaultPermissionDeniedError
from vaultpatch.models.document import RemoteDocument
from vaultpatch.models.location import SecretLocation
from vaultpatch.session import Session

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class VaultClient:
    """Async client for reading and writing whole KV v2 secrets.

    Usage::

        async with VaultClient(config) as client:
            document = await client.read_secret(SecretLocation.parse("app/my-service"))

    The first call logs in with AppRole; a 403 on a later call triggers a
    single re-login and retry.
    """

    def __init__(
        self,
        config: VaultPatchConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        config.validate()
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = None
        self._session: Session | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> VaultClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._session = None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self) -> None:
        """Authenticate with AppRole and store the client token."""
        transport = self._require_transport()
        token = await _approle_login(self._config, transport)

        if self._config.session_ttl > 0:
            ttl = self._config.session_ttl
        elif token.lease_duration > 0:
            ttl = float(token.lease_duration)
        else:
            ttl = float("inf")
        self._session = Session(token=token.client_token, accessor=token.accessor, ttl=ttl)
        _logger.info("Authenticated with Vault at %s (accessor=%s)", self._config.address, token.accessor)

    async def ensure_session(self) -> Session:
        """Return an active session, re-authenticating if expired."""
        if self._session is not None and not self._session.is_expired:
            return self._session
        await self.login()
        assert self._session is not None  # noqa: S101
        return self._session

    def invalidate_session(self) -> None:
        """Force session invalidation (next call will re-authenticate)."""
        self._session = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise VaultPatchError("Client not initialized. Use 'async with VaultClient(...) as client:'")
        return self._transport

    async def _call_with_reauth(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run an API call, retrying once after a 403."""
        try:
            return await fn()
        except VaultPermissionDeniedError:
            _logger.debug("Vault rejected the client token; re-authenticating")
            self.invalidate_session()
            await self.ensure_session()
            return await fn()

    # ------------------------------------------------------------------
    # KV v2
    # ------------------------------------------------------------------

    async def read_secret(self, location: SecretLocation) -> RemoteDocument:
        """Fetch the whole secret at *location* (absent ⇒ ``exists=False``)."""

        async def _call() -> RemoteDocument:
            session = await self.ensure_session()
            transport = self._require_transport()
            return await _kv_api.read_secret(session, transport, location)

        return await self._call_with_reauth(_call)

    async def write_secret(self, location: SecretLocation, data: Mapping[str, str]) -> None:
        """Replace the whole secret at *location* with *data*."""

        async def _call() -> None:
            session = await self.ensure_session()
            transport = self._require_transport()
            await _kv_api.write_secret(session, transport, location, data)

        await self._call_with_reauth(_call)
