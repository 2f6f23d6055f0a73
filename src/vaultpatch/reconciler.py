"""Lifecycle sequencing for a managed key slice.

:class:`KvKeysReconciler` runs fetch → patch engine → store for each
lifecycle transition.  It holds no tracked state of its own: every method
takes the prior :class:`KvKeysState` and returns the next one.

Each transition fetches immediately before computing and stores
immediately after.  There is no compare-and-swap: a write made by someone
else between the fetch and the store is overwritten by the full-document
replace.  Avoid overlapping operations against one location.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol

from vaultpatch.exceptions import VaultTransportError
from vaultpatch.models.document import RemoteDocument
from vaultpatch.models.location import SecretLocation
from vaultpatch.models.state import KvKeysState
from vaultpatch.patch.diff import diff_documents, keys_only
from vaultpatch.patch.engine import (
    adopt_document,
    all_managed_keys_vanished,
    compute_create_patch,
    compute_delete_patch,
    compute_update_patch,
    observe_managed_keys,
)

_logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Full-document fetch/store interface (satisfied by :class:`~vaultpatch.client.VaultClient`)."""

    async def read_secret(self, location: SecretLocation) -> RemoteDocument:
        ...

    async def write_secret(self, location: SecretLocation, data: Mapping[str, str]) -> None:
        ...


class KvKeysReconciler:
    """Bring the managed keys at a location into their declared state."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def create(self, location: SecretLocation, keys: Mapping[str, str]) -> KvKeysState:
        """Start managing *keys* at *location*.

        The write is skipped when every key already holds its declared
        value.
        """
        _logger.info(
            "Creating keys in Vault mount=%s path=%s keys=[%s]", location.mount, location.path, keys_only(keys)
        )

        existing = await self._store.read_secret(location)
        document, changed = compute_create_patch(existing.data, keys)
        if changed:
            _logger.debug("Create %s: %s", location, diff_documents(existing.data, document).summary())
            await self._store.write_secret(location, document)
        else:
            _logger.info(
                "All keys already exist with the same values, skipping write mount=%s path=%s",
                location.mount,
                location.path,
            )

        return KvKeysState.for_location(location, keys)

    async def read(self, state: KvKeysState) -> KvKeysState | None:
        """Refresh *state* from Vault.

        Returns
        -------
        KvKeysState or None
            The state restricted to tracked keys that still exist, with
            their current remote values, or ``None`` when none of them
            exist any more and the slice should be dropped from tracking.
        """
        location = state.location
        _logger.info("Reading keys from Vault mount=%s path=%s", location.mount, location.path)

        existing = await self._store.read_secret(location)
        observed = observe_managed_keys(existing.data, state.keys)

        if all_managed_keys_vanished(observed):
            _logger.warning(
                "None of the managed keys exist in Vault, removing from state mount=%s path=%s",
                location.mount,
                location.path,
            )
            return None

        drift = diff_documents(state.keys, observed)
        if not drift.is_empty:
            _logger.warning("Drift detected at %s: %s", location, drift.summary())

        return state.with_keys(observed)

    async def update(self, state: KvKeysState, keys: Mapping[str, str]) -> KvKeysState:
        """Move the managed slice from ``state.keys`` to *keys*.

        Keys dropped from the declaration are deleted remotely.  Always
        writes.
        """
        location = state.location
        _logger.info(
            "Updating keys in Vault mount=%s path=%s keys=[%s]", location.mount, location.path, keys_only(keys)
        )

        existing = await self._store.read_secret(location)
        document = compute_update_patch(existing.data, state.keys, keys)
        _logger.debug("Update %s: %s", location, diff_documents(existing.data, document).summary())
        await self._store.write_secret(location, document)

        return state.with_keys(keys)

    async def delete(self, state: KvKeysState) -> None:
        """Remove every tracked key from the secret.

        Delete is idempotent: if the secret cannot be fetched it is
        assumed to be gone already and nothing is raised.  A failure to
        store the reduced document still propagates.
        """
        location = state.location
        _logger.info(
            "Deleting keys from Vault mount=%s path=%s keys=[%s]",
            location.mount,
            location.path,
            keys_only(state.keys),
        )

        try:
            existing = await self._store.read_secret(location)
        except VaultTransportError as exc:
            _logger.warning("Could not read secret during delete, assuming already cleaned up: %s", exc)
            return

        document = compute_delete_patch(existing.data, state.keys)
        if document == existing.data:
            _logger.info("No managed keys left at %s, skipping write", location)
            return
        await self._store.write_secret(location, document)

    async def import_state(self, import_id: str) -> KvKeysState:
        """Adopt every key currently stored at ``mount/path``.

        Raises
        ------
        InvalidLocationError
            If *import_id* is not a valid ``mount/path`` identifier.
        """
        location = SecretLocation.parse(import_id)
        existing = await self._store.read_secret(location)
        adopted = adopt_document(existing.data)
        _logger.warning(
            "Imported %s adopting all %d existing keys [%s]; declare the intended key list to release the rest",
            location,
            len(adopted),
            keys_only(adopted),
        )
        return KvKeysState.for_location(location, adopted)

    async def reconcile(
        self,
        prior: KvKeysState | None,
        location: SecretLocation,
        keys: Mapping[str, str] | None,
    ) -> KvKeysState | None:
        """Dispatch to the right transition for a declared slice.

        ``prior`` is the tracked state (``None`` when nothing is tracked
        yet) and ``keys`` the declaration (``None`` when the slice is
        being removed).  A changed location deletes the keys at the old
        location and creates them at the new one.
        """
        if prior is None:
            if keys is None:
                return None
            return await self.create(location, keys)

        if keys is None:
            await self.delete(prior)
            return None

        if prior.location != location:
            await self.delete(prior)
            return await self.create(location, keys)

        if dict(keys) == prior.keys:
            _logger.debug("Declaration for %s matches tracked state, nothing to do", location)
            return prior

        return await self.update(prior, keys)
