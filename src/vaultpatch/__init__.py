"""vaultpatch - Partial key management for HashiCorp Vault KV v2 secrets."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vaultpatch")
except PackageNotFoundError:
    __version__ = "0+local"
from vaultpatch.client import VaultClient
from vaultpatch.config import VaultPatchConfig
from vaultpatch.exceptions import (
    InvalidLocationError,
    VaultAuthenticationError,
    VaultConfigError,
    VaultPatchError,
    VaultPermissionDeniedError,
    VaultTransportError,
)
from vaultpatch.models import AuthToken, KvKeysState, RemoteDocument, SecretLocation
from vaultpatch.patch import (
    DocumentDiff,
    adopt_document,
    all_managed_keys_vanished,
    compute_create_patch,
    compute_delete_patch,
    compute_update_patch,
    diff_documents,
    observe_managed_keys,
)
from vaultpatch.reconciler import DocumentStore, KvKeysReconciler
from vaultpatch.state_file import load_tracked_state, save_tracked_state

__all__ = [
    "__version__",
    "AuthToken",
    "DocumentDiff",
    "DocumentStore",
    "InvalidLocationError",
    "KvKeysReconciler",
    "KvKeysState",
    "RemoteDocument",
    "SecretLocation",
    "VaultAuthenticationError",
    "VaultClient",
    "VaultConfigError",
    "VaultPatchConfig",
    "VaultPatchError",
    "VaultPermissionDeniedError",
    "VaultTransportError",
    "adopt_document",
    "all_managed_keys_vanished",
    "compute_create_patch",
    "compute_delete_patch",
    "compute_update_patch",
    "diff_documents",
    "load_tracked_state",
    "observe_managed_keys",
    "save_tracked_state",
]
