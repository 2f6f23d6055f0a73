"""Partial secret patch engine.

This package holds the pure document transforms the reconciler runs
between fetching a secret and storing it back.
"""

from vaultpatch.patch.diff import DocumentDiff, diff_documents, keys_match, keys_only, merge_keys
from vaultpatch.patch.engine import (
    adopt_document,
    all_managed_keys_vanished,
    compute_create_patch,
    compute_delete_patch,
    compute_update_patch,
    observe_managed_keys,
)

__all__ = [
    "DocumentDiff",
    "adopt_document",
    "all_managed_keys_vanished",
    "compute_create_patch",
    "compute_delete_patch",
    "compute_update_patch",
    "diff_documents",
    "keys_match",
    "keys_only",
    "merge_keys",
    "observe_managed_keys",
]
