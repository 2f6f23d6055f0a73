"""Partial secret patch engine.

Pure functions that compute the full document to write back to a KV
secret when only a subset of its keys is managed.  Every function returns
a new dict and leaves its inputs untouched; none performs I/O or raises
for well-formed inputs.

Keys outside the managed sets are always carried over verbatim.  An
absent remote document is passed in as an empty mapping.
"""

from __future__ import annotations

from collections.abc import Mapping

from vaultpatch.patch.diff import keys_match, merge_keys


def compute_create_patch(
    existing: Mapping[str, str],
    planned: Mapping[str, str],
) -> tuple[dict[str, str], bool]:
    """Document for a newly declared slice.

    Returns
    -------
    tuple[dict, bool]
        ``(document, changed)``.  When every planned key already holds its
        planned value, ``changed`` is ``False`` and the document is an
        unmodified copy of *existing*; the caller should skip the write.
    """
    if keys_match(existing, planned):
        return dict(existing), False
    return merge_keys(existing, planned), True


def compute_update_patch(
    existing: Mapping[str, str],
    prior_managed: Mapping[str, str],
    planned: Mapping[str, str],
) -> dict[str, str]:
    """Document after the declared slice changed from *prior_managed* to *planned*.

    Keys dropped from the declaration are deleted whatever their current
    remote value.  Deletions happen before the planned pairs are applied,
    so a key present in both sets is never lost and the plan always wins.
    """
    working = dict(existing)
    for key in prior_managed:
        if key not in planned:
            working.pop(key, None)
    return merge_keys(working, planned)


def compute_delete_patch(
    existing: Mapping[str, str],
    tracked_managed: Mapping[str, str],
) -> dict[str, str]:
    """Document with every tracked key removed."""
    return {key: value for key, value in existing.items() if key not in tracked_managed}


def observe_managed_keys(
    existing: Mapping[str, str],
    tracked_managed: Mapping[str, str],
) -> dict[str, str]:
    """Current remote values of the tracked keys that still exist.

    Tracked keys missing remotely were deleted out-of-band and are
    omitted.  The tracked values themselves are ignored; only the key set
    matters.
    """
    return {key: existing[key] for key in tracked_managed if key in existing}


def all_managed_keys_vanished(observed: Mapping[str, str]) -> bool:
    """Whether a refresh found none of the tracked keys."""
    return not observed


def adopt_document(existing: Mapping[str, str]) -> dict[str, str]:
    """Managed set inferred at import time: the entire document.

    Before an import nothing records which subset is owned, so every key
    found at the location is adopted.  Declaring the intended key list
    right after import releases the keys that belong to other writers.
    """
    return dict(existing)
