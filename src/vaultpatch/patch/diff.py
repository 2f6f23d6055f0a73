"""Equality and diff helpers over flat string documents."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict


def keys_match(existing: Mapping[str, str], planned: Mapping[str, str]) -> bool:
    """Return ``True`` when every planned key already holds its planned value."""
    for key, value in planned.items():
        if key not in existing or existing[key] != value:
            return False
    return True


def merge_keys(existing: Mapping[str, str], new_keys: Mapping[str, str]) -> dict[str, str]:
    """Return a fresh document: *existing* with every pair of *new_keys* set on top."""
    merged = dict(existing)
    merged.update(new_keys)
    return merged


def keys_only(mapping: Mapping[str, str]) -> str:
    """Sorted, comma-joined key names.  Used for logging; values never leak."""
    return ", ".join(sorted(mapping))


class DocumentDiff(BaseModel):
    """Field-level mutations that turn one document into another.

    A full-document write and this set of mutations describe the same
    change; a store with field-level patch support could apply this
    directly.
    """

    model_config = ConfigDict(frozen=True)

    added: tuple[str, ...] = ()
    changed: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.changed or self.removed)

    def summary(self) -> str:
        """Human-readable one-liner naming affected keys (never values)."""
        if self.is_empty:
            return "no changes"
        parts: list[str] = []
        if self.added:
            parts.append(f"add [{', '.join(self.added)}]")
        if self.changed:
            parts.append(f"change [{', '.join(self.changed)}]")
        if self.removed:
            parts.append(f"remove [{', '.join(self.removed)}]")
        return "; ".join(parts)


def diff_documents(before: Mapping[str, str], after: Mapping[str, str]) -> DocumentDiff:
    """Compute the keys added, changed and removed going from *before* to *after*."""
    added = sorted(key for key in after if key not in before)
    removed = sorted(key for key in before if key not in after)
    changed = sorted(key for key in after if key in before and before[key] != after[key])
    return DocumentDiff(added=tuple(added), changed=tuple(changed), removed=tuple(removed))
