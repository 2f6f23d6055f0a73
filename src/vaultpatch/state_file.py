"""Persist tracked state between invocations.

The file holds one :class:`KvKeysState` as JSON.  It contains secret
values, so it is written with owner-only permissions.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from vaultpatch.exceptions import VaultConfigError
from vaultpatch.models.location import SecretLocation
from vaultpatch.models.state import KvKeysState

_logger = logging.getLogger(__name__)


def load_tracked_state(
    path: str | os.PathLike[str],
    *,
    location: SecretLocation | None = None,
) -> KvKeysState | None:
    """Read tracked state from *path*; ``None`` when the file does not exist.

    When *location* is given the loaded state must track that location.

    Raises
    ------
    VaultConfigError
        If the file exists but does not hold a valid state document, or
        holds state for a location other than *location*.
    """
    state_path = Path(path)
    if not state_path.exists():
        return None
    try:
        state = KvKeysState.model_validate_json(state_path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise VaultConfigError(f"Invalid tracked state in {state_path}: {exc}") from exc
    if location is not None and state.location != location:
        raise VaultConfigError(f"Tracked state in {state_path} is for {state.id}, not {location}")
    return state


def save_tracked_state(path: str | os.PathLike[str], state: KvKeysState | None) -> None:
    """Write *state* to *path*, or remove the file when *state* is ``None``.

    The new content is written to a sibling temp file and renamed over
    the old one, so a crash never leaves a half-written state file.
    """
    state_path = Path(path)
    if state is None:
        if state_path.exists():
            state_path.unlink()
            _logger.debug("Removed tracked state file %s", state_path)
        return

    tmp_path = state_path.with_name(f".{state_path.name}.tmp")
    fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(state.model_dump_json(indent=2))
        os.replace(tmp_path, state_path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
    _logger.debug("Saved tracked state for %s to %s", state.id, state_path)
