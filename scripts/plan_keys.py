#!/usr/bin/env python3
"""Show what declaring a key set at a Vault location would change.

Reads the secret, runs the patch engine and prints the field-level diff.
Nothing is written to Vault.  Only key names are printed, never values.

Usage
-----
Set environment variables and run::

    export VAULT_ADDR="https://vault.example.com"
    export VAULT_ROLE_ID="..."
    export VAULT_SECRET_ID="..."
    python scripts/plan_keys.py app_envs/my-service/test API_KEY=abc DB_HOST=db

Options::

    --state FILE     Tracked state file; plans an update instead of a create
    -v, --verbose    Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from vaultpatch import (  # noqa: E402
    SecretLocation,
    VaultClient,
    VaultPatchConfig,
    VaultPatchError,
    compute_create_patch,
    compute_update_patch,
    diff_documents,
    load_tracked_state,
)


def _parse_pairs(pairs: list[str]) -> dict[str, str]:
    keys: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise SystemExit(f"expected KEY=VALUE, got {pair!r}")
        keys[key] = value
    return keys


async def _plan(location: SecretLocation, planned: dict[str, str], state_file: Path | None) -> int:
    prior = load_tracked_state(state_file, location=location) if state_file is not None else None

    async with VaultClient(VaultPatchConfig.from_env()) as client:
        existing = await client.read_secret(location)

    if prior is None:
        document, changed = compute_create_patch(existing.data, planned)
        if not changed:
            print(f"{location}: all keys already hold their declared values; no write needed")
            return 0
    else:
        document = compute_update_patch(existing.data, prior.keys, planned)

    label = "existing" if existing.exists else "absent"
    print(f"{location} ({label}, {len(existing.data)} keys): {diff_documents(existing.data, document).summary()}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("location", help="mount/path of the secret")
    parser.add_argument("pairs", nargs="*", help="KEY=VALUE pairs to declare")
    parser.add_argument("--state", type=Path, default=None, help="tracked state file")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        location = SecretLocation.parse(args.location)
        return asyncio.run(_plan(location, _parse_pairs(args.pairs), args.state))
    except VaultPatchError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
