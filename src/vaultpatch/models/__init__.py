"""Pydantic models for Vault locations, documents, tokens and tracked state."""

from vaultpatch.models.document import RemoteDocument
from vaultpatch.models.location import SecretLocation
from vaultpatch.models.state import KvKeysState
from vaultpatch.models.token import AuthToken

__all__ = [
    "AuthToken",
    "KvKeysState",
    "RemoteDocument",
    "SecretLocation",
]
