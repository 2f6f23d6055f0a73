"""Tracked state of one managed key slice."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vaultpatch.models.location import SecretLocation


class KvKeysState(BaseModel):
    """Durable record of the keys this system owns at one location.

    The reconciler takes a ``KvKeysState`` as input and returns the next
    one as output; persisting it between invocations is up to the caller
    (see :mod:`vaultpatch.state_file`).

    Parameters
    ----------
    id : str
        ``mount/path`` identifier.
    mount : str
        Mount path of the KV v2 secrets engine.
    path : str
        Path of the secret inside the mount.
    keys : dict
        Managed key/value pairs.  Values are secrets and are excluded
        from ``repr``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    mount: str
    path: str
    keys: dict[str, str] = Field(default_factory=dict, repr=False)

    @model_validator(mode="after")
    def check_id_matches_location(self) -> KvKeysState:
        expected = f"{self.mount}/{self.path}"
        if self.id != expected:
            raise ValueError(f"id {self.id!r} does not match mount/path {expected!r}")
        return self

    @property
    def location(self) -> SecretLocation:
        return SecretLocation(mount=self.mount, path=self.path)

    @classmethod
    def for_location(cls, location: SecretLocation, keys: Mapping[str, str]) -> KvKeysState:
        return cls(id=location.id, mount=location.mount, path=location.path, keys=dict(keys))

    def with_keys(self, keys: Mapping[str, str]) -> KvKeysState:
        """Copy of this state tracking *keys* instead."""
        return self.model_copy(update={"keys": dict(keys)})
