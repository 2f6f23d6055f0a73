"""Secret location model: the ``(mount, path)`` pair a document lives at."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from vaultpatch.exceptions import InvalidLocationError


class SecretLocation(BaseModel):
    """Address of one KV v2 secret.

    Parameters
    ----------
    mount : str
        Mount path of the KV v2 secrets engine (e.g. ``"app_demo"``).
    path : str
        Path of the secret inside the mount (e.g. ``"my-service/test"``).
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    mount: str = Field(min_length=1)
    path: str = Field(min_length=1)

    @property
    def id(self) -> str:
        """Identifier in ``mount/path`` form."""
        return f"{self.mount}/{self.path}"

    @classmethod
    def parse(cls, location_id: str) -> SecretLocation:
        """Parse a ``mount/path`` identifier.

        The mount ends at the first ``/``; everything after it is the path,
        so ``"app_envs/my-service/test"`` has mount ``app_envs`` and path
        ``my-service/test``.

        Raises
        ------
        InvalidLocationError
            If there is no ``/`` or either half is empty or blank.
        """
        mount, sep, path = location_id.partition("/")
        mount, path = mount.strip(), path.strip()
        if not sep:
            raise InvalidLocationError(
                f"Location {location_id!r} must be in the format 'mount/path' (e.g. 'app_envs/my-service/test')."
            )
        if not mount or not path:
            raise InvalidLocationError(
                f"Both mount and path must be non-empty in {location_id!r}. Format: 'mount/path'."
            )
        return cls(mount=mount, path=path)

    def __str__(self) -> str:
        return self.id
