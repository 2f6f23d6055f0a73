"""Client configuration for vaultpatch."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from vaultpatch.exceptions import VaultConfigError


@dataclasses.dataclass(frozen=True)
class VaultPatchConfig:
    """Client configuration.

    Parameters
    ----------
    address : str
        URL of the Vault server (e.g. ``"https://vault.example.com"``).
        A trailing slash is stripped.
    role_id : str
        AppRole Role ID.
    secret_id : str
        AppRole Secret ID.
    auth_mount : str
        Mount path of the AppRole auth method.
    namespace : str or None
        Vault Enterprise namespace sent as ``X-Vault-Namespace``.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    session_ttl : float
        Client token time-to-live in seconds.  ``0`` means "use the
        ``lease_duration`` returned by the login call"; a lease of ``0``
        in turn means the token never expires locally (it will only be
        refreshed when Vault rejects it with 403).
    """

    address: str
    role_id: str
    secret_id: str
    auth_mount: str = "approle"
    namespace: str | None = None
    request_timeout: float = 30.0
    session_ttl: float = 0.0

    def __post_init__(self) -> None:
        if self.address.endswith("/"):
            object.__setattr__(self, "address", self.address.rstrip("/"))

    def validate(self) -> None:
        """Raise :class:`VaultConfigError` if a required field is empty."""
        if not self.address:
            raise VaultConfigError("Missing Vault address: the 'address' attribute must be set.")
        if not self.role_id:
            raise VaultConfigError("Missing Role ID: the 'role_id' attribute must be set.")
        if not self.secret_id:
            raise VaultConfigError("Missing Secret ID: the 'secret_id' attribute must be set.")
        if self.request_timeout <= 0:
            raise VaultConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> VaultPatchConfig:
        """Create configuration from environment variables.

        Reads ``VAULT_ADDR``, ``VAULT_ROLE_ID``, ``VAULT_SECRET_ID`` and the
        optional ``VAULT_AUTH_MOUNT``, ``VAULT_NAMESPACE``,
        ``VAULT_REQUEST_TIMEOUT`` and ``VAULT_SESSION_TTL``.  Explicit
        keyword arguments override environment values.

        Raises
        ------
        VaultConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "VAULT_ADDR": "address",
            "VAULT_ROLE_ID": "role_id",
            "VAULT_SECRET_ID": "secret_id",
            "VAULT_AUTH_MOUNT": "auth_mount",
            "VAULT_NAMESPACE": "namespace",
        }
        config_kwargs: dict[str, Any] = {"address": "", "role_id": "", "secret_id": ""}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # numeric fields are parsed separately
        for env_key, field_name in (
            ("VAULT_REQUEST_TIMEOUT", "request_timeout"),
            ("VAULT_SESSION_TTL", "session_ttl"),
        ):
            raw = env.get(env_key)
            if raw is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = float(raw)
            except ValueError as exc:
                raise VaultConfigError(f"{env_key} must be a number, got {raw!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
