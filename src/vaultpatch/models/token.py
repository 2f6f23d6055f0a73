"""Authentication token model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthToken(BaseModel):
    """Token returned by a successful AppRole login.

    Parameters
    ----------
    client_token : str
        Token sent as ``X-Vault-Token`` on every subsequent call.
    lease_duration : int
        Token TTL in seconds as reported by Vault (``0`` for no expiry).
    accessor : str
        Token accessor, safe to log.
    renewable : bool
        Whether Vault allows renewing this token.
    raw : dict
        Full ``auth`` block for access to additional fields.
    """

    model_config = ConfigDict(frozen=True)

    client_token: str = Field(repr=False)
    lease_duration: int = 0
    accessor: str = ""
    renewable: bool = False
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
