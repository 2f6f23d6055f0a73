"""Session state management for authenticated API calls."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field


class Session(BaseModel):
    """Client token state after a successful AppRole login.

    Parameters
    ----------
    token : str
        Vault client token.
    accessor : str
        Token accessor (safe to log).
    created_at : float
        Monotonic timestamp (``time.monotonic()``) when the session
        was created.  Defaults to *now* if not provided.
    ttl : float
        Time-to-live in seconds.  ``inf`` disables local expiry.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    token: str = Field(repr=False)
    accessor: str = ""
    created_at: float = Field(default_factory=time.monotonic)
    ttl: float = float("inf")

    @property
    def is_expired(self) -> bool:
        """Whether the session has exceeded its TTL."""
        return (time.monotonic() - self.created_at) >= self.ttl

    @property
    def age(self) -> float:
        """Seconds since the session was created."""
        return time.monotonic() - self.created_at
