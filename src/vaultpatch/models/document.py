"""Remote document model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RemoteDocument(BaseModel):
    """Entire contents of one KV v2 secret, as last fetched.

    An absent secret is represented as ``RemoteDocument(exists=False)``
    with empty ``data``; callers treat it exactly like an empty document.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    data: dict[str, str] = Field(default_factory=dict, repr=False)
    exists: bool = True

    @classmethod
    def absent(cls) -> RemoteDocument:
        return cls(data={}, exists=False)
