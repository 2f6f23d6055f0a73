"""AppRole login endpoint.

Endpoint:
  - /v1/auth/{auth_mount}/login
"""

from __future__ import annotations

import logging
from typing import Any

from vaultpatch._constants import login_endpoint
from vaultpatch._transport import Transport, VaultResponse
from vaultpatch.config import VaultPatchConfig
from vaultpatch.exceptions import VaultAuthenticationError
from vaultpatch.models.token import AuthToken

_logger = logging.getLogger(__name__)


def build_login_request(config: VaultPatchConfig) -> dict[str, str]:
    """Build the JSON payload for an AppRole login."""
    return {
        "role_id": config.role_id,
        "secret_id": config.secret_id,
    }


def parse_login_response(response: VaultResponse, *, endpoint: str) -> AuthToken:
    """Extract the client token from a login response.

    Raises
    ------
    VaultAuthenticationError
        If the login was rejected or the response has no client token.
    """
    if response.status != 200:
        raise VaultAuthenticationError(
            f"Vault returned status {response.status} for {endpoint}: {response.error_detail()}",
            status_code=response.status,
            endpoint=endpoint,
        )

    auth = response.body.get("auth")
    if not isinstance(auth, dict):
        raise VaultAuthenticationError(
            "Login response missing 'auth' block",
            status_code=response.status,
            endpoint=endpoint,
        )

    client_token = auth.get("client_token")
    if not isinstance(client_token, str) or not client_token:
        raise VaultAuthenticationError(
            "Vault returned empty client token",
            status_code=response.status,
            endpoint=endpoint,
        )

    lease: Any = auth.get("lease_duration", 0)
    return AuthToken(
        client_token=client_token,
        lease_duration=int(lease) if isinstance(lease, (int, float)) else 0,
        accessor=str(auth.get("accessor") or ""),
        renewable=bool(auth.get("renewable", False)),
        raw=auth,
    )


async def login(config: VaultPatchConfig, transport: Transport) -> AuthToken:
    """Authenticate with AppRole and return the issued token."""
    endpoint = login_endpoint(config.auth_mount)
    _logger.debug("AppRole login via %s", endpoint)
    response = await transport.request("POST", endpoint, payload=build_login_request(config))
    return parse_login_response(response, endpoint=endpoint)
