"""HTTP transport for the Vault API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import aiohttp

from vaultpatch._constants import NAMESPACE_HEADER, REQUEST_HEADER, TOKEN_HEADER, USER_AGENT
from vaultpatch._redact import redact_for_log, redact_headers
from vaultpatch.config import VaultPatchConfig
from vaultpatch.exceptions import VaultTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VaultResponse:
    """Status and decoded body of one Vault HTTP response.

    ``body`` is empty for ``204 No Content`` and for error responses whose
    body is not JSON; ``text`` keeps the raw body for error messages.
    """

    status: int
    body: dict[str, Any] = field(default_factory=dict)
    text: str = ""

    def error_detail(self) -> str:
        """Vault's ``errors`` list joined, or the raw body text."""
        errors = self.body.get("errors")
        if isinstance(errors, list) and errors:
            return "; ".join(str(e) for e in errors)
        return self.text[:200]


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Endpoint modules only depend on this protocol so tests can hand them
    small fakes; :class:`HttpTransport` is the production implementation.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        token: str | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> VaultResponse:
        ...


class HttpTransport:
    """aiohttp transport that adds Vault headers and decodes JSON bodies.

    The transport never interprets status codes; endpoint modules decide
    what a 404 or 403 means for their call.
    """

    def __init__(self, config: VaultPatchConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self, token: str | None, has_body: bool) -> dict[str, str]:
        headers: dict[str, str] = {
            "user-agent": USER_AGENT,
            REQUEST_HEADER: "true",
        }
        if has_body:
            headers["content-type"] = "application/json"
        if token:
            headers[TOKEN_HEADER] = token
        if self._config.namespace:
            headers[NAMESPACE_HEADER] = self._config.namespace
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        token: str | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> VaultResponse:
        """Send one request and return the decoded response.

        Raises
        ------
        VaultTransportError
            On network failure, timeout, or a 2xx response whose body is
            not a UTF-8 JSON object.
        """
        url = f"{self._config.address}{endpoint}"
        body = json.dumps(dict(payload), separators=(",", ":")) if payload is not None else None
        headers = self._headers(token, body is not None)

        _logger.debug(
            "%s %s headers=%s payload=%s",
            method,
            url,
            redact_headers(headers),
            redact_for_log(payload) if payload is not None else None,
        )

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                try:
                    text = await resp.text()
                except UnicodeDecodeError as exc:
                    if 200 <= status < 300:
                        raise VaultTransportError(
                            f"Undecodable response body from {endpoint}: {exc}",
                            status_code=status,
                            endpoint=endpoint,
                        ) from exc
                    text = ""
        except aiohttp.ClientError as exc:
            raise VaultTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise VaultTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            _logger.debug("%s %s -> HTTP %d (empty body)", method, url, status)
            return VaultResponse(status=status)

        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as exc:
            _logger.debug("%s %s -> HTTP %d (non-JSON body)", method, url, status)
            if 200 <= status < 300:
                raise VaultTransportError(
                    f"Invalid JSON from {endpoint}: {text[:200]}",
                    status_code=status,
                    endpoint=endpoint,
                ) from exc
            return VaultResponse(status=status, text=text)

        if not isinstance(decoded, dict):
            if 200 <= status < 300:
                raise VaultTransportError(
                    f"Expected a JSON object from {endpoint}",
                    status_code=status,
                    endpoint=endpoint,
                )
            return VaultResponse(status=status, text=text)

        _logger.debug("%s %s -> HTTP %d body=%s", method, url, status, redact_for_log(decoded))
        return VaultResponse(status=status, body=decoded, text=text)
