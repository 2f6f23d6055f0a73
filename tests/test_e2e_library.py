from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from vaultpatch._transport import VaultResponse
from vaultpatch.client import VaultClient
from vaultpatch.config import VaultPatchConfig
from vaultpatch.exceptions import (
    VaultAuthenticationError,
    VaultPatchError,
    VaultPermissionDeniedError,
)
from vaultpatch.models.location import SecretLocation
from vaultpatch.reconciler import KvKeysReconciler

_PREFIX = "/v1/app_envs/data/"


@dataclass
class FakeVaultBackend:
    secrets: dict[str, dict[str, Any]] = field(default_factory=dict)
    calls: dict[str, int] = field(default_factory=dict)
    issued_tokens: list[str] = field(default_factory=list)
    revoked_tokens: set[str] = field(default_factory=set)
    login_should_fail: bool = False
    deny_everything: bool = False
    lease_duration: int = 3600

    def _record_call(self, key: str) -> None:
        self.calls[key] = self.calls.get(key, 0) + 1

    def revoke_all(self) -> None:
        self.revoked_tokens.update(self.issued_tokens)

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        token: str | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> VaultResponse:
        self._record_call(f"{method} {endpoint}")

        if endpoint == "/v1/auth/approle/login":
            assert payload is not None
            if self.login_should_fail or payload.get("secret_id") != "secret-1":
                return VaultResponse(status=400, body={"errors": ["invalid role or secret ID"]})
            new_token = f"s.token-{len(self.issued_tokens) + 1}"
            self.issued_tokens.append(new_token)
            return VaultResponse(
                status=200,
                body={"auth": {"client_token": new_token, "accessor": "acc", "lease_duration": self.lease_duration}},
            )

        if self.deny_everything or token is None or token in self.revoked_tokens:
            return VaultResponse(status=403, body={"errors": ["permission denied"]})

        if not endpoint.startswith(_PREFIX):
            raise AssertionError(f"Unexpected endpoint in fake backend: {endpoint}")
        path = endpoint[len(_PREFIX) :]

        if method == "GET":
            data = self.secrets.get(path)
            if data is None:
                return VaultResponse(status=404, body={"errors": []})
            return VaultResponse(status=200, body={"data": {"data": dict(data), "metadata": {}}})

        if method == "POST":
            assert payload is not None
            self.secrets[path] = dict(payload["data"])
            return VaultResponse(status=200, body={"data": {"version": 1}})

        raise AssertionError(f"Unexpected method in fake backend: {method}")


@pytest.fixture
def config() -> VaultPatchConfig:
    return VaultPatchConfig(address="https://vault.example.com/", role_id="role-1", secret_id="secret-1")


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeVaultBackend:
    fake_backend = FakeVaultBackend()

    async def fake_request(
        _self: Any,
        method: str,
        endpoint: str,
        *,
        token: str | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> VaultResponse:
        return await fake_backend.request(method, endpoint, token=token, payload=payload)

    monkeypatch.setattr("vaultpatch._transport.HttpTransport.request", fake_request)
    return fake_backend


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_reconciler_over_client_manages_only_declared_keys(
    config: VaultPatchConfig,
    backend: FakeVaultBackend,
) -> None:
    backend.secrets["my-service/test"] = {"unmanaged": "keep", "flag": True}
    location = SecretLocation.parse("app_envs/my-service/test")

    async with VaultClient(config) as client:
        reconciler = KvKeysReconciler(client)

        state = await reconciler.create(location, {"API_KEY": "abc", "DB_HOST": "db"})
        assert backend.secrets["my-service/test"] == {
            "unmanaged": "keep",
            "flag": "true",
            "API_KEY": "abc",
            "DB_HOST": "db",
        }

        refreshed = await reconciler.read(state)
        assert refreshed == state

        state = await reconciler.update(state, {"API_KEY": "rotated"})
        assert backend.secrets["my-service/test"] == {"unmanaged": "keep", "flag": "true", "API_KEY": "rotated"}

        await reconciler.delete(state)
        assert backend.secrets["my-service/test"] == {"unmanaged": "keep", "flag": "true"}

    assert backend.calls["POST /v1/auth/approle/login"] == 1


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_import_adopts_all_keys(config: VaultPatchConfig, backend: FakeVaultBackend) -> None:
    backend.secrets["my-service/test"] = {"a": "1", "b": "2"}

    async with VaultClient(config) as client:
        state = await KvKeysReconciler(client).import_state("app_envs/my-service/test")

    assert state.id == "app_envs/my-service/test"
    assert state.keys == {"a": "1", "b": "2"}


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_reauthenticates_once_after_token_revoked(
    config: VaultPatchConfig,
    backend: FakeVaultBackend,
) -> None:
    backend.secrets["svc"] = {"a": "1"}
    location = SecretLocation(mount="app_envs", path="svc")

    async with VaultClient(config) as client:
        assert (await client.read_secret(location)).data == {"a": "1"}
        backend.revoke_all()
        assert (await client.read_secret(location)).data == {"a": "1"}

    assert backend.calls["POST /v1/auth/approle/login"] == 2
    assert backend.calls["GET /v1/app_envs/data/svc"] == 3


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_second_403_propagates(config: VaultPatchConfig, backend: FakeVaultBackend) -> None:
    backend.deny_everything = True

    async with VaultClient(config) as client:
        with pytest.raises(VaultPermissionDeniedError):
            await client.write_secret(SecretLocation(mount="app_envs", path="svc"), {"a": "1"})

    assert backend.calls["POST /v1/auth/approle/login"] == 2


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_login_error_raises_authentication(config: VaultPatchConfig, backend: FakeVaultBackend) -> None:
    backend.login_should_fail = True

    async with VaultClient(config) as client:
        with pytest.raises(VaultAuthenticationError):
            await client.login()


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_expired_session_logs_in_again(backend: FakeVaultBackend) -> None:
    config = VaultPatchConfig(
        address="https://vault.example.com",
        role_id="role-1",
        secret_id="secret-1",
        session_ttl=0.000001,
    )
    location = SecretLocation(mount="app_envs", path="svc")

    async with VaultClient(config) as client:
        await client.read_secret(location)
        await client.read_secret(location)

    assert backend.calls["POST /v1/auth/approle/login"] == 2


@pytest.mark.asyncio
async def test_client_outside_context_manager_raises(config: VaultPatchConfig) -> None:
    client = VaultClient(config)

    with pytest.raises(VaultPatchError, match="not initialized"):
        await client.read_secret(SecretLocation(mount="app_envs", path="svc"))
