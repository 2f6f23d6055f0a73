from __future__ import annotations

import pydantic
import pytest

from vaultpatch.exceptions import InvalidLocationError
from vaultpatch.models import KvKeysState, RemoteDocument, SecretLocation


def test_location_parse_splits_at_first_slash() -> None:
    location = SecretLocation.parse("app_envs/my-service/test")

    assert location.mount == "app_envs"
    assert location.path == "my-service/test"
    assert location.id == "app_envs/my-service/test"
    assert str(location) == "app_envs/my-service/test"


@pytest.mark.parametrize("location_id", ["no-slash", "/path", "mount/", "", "/", "app/ ", " /svc", "app/  "])
def test_location_parse_rejects_malformed_ids(location_id: str) -> None:
    with pytest.raises(InvalidLocationError):
        SecretLocation.parse(location_id)


def test_invalid_location_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        SecretLocation.parse("no-slash")


def test_location_requires_non_empty_fields() -> None:
    with pytest.raises(pydantic.ValidationError):
        SecretLocation(mount="", path="svc")


def test_absent_document_is_empty() -> None:
    document = RemoteDocument.absent()

    assert document.exists is False
    assert document.data == {}


def test_state_for_location_and_with_keys() -> None:
    location = SecretLocation(mount="kv", path="svc")
    state = KvKeysState.for_location(location, {"a": "1"})

    updated = state.with_keys({"b": "2"})

    assert state.keys == {"a": "1"}
    assert updated.keys == {"b": "2"}
    assert updated.id == "kv/svc"
    assert updated.location == location


def test_state_repr_hides_secret_values() -> None:
    state = KvKeysState.for_location(SecretLocation(mount="kv", path="svc"), {"API_KEY": "super-secret"})

    assert "super-secret" not in repr(state)
    assert "super-secret" not in repr(RemoteDocument(data={"API_KEY": "super-secret"}))


def test_state_json_round_trip() -> None:
    state = KvKeysState.for_location(SecretLocation(mount="kv", path="a/b"), {"x": "1", "y": ""})

    assert KvKeysState.model_validate_json(state.model_dump_json()) == state


def test_state_id_must_name_its_location() -> None:
    with pytest.raises(pydantic.ValidationError, match="does not match"):
        KvKeysState(id="kv/other", mount="kv", path="svc", keys={})
