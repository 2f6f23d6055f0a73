"""Internal constants shared across the library."""

USER_AGENT = "vaultpatch"
API_PREFIX = "/v1"

TOKEN_HEADER = "X-Vault-Token"
NAMESPACE_HEADER = "X-Vault-Namespace"
REQUEST_HEADER = "X-Vault-Request"

#: Status codes Vault uses for a successful KV v2 write.
WRITE_OK_STATUSES: frozenset[int] = frozenset({200, 204})


def login_endpoint(auth_mount: str) -> str:
    """AppRole login endpoint for the given auth mount."""
    return f"{API_PREFIX}/auth/{auth_mount.strip('/')}/login"


def kv_data_endpoint(mount: str, path: str) -> str:
    """KV v2 data endpoint for a secret at ``mount/path``."""
    return f"{API_PREFIX}/{mount.strip('/')}/data/{path.strip('/')}"
