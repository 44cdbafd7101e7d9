"""Vault HTTP API gateway.

This module translates the operations the wizard needs (connection test,
token login, AppRole login and KV v2 writes) into requests against Vault's
/v1 HTTP API. Every operation returns a result value; transport errors and
unexpected responses are folded into the same error shape as errors
reported by Vault itself.
"""

import re
from typing import Any, NamedTuple

import requests
from icecream import ic

from vault_bulk_upload.exceptions import VaultRequestError
from vault_bulk_upload.models import AuthResult, WriteResult

TOKEN_LOOKUP_PATH = "/v1/auth/token/lookup-self"
APPROLE_LOGIN_PATH = "/v1/auth/approle/login"
KV2_DATA_PATH = "/v1/kv/data"

DEFAULT_TIMEOUT = 30

# Fallback messages when Vault does not report an error of its own
_ERR_TOKEN_AUTH = "Vault auth failed"
_ERR_APPROLE_AUTH = "AppRole authentication failed"
_ERR_NO_TOKEN = "Authentication successful but no token received"
_ERR_WRITE = "Failed to store secret"

_KV2_PREFIX = re.compile(r"^kv/data/")


class VaultResponse(NamedTuple):
    """A decoded Vault response."""

    ok: bool
    status: int
    data: dict[str, Any]


def normalize_base_path(path: str) -> str:
    """Strip leading 'kv/data/' prefixes and slashes until none remain.

    The gateway always writes under /v1/kv/data/, so a base path copied from
    the Vault UI must not carry the prefix a second time. Applying this twice
    gives the same result as applying it once.

    Args:
        path: Base path as configured.

    Returns:
        The path relative to the KV v2 data endpoint.

    """
    cleaned = path
    while True:
        stripped = _KV2_PREFIX.sub("", cleaned.lstrip("/"), count=1)
        if stripped == cleaned:
            return cleaned
        cleaned = stripped


def extract_error(payload: Any, fallback: str) -> str:
    """Return the first error Vault reported, or the fallback message.

    Args:
        payload: Decoded JSON body of a Vault response.
        fallback: Message used if the body has no errors list.

    Returns:
        A human-readable error message.

    """
    if isinstance(payload, dict):
        errors = payload.get("errors")
        if isinstance(errors, list) and errors and errors[0]:
            return str(errors[0])
    return fallback


def _vault_headers(token: str | None = None, namespace: str | None = None) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if token:
        headers["X-Vault-Token"] = token
    if namespace:
        headers["X-Vault-Namespace"] = namespace
    return headers


class VaultGateway:
    """Client for the subset of the Vault API used by the uploader.

    Attributes:
        timeout: Per-request timeout in seconds.
        session: Underlying requests session.

    """

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT, session: requests.Session | None = None) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()

    def __enter__(self) -> "VaultGateway":
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"VaultGateway(timeout={self.timeout!r})"

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def request(
        self,
        base_url: str,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> VaultResponse:
        """Send a request to Vault and decode its JSON body.

        Args:
            base_url: Vault server URL without trailing slash.
            method: HTTP method.
            path: API path starting with /v1.
            headers: Extra request headers.
            body: JSON request body.

        Returns:
            The decoded response.

        Raises:
            VaultRequestError: If the request fails or the body is not JSON.

        """
        url = f"{base_url}{path}"
        ic(method, url)

        try:
            response = self.session.request(
                method,
                url,
                headers=headers or _vault_headers(),
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as err:
            raise VaultRequestError(str(err)) from err

        text = response.text
        if not text.strip() and response.ok:
            # KV writes may answer 204 No Content
            return VaultResponse(ok=True, status=response.status_code, data={})

        try:
            data = response.json()
        except ValueError as err:
            raise VaultRequestError(f"Invalid JSON response: {text}") from err

        ic(response.status_code)
        return VaultResponse(ok=response.ok, status=response.status_code, data=data if isinstance(data, dict) else {})

    def test_connection(self, base_url: str, token: str) -> bool:
        """Check that Vault is reachable and accepts the token.

        Args:
            base_url: Vault server URL.
            token: Vault token to look up.

        Returns:
            True if the token lookup succeeded, False on any failure.

        """
        try:
            response = self.request(base_url, "GET", TOKEN_LOOKUP_PATH, headers=_vault_headers(token))
        except VaultRequestError as err:
            ic(err)
            return False
        return response.ok

    def authenticate_token(self, base_url: str, token: str, namespace: str | None = None) -> AuthResult:
        """Validate an existing token.

        Args:
            base_url: Vault server URL.
            token: Pre-issued Vault token.
            namespace: Optional Vault namespace.

        Returns:
            AuthResult carrying the same token on success.

        """
        try:
            response = self.request(
                base_url, "GET", TOKEN_LOOKUP_PATH, headers=_vault_headers(token, namespace)
            )
        except VaultRequestError as err:
            return AuthResult(success=False, error=str(err))

        if response.ok:
            return AuthResult(success=True, token=token, status=response.status)
        return AuthResult(
            success=False, error=extract_error(response.data, _ERR_TOKEN_AUTH), status=response.status
        )

    def authenticate_approle(
        self,
        base_url: str,
        role_id: str,
        secret_id: str,
        namespace: str | None = None,
    ) -> AuthResult:
        """Log in with AppRole credentials.

        Args:
            base_url: Vault server URL.
            role_id: AppRole role ID.
            secret_id: AppRole secret ID.
            namespace: Optional Vault namespace.

        Returns:
            AuthResult carrying the issued client token on success.

        """
        try:
            response = self.request(
                base_url,
                "POST",
                APPROLE_LOGIN_PATH,
                headers=_vault_headers(namespace=namespace),
                body={"role_id": role_id, "secret_id": secret_id},
            )
        except VaultRequestError as err:
            return AuthResult(success=False, error=str(err))

        if not response.ok:
            return AuthResult(
                success=False, error=extract_error(response.data, _ERR_APPROLE_AUTH), status=response.status
            )

        auth = response.data.get("auth") or {}
        token = auth.get("client_token") if isinstance(auth, dict) else None
        if not token:
            return AuthResult(success=False, error=_ERR_NO_TOKEN, status=400)
        return AuthResult(success=True, token=token, status=response.status)

    def write_secret(
        self,
        base_url: str,
        token: str,
        base_path: str,
        secret_name: str,
        data: dict[str, str],
        namespace: str | None = None,
    ) -> WriteResult:
        """Write one secret to the KV v2 engine.

        Args:
            base_url: Vault server URL.
            token: Vault token.
            base_path: Configured secrets path, with or without 'kv/data/'.
            secret_name: Name of the secret under the base path.
            data: Key/value pairs to store.
            namespace: Optional Vault namespace.

        Returns:
            WriteResult with Vault's error message on failure.

        """
        path = f"{KV2_DATA_PATH}/{normalize_base_path(base_path)}/{secret_name}"
        try:
            response = self.request(
                base_url,
                "POST",
                path,
                headers=_vault_headers(token, namespace),
                body={"data": data},
            )
        except VaultRequestError as err:
            return WriteResult(success=False, error=str(err))

        if response.ok:
            return WriteResult(success=True, status=response.status)
        return WriteResult(success=False, error=extract_error(response.data, _ERR_WRITE), status=response.status)
