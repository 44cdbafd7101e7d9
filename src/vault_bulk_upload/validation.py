"""Validation of wizard form fields.

Each validator is a pure function returning a ValidationResult, so the
same rules can back questionary prompts, CLI options and the YAML profile.
"""

import re
from typing import NamedTuple
from urllib.parse import urlsplit

from vault_bulk_upload.exceptions import ConfigurationError
from vault_bulk_upload.models import AuthMode, VaultConfig

_SEGMENT_MAX_LENGTH = 255
_SEGMENT_PATTERN = re.compile(r"^[a-zA-Z0-9\-_.]+$")
_INVALID_CHARS = re.compile(r'[<>:"|?*]')
_KV2_PREFIX = "kv/data/"

KV2_PATH_WARNING = 'Warning: Path should typically start with "kv/data/" for KV v2 secrets engine'


class ValidationResult(NamedTuple):
    """Outcome of validating a single field.

    Attributes:
        is_valid: Whether the value can be used.
        error: Error text, or a warning when is_valid is True.
        normalized: Cleaned-up value to store when valid.

    """

    is_valid: bool
    error: str | None = None
    normalized: str | None = None


def validate_vault_url(url: str) -> ValidationResult:
    """Validate a Vault server URL.

    Args:
        url: The URL as typed by the user.

    Returns:
        ValidationResult with the URL minus its trailing slash when valid.

    """
    if not url or not url.strip():
        return ValidationResult(False, "Vault URL is required")

    trimmed = url.strip()
    try:
        parts = urlsplit(trimmed)
        hostname = parts.hostname
    except ValueError:
        return ValidationResult(False, "Please enter a valid URL (e.g., https://vault.example.com)")

    if not parts.scheme or not parts.netloc:
        return ValidationResult(False, "Please enter a valid URL (e.g., https://vault.example.com)")
    if parts.scheme not in ("http", "https"):
        return ValidationResult(False, "Vault URL must use HTTP or HTTPS protocol")
    if not hostname:
        return ValidationResult(False, "Vault URL must include a valid hostname")

    return ValidationResult(True, normalized=trimmed.rstrip("/"))


def _validate_segments(value: str, label: str) -> str | None:
    """Apply the shared slash and segment rules to a path-like value.

    Returns:
        An error message, or None if the value passes.

    """
    if _INVALID_CHARS.search(value):
        return f'{label} contains invalid characters. Avoid: < > : " | ? *'
    if "//" in value:
        return f"{label} cannot contain consecutive slashes"
    if value.startswith("/"):
        return f"{label} should not start with a slash"
    if value.endswith("/"):
        return f"{label} should not end with a slash"

    for segment in value.split("/"):
        if len(segment) > _SEGMENT_MAX_LENGTH:
            return f"{label} segments cannot exceed {_SEGMENT_MAX_LENGTH} characters"
        if not _SEGMENT_PATTERN.match(segment):
            return f"{label} segments can only contain letters, numbers, hyphens, underscores, and dots"
    return None


def validate_vault_path(path: str) -> ValidationResult:
    """Validate the base secrets path.

    A valid path that does not start with kv/data/ still passes, with a
    warning in the error field.

    Args:
        path: The secrets path as typed by the user.

    Returns:
        ValidationResult with the trimmed path when valid.

    """
    if not path or not path.strip():
        return ValidationResult(False, "Secrets path is required")

    trimmed = path.strip()
    error = _validate_segments(trimmed, "Path")
    if error:
        return ValidationResult(False, error)

    if not trimmed.lower().startswith(_KV2_PREFIX):
        return ValidationResult(True, KV2_PATH_WARNING, trimmed)
    return ValidationResult(True, normalized=trimmed)


def validate_namespace(namespace: str) -> ValidationResult:
    """Validate an optional Vault namespace."""
    if not namespace or not namespace.strip():
        return ValidationResult(True, normalized="")

    trimmed = namespace.strip()
    error = _validate_segments(trimmed, "Namespace")
    if error:
        return ValidationResult(False, error)
    return ValidationResult(True, normalized=trimmed)


def validate_config(config: VaultConfig, *, require_credentials: bool = True) -> VaultConfig:
    """Validate every field of a config and return its normalized form.

    Args:
        config: The config collected so far.
        require_credentials: Also check the credentials for the auth mode.

    Returns:
        A normalized copy of the config.

    Raises:
        ConfigurationError: For the first field that fails validation.

    """
    url = validate_vault_url(config.url)
    if not url.is_valid:
        raise ConfigurationError("url", url.error or "Invalid Vault URL")

    namespace = validate_namespace(config.namespace)
    if not namespace.is_valid:
        raise ConfigurationError("namespace", namespace.error or "Invalid namespace")

    path = validate_vault_path(config.secrets_path)
    if not path.is_valid:
        raise ConfigurationError("secrets_path", path.error or "Invalid secrets path")

    result = config.normalized().with_changes(
        url=url.normalized,
        namespace=namespace.normalized,
        secrets_path=path.normalized,
    )

    if require_credentials and not result.credentials_ready():
        if result.auth_mode is AuthMode.TOKEN:
            raise ConfigurationError("token", "Token is required")
        raise ConfigurationError("role_id", "Role ID and Secret ID are required")

    return result
