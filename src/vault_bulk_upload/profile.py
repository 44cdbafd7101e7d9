"""Connection profiles.

A profile is a small YAML file holding the non-secret connection defaults,
so repeated runs against the same Vault do not need every option:

    url: https://vault.example.com
    namespace: team-a
    secrets_path: kv/data/apps
    auth_method: approle

Credentials are never read from profiles.
"""

from pathlib import Path
from typing import Any

import yaml
from icecream import ic

from vault_bulk_upload import console
from vault_bulk_upload.exceptions import ConfigurationError
from vault_bulk_upload.models import AuthMode, VaultConfig

_CREDENTIAL_KEYS = frozenset({"token", "role_id", "secret_id"})


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as stream:
            document = yaml.safe_load(stream)
    except FileNotFoundError as err:
        raise ConfigurationError("config", f"Profile '{path}' does not exist") from err
    except (OSError, UnicodeDecodeError) as err:
        raise ConfigurationError("config", f"Cannot read profile '{path}': {err}") from err
    except yaml.YAMLError as err:
        raise ConfigurationError("config", f"Profile '{path}' contains malformed YAML: {err}") from err

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigurationError("config", f"Profile '{path}' does not contain a YAML mapping")
    return document


def load_profile(path: str | Path) -> VaultConfig:
    """Load connection defaults from a YAML profile.

    Args:
        path: Path to the profile.

    Returns:
        A VaultConfig carrying the profile's values and no credentials.

    Raises:
        ConfigurationError: If the file is missing, unreadable, malformed or
            names an unknown auth method.

    """
    document = _read_yaml(Path(path))
    ic(sorted(document))

    ignored = _CREDENTIAL_KEYS.intersection(document)
    if ignored:
        console.warning(f"Ignoring credentials in profile: {', '.join(sorted(ignored))}")

    auth_method = str(document.get("auth_method", AuthMode.TOKEN.value)).lower()
    try:
        auth_mode = AuthMode(auth_method)
    except ValueError as err:
        raise ConfigurationError("auth_method", f"Unknown auth method '{auth_method}' in profile") from err

    return VaultConfig(
        url=str(document.get("url") or ""),
        namespace=str(document.get("namespace") or ""),
        secrets_path=str(document.get("secrets_path") or ""),
        auth_mode=auth_mode,
    )
