"""Interactive wizard prompts.

This module provides the questionary prompts for the configuration,
authentication and file steps of the wizard.
"""

import questionary

from vault_bulk_upload import console
from vault_bulk_upload.models import AuthMode, VaultConfig
from vault_bulk_upload.styles import POINTER, PROMPT_STYLE, QMARK
from vault_bulk_upload.validation import (
    KV2_PATH_WARNING,
    ValidationResult,
    validate_namespace,
    validate_vault_path,
    validate_vault_url,
)


def _as_validator(result: ValidationResult) -> bool | str:
    """Convert a ValidationResult to questionary's True-or-message form."""
    if result.is_valid:
        return True
    return result.error or "Invalid value"


def _not_empty(label: str):
    return lambda value: True if value.strip() else f"{label} is required"


def prompt_configuration(defaults: VaultConfig) -> VaultConfig:
    """Collect Vault connection settings.

    Fields that already have a value are offered as defaults.

    Args:
        defaults: Config with any values already known.

    Returns:
        Config with URL, namespace, secrets path and auth mode filled in.

    """
    url = questionary.text(
        "Vault URL",
        default=defaults.url,
        validate=lambda value: _as_validator(validate_vault_url(value)),
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()

    namespace = questionary.text(
        "Namespace (optional)",
        default=defaults.namespace,
        validate=lambda value: _as_validator(validate_namespace(value)),
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()

    secrets_path = questionary.text(
        "Secrets path",
        default=defaults.secrets_path or "kv/data/",
        validate=lambda value: _as_validator(validate_vault_path(value)),
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()

    if validate_vault_path(secrets_path).error == KV2_PATH_WARNING:
        console.warning(KV2_PATH_WARNING)

    auth_mode = questionary.select(
        "Authentication method",
        choices=[
            {"name": "Token", "value": AuthMode.TOKEN.value},
            {"name": "AppRole", "value": AuthMode.APPROLE.value},
        ],
        default=defaults.auth_mode.value,
        style=PROMPT_STYLE,
        pointer=POINTER,
        qmark=QMARK,
    ).unsafe_ask()

    return defaults.with_changes(
        url=url,
        namespace=namespace,
        secrets_path=secrets_path,
        auth_mode=AuthMode(auth_mode),
    )


def prompt_credentials(config: VaultConfig) -> VaultConfig:
    """Collect the credentials for the configured auth mode.

    Args:
        config: Config whose auth_mode selects the prompts shown.

    Returns:
        Config with token, or role ID and secret ID, filled in.

    """
    if config.auth_mode is AuthMode.TOKEN:
        token = questionary.password(
            "Vault token",
            validate=_not_empty("Token"),
            style=PROMPT_STYLE,
            qmark=QMARK,
        ).unsafe_ask()
        return config.with_changes(token=token)

    role_id = questionary.text(
        "Role ID",
        default=config.role_id,
        validate=_not_empty("Role ID"),
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()

    secret_id = questionary.password(
        "Secret ID",
        validate=_not_empty("Secret ID"),
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()

    return config.with_changes(role_id=role_id, secret_id=secret_id)


def prompt_secrets_file() -> str:
    """Ask for the path of the secrets CSV file."""
    return questionary.path(
        "Secrets CSV file",
        validate=_not_empty("File"),
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()


def confirm_upload(count: int) -> bool:
    """Ask before writing secrets to Vault."""
    return questionary.confirm(
        f"Upload {count} secrets to Vault?",
        default=True,
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()


def confirm_retry(question: str) -> bool:
    """Ask whether to retry a failed step."""
    return questionary.confirm(
        question,
        default=False,
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()
