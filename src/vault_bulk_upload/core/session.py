"""Wizard session state.

WizardSession holds the connection settings as an immutable VaultConfig.
Every change replaces the config with a new value, and an upload run works
on a snapshot taken by freeze(), so edits made while a run is in progress
cannot affect it.
"""

from typing import Any

from icecream import ic

from vault_bulk_upload.core.gateway import VaultGateway
from vault_bulk_upload.exceptions import AuthenticationError, ConfigurationError
from vault_bulk_upload.models import AuthMode, VaultConfig
from vault_bulk_upload.validation import validate_config

_ERR_CANNOT_CONNECT = "Cannot connect to Vault server"


class WizardSession:
    """Holds configuration and authentication state for one wizard run.

    Attributes:
        authenticated: Whether the current config holds a verified token.

    """

    def __init__(self, config: VaultConfig | None = None) -> None:
        self._config: VaultConfig = config or VaultConfig()
        self.authenticated: bool = False

    def __repr__(self) -> str:
        return f"WizardSession(config={self._config!r}, authenticated={self.authenticated!r})"

    @property
    def config(self) -> VaultConfig:
        return self._config

    def update(self, **changes: Any) -> VaultConfig:
        """Replace the config with a copy carrying the given changes.

        Changing any field drops the authenticated state.

        Returns:
            The new config.

        """
        self._config = self._config.with_changes(**changes)
        self.authenticated = False
        return self._config

    def validate(self) -> VaultConfig:
        """Validate and normalize the connection fields.

        Raises:
            ConfigurationError: If a field is invalid.

        """
        self._config = validate_config(self._config, require_credentials=False)
        return self._config

    def authenticate(self, gateway: VaultGateway) -> VaultConfig:
        """Authenticate with the configured method.

        Token mode checks connectivity first and then validates the token.
        AppRole mode logs in and stores the issued token in the config.

        Args:
            gateway: Gateway used to reach Vault.

        Returns:
            The authenticated config.

        Raises:
            ConfigurationError: If required credentials are missing.
            AuthenticationError: If Vault rejects the credentials or is unreachable.

        """
        config = validate_config(self._config)
        ic(config)

        if config.auth_mode is AuthMode.TOKEN:
            if not gateway.test_connection(config.url, config.token):
                raise AuthenticationError(_ERR_CANNOT_CONNECT)
            result = gateway.authenticate_token(config.url, config.token, config.namespace)
        else:
            result = gateway.authenticate_approle(config.url, config.role_id, config.secret_id, config.namespace)

        if not result.success:
            raise AuthenticationError(result.error or "Authentication failed")

        if config.auth_mode is AuthMode.APPROLE and result.token:
            config = config.with_changes(token=result.token)

        self._config = config
        self.authenticated = True
        return config

    def freeze(self) -> VaultConfig:
        """Return the config snapshot to upload with.

        Raises:
            ConfigurationError: If the session has not authenticated yet.

        """
        if not self.authenticated:
            raise ConfigurationError("token", "Authenticate before uploading secrets")
        return self._config
