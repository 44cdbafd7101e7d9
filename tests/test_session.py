"""Tests for core/session.py module."""

import pytest

from vault_bulk_upload.core.session import WizardSession
from vault_bulk_upload.exceptions import AuthenticationError, ConfigurationError
from vault_bulk_upload.models import AuthMode, AuthResult, VaultConfig


class TestWizardSessionConfig:
    """Tests for config handling."""

    def test_update_replaces_config(self, token_config):
        """Test update produces a new value and leaves the old one intact."""
        session = WizardSession(token_config)
        before = session.config

        after = session.update(namespace="team-a")

        assert after.namespace == "team-a"
        assert before.namespace == ""
        assert session.config is after

    def test_update_drops_authentication(self, token_config, mock_gateway):
        """Test editing the config requires authenticating again."""
        mock_gateway.test_connection.return_value = True
        mock_gateway.authenticate_token.return_value = AuthResult(success=True, token="t1")
        session = WizardSession(token_config)
        session.authenticate(mock_gateway)

        session.update(url="https://other.test")

        assert session.authenticated is False
        with pytest.raises(ConfigurationError):
            session.freeze()

    def test_validate_normalizes(self):
        """Test validation trims fields and the URL's trailing slash."""
        session = WizardSession(VaultConfig(url=" https://vault.test/ ", secrets_path=" kv/data/app "))

        config = session.validate()

        assert config.url == "https://vault.test"
        assert config.secrets_path == "kv/data/app"

    def test_validate_rejects_bad_url(self):
        """Test an invalid URL raises ConfigurationError naming the field."""
        session = WizardSession(VaultConfig(url="ftp://vault.test", secrets_path="kv/data/app"))

        with pytest.raises(ConfigurationError) as exc_info:
            session.validate()

        assert exc_info.value.field == "url"


class TestWizardSessionAuthenticate:
    """Tests for WizardSession.authenticate."""

    def test_token_mode(self, token_config, mock_gateway):
        """Test token mode checks connectivity, then validates the token."""
        mock_gateway.test_connection.return_value = True
        mock_gateway.authenticate_token.return_value = AuthResult(success=True, token="t1")
        session = WizardSession(token_config)

        config = session.authenticate(mock_gateway)

        mock_gateway.test_connection.assert_called_once_with("https://vault.test", "t1")
        mock_gateway.authenticate_token.assert_called_once_with("https://vault.test", "t1", "")
        assert config.token == "t1"
        assert session.freeze() is config

    def test_token_mode_unreachable(self, token_config, mock_gateway):
        """Test a failed connection test stops before token validation."""
        mock_gateway.test_connection.return_value = False
        session = WizardSession(token_config)

        with pytest.raises(AuthenticationError, match="Cannot connect to Vault server"):
            session.authenticate(mock_gateway)

        mock_gateway.authenticate_token.assert_not_called()
        assert session.authenticated is False

    def test_token_mode_rejected(self, token_config, mock_gateway):
        """Test Vault's error becomes the AuthenticationError message."""
        mock_gateway.test_connection.return_value = True
        mock_gateway.authenticate_token.return_value = AuthResult(success=False, error="permission denied")
        session = WizardSession(token_config)

        with pytest.raises(AuthenticationError, match="permission denied"):
            session.authenticate(mock_gateway)

    def test_token_required(self, token_config, mock_gateway):
        """Test missing credentials are a configuration error."""
        session = WizardSession(token_config.with_changes(token=""))

        with pytest.raises(ConfigurationError, match="Token is required"):
            session.authenticate(mock_gateway)

        mock_gateway.test_connection.assert_not_called()

    def test_approle_mode_stores_issued_token(self, approle_config, mock_gateway):
        """Test AppRole login stores the issued token in a new config."""
        mock_gateway.authenticate_approle.return_value = AuthResult(success=True, token="hvs.issued")
        session = WizardSession(approle_config)

        config = session.authenticate(mock_gateway)

        mock_gateway.authenticate_approle.assert_called_once_with(
            "https://vault.test", "role-123", "secret-456", "team-a"
        )
        mock_gateway.test_connection.assert_not_called()
        assert config.token == "hvs.issued"
        assert approle_config.token == ""

    def test_approle_missing_token(self, approle_config, mock_gateway):
        """Test a login without a token fails authentication."""
        mock_gateway.authenticate_approle.return_value = AuthResult(
            success=False, error="Authentication successful but no token received"
        )
        session = WizardSession(approle_config)

        with pytest.raises(AuthenticationError, match="no token received"):
            session.authenticate(mock_gateway)

    def test_approle_requires_both_ids(self, approle_config, mock_gateway):
        """Test AppRole mode needs role ID and secret ID."""
        session = WizardSession(approle_config.with_changes(secret_id=""))

        with pytest.raises(ConfigurationError, match="Role ID and Secret ID are required"):
            session.authenticate(mock_gateway)


class TestWizardSessionFreeze:
    """Tests for WizardSession.freeze."""

    def test_freeze_requires_authentication(self, token_config):
        """Test a snapshot cannot be taken before authenticating."""
        with pytest.raises(ConfigurationError, match="Authenticate"):
            WizardSession(token_config).freeze()

    def test_frozen_snapshot_is_stable(self, token_config, mock_gateway):
        """Test later edits do not change an already frozen snapshot."""
        mock_gateway.test_connection.return_value = True
        mock_gateway.authenticate_token.return_value = AuthResult(success=True, token="t1")
        session = WizardSession(token_config)
        session.authenticate(mock_gateway)

        frozen = session.freeze()
        session.update(secrets_path="kv/data/other")

        assert frozen.secrets_path == "kv/data/app"
        assert frozen.auth_mode is AuthMode.TOKEN
