"""Tests for profile.py module."""

import pytest

from vault_bulk_upload.exceptions import ConfigurationError
from vault_bulk_upload.models import AuthMode
from vault_bulk_upload.profile import load_profile


class TestLoadProfile:
    """Tests for load_profile."""

    def test_loads_connection_defaults(self, tmp_path):
        """Test profile values populate the config."""
        path = tmp_path / "vault.yaml"
        path.write_text(
            "url: https://vault.example.com\n"
            "namespace: team-a\n"
            "secrets_path: kv/data/apps\n"
            "auth_method: approle\n"
        )

        config = load_profile(path)

        assert config.url == "https://vault.example.com"
        assert config.namespace == "team-a"
        assert config.secrets_path == "kv/data/apps"
        assert config.auth_mode is AuthMode.APPROLE

    def test_credentials_are_ignored(self, tmp_path):
        """Test tokens in a profile are never used."""
        path = tmp_path / "vault.yaml"
        path.write_text("url: https://vault.example.com\ntoken: hvs.leaked\n")

        config = load_profile(path)

        assert config.token == ""
        assert config.auth_mode is AuthMode.TOKEN

    def test_empty_profile(self, tmp_path):
        """Test an empty file gives an empty config."""
        path = tmp_path / "vault.yaml"
        path.write_text("")

        assert load_profile(path).url == ""

    def test_missing_profile(self, tmp_path):
        """Test a missing file raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="does not exist"):
            load_profile(tmp_path / "missing.yaml")

    def test_unreadable_profile(self, tmp_path):
        """Test a path that cannot be read raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Cannot read profile"):
            load_profile(tmp_path)

    def test_invalid_utf8(self, tmp_path):
        """Test undecodable bytes raise ConfigurationError."""
        path = tmp_path / "vault.yaml"
        path.write_bytes(b"url: \xff\xfe\n")

        with pytest.raises(ConfigurationError, match="Cannot read profile"):
            load_profile(path)

    def test_malformed_yaml(self, tmp_path):
        """Test malformed YAML raises ConfigurationError."""
        path = tmp_path / "vault.yaml"
        path.write_text("url: [unclosed\n")

        with pytest.raises(ConfigurationError, match="malformed YAML"):
            load_profile(path)

    def test_not_a_mapping(self, tmp_path):
        """Test a YAML list is rejected."""
        path = tmp_path / "vault.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_profile(path)

    def test_unknown_auth_method(self, tmp_path):
        """Test an unknown auth method is rejected."""
        path = tmp_path / "vault.yaml"
        path.write_text("auth_method: ldap\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_profile(path)

        assert exc_info.value.field == "auth_method"
