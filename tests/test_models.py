"""Tests for models.py module."""

import dataclasses

import pytest

from vault_bulk_upload.models import (
    AuthMode,
    RunOutcome,
    UploadResult,
    UploadStatus,
    UploadSummary,
    VaultConfig,
)


class TestVaultConfig:
    """Tests for VaultConfig."""

    def test_immutable(self, token_config):
        """Test fields cannot be assigned in place."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            token_config.url = "https://other.test"

    def test_credentials_ready(self, token_config, approle_config):
        """Test credential checks follow the auth mode."""
        assert token_config.credentials_ready() is True
        assert approle_config.credentials_ready() is True
        assert approle_config.with_changes(role_id="").credentials_ready() is False
        assert token_config.with_changes(auth_mode=AuthMode.APPROLE).credentials_ready() is False

    def test_secrets_hidden_from_repr_and_summary(self, approle_config):
        """Test credentials are not shown in repr or summary."""
        config = approle_config.with_changes(token="hvs.secret")

        assert "hvs.secret" not in repr(config)
        assert "secret-456" not in repr(config)
        assert "hvs.secret" not in str(config.summary())
        assert config.summary()["Auth Method"] == "approle"


class TestUploadResult:
    """Tests for UploadResult transitions."""

    def test_settle_and_reset(self, token_config):
        """Test settle attaches audit data and reset removes it."""
        pending = UploadResult(secret_name="svc", keys=("user",))

        settled = pending.settle(success=False, message="denied", config=token_config, timestamp="now")
        reset = settled.reset()

        assert settled.status is UploadStatus.ERROR
        assert settled.full_path == "kv/data/app/svc"
        assert pending.status is UploadStatus.PENDING
        assert reset == pending


class TestUploadSummary:
    """Tests for UploadSummary."""

    @pytest.mark.parametrize(
        ("succeeded", "failed", "outcome"),
        [
            (3, 0, RunOutcome.ALL_SUCCESS),
            (2, 1, RunOutcome.PARTIAL),
            (0, 3, RunOutcome.ALL_FAILED),
            (0, 0, RunOutcome.EMPTY),
        ],
    )
    def test_outcome(self, succeeded, failed, outcome):
        """Test run classification from counts."""
        summary = UploadSummary(total=succeeded + failed, succeeded=succeeded, failed=failed)

        assert summary.outcome is outcome

    def test_messages(self):
        """Test the aggregate messages."""
        assert UploadSummary(total=3, succeeded=3, failed=0).message == "All 3 secrets uploaded successfully!"
        assert UploadSummary(total=3, succeeded=1, failed=2).message == "2 secrets failed to upload. 1 succeeded."
