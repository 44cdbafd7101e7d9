"""vault-bulk-upload: Upload secrets from a CSV file to HashiCorp Vault.

This package reads SECRET_NAME,SECRET_KEY,SECRET_VALUE rows, groups them
into secrets and writes each one to a KV v2 engine, reporting the outcome
of every write.

Example usage:
    from vault_bulk_upload import SecretUploader, VaultConfig, VaultGateway, parse_secrets_csv

    records, errors = parse_secrets_csv(open("secrets.csv").read())
    config = VaultConfig(url="https://vault.example.com", secrets_path="kv/data/apps", token="hvs...")

    with VaultGateway() as gateway:
        summary = SecretUploader(gateway, config, records).upload()
"""

__version__ = "0.3.0"

from vault_bulk_upload.cli import cli
from vault_bulk_upload.core.gateway import VaultGateway
from vault_bulk_upload.core.session import WizardSession
from vault_bulk_upload.core.uploader import SecretUploader
from vault_bulk_upload.exceptions import (
    AuthenticationError,
    ConfigurationError,
    SecretFileError,
    VaultRequestError,
    VaultUploadError,
)
from vault_bulk_upload.models import AuthMode, UploadResult, UploadStatus, UploadSummary, VaultConfig
from vault_bulk_upload.secrets.grouping import group_secrets
from vault_bulk_upload.secrets.parsing import parse_secrets_csv

__all__ = [
    # Version
    "__version__",
    # Main CLI
    "cli",
    # Classes
    "SecretUploader",
    "VaultGateway",
    "WizardSession",
    # Models
    "AuthMode",
    "UploadResult",
    "UploadStatus",
    "UploadSummary",
    "VaultConfig",
    # Functions
    "group_secrets",
    "parse_secrets_csv",
    # Exceptions
    "VaultUploadError",
    "AuthenticationError",
    "ConfigurationError",
    "SecretFileError",
    "VaultRequestError",
]
