"""Core infrastructure subpackage.

This package contains the Vault gateway, the wizard session holding the
connection settings and the sequential secret uploader.
"""

from vault_bulk_upload.core.gateway import VaultGateway
from vault_bulk_upload.core.session import WizardSession
from vault_bulk_upload.core.uploader import SecretUploader

__all__ = [
    "SecretUploader",
    "VaultGateway",
    "WizardSession",
]
