"""Custom exceptions for vault-bulk-upload.

This module defines the exception hierarchy used throughout the application
to provide meaningful error messages and proper error handling.
"""


class VaultUploadError(Exception):
    """Base exception for all vault-bulk-upload errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch all vault-bulk-upload errors with a single
    except clause if desired.
    """

    pass


class ConfigurationError(VaultUploadError):
    """Raised when a configuration field is missing or invalid.

    Attributes:
        field: Name of the offending configuration field.

    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class AuthenticationError(VaultUploadError):
    """Raised when authenticating against Vault fails.

    This can occur when:
    - The token is invalid or expired
    - The AppRole credentials are rejected
    - Vault is unreachable during the authentication step
    """

    pass


class SecretFileError(VaultUploadError):
    """Raised when the secrets file cannot be used at all.

    Malformed rows are reported per line and never raise; this is
    reserved for a missing, unreadable or non-CSV file.
    """

    pass


class VaultRequestError(VaultUploadError):
    """Raised when a request to Vault fails below the HTTP status level.

    This covers connection failures and response bodies that are not JSON.
    """

    pass
