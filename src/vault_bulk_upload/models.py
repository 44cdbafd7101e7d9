"""Data models for vault-bulk-upload.

This module provides type-safe data structures for the upload pipeline:
the wizard configuration, parsed CSV records and per-secret upload results.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, NamedTuple


class AuthMode(str, Enum):
    """Supported Vault authentication methods.

    Inherits from str to allow direct use as click choices and YAML values.
    """

    TOKEN = "token"
    APPROLE = "approle"


@dataclass(frozen=True, slots=True)
class VaultConfig:
    """Connection settings collected by the wizard.

    Instances are immutable; use with_changes() to derive an updated copy.

    Attributes:
        url: Base URL of the Vault server.
        namespace: Optional Vault Enterprise namespace.
        secrets_path: Base path secrets are written under.
        auth_mode: Authentication method to use.
        token: Vault token (given, or issued by AppRole login).
        role_id: AppRole role ID.
        secret_id: AppRole secret ID.

    """

    url: str = ""
    namespace: str = ""
    secrets_path: str = ""
    auth_mode: AuthMode = AuthMode.TOKEN
    token: str = field(default="", repr=False)
    role_id: str = field(default="", repr=False)
    secret_id: str = field(default="", repr=False)

    def with_changes(self, **changes: Any) -> "VaultConfig":
        """Return a copy of the config with the given fields replaced."""
        return replace(self, **changes)

    def normalized(self) -> "VaultConfig":
        """Return a copy with whitespace trimmed and the URL's trailing slash removed."""
        return replace(
            self,
            url=self.url.strip().rstrip("/"),
            namespace=self.namespace.strip(),
            secrets_path=self.secrets_path.strip(),
            token=self.token.strip(),
            role_id=self.role_id.strip(),
            secret_id=self.secret_id.strip(),
        )

    def credentials_ready(self) -> bool:
        """Check whether the credentials required by auth_mode are present."""
        if self.auth_mode is AuthMode.TOKEN:
            return bool(self.token)
        return bool(self.role_id and self.secret_id)

    def summary(self) -> dict[str, str]:
        """Return the non-secret fields for display."""
        return {
            "Vault URL": self.url,
            "Namespace": self.namespace or "-",
            "Secrets Path": self.secrets_path,
            "Auth Method": self.auth_mode.value,
        }


class SecretRecord(NamedTuple):
    """A single SECRET_NAME,SECRET_KEY,SECRET_VALUE row."""

    secret_name: str
    key: str
    value: str


class ParseResult(NamedTuple):
    """Outcome of parsing a secrets CSV.

    Attributes:
        records: Rows that had all three fields.
        errors: One message per rejected line.

    """

    records: list[SecretRecord]
    errors: list[str]


class UploadStatus(str, Enum):
    """State of a single secret within an upload run."""

    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class UploadResult:
    """Outcome of writing one grouped secret.

    The audit fields stay None until the secret has been attempted.
    """

    secret_name: str
    status: UploadStatus = UploadStatus.PENDING
    message: str | None = None
    keys: tuple[str, ...] = ()
    full_path: str | None = None
    timestamp: str | None = None
    namespace: str | None = None
    backend_url: str | None = None
    base_path: str | None = None

    def settle(
        self,
        *,
        success: bool,
        message: str,
        config: "VaultConfig",
        timestamp: str,
    ) -> "UploadResult":
        """Return a copy marked as attempted, carrying audit metadata.

        Args:
            success: Whether Vault accepted the write.
            message: Success text or the error reported for the write.
            config: The frozen config the run was started with.
            timestamp: ISO-8601 time of the attempt.

        Returns:
            A new UploadResult in SUCCESS or ERROR state.

        """
        return replace(
            self,
            status=UploadStatus.SUCCESS if success else UploadStatus.ERROR,
            message=message,
            full_path=f"{config.secrets_path.rstrip('/')}/{self.secret_name}",
            timestamp=timestamp,
            namespace=config.namespace,
            backend_url=config.url,
            base_path=config.secrets_path,
        )

    def reset(self) -> "UploadResult":
        """Return a pending copy with message and audit data cleared."""
        return UploadResult(secret_name=self.secret_name, keys=self.keys)


class AuthResult(NamedTuple):
    """Result of a token or AppRole authentication attempt.

    Attributes:
        success: Whether a usable token was obtained.
        token: The token to use for subsequent requests.
        error: Reason for failure.
        status: HTTP status Vault answered with, None if no response arrived.

    """

    success: bool
    token: str | None = None
    error: str | None = None
    status: int | None = None


class WriteResult(NamedTuple):
    """Result of writing a single secret to Vault."""

    success: bool
    error: str | None = None
    status: int | None = None


class RunOutcome(str, Enum):
    """Aggregate classification of an upload run."""

    ALL_SUCCESS = "all-success"
    PARTIAL = "partial"
    ALL_FAILED = "all-failed"
    EMPTY = "empty"


@dataclass(frozen=True, slots=True)
class UploadSummary:
    """Counts over a set of upload results.

    Attributes:
        total: Number of distinct secrets in the run.
        succeeded: Secrets stored successfully.
        failed: Secrets Vault (or the network) rejected.
        pending: Secrets not attempted yet.
        cancelled: Whether the run was stopped before finishing.

    """

    total: int
    succeeded: int
    failed: int
    pending: int = 0
    cancelled: bool = False

    @classmethod
    def from_results(cls, results: "tuple[UploadResult, ...] | list[UploadResult]", *, cancelled: bool = False) -> "UploadSummary":
        """Build a summary by counting result states."""
        return cls(
            total=len(results),
            succeeded=sum(1 for r in results if r.status is UploadStatus.SUCCESS),
            failed=sum(1 for r in results if r.status is UploadStatus.ERROR),
            pending=sum(1 for r in results if r.status is UploadStatus.PENDING),
            cancelled=cancelled,
        )

    @property
    def outcome(self) -> RunOutcome:
        if self.succeeded == 0 and self.failed == 0:
            return RunOutcome.EMPTY
        if self.failed == 0:
            return RunOutcome.ALL_SUCCESS
        if self.succeeded == 0:
            return RunOutcome.ALL_FAILED
        return RunOutcome.PARTIAL

    @property
    def message(self) -> str:
        """Single aggregate line describing the run."""
        if self.outcome is RunOutcome.EMPTY:
            text = "No secrets were uploaded."
        elif self.failed == 0:
            text = f"All {self.succeeded} secrets uploaded successfully!"
        else:
            text = f"{self.failed} secrets failed to upload. {self.succeeded} succeeded."
        if self.cancelled:
            text += f" Upload cancelled with {self.pending} secrets not attempted."
        return text
