"""Sequential upload of grouped secrets to Vault.

SecretUploader owns the per-secret results for one set of records. Secrets
are written one at a time in first-seen order; after each write the full
results list is rebuilt and handed to the progress callback as a snapshot.
"""

import threading
import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from icecream import ic

from vault_bulk_upload.core.gateway import VaultGateway
from vault_bulk_upload.models import SecretRecord, UploadResult, UploadSummary, VaultConfig
from vault_bulk_upload.secrets.grouping import group_secrets

DEFAULT_DELAY = 0.2
SUCCESS_MESSAGE = "Successfully stored"

ProgressCallback = Callable[[tuple[UploadResult, ...], float], None]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SecretUploader:
    """Drives a VaultGateway over every grouped secret.

    Attributes:
        gateway: Gateway used for the writes.
        config: Frozen config snapshot the run uses.
        delay: Pause in seconds after each secret settles.
        cancelled: Whether the last upload pass was cancelled.

    """

    def __init__(
        self,
        gateway: VaultGateway,
        config: VaultConfig,
        records: Sequence[SecretRecord],
        *,
        delay: float = DEFAULT_DELAY,
    ) -> None:
        self.gateway = gateway
        self.config = config
        self.delay = delay
        self.cancelled = False
        self._grouped = group_secrets(records)
        self._results: tuple[UploadResult, ...] = tuple(
            UploadResult(secret_name=name, keys=tuple(data)) for name, data in self._grouped.items()
        )
        self._progress: float = 0.0

    def __repr__(self) -> str:
        return f"SecretUploader(secrets={len(self._results)}, progress={self._progress:.0f})"

    @property
    def grouped(self) -> dict[str, dict[str, str]]:
        """A copy of the grouped secret data."""
        return {name: dict(data) for name, data in self._grouped.items()}

    @property
    def results(self) -> tuple[UploadResult, ...]:
        return self._results

    @property
    def progress(self) -> float:
        """Percentage of secrets settled in the current pass."""
        return self._progress

    def _write(self, secret_name: str) -> tuple[bool, str]:
        config = self.config
        try:
            result = self.gateway.write_secret(
                config.url,
                config.token,
                config.secrets_path,
                secret_name,
                self._grouped[secret_name],
                namespace=config.namespace or None,
            )
        except Exception as err:  # noqa: BLE001
            return False, str(err)

        if result.success:
            return True, SUCCESS_MESSAGE
        return False, result.error or "Failed to store secret"

    def _settle(self, secret_name: str, success: bool, message: str) -> None:
        timestamp = _now()
        self._results = tuple(
            r.settle(success=success, message=message, config=self.config, timestamp=timestamp)
            if r.secret_name == secret_name
            else r
            for r in self._results
        )

    def upload(
        self,
        on_progress: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> UploadSummary:
        """Write every secret to Vault, one at a time.

        A failed write is recorded against its secret and the loop moves on.
        If cancel is set, the remaining secrets stay pending.

        Args:
            on_progress: Called after each secret with the results snapshot
                and the progress percentage.
            cancel: Event checked before each secret is written.

        Returns:
            Summary of the pass.

        """
        self.reset()
        names = list(self._grouped)
        total = len(names)

        for completed, name in enumerate(names, start=1):
            if cancel is not None and cancel.is_set():
                ic("upload cancelled", name)
                self.cancelled = True
                break

            success, message = self._write(name)
            ic(name, success)
            self._settle(name, success, message)
            self._progress = completed / total * 100

            if on_progress is not None:
                on_progress(self._results, self._progress)

            if self.delay and completed < total:
                time.sleep(self.delay)

        return self.summary()

    def reset(self) -> None:
        """Return every result to pending and progress to zero.

        The grouped secret data is left untouched.
        """
        self._results = tuple(r.reset() for r in self._results)
        self._progress = 0.0
        self.cancelled = False

    def summary(self) -> UploadSummary:
        return UploadSummary.from_results(self._results, cancelled=self.cancelled)
