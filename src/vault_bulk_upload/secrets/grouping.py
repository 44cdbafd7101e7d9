"""Grouping of parsed records into Vault secrets."""

from collections.abc import Iterable

from vault_bulk_upload.models import SecretRecord


def group_secrets(records: Iterable[SecretRecord]) -> dict[str, dict[str, str]]:
    """Fold records into secret name -> {key: value}.

    Secret names keep the order they were first seen in. A repeated key
    within a secret takes the value of its last occurrence.

    Args:
        records: Parsed CSV records.

    Returns:
        A new mapping; the input is never modified.

    """
    grouped: dict[str, dict[str, str]] = {}
    for record in records:
        grouped.setdefault(record.secret_name, {})[record.key] = record.value
    return grouped


def secret_names(records: Iterable[SecretRecord]) -> list[str]:
    """Return the distinct secret names in first-seen order."""
    return list(dict.fromkeys(record.secret_name for record in records))
