"""Upload report generation.

The report is a CSV with every field double-quoted, one row per secret,
named after the date of the run.
"""

from collections.abc import Sequence
from datetime import date
from itertools import count
from pathlib import Path

from icecream import ic

from vault_bulk_upload import console
from vault_bulk_upload.models import UploadResult

REPORT_COLUMNS = (
    "Full Path",
    "Secret Name",
    "Keys",
    "Namespace",
    "Vault URL",
    "Base Path",
    "Timestamp",
    "Status",
    "Message",
)


def _quote(value: str | None) -> str:
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def _report_row(result: UploadResult) -> list[str | None]:
    return [
        result.full_path,
        result.secret_name,
        ", ".join(result.keys),
        result.namespace,
        result.backend_url,
        result.base_path,
        result.timestamp,
        result.status.value,
        result.message,
    ]


def build_report(results: Sequence[UploadResult]) -> str:
    """Render upload results as CSV text.

    Args:
        results: Results in upload order.

    Returns:
        The CSV document, header row first.

    """
    lines = [",".join(_quote(column) for column in REPORT_COLUMNS)]
    lines.extend(",".join(_quote(value) for value in _report_row(result)) for result in results)
    return "\n".join(lines)


def report_filename(run_date: date | None = None) -> str:
    """Return the report file name for the given run date (default: today)."""
    run_date = run_date or date.today()
    return f"vault-upload-report-{run_date.isoformat()}.csv"


def write_report(
    results: Sequence[UploadResult],
    directory: str | Path = ".",
    run_date: date | None = None,
) -> Path:
    """Write the upload report to a file.

    An existing report for the same date is never overwritten; later runs
    get a numbered suffix (``vault-upload-report-<date>-2.csv`` and so on).

    Args:
        results: Results in upload order.
        directory: Directory the report is written into.
        run_date: Date used for the file name.

    Returns:
        Path of the written report.

    """
    stem = Path(report_filename(run_date)).stem
    content = build_report(results) + "\n"
    for attempt in count(1):
        name = f"{stem}.csv" if attempt == 1 else f"{stem}-{attempt}.csv"
        output = Path(directory) / name
        try:
            with output.open("x", encoding="utf-8") as stream:
                stream.write(content)
        except FileExistsError:
            continue
        ic(output)
        console.success(f"Report saved to {console.highlight(str(output))}")
        return output
