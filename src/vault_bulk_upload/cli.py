#!/usr/bin/env python
"""Command-line interface for vault-bulk-upload.

This module provides the main CLI entry point. It walks through the wizard
steps (configuration, authentication, secrets file, upload) or, with
--serve, runs the HTTP proxy used by the browser front end.
"""

import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import click
from icecream import ic

from vault_bulk_upload import __version__, console
from vault_bulk_upload.core.gateway import DEFAULT_TIMEOUT, VaultGateway
from vault_bulk_upload.core.session import WizardSession
from vault_bulk_upload.core.uploader import DEFAULT_DELAY, SecretUploader
from vault_bulk_upload.exceptions import AuthenticationError, ConfigurationError, SecretFileError
from vault_bulk_upload.models import (
    AuthMode,
    SecretRecord,
    UploadResult,
    UploadStatus,
    UploadSummary,
    VaultConfig,
)
from vault_bulk_upload.profile import load_profile
from vault_bulk_upload.secrets.parsing import read_secrets_file, write_sample
from vault_bulk_upload.secrets.prompts import (
    confirm_retry,
    confirm_upload,
    prompt_configuration,
    prompt_credentials,
    prompt_secrets_file,
)
from vault_bulk_upload.secrets.reporting import write_report
from vault_bulk_upload.server import DEFAULT_HOST, DEFAULT_PORT, run_server


def configure(session: WizardSession) -> VaultConfig:
    """Complete and validate the connection settings.

    Prompts for the settings unless both URL and secrets path were given.

    Args:
        session: Session holding the settings collected so far.

    Returns:
        The validated config.

    Raises:
        click.ClickException: If a supplied setting is invalid.

    """
    config = session.config
    if not config.url or not config.secrets_path:
        config = prompt_configuration(config)
        session.update(
            url=config.url,
            namespace=config.namespace,
            secrets_path=config.secrets_path,
            auth_mode=config.auth_mode,
        )

    try:
        config = session.validate()
    except ConfigurationError as e:
        raise click.ClickException(f"Invalid {e.field}: {e}") from None

    console.summary_panel("Vault Configuration", config.summary(), border_style="cyan")
    return config


def authenticate(session: WizardSession, gateway: VaultGateway, *, interactive: bool) -> VaultConfig:
    """Authenticate the session, prompting for credentials when missing.

    Args:
        session: Session with validated connection settings.
        gateway: Gateway used to reach Vault.
        interactive: Whether a failed attempt may be retried.

    Returns:
        The authenticated config.

    Raises:
        click.ClickException: If authentication fails and is not retried.

    """
    while True:
        if not session.config.credentials_ready():
            credentials = prompt_credentials(session.config)
            session.update(token=credentials.token, role_id=credentials.role_id, secret_id=credentials.secret_id)

        try:
            with console.spinner(f"Authenticating with {session.config.auth_mode.value}..."):
                config = session.authenticate(gateway)
        except (AuthenticationError, ConfigurationError) as e:
            console.error(f"Authentication failed: {e}")
            if not interactive or not confirm_retry("Try again with different credentials?"):
                raise click.ClickException("Authentication failed") from None
            session.update(token="", secret_id="")
            continue

        console.success("Authentication successful!")
        return config


def load_secrets(file: str | None) -> list[SecretRecord]:
    """Read and parse the secrets CSV, reporting rejected lines.

    Args:
        file: Path to the CSV, or None to prompt for it.

    Returns:
        The parsed records.

    Raises:
        click.ClickException: If the file is unusable or has no valid rows.

    """
    path = file or prompt_secrets_file()
    console.step(f"Reading {console.highlight(str(path))}")
    try:
        parsed = read_secrets_file(path)
    except SecretFileError as e:
        raise click.ClickException(str(e)) from None

    for line_error in parsed.errors:
        console.warning(line_error)

    if parsed.errors:
        console.error(f"Found {len(parsed.errors)} validation errors")
    if not parsed.records:
        raise click.ClickException(f"No secrets found in '{path}'")
    if not parsed.errors:
        console.success(f"Successfully parsed {len(parsed.records)} secrets")
    return parsed.records


def _run_pass(uploader: SecretUploader) -> UploadSummary:
    """Run one upload pass with a progress bar; Ctrl-C cancels after the current secret."""
    cancel = threading.Event()
    total = len(uploader.results)

    with console.create_upload_progress() as progress, ThreadPoolExecutor(max_workers=1) as executor:
        task = progress.add_task("Uploading secrets", total=total)

        def on_progress(results: tuple[UploadResult, ...], percent: float) -> None:
            settled = [r for r in results if r.status is not UploadStatus.PENDING]
            progress.update(task, completed=len(settled), description=f"Uploaded {settled[-1].secret_name}")

        future = executor.submit(uploader.upload, on_progress, cancel)
        while True:
            try:
                return future.result()
            except KeyboardInterrupt:
                if cancel.is_set():
                    raise
                console.warning("Cancelling after the current secret...")
                cancel.set()


def upload_secrets(
    gateway: VaultGateway,
    config: VaultConfig,
    records: list[SecretRecord],
    *,
    delay: float,
    report_dir: Path,
    interactive: bool,
) -> UploadSummary:
    """Upload grouped secrets, show the results and write the report.

    Args:
        gateway: Gateway used for the writes.
        config: Frozen, authenticated config.
        records: Parsed CSV records.
        delay: Pause between secrets in seconds.
        report_dir: Directory the report is written to.
        interactive: Whether to ask for confirmation and offer a retry.

    Returns:
        Summary of the final upload pass.

    """
    uploader = SecretUploader(gateway, config, records, delay=delay)
    ic(uploader)
    console.secrets_preview(uploader.grouped)

    if interactive and not confirm_upload(len(uploader.results)):
        console.warning("Upload aborted")
        return uploader.summary()

    console.action(f"Uploading {len(uploader.results)} unique secrets to {console.highlight(config.url)}")

    while True:
        summary = _run_pass(uploader)

        console.newline()
        console.results_table(uploader.results)
        if summary.failed or summary.cancelled:
            console.error(summary.message)
        else:
            console.success(summary.message)
        write_report(uploader.results, report_dir)

        if summary.failed and interactive and confirm_retry("Reset and upload all secrets again?"):
            uploader.reset()
            continue
        return summary


@click.command(help="Upload secrets from a CSV file to HashiCorp Vault")
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.option("--url", envvar="VAULT_ADDR", required=False, help="Vault server URL")
@click.option("--namespace", envvar="VAULT_NAMESPACE", required=False, help="Vault namespace")
@click.option("--path", "secrets_path", envvar="VAULT_SECRETS_PATH", required=False, help="base path for secrets")
@click.option(
    "--auth-method",
    type=click.Choice([m.value for m in AuthMode]),
    required=False,
    help="authentication method",
)
@click.option("--token", envvar="VAULT_TOKEN", required=False, help="Vault token")
@click.option("--role-id", envvar="VAULT_ROLE_ID", required=False, help="AppRole role ID")
@click.option("--secret-id", envvar="VAULT_SECRET_ID", required=False, help="AppRole secret ID")
@click.option("--config", "profile", type=click.Path(dir_okay=False), help="YAML profile with connection defaults")
@click.option("--file", "-f", required=False, help="CSV file with secrets")
@click.option("--sample", required=False, is_flag=True, help="write a sample CSV file and exit")
@click.option(
    "--report-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="directory for the upload report",
)
@click.option("--yes", "-y", required=False, is_flag=True, help="do not ask for confirmation")
@click.option("--delay", type=float, default=DEFAULT_DELAY, show_default=True, help="seconds between secrets")
@click.option("--timeout", type=float, default=DEFAULT_TIMEOUT, show_default=True, help="Vault request timeout")
@click.option("--serve", required=False, is_flag=True, help="run the HTTP proxy for the web front end")
@click.option("--host", default=DEFAULT_HOST, show_default=True, help="proxy bind address")
@click.option("--port", type=int, default=DEFAULT_PORT, show_default=True, help="proxy port")
def cli(
    version: bool,
    debug: bool,
    url: str | None,
    namespace: str | None,
    secrets_path: str | None,
    auth_method: str | None,
    token: str | None,
    role_id: str | None,
    secret_id: str | None,
    profile: str | None,
    file: str | None,
    sample: bool,
    report_dir: Path,
    yes: bool,
    delay: float,
    timeout: float,
    serve: bool,
    host: str,
    port: int,
) -> None:
    """Process CLI arguments and run the upload wizard.

    Exits with status 1 when configuration or authentication fails, or when
    any secret could not be stored.
    """
    if not debug:
        ic.disable()

    if version:
        click.echo(__version__)
        return

    if sample:
        write_sample()
        return

    if serve:
        run_server(host=host, port=port)
        return

    try:
        base = load_profile(profile) if profile else VaultConfig()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from None

    overrides = {
        "url": url,
        "namespace": namespace,
        "secrets_path": secrets_path,
        "auth_mode": AuthMode(auth_method) if auth_method else None,
        "token": token,
        "role_id": role_id,
        "secret_id": secret_id,
    }
    session = WizardSession(base.with_changes(**{k: v for k, v in overrides.items() if v}))

    try:
        with VaultGateway(timeout=timeout) as gateway:
            configure(session)
            authenticate(session, gateway, interactive=not yes)
            records = load_secrets(file)
            summary = upload_secrets(
                gateway,
                session.freeze(),
                records,
                delay=delay,
                report_dir=report_dir,
                interactive=not yes,
            )
    except KeyboardInterrupt:
        console.newline()
        console.error("Interrupted")
        sys.exit(130)

    if summary.failed or summary.cancelled:
        sys.exit(1)


if __name__ == "__main__":
    cli()
