"""Secrets file subpackage.

This package contains modules for parsing the secrets CSV, grouping rows
into secrets, writing the upload report and the wizard prompts.
"""

from vault_bulk_upload.secrets.grouping import group_secrets, secret_names
from vault_bulk_upload.secrets.parsing import parse_secrets_csv, read_secrets_file, write_sample
from vault_bulk_upload.secrets.prompts import prompt_configuration, prompt_credentials, prompt_secrets_file
from vault_bulk_upload.secrets.reporting import build_report, report_filename, write_report

__all__ = [
    # grouping
    "group_secrets",
    "secret_names",
    # parsing
    "parse_secrets_csv",
    "read_secrets_file",
    "write_sample",
    # prompts
    "prompt_configuration",
    "prompt_credentials",
    "prompt_secrets_file",
    # reporting
    "build_report",
    "report_filename",
    "write_report",
]
