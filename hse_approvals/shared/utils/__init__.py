"""Shared utilities: timestamp parsing and display-name helpers."""

from hse_approvals.shared.utils.datetime import parse_store_timestamp
from hse_approvals.shared.utils.text import humanize_identifier, name_from_email

__all__ = [
    "humanize_identifier",
    "name_from_email",
    "parse_store_timestamp",
]
