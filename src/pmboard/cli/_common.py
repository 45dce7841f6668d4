"""Shared helpers for CLI command handlers."""

import json
import sys
from pathlib import Path

from pmboard.service import TicketService


def make_service(root: str) -> TicketService:
    """Ticket service for the site root, configured from its board document."""
    return TicketService(Path(root).resolve())


def output_json(data: dict | list) -> None:
    """Write JSON to stdout."""
    print(json.dumps(data, indent=2))


def output_result(data: dict | list, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)


def split_tags(raw: str | None) -> list[str]:
    """Split a comma-separated --tags value, dropping blanks."""
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


def format_issue_line(issue: dict) -> str:
    return f"  {issue['file']:<20} {issue['reason']:<10} -> {issue['fixedSlug']}.md (id {issue['fixedId']})"
