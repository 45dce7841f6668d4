"""Scan a tickets directory into Ticket records."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

from pmboard.ids import DOCUMENT_SUFFIX, parse_ticket_id
from pmboard.models import DEFAULT_PRIORITY, DEFAULT_STATUS, PRIORITIES, Ticket
from pmboard.parser import read_document

ListingOrder = Callable[[Path], Any]


def by_filename(path: Path) -> str:
    """Default listing order: lexicographic by filename."""
    return path.name


def list_ticket_files(tickets_dir: str | Path, order: ListingOrder = by_filename) -> list[Path]:
    """List ticket documents directly inside tickets_dir, in listing order.

    A missing directory has no tickets.
    """
    tickets_dir = Path(tickets_dir)
    if not tickets_dir.is_dir():
        return []
    files = [p for p in tickets_dir.iterdir() if p.suffix == DOCUMENT_SUFFIX and p.is_file()]
    return sorted(files, key=order)


def _coerce_tags(value) -> list[str]:
    """Tags as a list of unique strings, first occurrence wins."""
    if not isinstance(value, list):
        return []
    tags: list[str] = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        tag = str(item)
        if tag not in tags:
            tags.append(tag)
    return tags


def _coerce_text(value, default: str) -> str:
    if value is None or isinstance(value, (dict, list, bool)):
        return default
    text = str(value)
    return text if text.strip() else default


def ticket_from_document(
    path: Path,
    meta: dict,
    body: str,
    url_dir: str = "tickets",
    prefix: str | None = None,
    default_status: str = DEFAULT_STATUS,
) -> Ticket:
    """Build a Ticket from decoded document parts, filling defaults."""
    priority = meta.get("priority")
    return Ticket(
        id=parse_ticket_id(meta.get("id")),
        title=_coerce_text(meta.get("title"), path.stem),
        status=_coerce_text(meta.get("status"), default_status),
        priority=priority if priority in PRIORITIES else DEFAULT_PRIORITY,
        tags=_coerce_tags(meta.get("tags")),
        body=body.strip(),
        file=path.name,
        dir=url_dir,
        prefix=prefix,
    )


def scan_tickets(
    tickets_dir: str | Path,
    url_dir: str = "tickets",
    prefix: str | None = None,
    default_status: str = DEFAULT_STATUS,
    order: ListingOrder = by_filename,
) -> list[Ticket]:
    """Decode every ticket document in tickets_dir."""
    tickets = []
    for path in list_ticket_files(tickets_dir, order):
        meta, body = read_document(path)
        tickets.append(ticket_from_document(path, meta, body, url_dir, prefix, default_status))
    return tickets


def max_ticket_id(tickets_dir: str | Path) -> int:
    """Highest ticket ID on disk, or 0 for an empty or missing directory."""
    highest = 0
    for path in list_ticket_files(tickets_dir):
        meta, _ = read_document(path)
        highest = max(highest, parse_ticket_id(meta.get("id")))
    return highest
