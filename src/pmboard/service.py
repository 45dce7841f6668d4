"""Ticket store operations behind the dev server, CLI and exporter."""

import logging
from pathlib import Path, PurePosixPath

from pmboard.allocator import IdAllocator
from pmboard.config import find_board_config
from pmboard.errors import BadRequest, NotFound
from pmboard.ids import DOCUMENT_SUFFIX, ticket_filename
from pmboard.loader import ListingOrder, by_filename, scan_tickets
from pmboard.models import DEFAULT_PRIORITY, PRIORITIES, BoardConfig, Issue, Ticket
from pmboard.parser import read_document, wrap_body, write_document
from pmboard.repair import fix_tickets
from pmboard.validate import validate_tickets

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New ticket"


class TicketService:
    """Create, list, update, validate and fix tickets under a site root.

    Directories and URLs are given relative to root and may not escape it.
    The allocator is owned here rather than shared globally; pass one in to
    share a high-water mark between services.
    """

    def __init__(
        self,
        root: str | Path,
        config: BoardConfig | None = None,
        allocator: IdAllocator | None = None,
        order: ListingOrder = by_filename,
    ):
        self.root = Path(root).resolve()
        self.config = config if config is not None else find_board_config(self.root)
        self.allocator = allocator if allocator is not None else IdAllocator()
        self.order = order

    def _inside_root(self, relative: str) -> Path:
        path = (self.root / relative).resolve()
        if path != self.root and self.root not in path.parents:
            raise BadRequest(f"Path escapes site root: {relative}")
        return path

    def resolve_dir(self, directory: str | None) -> tuple[str, Path]:
        """Return (url_dir, absolute path) for a tickets directory."""
        if directory is None or directory == "":
            directory = self.config.tickets_dir
        if not isinstance(directory, str):
            raise BadRequest("dir must be a string")
        url_dir = directory.strip("/")
        return url_dir, self._inside_root(url_dir)

    def resolve_prefix(self, prefix: str | None) -> str | None:
        """An explicit prefix wins; None falls back to the board's ticketPrefix."""
        if prefix is None:
            return self.config.ticket_prefix
        if not isinstance(prefix, str):
            raise BadRequest("prefix must be a string")
        return prefix.strip() or None

    def list_tickets(self, directory: str | None = None, prefix: str | None = None) -> list[Ticket]:
        url_dir, path = self.resolve_dir(directory)
        tickets = scan_tickets(path, url_dir, self.resolve_prefix(prefix), self.config.default_status, self.order)
        if path.is_dir():
            self.allocator.observe(path, max((t.id for t in tickets), default=0))
        return tickets

    def create_ticket(self, fields: dict, directory: str | None = None, prefix: str | None = None) -> Ticket:
        """Write a new well-formed ticket under the next free ID."""
        if not isinstance(fields, dict):
            raise BadRequest("ticket fields must be an object")
        title = _optional_string(fields, "title") or DEFAULT_TITLE
        status = _optional_string(fields, "status") or self.config.default_status
        priority = _optional_string(fields, "priority") or DEFAULT_PRIORITY
        if priority not in PRIORITIES:
            raise BadRequest(f"priority must be one of {', '.join(PRIORITIES)}")
        tags = _optional_tags(fields)
        body = _optional_string(fields, "body") or ""

        url_dir, path = self.resolve_dir(directory)
        prefix = self.resolve_prefix(prefix)
        path.mkdir(parents=True, exist_ok=True)

        ticket_id = self.allocator.allocate(path)
        while (path / ticket_filename(ticket_id, prefix)).exists():
            logger.warning("%s already exists, skipping id %d", ticket_filename(ticket_id, prefix), ticket_id)
            ticket_id = self.allocator.allocate(path)

        meta = {
            "id": ticket_id,
            "title": title,
            "status": status,
            "priority": priority,
            "tags": tags,
        }
        filename = ticket_filename(ticket_id, prefix)
        write_document(path / filename, wrap_body(body), meta)
        logger.info("created %s/%s: %s", url_dir, filename, title)

        return Ticket(
            id=ticket_id,
            title=title,
            status=status,
            priority=priority,
            tags=tags,
            body=body,
            file=filename,
            dir=url_dir,
            prefix=prefix,
        )

    def resolve_url(self, url) -> Path:
        """Map a rendered page URL like /tickets/1.html to its document."""
        if not isinstance(url, str) or not url.strip("/ "):
            raise BadRequest("Missing url")
        relative = url.strip().lstrip("/")
        if relative.endswith(".html"):
            relative = relative[: -len(".html")] + DOCUMENT_SUFFIX
        if PurePosixPath(relative).suffix != DOCUMENT_SUFFIX:
            raise BadRequest(f"Not a ticket url: {url}")
        return self._inside_root(relative)

    def update_ticket(self, url, updates: dict | None) -> None:
        """Merge updates into a ticket's front-matter in place.

        The "body" key replaces the document body instead.
        """
        path = self.resolve_url(url)
        if updates is None:
            updates = {}
        if not isinstance(updates, dict):
            raise BadRequest("updates must be an object")
        if not path.is_file():
            raise NotFound(f"File not found: {path.relative_to(self.root).as_posix()}")

        meta, body = read_document(path)
        for key, value in updates.items():
            if key == "body":
                body = wrap_body(str(value))
            else:
                meta[key] = value
        write_document(path, body, meta)
        logger.info("updated %s", path.relative_to(self.root).as_posix())

    def validate(self, directory: str | None = None, prefix: str | None = None) -> list[Issue]:
        _, path = self.resolve_dir(directory)
        return validate_tickets(path, self.resolve_prefix(prefix), self.order)

    def fix(self, directory: str | None = None, prefix: str | None = None) -> list[Issue]:
        _, path = self.resolve_dir(directory)
        return fix_tickets(path, self.resolve_prefix(prefix), self.order)


def _optional_string(fields: dict, key: str) -> str | None:
    value = fields.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise BadRequest(f"{key} must be a string")
    return value


def _optional_tags(fields: dict) -> list[str]:
    value = fields.get("tags")
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
        raise BadRequest("tags must be a list of strings")
    tags: list[str] = []
    for tag in value:
        if tag not in tags:
            tags.append(tag)
    return tags
