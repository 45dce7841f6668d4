"""Data models for pmboard ticket directories."""

from dataclasses import dataclass, field
from pathlib import PurePosixPath

from pmboard.ids import DOCUMENT_SUFFIX, ticket_slug

PRIORITIES = ("critical", "high", "medium", "low")
DEFAULT_PRIORITY = "medium"
DEFAULT_STATUS = "backlog"


@dataclass
class Ticket:
    """One ticket document in a tickets directory."""

    id: int = 0
    title: str = ""
    status: str = DEFAULT_STATUS
    priority: str = DEFAULT_PRIORITY
    tags: list[str] = field(default_factory=list)
    body: str = ""
    file: str = ""  # filename inside the directory, e.g. "PROJ-3.md"
    dir: str = "tickets"  # directory as addressed by clients
    prefix: str | None = None

    @property
    def stem(self) -> str:
        return PurePosixPath(self.file).stem

    @property
    def slug(self) -> str:
        return ticket_slug(self.id, self.prefix)

    @property
    def url(self) -> str:
        directory = self.dir.strip("/")
        return f"/{directory}/{self.stem}.html" if directory else f"/{self.stem}.html"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "priority": self.priority,
            "tags": list(self.tags),
            "body": self.body,
            "url": self.url,
        }


@dataclass
class Issue:
    """A ticket that breaks the naming invariant, and how to fix it."""

    file: str
    current_id: int
    current_slug: str
    fixed_id: int
    fixed_slug: str
    reason: str  # "duplicate", "missing" or "mismatch"

    @property
    def fixed_file(self) -> str:
        return self.fixed_slug + DOCUMENT_SUFFIX

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "currentId": self.current_id,
            "currentSlug": self.current_slug,
            "fixedId": self.fixed_id,
            "fixedSlug": self.fixed_slug,
            "reason": self.reason,
        }


@dataclass
class Column:
    """A board column."""

    key: str
    label: str
    color: str = ""

    def to_dict(self) -> dict:
        return {"key": self.key, "label": self.label, "color": self.color}


@dataclass
class BoardConfig:
    """Per-board settings read from a board document's front-matter."""

    columns: list[Column] = field(default_factory=list)
    tickets_dir: str = "tickets"
    ticket_prefix: str | None = None
    default_status: str = DEFAULT_STATUS
