"""Board configuration read from a board document's front-matter."""

from pathlib import Path
from typing import Any

from pmboard.models import DEFAULT_STATUS, BoardConfig, Column
from pmboard.parser import read_document

BOARD_FILENAMES = ("board.md", "index.md")

BOARD_DEFAULTS: dict[str, Any] = {
    "ticketsDir": "tickets",
    "ticketPrefix": None,
    "defaultStatus": DEFAULT_STATUS,
}

DEFAULT_COLUMNS = (
    Column("backlog", "Backlog", "#6b7280"),
    Column("todo", "To Do", "#3b82f6"),
    Column("in-progress", "In Progress", "#f59e0b"),
    Column("done", "Done", "#10b981"),
)


def is_board(meta: dict) -> bool:
    """Whether a document's front-matter marks it as a board page."""
    return bool(meta.get("board"))


def _coerce_string(key: str, raw) -> str | None:
    """Type-coerce a scalar setting, falling back to its default."""
    if raw is None or isinstance(raw, (dict, list, bool)):
        return BOARD_DEFAULTS[key]
    value = str(raw).strip()
    return value or BOARD_DEFAULTS[key]


def _label_for(key: str) -> str:
    label = key.replace("-", " ").replace("_", " ")
    return label[0].upper() + label[1:] if label else ""


def _coerce_columns(raw) -> list[Column]:
    if not isinstance(raw, list):
        return list(DEFAULT_COLUMNS)
    columns = []
    for item in raw:
        if isinstance(item, str):
            item = {"key": item}
        if not isinstance(item, dict) or not item.get("key"):
            continue
        key = str(item["key"])
        columns.append(Column(key=key, label=str(item.get("label") or _label_for(key)), color=str(item.get("color") or "")))
    return columns or list(DEFAULT_COLUMNS)


def board_config_from_meta(meta: dict) -> BoardConfig:
    """Build a BoardConfig from front-matter, defaulting anything missing or invalid."""
    return BoardConfig(
        columns=_coerce_columns(meta.get("columns")),
        tickets_dir=_coerce_string("ticketsDir", meta.get("ticketsDir")),
        ticket_prefix=_coerce_string("ticketPrefix", meta.get("ticketPrefix")),
        default_status=_coerce_string("defaultStatus", meta.get("defaultStatus")),
    )


def load_board_config(path: str | Path) -> BoardConfig:
    """Load config from a board document. A missing document gives the defaults."""
    path = Path(path)
    if not path.is_file():
        return board_config_from_meta({})
    meta, _ = read_document(path)
    return board_config_from_meta(meta)


def find_board_config(root: str | Path) -> BoardConfig:
    """Config for the board at root.

    board.md is used whenever it exists; index.md only when it carries the
    board flag.
    """
    root = Path(root)
    for name in BOARD_FILENAMES:
        path = root / name
        if not path.is_file():
            continue
        meta, _ = read_document(path)
        if name == "board.md" or is_board(meta):
            return board_config_from_meta(meta)
    return board_config_from_meta({})
