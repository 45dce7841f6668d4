"""Build-time JSON snapshots of every tickets directory a board page uses."""

import json
import logging
import os
import re
from pathlib import Path, PurePosixPath

from pmboard.config import board_config_from_meta, is_board
from pmboard.errors import PmboardError
from pmboard.ids import DOCUMENT_SUFFIX
from pmboard.loader import scan_tickets
from pmboard.parser import read_document

logger = logging.getLogger(__name__)

SKIP_DIRS = {"node_modules"}


def snapshot_name(tickets_dir: str) -> str:
    """Deterministic snapshot filename for a tickets directory.

    "tickets" → "tickets-tickets.json", "work/bugs" → "tickets-work-bugs.json"
    """
    slug = re.sub(r"[^A-Za-z0-9]+", "-", tickets_dir).strip("-")
    return f"tickets-{slug or 'root'}.json"


def find_board_documents(root: str | Path) -> list[Path]:
    """Board-flagged documents anywhere under root, in sorted walk order.

    Hidden directories and node_modules are skipped.
    """
    root = Path(root)
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith(".") and d not in SKIP_DIRS)
        for filename in sorted(filenames):
            if not filename.endswith(DOCUMENT_SUFFIX):
                continue
            path = Path(dirpath) / filename
            meta, _ = read_document(path)
            if is_board(meta):
                found.append(path)
    return found


def _normalize_dir(tickets_dir: str) -> str:
    """Canonical form of a ticketsDir setting.

    "./tickets/" → "tickets", "a//b" → "a/b", "/" → ""
    """
    url_dir = PurePosixPath(tickets_dir.strip("/")).as_posix()
    return "" if url_dir == "." else url_dir


def export_snapshots(root: str | Path, out_dir: str | Path) -> list[Path]:
    """Write one snapshot per distinct tickets directory referenced by a board.

    The first board document naming a directory decides its prefix and
    default status. A directory that doesn't exist yet exports as [].
    Raises PmboardError if a board's ticketsDir escapes root, or if two
    different directories would share a snapshot filename.
    """
    root = Path(root).resolve()
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    seen: set[Path] = set()
    names: dict[str, str] = {}
    for board_path in find_board_documents(root):
        meta, _ = read_document(board_path)
        config = board_config_from_meta(meta)
        url_dir = _normalize_dir(config.tickets_dir)
        tickets_path = (root / url_dir).resolve()
        if tickets_path != root and root not in tickets_path.parents:
            raise PmboardError(f"{board_path.relative_to(root).as_posix()}: ticketsDir escapes site root: {url_dir}")
        if tickets_path in seen:
            continue
        seen.add(tickets_path)

        name = snapshot_name(url_dir)
        if name in names:
            raise PmboardError(f"{url_dir} and {names[name]} would both export to {name}")
        names[name] = url_dir

        tickets = scan_tickets(tickets_path, url_dir, config.ticket_prefix, config.default_status)
        out_path = out_dir / name
        out_path.write_text(json.dumps([t.to_dict() for t in tickets], indent=2), encoding="utf-8")
        logger.info("exported %d tickets from %s to %s", len(tickets), url_dir or ".", out_path)
        written.append(out_path)

    return written
