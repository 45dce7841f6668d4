"""Apply validator repair plans to a tickets directory."""

import logging
import os
from pathlib import Path

from pmboard.errors import RepairError
from pmboard.ids import parse_ticket_id
from pmboard.loader import ListingOrder, by_filename
from pmboard.models import Issue
from pmboard.parser import read_document, write_document
from pmboard.validate import validate_tickets

logger = logging.getLogger(__name__)


def _pending_path(target: Path) -> Path:
    # Hidden and not ending in .md, so scans never pick it up.
    return target.with_name(f".{target.name}.tmp")


def apply_issues(tickets_dir: str | Path, issues: list[Issue]) -> list[Issue]:
    """Rewrite and rename documents so each issue's fixed id and slug hold.

    Replacements are staged next to their targets, moved into place and
    checked before any original is removed. An interrupted run can leave an
    original beside its replacement, never neither of them.
    """
    tickets_dir = Path(tickets_dir)

    staged: list[tuple[Issue, Path, Path]] = []
    for issue in issues:
        source = tickets_dir / issue.file
        if not source.exists():
            logger.warning("skipping %s: file disappeared before repair", issue.file)
            continue
        meta, body = read_document(source)
        meta["id"] = issue.fixed_id
        target = tickets_dir / issue.fixed_file
        pending = _pending_path(target)
        write_document(pending, body, meta)
        staged.append((issue, source, target))

    for issue, _, target in staged:
        os.replace(_pending_path(target), target)
        meta, _ = read_document(target)
        if parse_ticket_id(meta.get("id")) != issue.fixed_id:
            raise RepairError(f"{target.name} does not carry id {issue.fixed_id} after repair")

    targets = {target.name for _, _, target in staged}
    for issue, source, target in staged:
        if source.name not in targets and source.exists():
            source.unlink()
        logger.info("repaired %s -> %s (id %d)", issue.file, issue.fixed_file, issue.fixed_id)

    return [issue for issue, _, _ in staged]


def fix_tickets(
    tickets_dir: str | Path,
    prefix: str | None = None,
    order: ListingOrder = by_filename,
) -> list[Issue]:
    """Validate tickets_dir and repair everything found. Returns the applied issues."""
    issues = validate_tickets(tickets_dir, prefix, order)
    if not issues:
        return []
    return apply_issues(tickets_dir, issues)
