"""Find tickets that break the naming invariant and plan their repair.

A ticket is well-formed when its id is positive, no other document in the
directory has the same id, and its filename stem equals the slug for that
id. Everything else becomes an Issue carrying the id and filename it should
have.
"""

from collections import Counter
from dataclasses import dataclass
from pathlib import Path

from pmboard.ids import parse_ticket_id, smallest_free_id, ticket_slug
from pmboard.loader import ListingOrder, by_filename, list_ticket_files
from pmboard.models import Issue
from pmboard.parser import read_document

DUPLICATE = "duplicate"
MISSING = "missing"
MISMATCH = "mismatch"


@dataclass
class _Entry:
    file: str
    stem: str
    id: int
    reason: str | None = None


def _read_entries(tickets_dir: Path, order: ListingOrder) -> list[_Entry]:
    entries = []
    for path in list_ticket_files(tickets_dir, order):
        meta, _ = read_document(path)
        entries.append(_Entry(file=path.name, stem=path.stem, id=parse_ticket_id(meta.get("id"))))
    return entries


def _classify(entries: list[_Entry], prefix: str | None) -> None:
    counts = Counter(e.id for e in entries if e.id > 0)
    for entry in entries:
        if entry.id <= 0:
            entry.reason = MISSING
        elif counts[entry.id] > 1:
            entry.reason = DUPLICATE
        elif entry.stem != ticket_slug(entry.id, prefix):
            entry.reason = MISMATCH


def _assign_ids(broken: list[_Entry], reserved: set[int], prefix: str | None) -> dict[int, int]:
    """Map index in broken → fixed id.

    First an entry keeps its own id if no good ticket holds it; for a
    duplicated id the holder already named after it wins, else the first in
    listing order. The rest get the smallest free ids, in listing order.
    """
    fixed: dict[int, int] = {}
    taken = set(reserved)

    holders: dict[int, list[int]] = {}
    for i, entry in enumerate(broken):
        if entry.id > 0 and entry.id not in reserved:
            holders.setdefault(entry.id, []).append(i)
    for ticket_id, indexes in holders.items():
        named = [i for i in indexes if broken[i].stem == ticket_slug(ticket_id, prefix)]
        keeper = named[0] if named else indexes[0]
        fixed[keeper] = ticket_id
        taken.add(ticket_id)

    for i in range(len(broken)):
        if i in fixed:
            continue
        new_id = smallest_free_id(taken)
        fixed[i] = new_id
        taken.add(new_id)

    return fixed


def validate_tickets(
    tickets_dir: str | Path,
    prefix: str | None = None,
    order: ListingOrder = by_filename,
) -> list[Issue]:
    """Return an Issue for every ticket that is not well-formed, in listing order."""
    entries = _read_entries(Path(tickets_dir), order)
    _classify(entries, prefix)

    reserved = {e.id for e in entries if e.reason is None}
    broken = [e for e in entries if e.reason is not None]
    fixed = _assign_ids(broken, reserved, prefix)

    return [
        Issue(
            file=entry.file,
            current_id=entry.id,
            current_slug=entry.stem,
            fixed_id=fixed[i],
            fixed_slug=ticket_slug(fixed[i], prefix),
            reason=entry.reason,
        )
        for i, entry in enumerate(broken)
    ]
