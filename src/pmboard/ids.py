"""Ticket ID parsing and slug generation."""

DOCUMENT_SUFFIX = ".md"


def parse_ticket_id(value) -> int:
    """Coerce a front-matter id value to a ticket ID, 0 if unusable.

    5 → 5, "007" → 7, 3.0 → 3, "fish" → 0, "²" → 0, -2 → 0, True → 0, None → 0
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, float):
        if not value.is_integer():
            return 0
        value = int(value)
    if isinstance(value, str):
        value = value.strip()
        if not value.isdecimal():
            return 0
        value = int(value)
    if not isinstance(value, int):
        return 0
    return value if value > 0 else 0


def ticket_slug(ticket_id: int, prefix: str | None = None) -> str:
    """Canonical filename stem for a ticket ID.

    7 → "7", 7 with prefix "PROJ" → "PROJ-7"
    """
    return f"{prefix}-{ticket_id}" if prefix else str(ticket_id)


def ticket_filename(ticket_id: int, prefix: str | None = None) -> str:
    return ticket_slug(ticket_id, prefix) + DOCUMENT_SUFFIX


def smallest_free_id(taken: set[int]) -> int:
    """Return the smallest positive ID not in taken."""
    candidate = 1
    while candidate in taken:
        candidate += 1
    return candidate
