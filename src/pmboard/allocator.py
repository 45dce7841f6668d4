"""Sequential ticket ID allocation."""

from collections.abc import Callable
from pathlib import Path

from pmboard.loader import max_ticket_id


class IdAllocator:
    """Per-directory high-water mark for ticket IDs.

    The mark only narrows the window between two rapid allocations; the
    directory on disk stays authoritative and is re-read on every
    allocate(). Nothing is locked between reading the max and the caller
    writing the new file, so two writers racing on one directory can still
    claim the same ID. The validator reports that and fix repairs it.
    """

    def __init__(self, max_id: Callable[[Path], int] = max_ticket_id):
        self._max_id = max_id
        self._next: dict[Path, int] = {}

    @staticmethod
    def _key(tickets_dir: str | Path) -> Path:
        return Path(tickets_dir).resolve()

    def observe(self, tickets_dir: str | Path, current_max: int) -> None:
        """Resync after a scan that happened to compute the directory max."""
        self._next[self._key(tickets_dir)] = current_max + 1

    def allocate(self, tickets_dir: str | Path) -> int:
        key = self._key(tickets_dir)
        current_max = self._max_id(key)
        next_id = self._next.get(key)
        if next_id is None or next_id <= current_max:
            next_id = current_max + 1
        self._next[key] = next_id + 1
        return next_id
