"""Exceptions raised by the ticket store."""


class PmboardError(Exception):
    """Base class for ticket store errors."""


class BadRequest(PmboardError):
    """The request was malformed; nothing on disk was touched."""


class NotFound(PmboardError):
    """The ticket document addressed by a request does not exist."""


class RepairError(PmboardError):
    """A repaired document failed verification after being written."""
