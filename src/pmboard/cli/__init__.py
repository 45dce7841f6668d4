"""CLI argument parser and dispatch for pmboard."""

import argparse

from pmboard.cli.serve import export, serve
from pmboard.cli.ticket import ticket_add, ticket_fix, ticket_list, ticket_update, ticket_validate
from pmboard.models import PRIORITIES


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--root", default=".", help="Site root containing board.md (default: .)")
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")

    location = argparse.ArgumentParser(add_help=False)
    location.add_argument("--dir", default=None, help="Tickets directory relative to root (default: board ticketsDir)")
    location.add_argument("--prefix", default=None, help="Ticket ID prefix (overrides board.md ticketPrefix)")

    parser = argparse.ArgumentParser(
        prog="pmboard",
        description="Markdown ticket store for project boards",
        parents=[common],
    )

    nouns = parser.add_subparsers(dest="noun")

    # --- ticket ---
    ticket_p = nouns.add_parser("ticket", help="Ticket operations", parents=[common])
    ticket_verbs = ticket_p.add_subparsers(dest="verb")

    add_p = ticket_verbs.add_parser("add", help="Create a ticket", parents=[common, location])
    add_p.add_argument("title", help="Ticket title")
    add_p.add_argument("--status", default=None, help="Initial status (default: board defaultStatus)")
    add_p.add_argument("--priority", default=None, choices=PRIORITIES, help="Priority (default: medium)")
    add_p.add_argument("--tags", default=None, help="Comma-separated tags")
    add_p.add_argument("--body", default=None, help="Ticket body (markdown)")
    add_p.set_defaults(func=ticket_add)

    list_p = ticket_verbs.add_parser("list", help="List tickets", parents=[common, location])
    list_p.set_defaults(func=ticket_list)

    update_p = ticket_verbs.add_parser("update", help="Update ticket front-matter", parents=[common])
    update_p.add_argument("url", help="Ticket URL, e.g. /tickets/3.html")
    update_p.add_argument("set", nargs="*", metavar="key=value", help="Front-matter fields to set")
    update_p.add_argument("--body", default=None, help="Replace the ticket body")
    update_p.set_defaults(func=ticket_update)

    validate_p = ticket_verbs.add_parser("validate", help="Check ticket IDs and filenames", parents=[common, location])
    validate_p.set_defaults(func=ticket_validate)

    fix_p = ticket_verbs.add_parser("fix", help="Repair ticket IDs and filenames", parents=[common, location])
    fix_p.set_defaults(func=ticket_fix)

    # ticket with no verb = list
    ticket_p.set_defaults(func=ticket_list, dir=None, prefix=None)

    # --- serve ---
    serve_p = nouns.add_parser("serve", help="Serve ticket endpoints for development", parents=[common])
    serve_p.add_argument("--host", default="localhost", help="Bind address (default: localhost)")
    serve_p.add_argument("--port", type=int, default=5174, help="Port (default: 5174)")
    serve_p.set_defaults(func=serve)

    # --- export ---
    export_p = nouns.add_parser("export", help="Write ticket snapshots for board pages", parents=[common])
    export_p.add_argument("--out", default="dist", help="Output directory (default: dist)")
    export_p.set_defaults(func=export)

    return parser
