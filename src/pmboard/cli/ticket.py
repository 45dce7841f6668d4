"""Handlers for 'pmboard ticket' commands."""

from pmboard.cli._common import error, format_issue_line, make_service, output_json, output_result, split_tags
from pmboard.errors import PmboardError


def ticket_add(args) -> int:
    """Create a ticket with the next free ID."""
    if not args.title:
        error('title is required. Usage: pmboard ticket add "My ticket title"', args.json)
    service = make_service(args.root)
    fields = {
        "title": args.title,
        "status": args.status,
        "priority": args.priority,
        "tags": split_tags(args.tags),
        "body": args.body,
    }
    try:
        ticket = service.create_ticket(fields, args.dir, args.prefix)
    except PmboardError as e:
        error(str(e), args.json)

    output_result(
        ticket.to_dict(),
        f"Created {ticket.slug}: {ticket.title}\n  File: {ticket.dir}/{ticket.file}",
        args.json,
    )
    return 0


def ticket_list(args) -> int:
    """List tickets in a directory."""
    service = make_service(args.root)
    try:
        tickets = service.list_tickets(args.dir, args.prefix)
    except PmboardError as e:
        error(str(e), args.json)

    if args.json:
        output_json([t.to_dict() for t in tickets])
    else:
        for t in tickets:
            tags = f"  [{', '.join(t.tags)}]" if t.tags else ""
            print(f"{t.stem:<12} {t.status:<12} {t.priority:<8} {t.title}{tags}")
    return 0


def _parse_assignments(pairs: list[str]) -> dict:
    updates = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"expected key=value, got '{pair}'")
        updates[key] = split_tags(value) if key == "tags" else value
    return updates


def ticket_update(args) -> int:
    """Set front-matter fields (and optionally the body) of one ticket."""
    try:
        updates = _parse_assignments(args.set)
    except ValueError as e:
        error(str(e), args.json)
    if args.body is not None:
        updates["body"] = args.body

    service = make_service(args.root)
    try:
        service.update_ticket(args.url, updates)
    except PmboardError as e:
        error(str(e), args.json)

    output_result({"url": args.url, "updated": sorted(updates)}, f"Updated {args.url}", args.json)
    return 0


def ticket_validate(args) -> int:
    """Report tickets with duplicate, missing or mismatched IDs. Exit 1 if any."""
    service = make_service(args.root)
    try:
        issues = [i.to_dict() for i in service.validate(args.dir, args.prefix)]
    except PmboardError as e:
        error(str(e), args.json)

    if args.json:
        output_json(issues)
    elif issues:
        print(f"{len(issues)} ticket(s) need fixing:")
        for issue in issues:
            print(format_issue_line(issue))
    else:
        print("all tickets are well-formed")
    return 1 if issues else 0


def ticket_fix(args) -> int:
    """Repair every issue validate would report."""
    service = make_service(args.root)
    try:
        applied = [i.to_dict() for i in service.fix(args.dir, args.prefix)]
    except PmboardError as e:
        error(str(e), args.json)

    if args.json:
        output_json(applied)
    elif applied:
        print(f"fixed {len(applied)} ticket(s):")
        for issue in applied:
            print(format_issue_line(issue))
    else:
        print("nothing to fix")
    return 0
