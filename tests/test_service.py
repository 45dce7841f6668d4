"""Tests for the ticket service façade."""

import pytest

from pmboard.allocator import IdAllocator
from pmboard.errors import BadRequest, NotFound
from pmboard.models import BoardConfig
from pmboard.parser import decode, read_document
from pmboard.service import TicketService


@pytest.fixture
def service(site):
    return TicketService(site)


def test_create_then_list(service, tickets_dir):
    ticket = service.create_ticket({"title": "Fix bug", "priority": "high"}, "tickets")
    assert ticket.id == 1
    assert ticket.url == "/tickets/1.html"

    [listed] = service.list_tickets("tickets")
    assert listed.to_dict() == {
        "id": 1,
        "title": "Fix bug",
        "status": "backlog",
        "priority": "high",
        "tags": [],
        "body": "",
        "url": "/tickets/1.html",
    }


def test_create_uses_configured_default_status(site):
    service = TicketService(site, config=BoardConfig(default_status="todo"))
    ticket = service.create_ticket({"title": "T"})
    assert ticket.status == "todo"
    assert service.list_tickets()[0].status == "todo"


def test_create_defaults(service, tickets_dir):
    ticket = service.create_ticket({})
    assert (ticket.title, ticket.status, ticket.priority, ticket.tags, ticket.body) == (
        "New ticket",
        "backlog",
        "medium",
        [],
        "",
    )
    assert (tickets_dir / "1.md").read_text() == (
        "---\nid: 1\ntitle: New ticket\nstatus: backlog\npriority: medium\ntags: []\n---\n\n"
    )


def test_create_writes_round_trippable_document(service, tickets_dir):
    service.create_ticket({"title": "T", "tags": ["a", "b", "a"], "body": "Line one\n\nLine two"})
    meta, body = read_document(tickets_dir / "1.md")
    assert meta == {"id": 1, "title": "T", "status": "backlog", "priority": "medium", "tags": ["a", "b"]}
    assert body == "\nLine one\n\nLine two\n"


def test_create_ids_strictly_increase(service, tickets_dir, write_ticket):
    write_ticket(tickets_dir, "3.md", {"id": 3})
    ids = [service.create_ticket({"title": f"T{i}"}).id for i in range(4)]
    assert ids == [4, 5, 6, 7]


def test_create_with_prefix(service, tickets_dir):
    ticket = service.create_ticket({"title": "T"}, "tickets", "PROJ")
    assert ticket.slug == "PROJ-1"
    assert ticket.url == "/tickets/PROJ-1.html"
    assert (tickets_dir / "PROJ-1.md").exists()


def test_create_prefix_falls_back_to_board(site):
    (site / "board.md").write_text("---\nboard: true\nticketPrefix: WEB\n---\n")
    service = TicketService(site)
    assert service.create_ticket({"title": "T"}).file == "WEB-1.md"
    # an explicit empty prefix turns it off
    assert service.create_ticket({"title": "T"}, prefix="").file == "2.md"


def test_create_makes_directory(service, site):
    ticket = service.create_ticket({"title": "T"}, "new/tickets")
    assert (site / "new" / "tickets" / "1.md").exists()
    assert ticket.url == "/new/tickets/1.html"


def test_create_skips_existing_filename(service, tickets_dir, write_ticket):
    write_ticket(tickets_dir, "1.md", {"title": "No id yet"})
    ticket = service.create_ticket({"title": "T"})
    assert ticket.id == 2
    assert read_document(tickets_dir / "1.md")[0] == {"title": "No id yet"}


@pytest.mark.parametrize(
    "fields",
    [
        {"priority": "urgent"},
        {"title": 5},
        {"tags": "a,b"},
        {"tags": ["a", 1]},
        {"body": ["x"]},
    ],
)
def test_create_rejects_bad_fields(service, tickets_dir, fields):
    with pytest.raises(BadRequest):
        service.create_ticket(fields)
    assert list(tickets_dir.iterdir()) == []


def test_dir_cannot_escape_root(service):
    with pytest.raises(BadRequest):
        service.create_ticket({"title": "T"}, "../elsewhere")
    with pytest.raises(BadRequest):
        service.list_tickets("../../etc")


def test_list_missing_directory(service):
    assert service.list_tickets("nothing-here") == []


def test_list_refreshes_allocator(site, tickets_dir, write_ticket):
    allocator = IdAllocator()
    service = TicketService(site, allocator=allocator)
    write_ticket(tickets_dir, "6.md", {"id": 6})
    service.list_tickets()
    (tickets_dir / "6.md").unlink()
    assert allocator.allocate(tickets_dir) == 7


def test_update_merges_front_matter(service, tickets_dir):
    service.create_ticket({"title": "T"})
    service.update_ticket("/tickets/1.html", {"status": "doing", "assignee": "sam"})

    meta, body = read_document(tickets_dir / "1.md")
    assert meta == {
        "id": 1,
        "title": "T",
        "status": "doing",
        "priority": "medium",
        "tags": [],
        "assignee": "sam",
    }
    assert body == "\n"


def test_update_body_replaces_body(service, tickets_dir):
    service.create_ticket({"title": "T", "body": "old"})
    service.update_ticket("/tickets/1.html", {"body": "- [x] done"})
    assert decode((tickets_dir / "1.md").read_text())[1] == "\n- [x] done\n"
    assert service.list_tickets()[0].body == "- [x] done"


def test_update_does_not_rename(service, tickets_dir):
    service.create_ticket({"title": "T"})
    service.update_ticket("/tickets/1.html", {"id": 9})
    assert [p.name for p in tickets_dir.iterdir()] == ["1.md"]
    assert [i.reason for i in service.validate()] == ["mismatch"]


def test_update_accepts_md_path(service, tickets_dir):
    service.create_ticket({"title": "T"})
    service.update_ticket("tickets/1.md", {"title": "Renamed"})
    assert service.list_tickets()[0].title == "Renamed"


def test_update_not_found(service, tickets_dir):
    with pytest.raises(NotFound, match="tickets/42.md"):
        service.update_ticket("/tickets/42.html", {"status": "done"})
    assert list(tickets_dir.iterdir()) == []


@pytest.mark.parametrize("url", [None, "", "/", 7, "/tickets/1", "/../outside.html"])
def test_update_bad_url(service, url):
    with pytest.raises(BadRequest):
        service.update_ticket(url, {})


def test_update_bad_updates(service):
    service.create_ticket({"title": "T"})
    with pytest.raises(BadRequest):
        service.update_ticket("/tickets/1.html", ["status", "done"])


def test_validate_and_fix_pass_through(service, tickets_dir, write_ticket):
    write_ticket(tickets_dir, "a.md", {"id": 5})
    write_ticket(tickets_dir, "b.md", {"id": 5})
    assert len(service.validate()) == 2
    assert [i.fixed_file for i in service.fix()] == ["5.md", "1.md"]
    assert service.validate() == []
    assert service.fix() == []


def test_race_between_services_is_repairable(site, tickets_dir):
    """Two servers on one directory can both claim an ID; fix sorts it out."""
    first, second = TicketService(site), TicketService(site)
    first.create_ticket({"title": "A"}, prefix="P")
    first.create_ticket({"title": "B"}, prefix="P")
    # second process allocated before either write landed, then wrote a differently named file
    (tickets_dir / "P-2-copy.md").write_text((tickets_dir / "P-2.md").read_text())
    assert [i.reason for i in second.validate(prefix="P")] == ["duplicate", "duplicate"]
    second.fix(prefix="P")
    assert second.validate(prefix="P") == []
    assert sorted(t.id for t in second.list_tickets(prefix="P")) == [1, 2, 3]
