"""Tests for ticket ID parsing and slugs."""

import pytest

from pmboard.ids import parse_ticket_id, smallest_free_id, ticket_filename, ticket_slug


@pytest.mark.parametrize(
    "value, expected",
    [
        (5, 5),
        ("007", 7),
        (" 12 ", 12),
        (3.0, 3),
        (3.5, 0),
        ("fish", 0),
        ("²", 0),
        ("", 0),
        (-2, 0),
        (0, 0),
        (True, 0),
        (None, 0),
        ([1], 0),
    ],
)
def test_parse_ticket_id(value, expected):
    assert parse_ticket_id(value) == expected


def test_ticket_slug_without_prefix():
    assert ticket_slug(7) == "7"
    assert ticket_slug(7, None) == "7"
    assert ticket_slug(7, "") == "7"


def test_ticket_slug_with_prefix():
    assert ticket_slug(7, "PROJ") == "PROJ-7"


def test_ticket_filename():
    assert ticket_filename(3) == "3.md"
    assert ticket_filename(3, "PROJ") == "PROJ-3.md"


def test_smallest_free_id():
    assert smallest_free_id(set()) == 1
    assert smallest_free_id({1, 2, 4}) == 3
    assert smallest_free_id({2, 3}) == 1
