"""Shared fixtures for ticket store tests."""

import pytest

from pmboard.parser import encode


def _write(directory, name, meta=None, body="\nBody.\n", raw=None):
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(raw if raw is not None else encode(body, meta or {}), encoding="utf-8")
    return path


@pytest.fixture
def site(tmp_path):
    """A site root with an empty tickets/ directory."""
    (tmp_path / "tickets").mkdir()
    return tmp_path


@pytest.fixture
def tickets_dir(site):
    return site / "tickets"


@pytest.fixture
def write_ticket():
    """Write a ticket document: write_ticket(dir, "3.md", {"id": 3}, body=...)."""
    return _write
