"""Shared test fixtures for contextcrumb."""

from __future__ import annotations

from pathlib import Path

import pytest

from contextcrumb import tokens
from contextcrumb.models import SymbolGraph, SymbolKind, Tag, TagKind
from contextcrumb.symbols import index_tags


class _WhitespaceEncoding:
    """Stands in for a tiktoken encoding: one token per whitespace-separated word."""

    def encode(self, text: str, **_kwargs: object) -> list[str]:
        return text.split()


@pytest.fixture(autouse=True)
def whitespace_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    """Count tokens without downloading a tiktoken encoding."""
    monkeypatch.setattr(tokens, "_encoding", lambda *_args: _WhitespaceEncoding())


def definition(
    name: str,
    line: int = 1,
    kind: SymbolKind = SymbolKind.FUNCTION,
    *,
    exported: bool = True,
) -> Tag:
    return Tag(name, TagKind.DEFINITION, kind, line, exported)


def reference(name: str, line: int = 1) -> Tag:
    return Tag(name, TagKind.REFERENCE, SymbolKind.FUNCTION, line)


@pytest.fixture()
def sample_repo(tmp_path: Path) -> Path:
    """Create a small multi-file Python repo with cross-references."""
    (tmp_path / "models.py").write_text(
        '''\
class User:
    """A user model."""

    def __init__(self, name: str) -> None:
        self.name = name
''',
        encoding="utf-8",
    )
    (tmp_path / "utils.py").write_text(
        """\
def format_name(name: str) -> str:
    return name.strip().title()
""",
        encoding="utf-8",
    )
    (tmp_path / "main.py").write_text(
        """\
from models import User
from utils import format_name


def run() -> None:
    name = format_name("alice")
    user = User(name)
    print(user.name)
""",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture()
def booking_repo(tmp_path: Path) -> Path:
    """A repo with a booking feature, a billing module and shared helpers."""
    booking = tmp_path / "booking"
    booking.mkdir()
    (booking / "service.py").write_text(
        """\
from shared import format_date


def create_booking(slot):
    return format_date(slot)


class BookingService:
    def cancel(self):
        return None
""",
        encoding="utf-8",
    )
    (tmp_path / "billing.py").write_text(
        """\
from shared import format_date


def create_invoice(order):
    return format_date(order)
""",
        encoding="utf-8",
    )
    (tmp_path / "shared.py").write_text(
        """\
MAX_SLOTS = 10


def format_date(value):
    return str(value)
""",
        encoding="utf-8",
    )
    (tmp_path / "api.py").write_text(
        """\
from booking.service import create_booking, BookingService
from billing import create_invoice


def handle(request) -> BookingService:
    create_invoice(request)
    return create_booking(request)
""",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture()
def sample_graph() -> SymbolGraph:
    """Pre-built symbol graph: main.py uses models.py and utils.py."""
    return index_tags(
        [
            (
                "main.py",
                [
                    definition("run", 5),
                    reference("User", 1),
                    reference("format_name", 2),
                    reference("format_name", 6),
                    reference("User", 7),
                ],
            ),
            (
                "models.py",
                [
                    definition("User", 1, SymbolKind.CLASS),
                    definition("User.__init__", 4, SymbolKind.METHOD, exported=False),
                ],
            ),
            ("utils.py", [definition("format_name", 1)]),
        ]
    )


@pytest.fixture()
def booking_graph() -> SymbolGraph:
    """fileA defines createBooking, fileB references it twice, fileC is isolated."""
    return index_tags(
        [
            ("fileA.ts", [definition("createBooking", 3)]),
            (
                "fileB.ts",
                [
                    definition("renderPage", 1),
                    reference("createBooking", 4),
                    reference("createBooking", 9),
                ],
            ),
            ("fileC.ts", [definition("standalone", 1)]),
        ]
    )
