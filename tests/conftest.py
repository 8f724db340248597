"""Test configuration and fixtures for the Circulation Desk.

Every test gets:
1. A fixed clock - fine calculations are pinned to a known date
2. An isolated configuration - no environment leakage between tests
3. A fresh library - nothing shared with other tests
"""

import os
from collections.abc import Generator
from datetime import date

import pytest

from circulation_desk.clock import FixedClock
from circulation_desk.config import LibrarySettings, reset_config
from circulation_desk.library import Library, reset_library, set_library
from circulation_desk.models.book import Book
from circulation_desk.models.member import Member

START_DATE = date(2026, 1, 5)

SINGLE_COPY_ISBN = "9780306406157"
MULTI_COPY_ISBN = "9783161484100"


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to the first day of the test calendar."""
    return FixedClock(START_DATE)


@pytest.fixture
def test_config(clean_env) -> Generator[LibrarySettings, None, None]:
    """Default lending policy, independent of the host environment."""
    reset_config()
    config = LibrarySettings(_env_file=None)
    yield config
    reset_config()


@pytest.fixture
def library(test_config: LibrarySettings, clock: FixedClock) -> Library:
    return Library(config=test_config, clock=clock)


@pytest.fixture
def single_copy_book(library: Library) -> Book:
    return library.add_book(
        Book(
            isbn=SINGLE_COPY_ISBN,
            title="The Wizard's Adventures",
            author="Rodrigo Alfonso",
            publication_year=1980,
            total_copies=1,
        )
    )


@pytest.fixture
def multi_copy_book(library: Library) -> Book:
    return library.add_book(
        Book(
            isbn=MULTI_COPY_ISBN,
            title="Before Dying",
            author="Jorge Salamar",
            publication_year=2000,
            total_copies=5,
        )
    )


@pytest.fixture
def member_a(library: Library) -> Member:
    return library.new_member("Felipe", "felipe@gmail.com")


@pytest.fixture
def member_b(library: Library) -> Member:
    return library.new_member("Tatiana", "tatiana@gmail.com")


@pytest.fixture
def installed_library(library: Library) -> Generator[Library, None, None]:
    """Make ``library`` the one the MCP handlers operate on."""
    set_library(library)
    yield library
    reset_library()


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Run without any CIRCULATION_DESK_* variables from the host."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("CIRCULATION_DESK_"):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def make_book():
    """Factory for valid books with only the interesting fields varied."""

    def _make_book(isbn: str, total_copies: int = 3, title: str = "Test Book") -> Book:
        return Book(
            isbn=isbn,
            title=title,
            author="Test Author",
            publication_year=2020,
            total_copies=total_copies,
        )

    return _make_book


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Reset shared singletons after each test."""
    yield
    reset_config()
    reset_library()
