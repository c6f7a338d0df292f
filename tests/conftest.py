from decimal import Decimal

import pytest

from circulation import LibrarySystem, Settings


@pytest.fixture
def config():
    return Settings(
        default_loan_days=14,
        fine_per_day=Decimal("1"),
        default_max_books=5,
        sweep_interval_seconds=0.01,
        log_level="DEBUG",
    )


@pytest.fixture
def lib(config):
    return LibrarySystem(config)


@pytest.fixture
def book(lib):
    return lib.add_book("9780441172719", "Dune", "Frank Herbert", copies=2)


@pytest.fixture
def member(lib):
    return lib.register_member("Alice Reader", "alice@example.com")
