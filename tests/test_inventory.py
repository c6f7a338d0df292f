import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from circulation import (
    BookNotFound,
    BookRepo,
    InvalidCapacity,
    InventoryGuard,
    InventoryInvariantViolated,
    OutOfStock,
)
from circulation.domain import Book
from circulation.locks import KeyedLocks


@pytest.fixture
def books():
    repo = BookRepo()
    repo.add_book(Book("bk_1", "123", "Dune", "Frank Herbert", total_copies=2, available_copies=2))
    return repo


@pytest.fixture
def guard(books):
    return InventoryGuard(books)


def test_reserve_and_release(guard, books):
    assert guard.reserve("bk_1").available_copies == 1
    assert guard.reserve("bk_1").available_copies == 0
    with pytest.raises(OutOfStock):
        guard.reserve("bk_1")
    assert guard.release("bk_1").available_copies == 1
    assert books.get_book("bk_1").available_copies == 1


def test_release_past_total_is_invariant_violation(guard, books):
    with pytest.raises(InventoryInvariantViolated):
        guard.release("bk_1")
    assert books.get_book("bk_1").available_copies == 2


def test_unknown_book(guard):
    with pytest.raises(BookNotFound):
        guard.reserve("nope")
    with pytest.raises(BookNotFound):
        guard.release("nope")


def test_reserve_never_oversells(books):
    books.add_book(Book("bk_last", "999", "Last Copy", "Anon", total_copies=1, available_copies=1))
    guard = InventoryGuard(books)

    def attempt(_):
        try:
            guard.reserve("bk_last")
            return True
        except OutOfStock:
            return False

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(attempt, range(50)))

    assert results.count(True) == 1
    assert books.get_book("bk_last").available_copies == 0


def test_adjust_capacity_moves_available_by_delta(guard):
    guard.reserve("bk_1")
    book = guard.adjust_capacity("bk_1", 5)
    assert (book.total_copies, book.available_copies) == (5, 4)

    book = guard.adjust_capacity("bk_1", 2)
    assert (book.total_copies, book.available_copies) == (2, 1)


def test_adjust_capacity_floors_available_at_zero(guard):
    guard.reserve("bk_1")
    guard.reserve("bk_1")
    book = guard.adjust_capacity("bk_1", 1)
    assert (book.total_copies, book.available_copies) == (1, 0)


@pytest.mark.parametrize("total", [0, -3])
def test_adjust_capacity_rejects_empty_books(guard, total):
    with pytest.raises(InvalidCapacity):
        guard.adjust_capacity("bk_1", total)


def test_write_off_shrinks_total_only(guard):
    guard.reserve("bk_1")
    book = guard.write_off("bk_1")
    assert (book.total_copies, book.available_copies) == (1, 1)


def test_write_off_needs_a_copy_on_loan(guard):
    with pytest.raises(InventoryInvariantViolated):
        guard.write_off("bk_1")


def test_write_off_of_only_copy_leaves_title_unavailable(books, caplog):
    books.add_book(Book("bk_single", "555", "Only One", "Anon", total_copies=1, available_copies=1))
    guard = InventoryGuard(books)
    guard.reserve("bk_single")
    with caplog.at_level(logging.WARNING, logger="circulation"):
        book = guard.write_off("bk_single")
    assert (book.total_copies, book.available_copies) == (1, 0)
    assert books.get_book("bk_single") == book
    assert "lost its only copy" in caplog.text


def test_keyed_locks_forget_released_keys():
    locks = KeyedLocks()
    with locks.hold("bk_1"):
        with locks.hold("bk_1"):
            assert len(locks) == 1
        with locks.hold("bk_2"):
            assert len(locks) == 2
    assert len(locks) == 0


def test_keyed_locks_stay_bounded_under_load(guard):
    with ThreadPoolExecutor(max_workers=8) as pool:
        for _ in range(50):
            pool.submit(guard.reserve, "bk_1")
            pool.submit(guard.adjust_capacity, "bk_1", 4)
    assert len(guard._locks) == 0
