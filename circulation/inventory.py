from __future__ import annotations
import logging

from .domain import Book
from .errors import (
    BookNotFound,
    InvalidCapacity,
    InventoryInvariantViolated,
    OutOfStock,
)
from .locks import KeyedLocks
from .repositories import BookRepo

logger = logging.getLogger(__name__)


class InventoryGuard:
    """Sole mutator of a book's copy counts.

    Every operation runs under that book's lock, so a check and the write that
    depends on it are never interleaved with another caller's. Two reservations
    racing for the last copy therefore cannot both succeed.
    """

    def __init__(self, books: BookRepo) -> None:
        self.books = books
        self._locks = KeyedLocks()

    def _get(self, book_id: str) -> Book:
        book = self.books.get_book(book_id)
        if book is None:
            raise BookNotFound(book_id)
        return book

    def reserve(self, book_id: str) -> Book:
        with self._locks.hold(book_id):
            book = self._get(book_id)
            if book.available_copies <= 0:
                raise OutOfStock(book_id)
            book = self.books.adjust_available(book_id, -1)
        logger.debug("[reserve] book=%s available=%d", book_id, book.available_copies)
        return book

    def release(self, book_id: str) -> Book:
        with self._locks.hold(book_id):
            book = self._get(book_id)
            if book.available_copies >= book.total_copies:
                # a release with nothing on loan means the ledger and the catalog disagree
                raise InventoryInvariantViolated(
                    book_id,
                    f"release with all {book.total_copies} copies already on the shelf",
                )
            book = self.books.adjust_available(book_id, 1)
        logger.debug("[release] book=%s available=%d", book_id, book.available_copies)
        return book

    def adjust_capacity(self, book_id: str, new_total: int) -> Book:
        if new_total < 1:
            raise InvalidCapacity(book_id, new_total)
        with self._locks.hold(book_id):
            book = self._get(book_id)
            delta = new_total - book.total_copies
            available = max(0, book.available_copies + delta)
            if book.available_copies + delta < 0:
                logger.warning(
                    "[capacity] book=%s shrunk below copies on loan (%d out, total now %d)",
                    book_id,
                    book.copies_on_loan,
                    new_total,
                )
            book = self.books.set_capacity(book_id, new_total, available)
        logger.info("[capacity] book=%s total=%d available=%d", book_id, new_total, available)
        return book

    def write_off(self, book_id: str) -> Book:
        """Remove one copy that is out on loan and will not come back.

        The last copy of a title cannot leave the catalog, since a book keeps
        at least one copy. It stays counted as the missing copy instead: total
        and available are left alone, so the title reads as unavailable until
        its capacity is raised again.
        """
        with self._locks.hold(book_id):
            book = self._get(book_id)
            if book.copies_on_loan < 1:
                raise InventoryInvariantViolated(book_id, "write-off with no copy on loan")
            if book.total_copies == 1:
                logger.warning(
                    "[write-off] book=%s lost its only copy; title stays unavailable", book_id
                )
                return book
            book = self.books.set_capacity(
                book_id, book.total_copies - 1, book.available_copies
            )
        logger.info("[write-off] book=%s total=%d", book_id, book.total_copies)
        return book
