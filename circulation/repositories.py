from __future__ import annotations
import threading
from dataclasses import replace
from typing import Dict, List, Optional

from .domain import (
    ACTIVE_STATUSES,
    Book,
    Member,
    MemberStatus,
    Transaction,
    TransactionStatus,
)
from .errors import BookNotFound, InventoryInvariantViolated, MemberNotFound


class BookRepo:
    """Catalog store. Only the inventory guard should call the copy-count mutators."""

    def __init__(self) -> None:
        self._books: Dict[str, Book] = {}
        self._lock = threading.Lock()

    def add_book(self, book: Book) -> None:
        self._books[book.book_id] = book

    def get_book(self, book_id: str) -> Optional[Book]:
        return self._books.get(book_id)

    def get_by_isbn(self, isbn: str) -> Optional[Book]:
        return next((b for b in self.list_books() if b.isbn == isbn), None)

    def list_books(self) -> List[Book]:
        return list(self._books.values())

    # copy counts
    def adjust_available(self, book_id: str, delta: int) -> Book:
        with self._lock:
            book = self._books.get(book_id)
            if book is None:
                raise BookNotFound(book_id)
            available = book.available_copies + delta
            if not 0 <= available <= book.total_copies:
                raise InventoryInvariantViolated(
                    book_id,
                    f"available would become {available} with total {book.total_copies}",
                )
            book = replace(book, available_copies=available)
            self._books[book_id] = book
            return book

    def set_capacity(self, book_id: str, total: int, available: int) -> Book:
        with self._lock:
            book = self._books.get(book_id)
            if book is None:
                raise BookNotFound(book_id)
            if not 0 <= available <= total:
                raise InventoryInvariantViolated(
                    book_id, f"available={available} outside 0..{total}"
                )
            book = replace(book, total_copies=total, available_copies=available)
            self._books[book_id] = book
            return book


class MemberRepo:
    def __init__(self) -> None:
        self._members: Dict[str, Member] = {}

    def add(self, member: Member) -> None:
        self._members[member.member_id] = member

    def get(self, member_id: str) -> Optional[Member]:
        return self._members.get(member_id)

    def get_by_email(self, email: str) -> Optional[Member]:
        wanted = email.strip().lower()
        return next(
            (m for m in self.list_all() if m.email.lower() == wanted), None
        )

    def list_all(self) -> List[Member]:
        return list(self._members.values())

    def set_status(self, member_id: str, status: MemberStatus) -> Member:
        member = self._members.get(member_id)
        if member is None:
            raise MemberNotFound(member_id)
        member = replace(member, status=status)
        self._members[member_id] = member
        return member


class TransactionRepo:
    def __init__(self) -> None:
        self._transactions: Dict[str, Transaction] = {}

    def save(self, txn: Transaction) -> None:
        self._transactions[txn.transaction_id] = txn

    def get(self, transaction_id: str) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    def delete(self, transaction_id: str) -> Optional[Transaction]:
        return self._transactions.pop(transaction_id, None)

    def list_all(self) -> List[Transaction]:
        return list(self._transactions.values())

    def list_by_member(self, member_id: str) -> List[Transaction]:
        return [t for t in self.list_all() if t.member_id == member_id]

    def list_by_book(self, book_id: str) -> List[Transaction]:
        return [t for t in self.list_all() if t.book_id == book_id]

    def list_by_status(self, *statuses: TransactionStatus) -> List[Transaction]:
        return [t for t in self.list_all() if t.status in statuses]

    def count_active_by_member(self, member_id: str) -> int:
        return sum(
            1
            for t in self.list_all()
            if t.member_id == member_id and t.status in ACTIVE_STATUSES
        )
