from __future__ import annotations
from datetime import date
from typing import List, Optional, Tuple

from .config import Settings, settings
from .domain import Book, Member, MemberStatus, Transaction, new_id
from .eligibility import EligibilityChecker
from .errors import (
    BookNotFound,
    DuplicateBook,
    DuplicateMember,
    InvalidBorrowLimit,
    InvalidCapacity,
)
from .inventory import InventoryGuard
from .ledger import LoanLedger, OverdueSweep
from .repositories import BookRepo, MemberRepo, TransactionRepo
from .services import LendingWorkflow
from .sweeper import OverdueSweeper


class LibrarySystem:
    """
    A simple facade that wires the stores and the lending core and offers a
    compact API to a request layer.
    """

    def __init__(self, config: Settings = settings) -> None:
        self.config = config

        # stores
        self.books = BookRepo()
        self.members = MemberRepo()
        self.transactions = TransactionRepo()

        # core
        self.inventory = InventoryGuard(self.books)
        self.ledger = LoanLedger(self.transactions, config)
        self.eligibility = EligibilityChecker(self.members, self.ledger)
        self.lending = LendingWorkflow(
            self.books, self.members, self.inventory, self.eligibility, self.ledger
        )

    # ---- catalog
    def add_book(self, isbn: str, title: str, author: str, copies: int = 1) -> Book:
        isbn = isbn.strip()
        if copies < 1:
            raise InvalidCapacity(isbn, copies)
        if self.books.get_by_isbn(isbn):
            raise DuplicateBook(isbn)
        b = Book(
            book_id=new_id("bk"),
            isbn=isbn,
            title=title,
            author=author,
            total_copies=copies,
            available_copies=copies,
        )
        self.books.add_book(b)
        return b

    def get_book(self, book_id: str) -> Book:
        book = self.books.get_book(book_id)
        if book is None:
            raise BookNotFound(book_id)
        return book

    def set_book_capacity(self, book_id: str, total: int) -> Book:
        return self.inventory.adjust_capacity(book_id, total)

    # ---- membership
    def register_member(
        self, name: str, email: str, max_books: Optional[int] = None
    ) -> Member:
        if max_books is None:
            max_books = self.config.default_max_books
        if max_books < 1:
            raise InvalidBorrowLimit(max_books)
        if self.members.get_by_email(email):
            raise DuplicateMember(email)
        m = Member(
            member_id=new_id("mbr"),
            name=name,
            email=email.strip(),
            max_books_allowed=max_books,
        )
        self.members.add(m)
        return m

    def set_member_status(self, member_id: str, status: MemberStatus) -> Member:
        return self.members.set_status(member_id, status)

    # ---- circulation
    def borrow(
        self,
        book_id: str,
        member_id: str,
        loan_days: Optional[int] = None,
        as_of: Optional[date] = None,
    ) -> Transaction:
        return self.lending.borrow(book_id, member_id, loan_days, as_of)

    def return_book(self, transaction_id: str, as_of: Optional[date] = None) -> Transaction:
        return self.lending.return_book(transaction_id, as_of)

    def report_lost(self, transaction_id: str, as_of: Optional[date] = None) -> Transaction:
        return self.lending.report_lost(transaction_id, as_of)

    def delete_transaction(self, transaction_id: str) -> Transaction:
        return self.lending.delete_transaction(transaction_id)

    # ---- reporting
    def list_overdue(self, as_of: Optional[date] = None) -> OverdueSweep:
        return self.lending.list_overdue(as_of)

    def list_active_for_member(self, member_id: str) -> List[Transaction]:
        return self.lending.list_active_for_member(member_id)

    def list_transactions(self) -> List[Transaction]:
        return self.ledger.list_all()

    def report_inventory(self) -> List[Tuple[Book, int, int]]:
        """
        Returns tuples of (Book, total_copies, available_copies)
        """
        return [(b, b.total_copies, b.available_copies) for b in self.books.list_books()]

    def overdue_sweeper(self, interval: Optional[float] = None) -> OverdueSweeper:
        return OverdueSweeper(self.ledger, interval)
