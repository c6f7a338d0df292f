from __future__ import annotations
from typing import Optional


class LendingError(Exception):
    """Base class for every error raised by the circulation core."""


# ---- not found

class NotFound(LendingError):
    pass


class BookNotFound(NotFound):
    def __init__(self, book_id: str) -> None:
        super().__init__(f"Book not found: {book_id}")
        self.book_id = book_id


class MemberNotFound(NotFound):
    def __init__(self, member_id: str) -> None:
        super().__init__(f"Member not found: {member_id}")
        self.member_id = member_id


class TransactionNotFound(NotFound):
    def __init__(self, transaction_id: str) -> None:
        super().__init__(f"Transaction not found: {transaction_id}")
        self.transaction_id = transaction_id


# ---- conflicts (caller-correctable, state dependent)

class Conflict(LendingError):
    pass


class OutOfStock(Conflict):
    """No free copy at the instant of the reservation."""

    def __init__(self, book_id: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"No copies left to reserve for book {book_id}")
        self.book_id = book_id


class BookUnavailable(OutOfStock):
    """Shelf already empty when the borrow request was looked at."""

    def __init__(self, book_id: str) -> None:
        super().__init__(book_id, f"Book {book_id} is not available for borrowing")


class MemberNotActive(Conflict):
    def __init__(self, member_id: str, status: object) -> None:
        super().__init__(f"Member {member_id} is not active (status={status})")
        self.member_id = member_id
        self.status = status


class BorrowLimitReached(Conflict):
    def __init__(self, member_id: str, limit: int) -> None:
        super().__init__(f"Member {member_id} has reached the borrowing limit of {limit}")
        self.member_id = member_id
        self.limit = limit


class AlreadyReturned(Conflict):
    def __init__(self, transaction_id: str) -> None:
        super().__init__(f"Transaction {transaction_id} has already been returned")
        self.transaction_id = transaction_id


class InvalidTransition(Conflict):
    def __init__(self, transaction_id: str, status: object, target: object) -> None:
        super().__init__(f"Transaction {transaction_id} cannot move from {status} to {target}")
        self.transaction_id = transaction_id
        self.status = status
        self.target = target


class DuplicateBook(Conflict):
    def __init__(self, isbn: str) -> None:
        super().__init__(f"Book with ISBN {isbn} already exists")
        self.isbn = isbn


class DuplicateMember(Conflict):
    def __init__(self, email: str) -> None:
        super().__init__(f"Member with email {email} already exists")
        self.email = email


# ---- bad input

class InvalidInput(LendingError, ValueError):
    pass


class InvalidLoanPeriod(InvalidInput):
    def __init__(self, loan_days: object) -> None:
        super().__init__(f"Loan period must be a positive number of days, got {loan_days!r}")
        self.loan_days = loan_days


class InvalidCapacity(InvalidInput):
    def __init__(self, book_id: str, total: object) -> None:
        super().__init__(f"Book {book_id} needs at least one copy, got total={total!r}")
        self.book_id = book_id
        self.total = total


class InvalidBorrowLimit(InvalidInput):
    def __init__(self, max_books: object) -> None:
        super().__init__(f"Borrowing limit must be at least 1, got {max_books!r}")
        self.max_books = max_books


# ---- fatal

class InventoryInvariantViolated(LendingError):
    """Inventory and ledger disagree. Not retried; needs an operator."""

    def __init__(self, book_id: str, detail: str, transaction_id: Optional[str] = None) -> None:
        super().__init__(f"Inventory invariant violated for book {book_id}: {detail}")
        self.book_id = book_id
        self.detail = detail
        self.transaction_id = transaction_id
