from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
import uuid


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


class MemberStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


@dataclass(frozen=True)
class Member:
    member_id: str
    name: str
    email: str
    # filled from Settings.default_max_books on registration
    max_books_allowed: int
    status: MemberStatus = MemberStatus.ACTIVE

    def can_borrow(self) -> bool:
        return self.status is MemberStatus.ACTIVE


@dataclass(frozen=True)
class Book:
    book_id: str
    isbn: str
    title: str
    author: str
    total_copies: int = 1
    available_copies: int = 1

    @property
    def is_available(self) -> bool:
        return self.available_copies > 0

    @property
    def copies_on_loan(self) -> int:
        return self.total_copies - self.available_copies


class TransactionStatus(Enum):
    BORROWED = "BORROWED"
    OVERDUE = "OVERDUE"
    RETURNED = "RETURNED"
    LOST = "LOST"


ACTIVE_STATUSES = frozenset({TransactionStatus.BORROWED, TransactionStatus.OVERDUE})
CLOSED_STATUSES = frozenset({TransactionStatus.RETURNED, TransactionStatus.LOST})


def days_past_due(due_date: date, as_of: date) -> int:
    return max(0, (as_of - due_date).days)


def assess_fine(due_date: date, as_of: date, rate_per_day: Decimal) -> Decimal:
    """Fine owed on a loan due ``due_date`` when evaluated on ``as_of``.

    Depends on the dates and the rate only, so the same evaluation date always
    yields the same amount no matter how many sweeps ran before it.
    """
    return Decimal(days_past_due(due_date, as_of)) * rate_per_day


@dataclass(frozen=True)
class Transaction:
    transaction_id: str
    book_id: str
    member_id: str
    borrow_date: date
    due_date: date
    return_date: Optional[date] = None
    status: TransactionStatus = TransactionStatus.BORROWED
    fine_amount: Decimal = Decimal("0")
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def is_overdue(self, as_of: date) -> bool:
        return self.is_active and as_of > self.due_date

    def days_overdue(self, as_of: date) -> int:
        if not self.is_overdue(as_of):
            return 0
        return days_past_due(self.due_date, as_of)

    @property
    def loan_period_days(self) -> int:
        return (self.due_date - self.borrow_date).days
