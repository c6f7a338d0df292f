from __future__ import annotations
import logging
import threading
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator, List, Optional

from .config import Settings, settings
from .domain import (
    Transaction,
    TransactionStatus,
    assess_fine,
    new_id,
)
from .errors import (
    AlreadyReturned,
    InvalidLoanPeriod,
    InvalidTransition,
    TransactionNotFound,
)
from .repositories import TransactionRepo

logger = logging.getLogger(__name__)


class OverdueSweep:
    """Overdue loans as of a fixed date.

    Nothing runs until iteration starts, and every new iteration sweeps the
    ledger again, so the same object can be consumed more than once.

    Stored state only moves forward: a sweep dated before an earlier one
    skips loans not yet due on its date, and their stored OVERDUE status and
    fine keep the values of the later sweep.
    """

    def __init__(self, ledger: "LoanLedger", as_of: date) -> None:
        self.ledger = ledger
        self.as_of = as_of

    def __iter__(self) -> Iterator[Transaction]:
        return self.ledger._sweep(self.as_of)


class LoanLedger:
    """Source of truth for transactions and the only writer of their status.

    Status changes are compare-and-update under one ledger lock: a sweep that
    read a loan as BORROWED cannot overwrite a return that landed meanwhile.
    """

    def __init__(self, transactions: TransactionRepo, config: Settings = settings) -> None:
        self.transactions = transactions
        self.config = config
        self._lock = threading.RLock()

    # ---- lookups
    def get(self, transaction_id: str) -> Transaction:
        txn = self.transactions.get(transaction_id)
        if txn is None:
            raise TransactionNotFound(transaction_id)
        return txn

    def list_all(self) -> List[Transaction]:
        return sorted(self.transactions.list_all(), key=lambda t: t.created_at, reverse=True)

    def list_for_member(self, member_id: str) -> List[Transaction]:
        return sorted(self.transactions.list_by_member(member_id), key=lambda t: t.created_at)

    def list_active_for_member(self, member_id: str) -> List[Transaction]:
        return [t for t in self.list_for_member(member_id) if t.is_active]

    def list_for_book(self, book_id: str) -> List[Transaction]:
        return sorted(self.transactions.list_by_book(book_id), key=lambda t: t.created_at)

    def list_by_status(self, status: TransactionStatus) -> List[Transaction]:
        return self.transactions.list_by_status(status)

    def count_active(self, member_id: str) -> int:
        return self.transactions.count_active_by_member(member_id)

    # ---- fines
    def fine_as_of(self, txn: Transaction, as_of: date) -> Decimal:
        return assess_fine(txn.due_date, as_of, self.config.fine_per_day)

    # ---- lifecycle
    def create(
        self,
        book_id: str,
        member_id: str,
        loan_days: Optional[int] = None,
        as_of: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> Transaction:
        if loan_days is None:
            loan_days = self.config.default_loan_days
        if isinstance(loan_days, bool) or not isinstance(loan_days, int) or loan_days < 1:
            raise InvalidLoanPeriod(loan_days)

        today = as_of or date.today()
        txn = Transaction(
            transaction_id=new_id("txn"),
            book_id=book_id,
            member_id=member_id,
            borrow_date=today,
            due_date=today + timedelta(days=loan_days),
            notes=notes,
        )
        with self._lock:
            self.transactions.save(txn)
        logger.info(
            "[ledger] created %s book=%s member=%s due=%s",
            txn.transaction_id,
            book_id,
            member_id,
            txn.due_date.isoformat(),
        )
        return txn

    def finalize_return(self, transaction_id: str, as_of: Optional[date] = None) -> Transaction:
        today = as_of or date.today()
        with self._lock:
            txn = self.get(transaction_id)
            if txn.status is TransactionStatus.RETURNED:
                raise AlreadyReturned(transaction_id)
            if txn.status is TransactionStatus.LOST:
                raise InvalidTransition(transaction_id, txn.status, TransactionStatus.RETURNED)
            txn = replace(
                txn,
                return_date=today,
                status=TransactionStatus.RETURNED,
                fine_amount=self.fine_as_of(txn, today),
            )
            self.transactions.save(txn)
        logger.info(
            "[ledger] returned %s on %s fine=%s",
            transaction_id,
            today.isoformat(),
            txn.fine_amount,
        )
        return txn

    def mark_lost(self, transaction_id: str, as_of: Optional[date] = None) -> Transaction:
        today = as_of or date.today()
        with self._lock:
            txn = self.get(transaction_id)
            if not txn.is_active:
                raise InvalidTransition(transaction_id, txn.status, TransactionStatus.LOST)
            txn = replace(
                txn,
                status=TransactionStatus.LOST,
                fine_amount=self.fine_as_of(txn, today),
            )
            self.transactions.save(txn)
        logger.info("[ledger] lost %s fine=%s", transaction_id, txn.fine_amount)
        return txn

    def delete(self, transaction_id: str) -> Transaction:
        with self._lock:
            txn = self.transactions.delete(transaction_id)
        if txn is None:
            raise TransactionNotFound(transaction_id)
        return txn

    # ---- overdue
    def list_overdue(self, as_of: Optional[date] = None) -> OverdueSweep:
        return OverdueSweep(self, as_of or date.today())

    def _sweep(self, as_of: date) -> Iterator[Transaction]:
        candidates = self.transactions.list_by_status(
            TransactionStatus.BORROWED, TransactionStatus.OVERDUE
        )
        for candidate in candidates:
            if not candidate.is_overdue(as_of):
                continue
            with self._lock:
                txn = self.transactions.get(candidate.transaction_id)
                if txn is None or not txn.is_overdue(as_of):
                    continue
                swept = replace(
                    txn,
                    status=TransactionStatus.OVERDUE,
                    fine_amount=self.fine_as_of(txn, as_of),
                )
                if swept != txn:
                    self.transactions.save(swept)
                    logger.debug(
                        "[sweep] %s overdue by %d day(s) fine=%s",
                        swept.transaction_id,
                        swept.days_overdue(as_of),
                        swept.fine_amount,
                    )
            yield swept
