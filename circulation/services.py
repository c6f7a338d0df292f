from __future__ import annotations
import logging
from datetime import date
from typing import List, Optional

from .domain import Transaction, TransactionStatus
from .eligibility import EligibilityChecker
from .errors import (
    BookNotFound,
    BookUnavailable,
    InvalidTransition,
    InventoryInvariantViolated,
    MemberNotFound,
)
from .inventory import InventoryGuard
from .ledger import LoanLedger, OverdueSweep
from .locks import KeyedLocks
from .repositories import BookRepo, MemberRepo

logger = logging.getLogger(__name__)


class LendingWorkflow:
    """Borrow and return as single units of work.

    Lock order is member, then book (inside the guard), then ledger. The
    member lock spans the eligibility check, the reservation and the new
    record, so two borrows by one member cannot both pass the limit check.
    """

    def __init__(
        self,
        books: BookRepo,
        members: MemberRepo,
        inventory: InventoryGuard,
        eligibility: EligibilityChecker,
        ledger: LoanLedger,
    ) -> None:
        self.books = books
        self.members = members
        self.inventory = inventory
        self.eligibility = eligibility
        self.ledger = ledger
        self._member_locks = KeyedLocks()

    def borrow(
        self,
        book_id: str,
        member_id: str,
        loan_days: Optional[int] = None,
        as_of: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> Transaction:
        book = self.books.get_book(book_id)
        if book is None:
            raise BookNotFound(book_id)
        if not book.is_available:
            logger.warning("[borrow] book=%s has no copies on the shelf", book_id)
            raise BookUnavailable(book_id)
        if self.members.get(member_id) is None:
            raise MemberNotFound(member_id)

        with self._member_locks.hold(member_id):
            self.eligibility.check_eligible(member_id)
            self.inventory.reserve(book_id)
            try:
                txn = self.ledger.create(book_id, member_id, loan_days, as_of, notes)
            except Exception:
                logger.warning("[borrow] ledger rejected loan, releasing copy of book=%s", book_id)
                self.inventory.release(book_id)
                raise

        logger.info("[borrow] %s member=%s book=%s", txn.transaction_id, member_id, book_id)
        return txn

    def return_book(self, transaction_id: str, as_of: Optional[date] = None) -> Transaction:
        member_id = self.ledger.get(transaction_id).member_id
        with self._member_locks.hold(member_id):
            txn = self.ledger.finalize_return(transaction_id, as_of)
            try:
                self.inventory.release(txn.book_id)
            except InventoryInvariantViolated as exc:
                exc.transaction_id = transaction_id
                logger.critical(
                    "[return] %s marked RETURNED but copy not released: %s",
                    transaction_id,
                    exc,
                )
                raise
            except BookNotFound as exc:
                logger.critical(
                    "[return] %s marked RETURNED but book=%s is gone from the catalog",
                    transaction_id,
                    txn.book_id,
                )
                raise InventoryInvariantViolated(
                    txn.book_id, "book missing at release", transaction_id
                ) from exc

        logger.info("[return] %s book=%s fine=%s", transaction_id, txn.book_id, txn.fine_amount)
        return txn

    def report_lost(self, transaction_id: str, as_of: Optional[date] = None) -> Transaction:
        """Close an active loan as LOST and remove the copy from the collection."""
        txn = self.ledger.get(transaction_id)
        with self._member_locks.hold(txn.member_id):
            txn = self.ledger.get(transaction_id)
            if not txn.is_active:
                raise InvalidTransition(transaction_id, txn.status, TransactionStatus.LOST)
            # the member lock keeps the status fixed, so mark_lost cannot fail after this
            self.inventory.write_off(txn.book_id)
            txn = self.ledger.mark_lost(transaction_id, as_of)

        logger.info("[lost] %s book=%s fine=%s", transaction_id, txn.book_id, txn.fine_amount)
        return txn

    def delete_transaction(self, transaction_id: str) -> Transaction:
        """Administrative removal. Inventory is left as it is."""
        member_id = self.ledger.get(transaction_id).member_id
        with self._member_locks.hold(member_id):
            txn = self.ledger.delete(transaction_id)
        if txn.is_active:
            logger.warning(
                "[delete] %s was %s; one copy of book=%s stays counted as on loan",
                transaction_id,
                txn.status.value,
                txn.book_id,
            )
        else:
            logger.info("[delete] %s", transaction_id)
        return txn

    def list_overdue(self, as_of: Optional[date] = None) -> OverdueSweep:
        return self.ledger.list_overdue(as_of)

    def list_active_for_member(self, member_id: str) -> List[Transaction]:
        if self.members.get(member_id) is None:
            raise MemberNotFound(member_id)
        return self.ledger.list_active_for_member(member_id)
