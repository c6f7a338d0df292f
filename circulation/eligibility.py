from __future__ import annotations
import logging

from .domain import Member
from .errors import BorrowLimitReached, MemberNotActive, MemberNotFound
from .ledger import LoanLedger
from .repositories import MemberRepo

logger = logging.getLogger(__name__)


class EligibilityChecker:
    def __init__(self, members: MemberRepo, ledger: LoanLedger) -> None:
        self.members = members
        self.ledger = ledger

    def check_eligible(self, member_id: str) -> Member:
        """Return the member if they may start a new loan, raise otherwise.

        The active count is recomputed from the ledger on every call. Callers
        must hold the member's lock until the new transaction is recorded.
        """
        member = self.members.get(member_id)
        if member is None:
            raise MemberNotFound(member_id)
        if not member.can_borrow():
            logger.warning("[eligibility] member=%s status=%s", member_id, member.status.value)
            raise MemberNotActive(member_id, member.status)

        active = self.ledger.count_active(member_id)
        if active >= member.max_books_allowed:
            logger.warning(
                "[eligibility] member=%s at limit (%d/%d)",
                member_id,
                active,
                member.max_books_allowed,
            )
            raise BorrowLimitReached(member_id, member.max_books_allowed)
        return member
