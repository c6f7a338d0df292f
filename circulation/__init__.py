"""
Library circulation core.

Exports key modules for convenient imports.
"""

from .domain import (
    MemberStatus,
    Member,
    Book,
    TransactionStatus,
    Transaction,
    assess_fine,
)

from .errors import (
    LendingError,
    NotFound,
    BookNotFound,
    MemberNotFound,
    TransactionNotFound,
    Conflict,
    OutOfStock,
    BookUnavailable,
    MemberNotActive,
    BorrowLimitReached,
    AlreadyReturned,
    InvalidTransition,
    DuplicateBook,
    DuplicateMember,
    InvalidInput,
    InvalidLoanPeriod,
    InvalidCapacity,
    InvalidBorrowLimit,
    InventoryInvariantViolated,
)

from .repositories import (
    BookRepo,
    MemberRepo,
    TransactionRepo,
)

from .config import Settings, settings, configure_logging
from .inventory import InventoryGuard
from .ledger import LoanLedger, OverdueSweep
from .eligibility import EligibilityChecker
from .services import LendingWorkflow
from .sweeper import OverdueSweeper
from .api import LibrarySystem

__all__ = [
    # domain
    "MemberStatus",
    "Member",
    "Book",
    "TransactionStatus",
    "Transaction",
    "assess_fine",
    # errors
    "LendingError",
    "NotFound",
    "BookNotFound",
    "MemberNotFound",
    "TransactionNotFound",
    "Conflict",
    "OutOfStock",
    "BookUnavailable",
    "MemberNotActive",
    "BorrowLimitReached",
    "AlreadyReturned",
    "InvalidTransition",
    "DuplicateBook",
    "DuplicateMember",
    "InvalidInput",
    "InvalidLoanPeriod",
    "InvalidCapacity",
    "InvalidBorrowLimit",
    "InventoryInvariantViolated",
    # stores
    "BookRepo",
    "MemberRepo",
    "TransactionRepo",
    # config
    "Settings",
    "settings",
    "configure_logging",
    # core
    "InventoryGuard",
    "LoanLedger",
    "OverdueSweep",
    "EligibilityChecker",
    "LendingWorkflow",
    "OverdueSweeper",
    # api
    "LibrarySystem",
]
