import threading
from datetime import date

from circulation import TransactionStatus


def test_run_once_uses_clock(lib, book, member):
    txn = lib.borrow(book.book_id, member.member_id, loan_days=2, as_of=date(2024, 1, 1))
    sweeper = lib.overdue_sweeper(interval=60)
    sweeper.clock = lambda: date(2024, 1, 10)

    overdue = sweeper.run_once()

    assert [t.transaction_id for t in overdue] == [txn.transaction_id]
    assert lib.ledger.get(txn.transaction_id).status is TransactionStatus.OVERDUE


def test_interval_defaults_to_config(lib):
    assert lib.overdue_sweeper().interval == lib.config.sweep_interval_seconds


def test_background_thread_sweeps_until_stopped(lib, book, member):
    txn = lib.borrow(book.book_id, member.member_id, loan_days=1, as_of=date(2024, 1, 1))
    swept = threading.Event()

    def clock():
        swept.set()
        return date(2024, 1, 5)

    sweeper = lib.overdue_sweeper(interval=0.01)
    sweeper.clock = clock
    sweeper.start()
    try:
        assert swept.wait(timeout=5)
        assert sweeper.running
    finally:
        sweeper.stop(timeout=5)

    assert not sweeper.running
    assert lib.ledger.get(txn.transaction_id).status is TransactionStatus.OVERDUE
