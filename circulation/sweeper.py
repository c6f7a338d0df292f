from __future__ import annotations
import logging
import threading
from datetime import date
from typing import Callable, List, Optional

from .domain import Transaction
from .ledger import LoanLedger

logger = logging.getLogger(__name__)


class OverdueSweeper:
    """Runs the overdue sweep on a fixed interval in a daemon thread."""

    def __init__(
        self,
        ledger: LoanLedger,
        interval: Optional[float] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.ledger = ledger
        self.interval = interval if interval is not None else ledger.config.sweep_interval_seconds
        self.clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def run_once(self) -> List[Transaction]:
        overdue = list(self.ledger.list_overdue(self.clock()))
        logger.info("[sweep] %d overdue loan(s)", len(overdue))
        return overdue

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.run_once()
            except Exception:
                logger.exception("[sweep] run failed")
            self._stop.wait(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="overdue-sweeper", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
