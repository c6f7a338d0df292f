import logging
import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@dataclass(frozen=True)
class Settings:
    # Loan policy
    default_loan_days: int = int(os.getenv("LIBRARY_DEFAULT_LOAN_DAYS", "14"))
    fine_per_day: Decimal = Decimal(os.getenv("LIBRARY_FINE_PER_DAY", "1"))

    # Membership defaults
    default_max_books: int = int(os.getenv("LIBRARY_DEFAULT_MAX_BOOKS", "5"))

    # Overdue sweep
    sweep_interval_seconds: float = float(os.getenv("LIBRARY_SWEEP_INTERVAL_SECONDS", "3600"))

    log_level: str = os.getenv("LIBRARY_LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        if self.default_loan_days < 1:
            raise ValueError("default_loan_days must be at least 1")
        if self.fine_per_day < 0:
            raise ValueError("fine_per_day cannot be negative")
        if self.default_max_books < 1:
            raise ValueError("default_max_books must be at least 1")
        if self.sweep_interval_seconds <= 0:
            raise ValueError("sweep_interval_seconds must be positive")


settings = Settings()


def configure_logging(level: str = settings.log_level) -> logging.Logger:
    """Attach one stream handler to the package logger. Safe to call twice."""
    logger = logging.getLogger("circulation")
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
