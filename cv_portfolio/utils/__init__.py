"""Utility exports."""

from .helpers import extract_emails, is_portfolio_id, new_portfolio_id, normalize_email, run_sync, utc_now_iso
from .logger import get_logger

__all__ = [
    "get_logger",
    "extract_emails",
    "normalize_email",
    "new_portfolio_id",
    "is_portfolio_id",
    "run_sync",
    "utc_now_iso",
]
