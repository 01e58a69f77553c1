"""Helper utilities for the CV portfolio service."""

import asyncio
import re
import secrets
from datetime import datetime, timezone
from typing import Any, Coroutine, List, TypeVar

EMAIL_PATTERN = r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"
PORTFOLIO_ID_PATTERN = re.compile(r"^[0-9a-f]{4,32}$")

T = TypeVar("T")


def extract_emails(text: str) -> List[str]:
    """Extract email addresses from text using regex."""
    if not text:
        return []
    return list(dict.fromkeys(re.findall(EMAIL_PATTERN, text)))


def normalize_email(email: str) -> str:
    """Identity key for an owner: trimmed and lower-cased."""
    return (email or "").strip().lower()


def new_portfolio_id(nbytes: int = 4) -> str:
    """Short random hex token used as a portfolio id."""
    return secrets.token_hex(nbytes)


def is_portfolio_id(value: str) -> bool:
    """True for ids shaped like new_portfolio_id output; rejects path segments."""
    return bool(PORTFOLIO_ID_PATTERN.match(value or ""))


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a coroutine to completion on a fresh event loop.
    Safe to call from sync context (e.g. Streamlit reruns).
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()
