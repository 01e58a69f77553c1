"""Per-portfolio view counters, persisted in a JsonStore keyed by portfolio id."""

from typing import Mapping, Optional

from cv_portfolio.config import VIEWS_STORE_PATH
from cv_portfolio.portfolio.store import JsonStore
from cv_portfolio.schemas.portfolio import ViewCounter, ViewEvent
from cv_portfolio.utils.helpers import utc_now_iso
from cv_portfolio.utils.logger import get_logger

logger = get_logger(__name__)

UNKNOWN_SOURCE = "unknown"


def source_address_from_headers(headers: Mapping[str, str]) -> str:
    """Best-effort client address: first X-Forwarded-For entry, else 'unknown'."""
    forwarded = ""
    for key, value in headers.items():
        if key.lower() == "x-forwarded-for":
            forwarded = value
            break
    first = forwarded.split(",")[0].strip() if forwarded else ""
    return first or UNKNOWN_SOURCE


class ViewTracker:
    def __init__(self, store: Optional[JsonStore] = None):
        self.store = store or JsonStore(VIEWS_STORE_PATH)

    async def record_view(self, portfolio_id: str, source_address: str = UNKNOWN_SOURCE) -> Optional[ViewCounter]:
        """
        Count one page view. Failures are logged and swallowed so a broken
        store never breaks page serving; returns None in that case.
        """
        try:
            async with self.store.transaction() as views:
                counter = ViewCounter.model_validate(views.get(portfolio_id) or {})
                source = source_address or UNKNOWN_SOURCE
                seen = any(e.source_address == source for e in counter.view_history)
                now = utc_now_iso()
                counter.total_views += 1
                if not seen:
                    counter.unique_views += 1
                counter.last_viewed = now
                counter.view_history.append(ViewEvent(timestamp=now, source_address=source))
                views[portfolio_id] = counter.model_dump(by_alias=True)
            return counter
        except Exception:
            logger.exception("View tracking failed for portfolio %s", portfolio_id)
            return None

    async def get_stats(self, portfolio_id: str) -> Optional[ViewCounter]:
        entry = (await self.store.load()).get(portfolio_id)
        return ViewCounter.model_validate(entry) if entry else None
