"""Base site for new portfolios: a local template directory or a remote origin."""

import asyncio
import shutil
from pathlib import Path
from typing import Optional, Union

import httpx

from cv_portfolio.config import ENTRY_PAGE, HTTP_TIMEOUT_SECONDS, TEMPLATE_DIR, TEMPLATE_ORIGIN_URL
from cv_portfolio.errors import TemplateUnavailable
from cv_portfolio.utils.logger import get_logger

logger = get_logger(__name__)


class TemplateSource:
    """
    Copies the base site into a new artifact directory.
    With `origin_url` set, only the entry page is fetched at publish time and
    other assets are proxied per request through `fetch_asset`.
    """

    def __init__(
        self,
        template_dir: Union[str, Path] = TEMPLATE_DIR,
        origin_url: str = TEMPLATE_ORIGIN_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.template_dir = Path(template_dir)
        self.origin_url = (origin_url or "").rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def is_remote(self) -> bool:
        return bool(self.origin_url)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def fetch_asset(self, path: str) -> Optional[bytes]:
        """Fetch one file from the remote origin; None when the origin has no such file."""
        if not self.is_remote:
            return None
        url = f"{self.origin_url}/{path.lstrip('/')}"
        try:
            async with self._client() as client:
                response = await client.get(url)
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as e:
            logger.warning("HTTP error %s fetching template asset %s", e.response.status_code, path)
            raise TemplateUnavailable(f"Template origin returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Template origin request failed for %s: %s", path, e)
            raise TemplateUnavailable("Template origin unreachable") from e

    async def materialize(self, dest: Path) -> None:
        """Create `dest` holding a fresh copy of the base site."""
        if self.is_remote:
            entry = await self.fetch_asset(ENTRY_PAGE)
            if entry is None:
                raise TemplateUnavailable("Template origin has no entry page")
            dest.mkdir(parents=True)
            await asyncio.to_thread((dest / ENTRY_PAGE).write_bytes, entry)
            return
        if not (self.template_dir / ENTRY_PAGE).is_file():
            raise TemplateUnavailable("Template directory has no entry page")
        await asyncio.to_thread(shutil.copytree, self.template_dir, dest)
