"""Serve files from published portfolio directories."""

import asyncio
import mimetypes
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from cv_portfolio.config import ENTRY_PAGE, PORTFOLIOS_DIR
from cv_portfolio.errors import ArtifactNotFound, TemplateUnavailable
from cv_portfolio.portfolio.template_source import TemplateSource
from cv_portfolio.portfolio.view_tracker import UNKNOWN_SOURCE, ViewTracker
from cv_portfolio.utils.helpers import is_portfolio_id
from cv_portfolio.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ServedFile:
    content: bytes
    media_type: str


def is_soft_route(request_path: str) -> bool:
    """A path whose last segment has no extension is an app route, not an asset."""
    return not PurePosixPath(request_path.strip("/")).suffix


def guess_media_type(name: str) -> str:
    media_type, _ = mimetypes.guess_type(name)
    return media_type or "application/octet-stream"


class ArtifactServer:
    """
    Resolves (portfolio id, sub-path) to file bytes. Soft routes fall back to the
    entry page and count a view; assets come from disk, else the template origin.
    """

    def __init__(
        self,
        portfolios_dir: Union[str, Path] = PORTFOLIOS_DIR,
        tracker: Optional[ViewTracker] = None,
        template: Optional[TemplateSource] = None,
    ):
        self.portfolios_dir = Path(portfolios_dir)
        self.tracker = tracker or ViewTracker()
        self.template = template or TemplateSource()

    def artifact_root(self, portfolio_id: str) -> Path:
        """Directory of a live portfolio; ArtifactNotFound for bad or unknown ids."""
        if not is_portfolio_id(portfolio_id):
            raise ArtifactNotFound("Portfolio not found")
        root = self.portfolios_dir / portfolio_id
        if not (root / ENTRY_PAGE).is_file():
            raise ArtifactNotFound("Portfolio not found")
        return root

    async def serve(self, portfolio_id: str, request_path: str = "", source_address: str = UNKNOWN_SOURCE) -> ServedFile:
        root = self.artifact_root(portfolio_id)

        if is_soft_route(request_path):
            content = await asyncio.to_thread((root / ENTRY_PAGE).read_bytes)
            await self.tracker.record_view(portfolio_id, source_address)
            return ServedFile(content=content, media_type="text/html; charset=utf-8")

        relative = request_path.strip("/")
        target = (root / relative).resolve()
        if not target.is_relative_to(root.resolve()):
            raise ArtifactNotFound("File not found")
        if target.is_file():
            content = await asyncio.to_thread(target.read_bytes)
            return ServedFile(content=content, media_type=guess_media_type(target.name))

        proxied = None
        if self.template.is_remote:
            try:
                proxied = await self.template.fetch_asset(relative)
            except TemplateUnavailable as e:
                logger.warning("Asset proxy failed for %s/%s: %s", portfolio_id, relative, e)
        if proxied is None:
            raise ArtifactNotFound("File not found")
        return ServedFile(content=proxied, media_type=guess_media_type(relative))
