"""Publish a CV record as a static portfolio site, one live site per owner email."""

import asyncio
import json
import shutil
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from cv_portfolio.config import BASE_HOST, DEFAULT_THEME, ENTRY_PAGE, IDENTITY_STORE_PATH, PORTFOLIOS_DIR
from cv_portfolio.errors import MissingIdentity, PublishFailed, StoreError
from cv_portfolio.portfolio.store import JsonStore
from cv_portfolio.portfolio.template_source import TemplateSource
from cv_portfolio.schemas.cv_record import CVRecord
from cv_portfolio.schemas.portfolio import PortfolioRecord, PublishResult
from cv_portfolio.utils.helpers import is_portfolio_id, new_portfolio_id, normalize_email, utc_now_iso
from cv_portfolio.utils.logger import get_logger

logger = get_logger(__name__)


def _mapping_entry(entry: Any) -> Optional[PortfolioRecord]:
    """Parse one identity-map value; malformed entries count as no mapping."""
    if not entry:
        return None
    try:
        record = PortfolioRecord.model_validate(entry)
    except ValidationError:
        logger.warning("Discarding malformed identity mapping entry")
        return None
    return record if is_portfolio_id(record.id) else None


def _script_json(value) -> str:
    """JSON safe to inline in a <script> tag."""
    return json.dumps(value, ensure_ascii=False).replace("</", "<\\/")


def render_init_script(record: CVRecord, theme: str) -> str:
    return (
        "<script>"
        f"window.__PORTFOLIO_DATA__ = {_script_json(record.model_dump())};"
        f"window.__PORTFOLIO_THEME__ = {_script_json(theme)};"
        "</script>"
    )


def inject_portfolio_data(html: str, record: CVRecord, theme: str, base_href: str = "") -> str:
    """Embed the CV record and theme in the entry page, before </head> when present."""
    script = render_init_script(record, theme)
    if base_href:
        script = f'<base href="{base_href}">' + script
    lower = html.lower()
    idx = lower.find("</head>")
    if idx == -1:
        idx = lower.find("<body")
    if idx == -1:
        return script + "\n" + html
    return html[:idx] + script + "\n" + html[idx:]


class PortfolioPublisher:
    """
    Maps normalized owner email -> portfolio id in a JsonStore and keeps one
    artifact directory per id under `portfolios_dir`. The identity lookup and
    the mapping write happen inside one store transaction.
    """

    def __init__(
        self,
        portfolios_dir: Union[str, Path] = PORTFOLIOS_DIR,
        identity_store: Optional[JsonStore] = None,
        template: Optional[TemplateSource] = None,
        base_host: str = BASE_HOST,
        default_theme: str = DEFAULT_THEME,
    ):
        self.portfolios_dir = Path(portfolios_dir)
        self.identity_store = identity_store or JsonStore(IDENTITY_STORE_PATH)
        self.template = template or TemplateSource()
        self.base_host = base_host.rstrip("/")
        self.default_theme = default_theme

    def artifact_dir(self, portfolio_id: str) -> Path:
        return self.portfolios_dir / portfolio_id

    def artifact_exists(self, portfolio_id: str) -> bool:
        return (self.artifact_dir(portfolio_id) / ENTRY_PAGE).is_file()

    def public_url(self, portfolio_id: str) -> str:
        return f"{self.base_host}/p/{portfolio_id}"

    def _mint_id(self) -> str:
        portfolio_id = new_portfolio_id()
        while self.artifact_dir(portfolio_id).exists():
            portfolio_id = new_portfolio_id()
        return portfolio_id

    async def _create_artifact(self, portfolio_id: str, record: CVRecord, theme: str) -> None:
        dest = self.artifact_dir(portfolio_id)
        self.portfolios_dir.mkdir(parents=True, exist_ok=True)
        try:
            await self.template.materialize(dest)
            entry = dest / ENTRY_PAGE
            html = await asyncio.to_thread(entry.read_text, encoding="utf-8")
            html = inject_portfolio_data(html, record, theme, base_href=f"/p/{portfolio_id}/")
            await asyncio.to_thread(entry.write_text, html, encoding="utf-8")
        except BaseException:
            await asyncio.to_thread(shutil.rmtree, dest, ignore_errors=True)
            raise

    async def publish(self, record: CVRecord, theme: str = "") -> PublishResult:
        owner = normalize_email(record.contact.email)
        if not owner:
            raise MissingIdentity("A contact email is required to publish a portfolio")
        theme = (theme or "").strip() or self.default_theme

        created_id = None
        try:
            async with self.identity_store.transaction() as mapping:
                current = _mapping_entry(mapping.get(owner))
                if current and self.artifact_exists(current.id):
                    logger.info("Portfolio %s reused for existing owner", current.id)
                    return PublishResult(id=current.id, url=self.public_url(current.id), is_existing=True)
                if current:
                    logger.info("Portfolio %s is gone; minting a new one", current.id)
                    await asyncio.to_thread(shutil.rmtree, self.artifact_dir(current.id), ignore_errors=True)

                created_id = self._mint_id()
                await self._create_artifact(created_id, record, theme)
                mapping[owner] = PortfolioRecord(
                    id=created_id,
                    owner_email=owner,
                    created_at=utc_now_iso(),
                    theme=theme,
                ).model_dump(by_alias=True)
        except PublishFailed:
            raise
        except (StoreError, OSError, ValueError) as e:
            if created_id:
                await asyncio.to_thread(shutil.rmtree, self.artifact_dir(created_id), ignore_errors=True)
            logger.error("Publish failed: %s", e)
            raise PublishFailed("Could not publish portfolio") from e

        logger.info("Portfolio %s published", created_id)
        return PublishResult(id=created_id, url=self.public_url(created_id), is_existing=False)

    async def lookup(self, email: str) -> Optional[PortfolioRecord]:
        """Live portfolio for an owner, or None."""
        owner = normalize_email(email)
        record = _mapping_entry((await self.identity_store.load()).get(owner)) if owner else None
        return record if record and self.artifact_exists(record.id) else None

    async def unpublish(self, email: str) -> bool:
        """Remove an owner's mapping and artifact. Returns False when nothing was published."""
        owner = normalize_email(email)
        if not owner:
            raise MissingIdentity("A contact email is required to unpublish a portfolio")
        async with self.identity_store.transaction() as mapping:
            entry = mapping.pop(owner, None)
        if not entry:
            return False
        record = _mapping_entry(entry)
        if record:
            await asyncio.to_thread(shutil.rmtree, self.artifact_dir(record.id), ignore_errors=True)
        logger.info("Portfolio %s unpublished", record.id if record else "(malformed entry)")
        return True
