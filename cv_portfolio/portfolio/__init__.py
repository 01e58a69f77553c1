"""Portfolio publishing: identity-keyed static sites, serving and view tracking."""

from cv_portfolio.portfolio.artifact_server import ArtifactServer, ServedFile
from cv_portfolio.portfolio.publisher import PortfolioPublisher
from cv_portfolio.portfolio.store import JsonStore
from cv_portfolio.portfolio.template_source import TemplateSource
from cv_portfolio.portfolio.view_tracker import ViewTracker, source_address_from_headers

__all__ = [
    "ArtifactServer",
    "ServedFile",
    "PortfolioPublisher",
    "JsonStore",
    "TemplateSource",
    "ViewTracker",
    "source_address_from_headers",
]
