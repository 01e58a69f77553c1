"""Error taxonomy for the CV pipeline and portfolio publishing.

Each error carries a stable ``code`` (returned to API clients) and the HTTP
status the API layer maps it to.
"""

from typing import Optional


class CVPortfolioError(Exception):
    """Base class for every expected failure in this package."""

    code: str = "InternalError"
    status_code: int = 500

    def __init__(self, message: str = "", *, raw: Optional[str] = None):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.raw = raw


class NoInputFile(CVPortfolioError):
    """Request carried no uploadable file."""

    code = "NoFileUploaded"
    status_code = 400


class ExtractionEmpty(CVPortfolioError):
    """Extracted text is shorter than the minimum viable length."""

    code = "ExtractionFailed"
    status_code = 400


class GatewayError(CVPortfolioError):
    """The LLM provider call failed outright."""

    code = "GatewayFailure"
    status_code = 500


class GatewayTimeout(GatewayError):
    code = "GatewayTimeout"
    status_code = 504


class RecoveryFailure(CVPortfolioError):
    """Model responded but its output could not be turned into JSON."""

    code = "RecoveryFailure"
    status_code = 500


class NoJsonFound(RecoveryFailure):
    code = "NoJsonFound"


class InvalidJson(RecoveryFailure):
    code = "InvalidJson"


class MissingIdentity(CVPortfolioError):
    """Publish requested without a usable contact email."""

    code = "MissingIdentity"
    status_code = 400


class PublishFailed(CVPortfolioError):
    code = "PublishFailed"
    status_code = 500


class TemplateUnavailable(PublishFailed):
    """Base site could not be fetched from its origin."""


class ArtifactNotFound(CVPortfolioError):
    code = "ArtifactNotFound"
    status_code = 404


class StoreError(CVPortfolioError):
    """Persisted store could not be read or written."""

    code = "InternalError"
    status_code = 500
