"""
HTTP API: CV upload/extraction, portfolio publishing and portfolio serving.
Routes stay thin; the pipeline and the portfolio services hold the logic.
"""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from cv_portfolio.config import UPLOAD_DIR
from cv_portfolio.cv_pipeline.cv_extractor import run_cv_pipeline, save_upload
from cv_portfolio.cv_pipeline.model_gateway import ModelGateway
from cv_portfolio.cv_pipeline.normalizer import normalize_cv
from cv_portfolio.errors import CVPortfolioError, NoInputFile, RecoveryFailure
from cv_portfolio.portfolio.artifact_server import ArtifactServer
from cv_portfolio.portfolio.publisher import PortfolioPublisher
from cv_portfolio.portfolio.view_tracker import ViewTracker, source_address_from_headers
from cv_portfolio.schemas.portfolio import ViewCounter
from cv_portfolio.utils.logger import get_logger

logger = get_logger(__name__)


class PublishRequest(BaseModel):
    cv: Dict[str, Any] = Field(default_factory=dict, description="CV record as returned by /upload-cv")
    theme: str = Field(default="", description="Theme selector for the published site")


def _error_body(exc: CVPortfolioError) -> Dict[str, Any]:
    # InternalError-coded failures never echo details (paths, keys) to clients
    message = "Internal server error" if exc.code == "InternalError" else exc.message
    body: Dict[str, Any] = {"error": exc.code, "message": message}
    if isinstance(exc, RecoveryFailure):
        body["raw"] = exc.raw or ""
    return body


def create_app(
    publisher: Optional[PortfolioPublisher] = None,
    tracker: Optional[ViewTracker] = None,
    server: Optional[ArtifactServer] = None,
    gateway: Optional[ModelGateway] = None,
    upload_dir: Union[str, Path] = UPLOAD_DIR,
) -> FastAPI:
    """Build the FastAPI app; collaborators default to config-driven instances."""
    publisher = publisher or PortfolioPublisher()
    tracker = tracker or ViewTracker()
    server = server or ArtifactServer(
        portfolios_dir=publisher.portfolios_dir,
        tracker=tracker,
        template=publisher.template,
    )

    app = FastAPI(title="CV Portfolio", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CVPortfolioError)
    async def _handle_known_error(request: Request, exc: CVPortfolioError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(Exception)
    async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "InternalError", "message": "Internal server error"})

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/upload-cv")
    async def upload_cv(cv: Optional[UploadFile] = File(None)) -> Dict[str, Any]:
        """Upload a CV (PDF/DOCX/TXT) and get the structured record plus the raw model text."""
        if cv is None or not cv.filename:
            raise NoInputFile("No file uploaded")
        original_name = cv.filename
        path = save_upload(await cv.read(), original_name, upload_dir)
        result = await run_cv_pipeline(path, original_name, gateway=gateway)
        return {
            "extracted": result.record.model_dump(),
            "raw": result.raw,
            "cvUploaded": {
                "originalName": original_name,
                "uploadDate": datetime.now(timezone.utc).isoformat(timespec="seconds"),
                "textChars": result.text_chars,
            },
        }

    @app.post("/publish")
    async def publish(body: PublishRequest) -> Dict[str, Any]:
        result = await publisher.publish(normalize_cv(body.cv), body.theme)
        return {"id": result.id, "url": result.url, "isExisting": result.is_existing}

    @app.get("/api/portfolio/{portfolio_id}/stats")
    async def portfolio_stats(portfolio_id: str) -> Dict[str, Any]:
        server.artifact_root(portfolio_id)
        stats = await tracker.get_stats(portfolio_id) or ViewCounter()
        return stats.model_dump(by_alias=True)

    @app.get("/p/{portfolio_id}")
    @app.get("/p/{portfolio_id}/{path:path}")
    async def serve_portfolio(portfolio_id: str, request: Request, path: str = "") -> Response:
        served = await server.serve(portfolio_id, path, source_address_from_headers(request.headers))
        return Response(content=served.content, media_type=served.media_type)

    return app


app = create_app()


def main() -> None:
    """Run the API with uvicorn. Use: cv-portfolio-api"""
    import uvicorn

    uvicorn.run(
        "cv_portfolio.api:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
