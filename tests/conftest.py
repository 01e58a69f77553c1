"""Shared fixtures: sample documents, a fake model gateway and temp-dir services."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import pytest

from cv_portfolio.portfolio.artifact_server import ArtifactServer
from cv_portfolio.portfolio.publisher import PortfolioPublisher
from cv_portfolio.portfolio.store import JsonStore
from cv_portfolio.portfolio.template_source import TemplateSource
from cv_portfolio.portfolio.view_tracker import ViewTracker

SAMPLE_CV_TEXT = (
    "Jane Doe\n"
    "Senior Backend Engineer\n"
    "Email: jane.doe@example.com | Phone: +1 555 0100 | Berlin\n"
    "Skills: Python, FastAPI, PostgreSQL, Docker\n"
    "Experience: Acme Corp, Backend Engineer, 2019 - Present\n"
)

SAMPLE_RECORD = {
    "name": "Jane Doe",
    "position": "Senior Backend Engineer",
    "professional_summary": "Backend engineer building APIs.",
    "experience_years": "6",
    "linkedin": "https://linkedin.com/in/janedoe",
    "github": "https://github.com/janedoe",
    "skills": {
        "Backend": ["Python", "FastAPI"],
        "Databases": ["PostgreSQL"],
        "Cloud / DevOps": ["Docker"],
    },
    "experience": [
        {
            "company": "Acme Corp",
            "role": "Backend Engineer",
            "start_date": "2019",
            "end_date": "Present",
            "description": "Built payment APIs.",
        }
    ],
    "projects": [{"title": "Ledger", "tech": ["Python", "Kafka"], "description": "Event-sourced ledger"}],
    "awards": [],
    "education": [{"degree": "BSc Computer Science", "year": "2016"}],
    "certifications": ["AWS SAA"],
    "contact": {"email": "jane.doe@example.com", "phone": "+1 555 0100", "location": "Berlin"},
    "keywords": ["backend", "python"],
}


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: List[List[str]]) -> bytes:
    """Minimal PDF (Helvetica, one text run per line) with a correct xref table."""
    page_count = len(pages)
    font_num = 3
    first_page = 4
    objects: List[bytes] = []
    kids = " ".join(f"{first_page + 2 * i} 0 R" for i in range(page_count))
    objects.append(b"<< /Type /Catalog /Pages 2 0 R >>")
    objects.append(f"<< /Type /Pages /Kids [{kids}] /Count {page_count} >>".encode())
    objects.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")
    for i, lines in enumerate(pages):
        page_num = first_page + 2 * i
        content_num = page_num + 1
        objects.append(
            (
                f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 {font_num} 0 R >> >> /Contents {content_num} 0 R >>"
            ).encode()
        )
        ops = "".join(
            f"BT /F1 12 Tf 72 {720 - 18 * n} Td ({_pdf_escape(line)}) Tj ET\n" for n, line in enumerate(lines)
        ).encode()
        objects.append(b"<< /Length %d >>\nstream\n" % len(ops) + ops + b"endstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{num} 0 obj\n".encode() + body + b"\nendobj\n"
    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += f"{off:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode()
    return bytes(out)


class FakeGateway:
    """Stands in for ModelGateway: returns a canned completion or raises."""

    def __init__(self, raw: str = "", exc: Optional[Exception] = None):
        self.raw = raw
        self.exc = exc
        self.prompts: List[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.exc is not None:
            raise self.exc
        return self.raw


@pytest.fixture
def sample_record() -> dict:
    return json.loads(json.dumps(SAMPLE_RECORD))


@pytest.fixture
def sample_cv_file(tmp_path: Path) -> Path:
    path = tmp_path / "uploads" / "cv.txt"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(SAMPLE_CV_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    site = tmp_path / "base_site"
    (site / "assets").mkdir(parents=True)
    (site / "index.html").write_text(
        "<!doctype html><html><head><title>Portfolio</title></head><body><div id='app'></div></body></html>",
        encoding="utf-8",
    )
    (site / "assets" / "style.css").write_text("body { margin: 0; }", encoding="utf-8")
    return site


@pytest.fixture
def publisher(tmp_path: Path, template_dir: Path) -> PortfolioPublisher:
    return PortfolioPublisher(
        portfolios_dir=tmp_path / "portfolios",
        identity_store=JsonStore(tmp_path / "portfolio_map.json"),
        template=TemplateSource(template_dir=template_dir, origin_url=""),
        base_host="https://cv.example.org",
    )


@pytest.fixture
def tracker(tmp_path: Path) -> ViewTracker:
    return ViewTracker(JsonStore(tmp_path / "views.json"))


@pytest.fixture
def artifact_server(publisher: PortfolioPublisher, tracker: ViewTracker) -> ArtifactServer:
    return ArtifactServer(portfolios_dir=publisher.portfolios_dir, tracker=tracker, template=publisher.template)
