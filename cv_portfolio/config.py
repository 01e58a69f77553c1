"""Configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    return int(value) if value else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    return float(value) if value else default


# API keys – never hardcode
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "")
MODEL_NAME: str = os.getenv("MODEL_NAME", "gpt-4o-mini")

# Timeouts
LLM_TIMEOUT_SECONDS: float = _env_float("LLM_TIMEOUT_SECONDS", 120.0)
HTTP_TIMEOUT_SECONDS: float = _env_float("HTTP_TIMEOUT_SECONDS", 30.0)

# Extraction limits
MIN_TEXT_CHARS: int = _env_int("MIN_TEXT_CHARS", 20)  # Below this, extraction counts as failed
MAX_CV_CHARS: int = _env_int("MAX_CV_CHARS", 30000)  # Pre-flight cut before the LLM call
SUMMARY_MAX_WORDS: int = _env_int("SUMMARY_MAX_WORDS", 50)

# Publishing
BASE_HOST: str = os.getenv("BASE_HOST", "http://localhost:8000")
DEFAULT_THEME: str = os.getenv("DEFAULT_THEME", "light")
AVAILABLE_THEMES: list = ["light", "dark", "minimal", "classic"]

# Storage layout
DATA_DIR: Path = Path(os.getenv("DATA_DIR", "data"))
UPLOAD_DIR: Path = Path(os.getenv("UPLOAD_DIR", str(DATA_DIR / "uploads")))
PORTFOLIOS_DIR: Path = Path(os.getenv("PORTFOLIOS_DIR", str(DATA_DIR / "portfolios")))
IDENTITY_STORE_PATH: Path = Path(os.getenv("IDENTITY_STORE_PATH", str(DATA_DIR / "portfolio_map.json")))
VIEWS_STORE_PATH: Path = Path(os.getenv("VIEWS_STORE_PATH", str(DATA_DIR / "views.json")))

# Base site for new portfolios: local directory, or a remote origin when TEMPLATE_ORIGIN_URL is set
TEMPLATE_DIR: Path = Path(os.getenv("TEMPLATE_DIR", str(_base / "templates" / "base_site")))
TEMPLATE_ORIGIN_URL: str = os.getenv("TEMPLATE_ORIGIN_URL", "")
ENTRY_PAGE: str = "index.html"

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Fixed skill categories the prompt and the normalizer agree on.
# Changing this list is a breaking change for stored and served records.
SKILL_CATEGORIES: tuple = (
    "Backend",
    "Architecture",
    "Databases",
    "Cloud / DevOps",
    "Frontend",
    "AI / Tools",
    "Authentication",
    "Testing",
    "Version Control",
    "Soft Skills",
    "Project Management",
    "Operating Systems",
    "Build Tools",
    "Languages",
)
