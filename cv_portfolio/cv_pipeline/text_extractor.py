"""Extract raw text from uploaded CV files (PDF, DOCX, TXT).

PDF text comes from pdfplumber, which joins the fragments of one line with a
single space; pages are kept in document order and joined with one newline.
Every failure path returns an empty string: callers treat "" as "extraction
failed".
"""

import re
import unicodedata
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Union

import pdfplumber
from docx import Document

from cv_portfolio.utils.logger import get_logger

logger = get_logger(__name__)

Source = Union[bytes, str, Path]


def _normalize_unicode(text: str) -> str:
    """Normalize unicode (NFC) and replace problematic chars."""
    if not text:
        return ""
    return unicodedata.normalize("NFC", text).replace("\x00", "")


def _clean_cv_text(text: str) -> str:
    """Remove excessive whitespace and normalize unicode for CV content."""
    if not text or not text.strip():
        return ""
    t = _normalize_unicode(text)
    t = re.sub(r"[ \t]+", " ", t)
    t = re.sub(r"\n\s*\n\s*\n", "\n\n", t)
    return t.strip()


def _open_source(source: Source) -> Union[BinaryIO, str]:
    if isinstance(source, (bytes, bytearray)):
        return BytesIO(source)
    return str(source)


def _read_bytes(source: Source) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    return Path(source).read_bytes()


def _extract_pdf(source: Source) -> str:
    """Extract text from PDF using pdfplumber."""
    try:
        with pdfplumber.open(_open_source(source)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
        return "\n".join(pages)
    except Exception as e:
        logger.warning("PDF extraction failed: %s", e)
        return ""


def _extract_docx(source: Source) -> str:
    """Extract text from DOCX using python-docx (paragraphs, then table cells)."""
    try:
        doc = Document(_open_source(source))
        parts = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [c.text.strip() for c in row.cells if c.text.strip()]
                if cells:
                    parts.append(" | ".join(cells))
        return "\n".join(parts)
    except Exception as e:
        logger.warning("DOCX extraction failed: %s", e)
        return ""


def _extract_plain(source: Source) -> str:
    """Read file content as UTF-8 text."""
    try:
        return _read_bytes(source).decode("utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Plain text read failed: %s", e)
        return ""


def file_kind(filename: str) -> str:
    """Declared kind of an upload, from its extension (e.g. '.pdf')."""
    return Path((filename or "").strip()).suffix.lower()


def extract_text_from_file(source: Source, filename: str) -> str:
    """
    Extract and clean text from an uploaded CV file.
    `source` is a path on disk or the raw file bytes; `filename` only decides the kind.
    Unknown extensions are read as UTF-8 text. Returns "" when nothing could be extracted.
    """
    kind = file_kind(filename)
    if kind == ".pdf":
        raw = _extract_pdf(source)
    elif kind == ".docx":
        raw = _extract_docx(source)
    else:
        if kind != ".txt":
            logger.info("Unknown file type %r; trying UTF-8 text read", kind or filename)
        raw = _extract_plain(source)
    return _clean_cv_text(raw)
