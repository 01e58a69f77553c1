"""CV upload pipeline: extract text, prompt the LLM, recover and normalize the JSON."""

import asyncio
import os
import uuid
from pathlib import Path
from typing import Optional, Union

from cv_portfolio.config import MIN_TEXT_CHARS, UPLOAD_DIR
from cv_portfolio.cv_pipeline.json_recovery import recover_cv_json
from cv_portfolio.cv_pipeline.model_gateway import ModelGateway
from cv_portfolio.cv_pipeline.prompt_builder import build_cv_prompt
from cv_portfolio.cv_pipeline.text_extractor import extract_text_from_file, file_kind
from cv_portfolio.errors import ExtractionEmpty
from cv_portfolio.schemas.cv_record import CVExtraction, CVRecord
from cv_portfolio.utils.helpers import extract_emails, run_sync
from cv_portfolio.utils.logger import get_logger

logger = get_logger(__name__)


def save_upload(data: bytes, original_name: str, upload_dir: Union[str, Path] = UPLOAD_DIR) -> Path:
    """
    Write uploaded bytes to a uniquely named temp file, keeping the extension.
    Zero-byte uploads are written too; the pipeline reports them as empty text.
    """
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{uuid.uuid4().hex}{file_kind(original_name)}"
    path.write_bytes(data)
    return path


def _remove_upload(path: Path) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove uploaded file %s: %s", path.name, e)


def _merge_email_into_record(record: CVRecord, cv_text: str) -> CVRecord:
    """If the LLM didn't extract an email, try regex on the CV text."""
    if record.contact.email:
        return record
    emails = extract_emails(cv_text)
    if not emails:
        return record
    contact = record.contact.model_copy(update={"email": emails[0]})
    return record.model_copy(update={"contact": contact})


async def run_cv_pipeline(
    file_path: Union[str, Path],
    original_name: str,
    gateway: Optional[ModelGateway] = None,
    min_text_chars: int = MIN_TEXT_CHARS,
) -> CVExtraction:
    """
    Run the full CV pipeline on an uploaded file: extract text, call the LLM,
    recover and normalize the JSON. The uploaded file is always deleted.
    """
    path = Path(file_path)
    try:
        text = await asyncio.to_thread(extract_text_from_file, path, original_name)
        if len(text.strip()) < min_text_chars:
            logger.warning("Extracted text too short (%s chars) from %s", len(text.strip()), file_kind(original_name))
            raise ExtractionEmpty("Could not extract text from file or file is empty.")

        gateway = gateway or ModelGateway()
        raw = await gateway.complete(build_cv_prompt(text))
        record = _merge_email_into_record(recover_cv_json(raw), text)
        logger.info("CV extracted: chars=%s name=%r", len(text), record.name)
        return CVExtraction(record=record, raw=raw, text_chars=len(text), original_name=original_name)
    finally:
        await asyncio.to_thread(_remove_upload, path)


def run_cv_pipeline_sync(
    file_path: Union[str, Path],
    original_name: str,
    gateway: Optional[ModelGateway] = None,
) -> CVExtraction:
    """Synchronous wrapper around run_cv_pipeline."""
    return run_sync(run_cv_pipeline(file_path, original_name, gateway))
