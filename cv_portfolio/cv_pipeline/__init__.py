"""CV upload pipeline: text extraction (PDF/DOCX/TXT), prompting, JSON recovery, normalization."""

from cv_portfolio.cv_pipeline.cv_extractor import run_cv_pipeline, run_cv_pipeline_sync, save_upload
from cv_portfolio.cv_pipeline.json_recovery import extract_json_object, recover_cv_json
from cv_portfolio.cv_pipeline.model_gateway import ModelGateway
from cv_portfolio.cv_pipeline.normalizer import normalize_cv
from cv_portfolio.cv_pipeline.prompt_builder import build_cv_prompt
from cv_portfolio.cv_pipeline.text_extractor import extract_text_from_file

__all__ = [
    "run_cv_pipeline",
    "run_cv_pipeline_sync",
    "save_upload",
    "extract_text_from_file",
    "build_cv_prompt",
    "ModelGateway",
    "extract_json_object",
    "recover_cv_json",
    "normalize_cv",
]
