"""Prompt template for LLM-based CV extraction."""

import json

from cv_portfolio.config import MAX_CV_CHARS, SKILL_CATEGORIES, SUMMARY_MAX_WORDS
from cv_portfolio.utils.logger import get_logger

logger = get_logger(__name__)

# Bump when field names or skill categories change; the normalizer depends on both.
PROMPT_VERSION = "2"

TRUNCATION_MARKER = "\n\n[Content truncated.]"

_SKILLS_BLOCK = json.dumps({category: [] for category in SKILL_CATEGORIES}, indent=2)

CV_EXTRACTION_PROMPT = """You are a highly accurate CV parsing assistant.
You must extract structured data from the CV and respond ONLY in valid JSON.

Return a single JSON object with exactly these keys:
- name (string)
- position (string)
- professional_summary (string, max {summary_max_words} words)
- experience_years (string, e.g. "5", "3+")
- linkedin (string)
- github (string)
- skills (object, grouped exactly as below)
- experience (array of {{"company": string, "role": string, "start_date": string, "end_date": string, "description": [string]}})
- projects (array of {{"title": string, "tech": string, "description": string}})
- awards (array)
- education (array)
- certifications (array)
- contact ({{"email": string, "phone": string, "location": string}})
- keywords (array of strings)

Skills format MUST be exactly:

"skills": {skills_block}

Rules:
- Do NOT invent data
- If not found, return empty string or empty array
- JSON ONLY, no explanation, no markdown, no code block
- professional_summary max {summary_max_words} words

CV CONTENT:
"""


def truncate_cv_text(text: str, max_chars: int = MAX_CV_CHARS) -> str:
    """Cut CV text to max_chars so oversized documents do not fail provider-side."""
    text = text or ""
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    logger.warning("CV text truncated from %s to %s chars before prompting", len(text), max_chars)
    return text[:max_chars] + TRUNCATION_MARKER


def build_cv_prompt(text: str, max_chars: int = MAX_CV_CHARS) -> str:
    """Render the extraction instructions with the CV text appended verbatim at the end."""
    header = CV_EXTRACTION_PROMPT.format(
        summary_max_words=SUMMARY_MAX_WORDS,
        skills_block=_SKILLS_BLOCK,
    )
    return header + truncate_cv_text(text, max_chars)
