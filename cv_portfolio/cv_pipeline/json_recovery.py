"""Recover a JSON object from a noisy LLM completion.

Completions may wrap the answer in markdown fences or prose. After stripping
fences the whole string is parsed strictly; if that does not give an object,
the text between the first ``{`` and the last ``}`` is parsed instead. The
brace search is a heuristic: an example JSON snippet emitted before the real
answer will be swallowed into the slice and usually fail as InvalidJson.
"""

import json
import re
from typing import Any, Dict

from cv_portfolio.cv_pipeline.normalizer import normalize_cv
from cv_portfolio.errors import InvalidJson, NoJsonFound
from cv_portfolio.schemas.cv_record import CVRecord
from cv_portfolio.utils.logger import get_logger

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers anywhere in the text, then trim."""
    return _FENCE_RE.sub("", text or "").strip()


def extract_json_object(raw: str) -> Dict[str, Any]:
    """Return the JSON object embedded in raw; raises NoJsonFound / InvalidJson."""
    text = strip_code_fences(raw)

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed

    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last < first:
        logger.warning("No JSON object in model output (%s chars)", len(raw or ""))
        raise NoJsonFound("No JSON found", raw=raw)

    try:
        parsed = json.loads(text[first : last + 1])
    except json.JSONDecodeError as e:
        logger.warning("Model output is not valid JSON (%s chars): %s", len(raw or ""), e.msg)
        raise InvalidJson("Invalid JSON", raw=raw) from e
    return parsed


def recover_cv_json(raw: str) -> CVRecord:
    """Parse a model completion into a normalized CVRecord."""
    return normalize_cv(extract_json_object(raw))
