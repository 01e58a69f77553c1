"""Tests for recovering JSON from noisy model output."""

from __future__ import annotations

import json

import pytest

from cv_portfolio.cv_pipeline.json_recovery import extract_json_object, recover_cv_json, strip_code_fences
from cv_portfolio.cv_pipeline.normalizer import normalize_cv
from cv_portfolio.errors import InvalidJson, NoJsonFound, RecoveryFailure


def test_clean_json_round_trips(sample_record: dict) -> None:
    normalized = normalize_cv(sample_record).model_dump()
    assert recover_cv_json(json.dumps(normalized)).model_dump() == normalized


def test_fenced_output_matches_unfenced(sample_record: dict) -> None:
    payload = json.dumps(sample_record, indent=2)
    fenced = f"```json\n{payload}\n```"
    assert recover_cv_json(fenced) == recover_cv_json(payload)


def test_uppercase_and_untagged_fences() -> None:
    assert extract_json_object('```JSON\n{"name": "A"}\n```') == {"name": "A"}
    assert extract_json_object('```\n{"name": "B"}\n```') == {"name": "B"}


def test_prose_around_json_is_ignored() -> None:
    raw = 'Sure! Here is the parsed CV:\n{"name": "Jane", "contact": {"email": "j@x.io"}}\nLet me know.'
    record = recover_cv_json(raw)
    assert record.name == "Jane"
    assert record.contact.email == "j@x.io"


def test_no_braces_raises_no_json_found() -> None:
    raw = "I could not read this CV, sorry."
    with pytest.raises(NoJsonFound) as info:
        recover_cv_json(raw)
    assert info.value.raw == raw
    assert isinstance(info.value, RecoveryFailure)


def test_closing_brace_before_opening_is_no_json() -> None:
    with pytest.raises(NoJsonFound):
        extract_json_object("} nothing here {")


def test_broken_json_raises_invalid_json() -> None:
    raw = '```json\n{"name": "Jane", "skills": {"Backend": ["Python",]}\n```'
    with pytest.raises(InvalidJson) as info:
        recover_cv_json(raw)
    assert info.value.raw == raw


def test_json_array_falls_back_to_brace_slice() -> None:
    assert extract_json_object('[{"name": "Jane"}]') == {"name": "Jane"}


def test_empty_output_is_no_json() -> None:
    with pytest.raises(NoJsonFound):
        recover_cv_json("")


def test_strip_code_fences_anywhere() -> None:
    assert strip_code_fences("  text ```json {} ``` more  ") == "text  {}  more"
