"""Unit tests for the preprocessor's character-count and PDF-safety heuristics."""

import pytest

from pagefit.contexts.preprocessing.pdf_safety import (
    MIN_TOTAL_CHARS,
    count_characters,
    estimate_content_height,
    is_pdf_safe,
)
from pagefit.contexts.preprocessing.resume_record import ResumeRecord


@pytest.mark.unit
def test_empty_record_height_and_chars():
    """Test the header-only height and the character floor."""
    record = ResumeRecord()

    assert estimate_content_height(record) == 80
    assert count_characters(record) == MIN_TOTAL_CHARS
    assert is_pdf_safe(record)


@pytest.mark.unit
def test_height_heuristic_sections(make_experience):
    """Test summary minimum, per-bullet height and the achievements cap."""
    record = ResumeRecord.from_dict(
        {
            "summary": "s" * 100,
            "experience": [make_experience(1), make_experience(2)],
            "achievements": [f"Award {i}" for i in range(10)],
            "skills": ["Python"],
        }
    )

    # header 80 + summary 40 + experience 200 + achievements 100 + skills 40
    assert estimate_content_height(record) == 460


@pytest.mark.unit
def test_long_summary_height_scales_with_length():
    """Test that summaries past the minimum grow 20px per 80 chars."""
    record = ResumeRecord(summary="s" * 800)
    assert estimate_content_height(record) == 80 + 200


@pytest.mark.unit
def test_pdf_safety_threshold_is_inclusive():
    """Test that exactly 800px is still safe and one more entry is not."""
    safe = ResumeRecord.from_dict({"experience": [{"role": f"R{i}"} for i in range(12)]})
    unsafe = ResumeRecord.from_dict({"experience": [{"role": f"R{i}"} for i in range(13)]})

    assert estimate_content_height(safe) == 800
    assert is_pdf_safe(safe)
    assert not is_pdf_safe(unsafe)


@pytest.mark.unit
def test_count_characters_joins_with_spaces():
    """Test that entries are counted the way they read on the page."""
    record = ResumeRecord.from_dict(
        {
            "name": "Ada",
            "title": "Eng",
            "summary": "x" * 100,
            "experience": [{"role": "R", "company": "C", "duration": "D", "description": ["ab", "cd"]}],
        }
    )

    # 3 + 3 + 100 + len("R C D ab cd")
    assert count_characters(record) == 117


@pytest.mark.unit
def test_relocated_achievement_counts_no_more_than_its_source():
    """Test that relocation separators in achievements count as single spaces."""
    source = ResumeRecord.from_dict(
        {"experience": [{"role": "Lead Engineer", "company": "Acme", "description": ["b" * 60]}]}
    )
    relocated = ResumeRecord.from_dict({"achievements": ["Lead Engineer — Acme • " + "b" * 60]})

    # len("Lead Engineer Acme " + "b" * 60)
    assert count_characters(relocated) == 79
    # source also carries the empty duration's separator
    assert count_characters(source) == 80
