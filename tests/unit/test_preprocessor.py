"""Unit tests for resume preprocessing: density decisions, caps and relocation."""

import copy

import pytest

from pagefit.contexts.layout import ContentDensity, TemplateKind
from pagefit.contexts.preprocessing.exceptions import InvalidResumeInputError
from pagefit.contexts.preprocessing.preprocessor import (
    COMPACT_CAPS,
    STANDARD_CAPS,
    ProcessedResume,
    compute_global_scale,
    compute_name_font_size,
    compute_section_font_sizes,
    preprocess_resume,
    select_caps,
)
from pagefit.contexts.preprocessing.resume_record import ResumeRecord
from pagefit.utils.text_processing import ELLIPSIS

# =============================================================================
# DENSITY DECISIONS
# =============================================================================


@pytest.mark.unit
def test_global_scale_ranges():
    """Test up-scaling for sparse records and down-scaling for long ones."""
    assert compute_global_scale(50) == pytest.approx(1.1 * 1.3**0.3)
    assert compute_global_scale(800) == 1.0
    assert compute_global_scale(2000) == 1.0
    assert compute_global_scale(3600) == 1.0
    assert compute_global_scale(5000) == pytest.approx((3600 / 5000) ** 0.5)
    assert compute_global_scale(14400) == 0.7


@pytest.mark.unit
def test_name_font_size_penalizes_long_names():
    """Test the 0.25px-per-char penalty past 24 chars and the 18px floor."""
    assert compute_name_font_size("Ada Lovelace", 2000, 1.0) == 40
    assert compute_name_font_size("x" * 44, 2000, 1.0) == 35
    assert compute_name_font_size("x" * 200, 2000, 1.0) == 18
    assert compute_name_font_size("Ada", 500, 1.25) == 52


@pytest.mark.unit
def test_section_font_sizes_for_long_records():
    """Test down-scaled section sizes with the extra sidebar shrink."""
    sizes = compute_section_font_sizes("X", 5000, compute_global_scale(5000))

    assert sizes.name == 34
    assert sizes.section_title == 12
    assert sizes.body == 10
    assert sizes.sidebar_title == 10
    assert sizes.sidebar_body == 9
    assert sizes.duration == 9


@pytest.mark.unit
def test_sidebar_shrink_starts_above_4200_chars():
    """Test that the sidebar penalty is exclusive of the threshold."""
    at_threshold = compute_section_font_sizes("X", 4200, compute_global_scale(4200))
    above = compute_section_font_sizes("X", 4201, compute_global_scale(4201))

    assert at_threshold.sidebar_title == 11
    assert above.sidebar_title == 10


@pytest.mark.unit
def test_caps_presets():
    """Test the two cap presets."""
    assert select_caps(True) is COMPACT_CAPS
    assert select_caps(False) is STANDARD_CAPS
    assert (COMPACT_CAPS.max_experience_items, STANDARD_CAPS.max_experience_items) == (3, 6)
    assert (COMPACT_CAPS.truncate_char_per_line, STANDARD_CAPS.truncate_char_per_line) == (120, 220)
    assert (COMPACT_CAPS.max_achievements, STANDARD_CAPS.max_achievements) == (6, 12)


# =============================================================================
# EDGE INPUTS
# =============================================================================


@pytest.mark.unit
def test_none_input_raises():
    """Test that a missing record is rejected."""
    with pytest.raises(InvalidResumeInputError):
        preprocess_resume(None)


@pytest.mark.unit
def test_empty_input_is_degenerate_but_returned(log_messages):
    """Test empty lists, compact off and the degenerate-content warning."""
    processed = preprocess_resume({})

    assert isinstance(processed, ProcessedResume)
    assert processed.experience == []
    assert processed.skills == []
    assert processed.achievements == []
    assert processed.layout.compact_mode is False
    assert any("mostly empty" in message for message in log_messages)


@pytest.mark.unit
def test_name_only_input():
    """Test that a name-only record is sparse: compact off, large name font."""
    processed = preprocess_resume({"name": "A"})

    assert processed.name == "A"
    assert processed.layout.compact_mode is False
    assert processed.layout.name_font_size >= 40
    assert processed.layout.name_font_size == 52
    assert processed.layout.section_font_sizes.section_title == 19
    assert processed.experience == []
    assert processed.education == []
    assert processed.languages == []


@pytest.mark.unit
def test_named_record_is_not_degenerate(log_messages):
    """Test that no warning is logged for a record with a name."""
    preprocess_resume({"name": "Ada"})
    assert not any("mostly empty" in message for message in log_messages)


# =============================================================================
# COMPACT MODE
# =============================================================================


@pytest.mark.unit
def test_compact_when_over_character_threshold():
    """Test compact mode from character count alone."""
    processed = preprocess_resume({"name": "Ada", "summary": "x" * 2300})
    assert processed.layout.compact_mode is True


@pytest.mark.unit
def test_compact_when_not_pdf_safe():
    """Test compact mode from the height check on an otherwise short record."""
    short_but_tall = {"name": "Ada", "experience": [{"role": f"R{i}"} for i in range(13)]}
    processed = preprocess_resume(short_but_tall)

    assert processed.layout.compact_mode is True
    assert len(processed.experience) == 3


@pytest.mark.unit
def test_compact_truncates_long_bullet_to_120():
    """Test that a 300-char bullet becomes 120 chars in compact mode."""
    processed = preprocess_resume(
        {
            "name": "Ada",
            "summary": "s" * 2000,
            "experience": [{"role": "Engineer", "company": "Acme", "description": ["a" * 300]}],
        }
    )

    bullet = processed.experience[0].description[0]
    assert processed.layout.compact_mode is True
    assert processed.layout.truncate_char_per_line == 120
    assert len(bullet) == 120
    assert bullet == "a" * 119 + ELLIPSIS


@pytest.mark.unit
def test_volunteer_bullets_truncated():
    """Test that volunteer bullets obey the same truncation limit."""
    processed = preprocess_resume(
        {
            "name": "Ada",
            "summary": "s" * 2300,
            "volunteer": [{"role": "Mentor", "org": "Code Club", "description": ["v" * 300]}],
        }
    )

    assert len(processed.volunteer[0].description[0]) == 120


# =============================================================================
# RELOCATION AND CAPS
# =============================================================================


@pytest.mark.unit
def test_overflow_experience_relocated_to_achievements(make_experience):
    """Test that 8 experiences become 6 plus two generated achievements."""
    resume = {
        "name": "Ada",
        "experience": [make_experience(i, bullets=1, bullet_text="Did thing") for i in range(1, 9)],
        "achievements": ["Award"],
    }
    processed = preprocess_resume(resume)

    assert processed.layout.compact_mode is False
    assert [exp.role for exp in processed.experience] == [f"Role {i}" for i in range(1, 7)]
    assert processed.achievements == [
        "Award",
        "Role 7 — Company 7 • Did thing 7.1",
        "Role 8 — Company 8 • Did thing 8.1",
    ]


@pytest.mark.unit
def test_achievement_dedupe_keeps_first_occurrence(make_experience):
    """Test exact-equality de-duplication across existing and relocated entries."""
    relocated_text = "Role 7 — Company 7 • Did thing 7.1"
    resume = {
        "name": "Ada",
        "experience": [make_experience(i, bullets=1, bullet_text="Did thing") for i in range(1, 8)],
        "achievements": [" Award ", relocated_text, "Award", "award", ""],
    }
    processed = preprocess_resume(resume)

    assert processed.achievements == ["Award", relocated_text, "award"]


@pytest.mark.unit
def test_compact_relocation_caps_achievements(large_resume):
    """Test compact caps on experience, education and achievements."""
    processed = preprocess_resume(large_resume)

    assert processed.layout.compact_mode is True
    assert len(processed.experience) == 3
    assert len(processed.education) == 2
    assert len(processed.achievements) == 6
    assert processed.achievements[:4] == ["Award A", "Award B", "Award C", "Award D"]
    assert processed.achievements[4].startswith("Role 4 — Company 4 • ")
    assert processed.achievements[4].count(" • ") == 2


@pytest.mark.unit
def test_relocated_education_format():
    """Test the 'degree — school year' achievement for excess education."""
    resume = {
        "name": "Ada",
        "summary": "s" * 2300,
        "education": [
            {"degree": f"Degree {i}", "school": f"School {i}", "year": "2020"} for i in range(1, 4)
        ],
    }
    processed = preprocess_resume(resume)

    assert len(processed.education) == 2
    assert processed.achievements == ["Degree 3 — School 3 2020"]


@pytest.mark.unit
def test_compact_caps_simple_lists(large_resume):
    """Test skills, soft skills, languages and bullets under compact caps."""
    processed = preprocess_resume(large_resume)

    assert len(processed.skills) == 12
    assert len(processed.soft_skills) == 6
    assert processed.languages == ["English", "Spanish", "German"]
    for exp in processed.experience:
        assert len(exp.description) <= 2
        assert all(len(bullet) <= 120 for bullet in exp.description)


@pytest.mark.unit
def test_untitled_entries_dropped():
    """Test that entries with neither title field are removed."""
    processed = preprocess_resume(
        {
            "name": "Ada",
            "experience": [{"role": "", "company": ""}, {"duration": "2020"}, {"company": "Acme"}],
            "education": [{"year": "2020"}, {"school": "MIT"}],
        }
    )

    assert [exp.company for exp in processed.experience] == ["Acme"]
    assert [edu.school for edu in processed.education] == ["MIT"]


@pytest.mark.unit
def test_lists_trimmed_and_deduplicated():
    """Test case-sensitive de-duplication and certification (name, year) keys."""
    processed = preprocess_resume(
        {
            "name": "Ada",
            "skills": [" Python", "Python", "python", ""],
            "certifications": [
                {"name": " AWS ", "year": "2020"},
                {"name": "AWS", "year": "2020"},
                {"name": "AWS", "year": "2021"},
            ],
        }
    )

    assert processed.skills == ["Python", "python"]
    assert [(c.name, c.year) for c in processed.certifications] == [("AWS", "2020"), ("AWS", "2021")]


# =============================================================================
# PURITY, IDEMPOTENCE AND ANNOTATIONS
# =============================================================================


@pytest.mark.unit
def test_input_never_mutated(large_resume):
    """Test that preprocessing works on a private copy."""
    before = copy.deepcopy(large_resume)
    preprocess_resume(large_resume)
    assert large_resume == before


@pytest.mark.unit
def test_record_input_never_mutated(large_resume):
    """Test that a ResumeRecord argument is copied, not modified."""
    record = ResumeRecord.from_dict(large_resume)
    before = copy.deepcopy(record)
    preprocess_resume(record)
    assert record == before


@pytest.mark.unit
def test_preprocessing_is_idempotent(large_resume, typical_resume):
    """Test that a processed record passes through unchanged a second time."""
    for resume in (large_resume, typical_resume):
        first = preprocess_resume(resume)
        second = preprocess_resume(first)
        assert ResumeRecord.to_dict(second) == ResumeRecord.to_dict(first)


def _near_compact_threshold_resume():
    """
    Non-compact record sitting just under the compact character threshold:
    8 experiences (2 to relocate), 24 long skills, summary padded to 2198 chars
    total and an estimated height of exactly 800px.
    """
    return {
        "summary": "s" * 32,
        "experience": [
            {"role": f"R{i}", "company": f"C{i}", "description": ["b" * 20]} for i in range(1, 9)
        ],
        "skills": [f"{i:02d}".ljust(80, "k") for i in range(24)],
    }


@pytest.mark.unit
def test_preprocessing_is_idempotent_near_compact_threshold():
    """Test that relocated achievements do not tip a second pass into compact mode."""
    first = preprocess_resume(_near_compact_threshold_resume())

    assert first.layout.compact_mode is False
    assert len(first.experience) == 6
    assert first.achievements == ["R7 — C7 • " + "b" * 20, "R8 — C8 • " + "b" * 20]

    second = preprocess_resume(first)

    assert second.layout.compact_mode is False
    assert len(second.experience) == 6
    assert ResumeRecord.to_dict(second) == ResumeRecord.to_dict(first)


@pytest.mark.unit
def test_compact_decision_uses_pdf_safety_check(monkeypatch):
    """Test that a failed PDF-safety check alone switches on compact mode."""
    monkeypatch.setattr(
        "pagefit.contexts.preprocessing.preprocessor.is_pdf_safe", lambda record: False
    )

    processed = preprocess_resume({"name": "Ada"})
    assert processed.layout.compact_mode is True


@pytest.mark.unit
def test_layout_config_describes_uncapped_record(large_resume):
    """Test that attached metrics and config are computed before capping."""
    processed = preprocess_resume(large_resume)

    assert processed.layout_config.template_type == TemplateKind.MODERN
    assert processed.content_metrics.experience_count == 10
    assert processed.content_metrics.content_density == ContentDensity.OVERFLOW
    assert processed.layout.sidebar_width_px == 180


@pytest.mark.unit
def test_layout_config_for_requested_template(large_resume):
    """Test computing the attached config for another template."""
    processed = preprocess_resume(large_resume, TemplateKind.MINIMAL)
    assert processed.layout_config.template_type == TemplateKind.MINIMAL


@pytest.mark.unit
def test_to_dict_attaches_annotations(typical_resume):
    """Test the serialized annotation blocks."""
    data = preprocess_resume(typical_resume).to_dict()

    assert data["name"] == "Ada Lovelace"
    assert data["_layout"]["sidebarWidthPx"] == 180
    assert set(data["_layout"]["sectionFontSizes"]) == {
        "name",
        "sectionTitle",
        "body",
        "sidebarTitle",
        "sidebarBody",
        "duration",
    }
    assert data["_layoutConfig"]["template_type"] == TemplateKind.MODERN
    assert data["_contentMetrics"]["experienceCount"] == 3
