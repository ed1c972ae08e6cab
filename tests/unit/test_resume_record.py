"""Unit tests for ResumeRecord normalization and serialization."""

import copy

import pytest

from pagefit.contexts.preprocessing.exceptions import InvalidResumeInputError
from pagefit.contexts.preprocessing.resume_record import ResumeRecord


@pytest.mark.unit
def test_from_dict_empty_mapping_gives_empty_record():
    """Test that every field defaults to an empty value."""
    record = ResumeRecord.from_dict({})

    assert record.name == ""
    assert record.contact.email == ""
    assert record.experience == []
    assert record.achievements == []
    assert record.soft_skills == []
    assert record.is_visually_empty


@pytest.mark.unit
def test_from_dict_non_mapping_is_empty_record():
    """Test that lists, strings and numbers are treated as an empty record."""
    for raw in ([], "resume", 42):
        assert ResumeRecord.from_dict(raw) == ResumeRecord()


@pytest.mark.unit
def test_from_dict_accepts_camel_case_and_wire_spelling():
    """Test photoUrl, softSkills and the 'achivements' alias."""
    record = ResumeRecord.from_dict(
        {
            "photoUrl": "https://example.com/me.png",
            "softSkills": ["Mentoring"],
            "achivements": ["Award"],
        }
    )

    assert record.photo_url == "https://example.com/me.png"
    assert record.soft_skills == ["Mentoring"]
    assert record.achievements == ["Award"]


@pytest.mark.unit
def test_from_dict_coerces_malformed_fields():
    """Test that wrong types become empty values instead of raising."""
    record = ResumeRecord.from_dict(
        {
            "name": None,
            "title": 7,
            "skills": "Python",
            "experience": [{"role": "Engineer", "description": ["a", None, 3, True]}, "junk"],
            "education": {"degree": "BSc"},
            "contact": "ada@example.com",
        }
    )

    assert record.name == ""
    assert record.title == "7"
    assert record.skills == []
    assert len(record.experience) == 1
    assert record.experience[0].description == ["a", "3"]
    assert record.education == []
    assert record.contact.email == ""


@pytest.mark.unit
def test_experience_description_shapes():
    """Test list, string and missing descriptions."""
    record = ResumeRecord.from_dict(
        {
            "experience": [
                {"role": "A", "description": ["one", "two"]},
                {"role": "B", "description": "single line"},
                {"role": "C"},
            ]
        }
    )

    assert record.experience[0].description == ["one", "two"]
    assert record.experience[1].description == ["single line"]
    assert record.experience[2].description is None
    assert record.experience[2].bullets == []


@pytest.mark.unit
def test_contact_and_volunteer_aliases():
    """Test link/website aliases for linkedin and organization for org."""
    record = ResumeRecord.from_dict(
        {
            "contact": {"website": "ada.dev"},
            "volunteer": [{"role": "Mentor", "organization": "Code Club", "description": "Teach"}],
        }
    )

    assert record.contact.linkedin == "ada.dev"
    assert record.volunteer[0].org == "Code Club"
    assert record.volunteer[0].description == ["Teach"]


@pytest.mark.unit
def test_from_dict_ignores_layout_annotations():
    """Test that a processed record's annotation keys are dropped on reload."""
    record = ResumeRecord.from_dict({"name": "Ada", "_layout": {"compactMode": True}})
    assert record == ResumeRecord(name="Ada")


@pytest.mark.unit
def test_coerce_none_raises():
    """Test that a missing record is the one fatal input."""
    with pytest.raises(InvalidResumeInputError) as exc_info:
        ResumeRecord.coerce(None, operation="preprocess_resume")

    assert exc_info.value.operation == "preprocess_resume"
    assert "preprocess_resume" in str(exc_info.value)
    assert isinstance(exc_info.value, ValueError)


@pytest.mark.unit
def test_coerce_returns_private_copy():
    """Test that coercing a record never aliases the original."""
    original = ResumeRecord.from_dict({"name": "Ada", "skills": ["Python"]})
    copied = ResumeRecord.coerce(original)

    copied.skills.append("SQL")
    copied.name = "Grace"

    assert original.skills == ["Python"]
    assert original.name == "Ada"


@pytest.mark.unit
def test_to_dict_round_trips_through_from_dict(typical_resume):
    """Test camelCase serialization that from_dict reads back unchanged."""
    record = ResumeRecord.from_dict(typical_resume)
    data = record.to_dict()

    assert "softSkills" in data
    assert "photoUrl" in data
    assert data["achievements"] == typical_resume["achivements"]
    assert ResumeRecord.from_dict(copy.deepcopy(data)) == record
