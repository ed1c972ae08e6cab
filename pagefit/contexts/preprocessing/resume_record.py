"""
Resume Record Data Structures

Defines the canonical structured resume produced by the structuring model and
consumed by the layout and preprocessing contexts. Raw records arrive as
JSON-like mappings with camelCase keys; from_dict() coerces every field to its
expected shape so downstream code never has to guard against missing data.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from pagefit.contexts.preprocessing.exceptions import InvalidResumeInputError


def _as_str(value: Any) -> str:
    """Coerce a scalar to str; anything else (None, containers, bools) becomes ""."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _as_str_list(value: Any) -> List[str]:
    """Keep the string-like items of a list; non-lists become []."""
    if not isinstance(value, list):
        return []
    return [
        _as_str(item)
        for item in value
        if isinstance(item, (str, int, float)) and not isinstance(item, bool)
    ]


def _get(data: Mapping[str, Any], key: str, *aliases: str) -> Any:
    """Return the first present value among key and its aliases."""
    for name in (key, *aliases):
        if name in data and data[name] is not None:
            return data[name]
    return None


@dataclass
class ContactInfo:
    """Contact block shown in the resume header."""

    email: str = ""
    phone: str = ""
    address: str = ""
    linkedin: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ContactInfo":
        data = data if isinstance(data, Mapping) else {}
        return cls(
            email=_as_str(data.get("email")),
            phone=_as_str(data.get("phone")),
            address=_as_str(data.get("address")),
            linkedin=_as_str(_get(data, "linkedin", "link", "website")),
        )


@dataclass
class ExperienceEntry:
    """
    One work-experience entry.

    description is None when the raw entry carried no bullet list at all; the
    content analyzer counts such an entry as one bullet for a conservative
    height estimate. A bare string description becomes a single bullet.
    """

    role: str = ""
    company: str = ""
    duration: str = ""
    description: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExperienceEntry":
        raw_description = data.get("description")
        if isinstance(raw_description, list):
            description = _as_str_list(raw_description)
        elif isinstance(raw_description, str) and raw_description.strip():
            description = [raw_description]
        else:
            description = None
        return cls(
            role=_as_str(data.get("role")),
            company=_as_str(data.get("company")),
            duration=_as_str(data.get("duration")),
            description=description,
        )

    @property
    def bullets(self) -> List[str]:
        return self.description or []


@dataclass
class EducationEntry:
    degree: str = ""
    school: str = ""
    year: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EducationEntry":
        return cls(
            degree=_as_str(data.get("degree")),
            school=_as_str(data.get("school")),
            year=_as_str(data.get("year")),
        )


@dataclass
class Certification:
    name: str = ""
    year: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Certification":
        return cls(name=_as_str(data.get("name")), year=_as_str(data.get("year")))


@dataclass
class VolunteerEntry:
    role: str = ""
    org: str = ""
    duration: str = ""
    description: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VolunteerEntry":
        raw_description = data.get("description")
        if isinstance(raw_description, str):
            description = [raw_description] if raw_description.strip() else []
        else:
            description = _as_str_list(raw_description)
        return cls(
            role=_as_str(data.get("role")),
            org=_as_str(_get(data, "org", "organization")),
            duration=_as_str(data.get("duration")),
            description=description,
        )


def _entries(value: Any, entry_cls) -> list:
    """Build entries from the mapping items of a raw list, skipping anything else."""
    if not isinstance(value, list):
        return []
    return [entry_cls.from_dict(item) for item in value if isinstance(item, Mapping)]


@dataclass
class ResumeRecord:
    """
    Canonical structured resume.

    All list fields default to empty lists and all text fields to empty
    strings. Instances are treated as values: the preprocessor always works on
    a deep copy.

    Factory methods:
        from_dict(data) - Normalize a raw (possibly AI-sourced) mapping
        coerce(resume) - Accept a ResumeRecord or mapping, return a private copy
    """

    name: str = ""
    title: str = ""
    photo_url: str = ""
    contact: ContactInfo = field(default_factory=ContactInfo)
    summary: str = ""
    experience: List[ExperienceEntry] = field(default_factory=list)
    education: List[EducationEntry] = field(default_factory=list)
    certifications: List[Certification] = field(default_factory=list)
    achievements: List[str] = field(default_factory=list)
    volunteer: List[VolunteerEntry] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    soft_skills: List[str] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)
    interests: List[str] = field(default_factory=list)

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @classmethod
    def from_dict(cls, data: Any) -> "ResumeRecord":
        """
        Normalize a raw resume mapping.

        Never fails on missing or malformed optional fields: wrong types become
        empty values, non-mapping list entries are skipped. Layout annotation
        keys (_layout, _layoutConfig, _contentMetrics) are ignored, so a
        processed record can be fed back in.

        Args:
            data: Raw resume mapping (camelCase or snake_case keys); anything
                that is not a mapping is treated as an empty record

        Returns:
            Normalized ResumeRecord
        """
        data = data if isinstance(data, Mapping) else {}
        return cls(
            name=_as_str(data.get("name")),
            title=_as_str(data.get("title")),
            photo_url=_as_str(_get(data, "photo_url", "photoUrl")),
            contact=ContactInfo.from_dict(data.get("contact")),
            summary=_as_str(data.get("summary")),
            experience=_entries(data.get("experience"), ExperienceEntry),
            education=_entries(data.get("education"), EducationEntry),
            certifications=_entries(data.get("certifications"), Certification),
            # "achivements" is the spelling used by the structuring endpoint schema
            achievements=_as_str_list(_get(data, "achievements", "achivements")),
            volunteer=_entries(data.get("volunteer"), VolunteerEntry),
            skills=_as_str_list(data.get("skills")),
            soft_skills=_as_str_list(_get(data, "soft_skills", "softSkills")),
            languages=_as_str_list(data.get("languages")),
            interests=_as_str_list(data.get("interests")),
        )

    @classmethod
    def coerce(cls, resume: Any, operation: str = "coerce") -> "ResumeRecord":
        """
        Return a private, normalized copy of resume.

        Raises:
            InvalidResumeInputError: If resume is None
        """
        if resume is None:
            raise InvalidResumeInputError("input is required", operation=operation)
        if isinstance(resume, ResumeRecord):
            return copy.deepcopy(resume)
        return cls.from_dict(resume)

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase mapping consumed by rendering templates."""
        return {
            "name": self.name,
            "title": self.title,
            "photoUrl": self.photo_url,
            "contact": {
                "email": self.contact.email,
                "phone": self.contact.phone,
                "address": self.contact.address,
                "linkedin": self.contact.linkedin,
            },
            "summary": self.summary,
            "experience": [
                {
                    "role": exp.role,
                    "company": exp.company,
                    "duration": exp.duration,
                    "description": list(exp.bullets),
                }
                for exp in self.experience
            ],
            "education": [
                {"degree": edu.degree, "school": edu.school, "year": edu.year}
                for edu in self.education
            ],
            "certifications": [{"name": c.name, "year": c.year} for c in self.certifications],
            "achievements": list(self.achievements),
            "volunteer": [
                {
                    "role": vol.role,
                    "org": vol.org,
                    "duration": vol.duration,
                    "description": list(vol.description),
                }
                for vol in self.volunteer
            ],
            "skills": list(self.skills),
            "softSkills": list(self.soft_skills),
            "languages": list(self.languages),
            "interests": list(self.interests),
        }

    # =========================================================================
    # CONTENT QUERIES
    # =========================================================================

    @property
    def is_visually_empty(self) -> bool:
        """True when nothing meaningful would render: no name, title, summary or experience."""
        return not self.name and not self.title and not self.summary and not self.experience
