"""
Content analysis for single-page fitting.

Estimates how tall a resume will render on an A4 page using an additive
per-section pixel model, and classifies the result into a density bucket that
drives the layout optimizer.

The height model is a heuristic: every per-section constant below was tuned
together against the rendered templates. Changing one of them without
re-tuning the others skews the density thresholds.
"""

import math
from dataclasses import dataclass
from typing import Any, Set

from pagefit.contexts.preprocessing.resume_record import ResumeRecord

# A4 at 96 DPI
A4_WIDTH_PX = 794  # 210mm
A4_HEIGHT_PX = 1123  # 297mm
PAGE_MARGIN_PX = 32
USABLE_WIDTH_PX = A4_WIDTH_PX - 2 * PAGE_MARGIN_PX  # 730
USABLE_HEIGHT_PX = A4_HEIGHT_PX - 2 * PAGE_MARGIN_PX  # 1059

# Density thresholds as fractions of usable height (all boundaries exclusive)
OVERFLOW_RATIO = 1.1
DENSE_RATIO = 0.85
SPARSE_RATIO = 0.6

# Height model constants (px)
HEADER_HEIGHT = 100
PHOTO_EXTRA_HEIGHT = 40
SECTION_TITLE_HEIGHT = 35
SUMMARY_TITLE_HEIGHT = 30
CHARS_PER_LINE = 80
LINE_HEIGHT = 16
EXPERIENCE_ENTRY_HEIGHT = 60
MAX_COUNTED_EXPERIENCE = 6
MAX_COUNTED_BULLETS_PER_EXPERIENCE = 4
EDUCATION_ENTRY_HEIGHT = 45
MAX_COUNTED_EDUCATION = 4
SKILLS_PER_ROW = 6
SKILLS_ROW_HEIGHT = 25
SOFT_SKILLS_PER_ROW = 4
SOFT_SKILLS_ROW_HEIGHT = 20
SINGLE_ROW_SECTION_HEIGHT = 55  # languages, interests
CERTIFICATION_ROW_HEIGHT = 25
MAX_COUNTED_CERTIFICATIONS = 4
ACHIEVEMENT_ROW_HEIGHT = 18
MAX_COUNTED_ACHIEVEMENTS = 6
VOLUNTEER_ENTRY_HEIGHT = 50
MAX_COUNTED_VOLUNTEER = 3


class ContentDensity:
    """Enum-like class for density classifications"""

    SPARSE = "sparse"
    NORMAL = "normal"
    DENSE = "dense"
    OVERFLOW = "overflow"

    @classmethod
    def get_all(cls) -> Set[str]:
        return {cls.SPARSE, cls.NORMAL, cls.DENSE, cls.OVERFLOW}


@dataclass
class ContentMetrics:
    """
    Quantitative summary of a resume's content.

    Attributes:
        experience_count: Number of experience entries
        education_count: Number of education entries
        skills_count: Number of skills
        achievements_count: Number of achievements
        total_bullet_points: Sum of experience bullets (an entry without a
            description list counts as one)
        summary_length: Characters in the summary
        has_image: Whether a photo is referenced
        section_count: Number of non-empty optional sections
        estimated_height: Estimated rendered height in px
        content_density: One of ContentDensity
    """

    experience_count: int
    education_count: int
    skills_count: int
    achievements_count: int
    total_bullet_points: int
    summary_length: int
    has_image: bool
    section_count: int
    estimated_height: int
    content_density: str

    @property
    def page_fill_ratio(self) -> float:
        """Estimated height as a fraction of usable page height."""
        return self.estimated_height / USABLE_HEIGHT_PX

    def to_dict(self) -> dict:
        return {
            "experienceCount": self.experience_count,
            "educationCount": self.education_count,
            "skillsCount": self.skills_count,
            "achievementsCount": self.achievements_count,
            "totalBulletPoints": self.total_bullet_points,
            "summaryLength": self.summary_length,
            "hasImage": self.has_image,
            "sectionCount": self.section_count,
            "estimatedHeight": self.estimated_height,
            "contentDensity": self.content_density,
        }


def classify_density(estimated_height: float, usable_height: float = USABLE_HEIGHT_PX) -> str:
    """
    Classify an estimated height against the usable page height.

    > 110% overflow, > 85% dense, < 60% sparse, otherwise normal. A height
    exactly on a threshold falls into the less extreme bucket.
    """
    if estimated_height > usable_height * OVERFLOW_RATIO:
        return ContentDensity.OVERFLOW
    if estimated_height > usable_height * DENSE_RATIO:
        return ContentDensity.DENSE
    if estimated_height < usable_height * SPARSE_RATIO:
        return ContentDensity.SPARSE
    return ContentDensity.NORMAL


def count_sections(resume: ResumeRecord) -> int:
    """Count the non-empty optional sections."""
    sections = [
        resume.summary,
        resume.experience,
        resume.education,
        resume.skills,
        resume.soft_skills,
        resume.languages,
        resume.certifications,
        resume.achievements,
        resume.volunteer,
        resume.interests,
    ]
    return sum(1 for section in sections if section)


def count_bullet_points(resume: ResumeRecord) -> int:
    """Total experience bullets, counting an entry with no description list as one."""
    return sum(
        len(exp.description) if exp.description is not None else 1 for exp in resume.experience
    )


def estimate_rendered_height(resume: ResumeRecord) -> int:
    """
    Estimate the rendered height of a resume in px.

    Experience, education, certifications, achievements and volunteer entries
    are counted up to a cap so very long lists do not dominate the estimate.
    """
    height = HEADER_HEIGHT
    if resume.photo_url:
        height += PHOTO_EXTRA_HEIGHT

    if resume.summary:
        summary_lines = math.ceil(len(resume.summary) / CHARS_PER_LINE)
        height += SUMMARY_TITLE_HEIGHT + summary_lines * LINE_HEIGHT

    if resume.experience:
        counted = min(len(resume.experience), MAX_COUNTED_EXPERIENCE)
        counted_bullets = min(
            count_bullet_points(resume), counted * MAX_COUNTED_BULLETS_PER_EXPERIENCE
        )
        height += SECTION_TITLE_HEIGHT
        height += counted * EXPERIENCE_ENTRY_HEIGHT
        height += counted_bullets * LINE_HEIGHT

    if resume.education:
        counted = min(len(resume.education), MAX_COUNTED_EDUCATION)
        height += SECTION_TITLE_HEIGHT + counted * EDUCATION_ENTRY_HEIGHT

    if resume.skills:
        rows = math.ceil(len(resume.skills) / SKILLS_PER_ROW)
        height += SECTION_TITLE_HEIGHT + rows * SKILLS_ROW_HEIGHT

    if resume.soft_skills:
        rows = math.ceil(len(resume.soft_skills) / SOFT_SKILLS_PER_ROW)
        height += SECTION_TITLE_HEIGHT + rows * SOFT_SKILLS_ROW_HEIGHT

    if resume.languages:
        height += SINGLE_ROW_SECTION_HEIGHT

    if resume.certifications:
        counted = min(len(resume.certifications), MAX_COUNTED_CERTIFICATIONS)
        height += SECTION_TITLE_HEIGHT + counted * CERTIFICATION_ROW_HEIGHT

    if resume.achievements:
        counted = min(len(resume.achievements), MAX_COUNTED_ACHIEVEMENTS)
        height += SECTION_TITLE_HEIGHT + counted * ACHIEVEMENT_ROW_HEIGHT

    if resume.volunteer:
        counted = min(len(resume.volunteer), MAX_COUNTED_VOLUNTEER)
        height += SECTION_TITLE_HEIGHT + counted * VOLUNTEER_ENTRY_HEIGHT

    if resume.interests:
        height += SINGLE_ROW_SECTION_HEIGHT

    return height


def analyze_content(resume: Any) -> ContentMetrics:
    """
    Compute content metrics for a resume.

    Pure function: the input is normalized into a private copy and never
    modified.

    Args:
        resume: ResumeRecord or raw resume mapping

    Returns:
        ContentMetrics with counts, estimated height and density

    Raises:
        InvalidResumeInputError: If resume is None
    """
    record = ResumeRecord.coerce(resume, operation="analyze_content")

    estimated_height = estimate_rendered_height(record)

    return ContentMetrics(
        experience_count=len(record.experience),
        education_count=len(record.education),
        skills_count=len(record.skills),
        achievements_count=len(record.achievements),
        total_bullet_points=count_bullet_points(record),
        summary_length=len(record.summary),
        has_image=bool(record.photo_url),
        section_count=count_sections(record),
        estimated_height=estimated_height,
        content_density=classify_density(estimated_height),
    )
