"""
Resume Preprocessing for Single-Page Rendering

Turns a raw (possibly AI-structured) resume into a record that is safe to hand
to any template:

1. Normalize every field (ResumeRecord.from_dict)
2. Decide compact mode from the character count and a PDF-safety height check
3. Compute a global font scale and per-section font sizes
4. Pick content caps (one of two presets, by compact mode)
5. Relocate experience and education entries beyond the caps into achievements
6. Trim and truncate bullets; de-duplicate and cap the simple lists
7. Attach layout hints, the modern-template LayoutConfig and ContentMetrics

The input is never mutated; every step works on a private deep copy.
"""

import math
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Optional

from pagefit.contexts.layout import (
    ContentMetrics,
    LayoutConfig,
    TemplateKind,
    analyze_content,
    optimize_layout,
)
from pagefit.contexts.preprocessing.logger import (
    log_achievements_dropped,
    log_degenerate_content,
    log_density_decision,
    log_relocation,
)
from pagefit.contexts.preprocessing.pdf_safety import (
    RELOCATION_SEPARATOR,
    TITLE_SEPARATOR,
    count_characters,
    estimate_content_height,
    is_pdf_safe,
)
from pagefit.contexts.preprocessing.resume_record import Certification, ResumeRecord
from pagefit.utils.text_processing import (
    clamp,
    round_half_up,
    truncate_with_ellipsis,
    unique_strings,
)

# Character-count thresholds
SPARSE_CHARS = 800  # below: scale fonts up
COMPACT_CHARS = 2200  # above: compact mode
TARGET_CHARS = 3600  # above: scale fonts down
DENSE_CHARS = 4200  # above: extra sidebar shrink

MAX_UPSCALE_RATIO = 1.3
UPSCALE_EXPONENT = 0.3
UPSCALE_BOOST = 1.1
MIN_GLOBAL_SCALE = 0.7
MAX_GLOBAL_SCALE = 1.25
DOWNSCALE_EXPONENT = 0.5

NAME_BASE_SPARSE = 44
NAME_BASE = 40
NAME_PENALTY_FREE_LENGTH = 24
NAME_PENALTY_PER_CHAR = 0.25
NAME_FONT_BOUNDS = (18, 52)

SIDEBAR_DENSE_PENALTY = 0.88
DEFAULT_SIDEBAR_WIDTH_PX = 180

# section -> (sparse base, normal base, floor, ceiling)
SECTION_FONT_BASES = {
    "section_title": (16, 14, 12, 20),
    "body": (13, 12, 10, 16),
    "sidebar_title": (13, 12, 10, 16),
    "sidebar_body": (12, 11, 9, 14),
    "duration": (11, 10, 9, 14),
}
SIDEBAR_SECTIONS = ("sidebar_title", "sidebar_body")


@dataclass
class ContentCaps:
    """Per-section limits applied to the processed record."""

    max_experience_items: int
    max_bullets_per_exp: int
    max_education_items: int
    truncate_char_per_line: int
    max_achievements: int
    max_skills: int
    max_soft_skills: int
    max_languages: int
    max_certifications: int = 20


COMPACT_CAPS = ContentCaps(
    max_experience_items=3,
    max_bullets_per_exp=2,
    max_education_items=2,
    truncate_char_per_line=120,
    max_achievements=6,
    max_skills=12,
    max_soft_skills=6,
    max_languages=3,
)

STANDARD_CAPS = ContentCaps(
    max_experience_items=6,
    max_bullets_per_exp=4,
    max_education_items=6,
    truncate_char_per_line=220,
    max_achievements=12,
    max_skills=30,
    max_soft_skills=12,
    max_languages=8,
)


@dataclass
class SectionFontSizes:
    """Font sizes (px) per resume section."""

    name: int
    section_title: int
    body: int
    sidebar_title: int
    sidebar_body: int
    duration: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "name": self.name,
            "sectionTitle": self.section_title,
            "body": self.body,
            "sidebarTitle": self.sidebar_title,
            "sidebarBody": self.sidebar_body,
            "duration": self.duration,
        }


@dataclass
class LayoutHints:
    """
    Preprocessor decisions attached to the processed record.

    Attributes:
        compact_mode: True when the record is long or fails the PDF-safety check
        name_font_size: Name size after scale and long-name penalty
        max_experience_items: Experience entries kept in place
        max_bullets_per_exp: Bullets kept per experience entry
        max_education_items: Education entries kept in place
        truncate_char_per_line: Maximum bullet length (ellipsis included)
        section_font_sizes: Per-section font sizes
        sidebar_width_px: Sidebar width for sidebar-bearing templates
    """

    compact_mode: bool
    name_font_size: int
    max_experience_items: int
    max_bullets_per_exp: int
    max_education_items: int
    truncate_char_per_line: int
    section_font_sizes: SectionFontSizes
    sidebar_width_px: int = DEFAULT_SIDEBAR_WIDTH_PX

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compactMode": self.compact_mode,
            "nameFontSize": self.name_font_size,
            "maxExperienceItems": self.max_experience_items,
            "maxBulletsPerExp": self.max_bullets_per_exp,
            "maxEducationItems": self.max_education_items,
            "truncateCharPerLine": self.truncate_char_per_line,
            "sectionFontSizes": self.section_font_sizes.to_dict(),
            "sidebarWidthPx": self.sidebar_width_px,
        }


@dataclass
class ProcessedResume(ResumeRecord):
    """
    A ResumeRecord with its layout annotations attached.

    Reads exactly like a ResumeRecord; layout, layout_config and
    content_metrics are extra and serialize as _layout, _layoutConfig and
    _contentMetrics.
    """

    layout: Optional[LayoutHints] = None
    layout_config: Optional[LayoutConfig] = None
    content_metrics: Optional[ContentMetrics] = None

    @classmethod
    def from_record(
        cls,
        record: ResumeRecord,
        layout: LayoutHints,
        layout_config: LayoutConfig,
        content_metrics: ContentMetrics,
    ) -> "ProcessedResume":
        values = {f.name: getattr(record, f.name) for f in fields(ResumeRecord)}
        return cls(
            layout=layout, layout_config=layout_config, content_metrics=content_metrics, **values
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.layout is not None:
            data["_layout"] = self.layout.to_dict()
        if self.layout_config is not None:
            data["_layoutConfig"] = asdict(self.layout_config)
        if self.content_metrics is not None:
            data["_contentMetrics"] = self.content_metrics.to_dict()
        return data


# ============================================================================
# Density decisions
# ============================================================================


def compute_global_scale(total_chars: int) -> float:
    """
    Global font scale from the character count.

    Sparse records (< 800 chars) grow up to 1.25x, records beyond the
    comfortable 3600 chars shrink down to 0.7x, everything else stays at 1.
    """
    if total_chars < SPARSE_CHARS:
        up_scale = min(SPARSE_CHARS / max(1, total_chars), MAX_UPSCALE_RATIO)
        return clamp(math.pow(up_scale, UPSCALE_EXPONENT) * UPSCALE_BOOST, 1.0, MAX_GLOBAL_SCALE)
    if total_chars > TARGET_CHARS:
        raw_scale = TARGET_CHARS / max(1, total_chars)
        return clamp(math.pow(raw_scale, DOWNSCALE_EXPONENT), MIN_GLOBAL_SCALE, 1.0)
    return 1.0


def compute_name_font_size(name: str, total_chars: int, global_scale: float) -> int:
    """Name size: larger base for sparse records, 0.25px smaller per char past 24."""
    base = NAME_BASE_SPARSE if total_chars < SPARSE_CHARS else NAME_BASE
    penalty = 0.0
    if len(name) > NAME_PENALTY_FREE_LENGTH:
        penalty = (len(name) - NAME_PENALTY_FREE_LENGTH) * NAME_PENALTY_PER_CHAR
    return clamp(round_half_up(base * global_scale - penalty), *NAME_FONT_BOUNDS)


def compute_section_font_sizes(
    name: str, total_chars: int, global_scale: float
) -> SectionFontSizes:
    sparse = total_chars < SPARSE_CHARS
    sidebar_penalty = SIDEBAR_DENSE_PENALTY if total_chars > DENSE_CHARS else 1.0

    sizes = {}
    for section, (sparse_base, base, floor, ceiling) in SECTION_FONT_BASES.items():
        size = (sparse_base if sparse else base) * global_scale
        if section in SIDEBAR_SECTIONS:
            size *= sidebar_penalty
        sizes[section] = clamp(round_half_up(size), floor, ceiling)

    return SectionFontSizes(
        name=compute_name_font_size(name, total_chars, global_scale), **sizes
    )


def select_caps(compact_mode: bool) -> ContentCaps:
    return COMPACT_CAPS if compact_mode else STANDARD_CAPS


# ============================================================================
# Content shaping
# ============================================================================


def _drop_untitled_entries(record: ResumeRecord) -> None:
    record.experience = [exp for exp in record.experience if exp.role or exp.company]
    record.education = [edu for edu in record.education if edu.degree or edu.school]


def _relocate_overflow(record: ResumeRecord, caps: ContentCaps) -> List[str]:
    """
    Cut experience and education down to their caps, returning the excess
    entries flattened into achievement strings (in original order).
    """
    relocated = []

    extra_experience = record.experience[caps.max_experience_items:]
    record.experience = record.experience[: caps.max_experience_items]
    for exp in extra_experience:
        title = f"{exp.role}{TITLE_SEPARATOR}{exp.company}".strip()
        bullets = [bullet.strip() for bullet in exp.bullets[: caps.max_bullets_per_exp]]
        entry = RELOCATION_SEPARATOR.join(part for part in [title, *bullets] if part)
        if entry:
            relocated.append(entry)

    extra_education = record.education[caps.max_education_items:]
    record.education = record.education[: caps.max_education_items]
    for edu in extra_education:
        entry = f"{edu.degree}{TITLE_SEPARATOR}{edu.school} {edu.year.strip()}".strip()
        if entry:
            relocated.append(entry)

    log_relocation(len(extra_experience), len(extra_education))
    return relocated


def _trim_bullets(record: ResumeRecord, caps: ContentCaps) -> None:
    limit = caps.truncate_char_per_line
    for exp in record.experience:
        exp.description = [
            truncate_with_ellipsis(bullet.strip(), limit)
            for bullet in exp.bullets[: caps.max_bullets_per_exp]
        ]
    for vol in record.volunteer:
        vol.description = [truncate_with_ellipsis(bullet.strip(), limit) for bullet in vol.description]


def _normalize_lists(record: ResumeRecord, caps: ContentCaps) -> None:
    record.skills = unique_strings(record.skills)[: caps.max_skills]
    record.soft_skills = unique_strings(record.soft_skills)[: caps.max_soft_skills]
    record.languages = unique_strings(record.languages)[: caps.max_languages]

    seen = set()
    certifications = []
    for cert in record.certifications:
        key = (cert.name.strip(), cert.year.strip())
        if key in seen:
            continue
        seen.add(key)
        certifications.append(Certification(name=key[0], year=key[1]))
    record.certifications = certifications[: caps.max_certifications]


def _merge_achievements(record: ResumeRecord, relocated: List[str], caps: ContentCaps) -> None:
    """Existing achievements first, then relocated entries; first occurrence wins."""
    combined = []
    for achievement in [a.strip() for a in record.achievements] + relocated:
        if achievement and achievement not in combined:
            combined.append(achievement)

    record.achievements = combined[: caps.max_achievements]
    log_achievements_dropped(len(combined) - len(record.achievements))


# ============================================================================
# Entry point
# ============================================================================


def preprocess_resume(resume: Any, template_kind: str = TemplateKind.MODERN) -> ProcessedResume:
    """
    Normalize, cap and annotate a resume for single-page rendering.

    Args:
        resume: ResumeRecord or raw resume mapping (camelCase or snake_case)
        template_kind: Template the attached LayoutConfig is computed for;
            templates recompute their own layout at render time

    Returns:
        ProcessedResume: deep copy of the normalized record with caps applied
        and layout, layout_config and content_metrics attached

    Raises:
        InvalidResumeInputError: If resume is None
        UnknownTemplateError: If template_kind has no base configuration

    Example:
        processed = preprocess_resume({"name": "Ada Lovelace", "experience": [...]})
        processed.layout.compact_mode  # False
        processed.to_dict()["_layout"]["nameFontSize"]
    """
    record = ResumeRecord.coerce(resume, operation="preprocess_resume")

    estimated_height = estimate_content_height(record)
    pdf_safe = is_pdf_safe(record)

    # Layout config and metrics describe the record before any capping
    content_metrics = analyze_content(record)
    layout_config = optimize_layout(record, template_kind)

    total_chars = count_characters(record)
    compact_mode = total_chars > COMPACT_CHARS or not pdf_safe
    global_scale = compute_global_scale(total_chars)
    log_density_decision(total_chars, estimated_height, compact_mode, global_scale)

    section_font_sizes = compute_section_font_sizes(record.name, total_chars, global_scale)
    caps = select_caps(compact_mode)

    _drop_untitled_entries(record)
    relocated = _relocate_overflow(record, caps)
    _trim_bullets(record, caps)
    _normalize_lists(record, caps)
    _merge_achievements(record, relocated, caps)

    layout = LayoutHints(
        compact_mode=compact_mode,
        name_font_size=section_font_sizes.name,
        max_experience_items=caps.max_experience_items,
        max_bullets_per_exp=caps.max_bullets_per_exp,
        max_education_items=caps.max_education_items,
        truncate_char_per_line=caps.truncate_char_per_line,
        section_font_sizes=section_font_sizes,
    )

    processed = ProcessedResume.from_record(record, layout, layout_config, content_metrics)
    if processed.is_visually_empty:
        log_degenerate_content()
    return processed
