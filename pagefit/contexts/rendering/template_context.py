"""
Template context assembly.

build_template_context() is the seam between the layout engine and whatever
renders the page markup. It preprocesses the resume, resolves exactly one
LayoutConfig for the requested template, applies that config's caps, and
returns a single plain dict with everything a template reads: the record,
the layout values, inline styles, utility classes and the print stylesheet.

Font sizes and caps come from the LayoutConfig only. The preprocessor's own
hints are passed through for reference but never override it.
"""

from typing import Any, Dict, Iterable, List, Optional, TypeVar, Union

from pagefit.contexts.layout import LayoutConfig, UnknownTemplateError, optimize_layout
from pagefit.contexts.preprocessing.preprocessor import ProcessedResume, preprocess_resume
from pagefit.contexts.preprocessing.resume_record import ResumeRecord
from pagefit.contexts.rendering.logger import log_preprocessing_fallback, log_template_context
from pagefit.contexts.rendering.print_styles import (
    get_print_styles,
    get_responsive_classes,
    render_print_css,
)

T = TypeVar("T")


def limit_content(items: Optional[Iterable[T]], max_items: int) -> List[T]:
    """First max_items items (an absent list counts as empty)."""
    return list(items or [])[:max_items]


def limit_bullet_points(description: Union[List[str], str, None], max_bullets: int) -> List[str]:
    """
    Cap a description's bullets.

    A bare string is a single bullet and is returned as-is in a list.
    """
    if isinstance(description, str):
        return [description]
    return list(description or [])[:max_bullets]


def _fallback_record(resume: Any) -> ResumeRecord:
    """Normalize the raw input without any capping; None becomes an empty record."""
    if isinstance(resume, ResumeRecord):
        return ResumeRecord.coerce(resume)
    return ResumeRecord.from_dict(resume)


def apply_layout_caps(record: ResumeRecord, config: LayoutConfig) -> Dict[str, Any]:
    """Serialize record for a template, keeping only what config allows on the page."""
    data = ResumeRecord.to_dict(record)

    data["experience"] = [
        {**exp, "description": limit_bullet_points(exp["description"], config.max_bullets_per_exp)}
        for exp in limit_content(data["experience"], config.max_experience_items)
    ]
    data["education"] = limit_content(data["education"], config.max_education_items)
    data["skills"] = limit_content(data["skills"], config.max_skills_display)
    data["achievements"] = limit_content(data["achievements"], config.max_achievements)
    return data


def build_template_context(resume: Any, template_kind: str) -> Dict[str, Any]:
    """
    Build the rendering context for one resume and template.

    If preprocessing raises, the error is logged and the normalized raw record
    is rendered with a freshly optimized layout instead.

    Args:
        resume: ResumeRecord or raw resume mapping
        template_kind: "minimal", "modern" or "creative"

    Returns:
        Dict with keys:
            template_kind: The requested template
            resume: Capped camelCase record
            layout: LayoutConfig as a dict
            hints: Preprocessor layout hints as a dict (None after a fallback)
            metrics: ContentMetrics as a dict (None after a fallback)
            styles: get_print_styles() output
            classes: get_responsive_classes() output
            print_css: @media print stylesheet
            preprocessed: False when the fallback path was taken

    Raises:
        UnknownTemplateError: If template_kind has no base configuration
    """
    try:
        record = preprocess_resume(resume, template_kind)
    except UnknownTemplateError:
        raise
    except Exception as e:
        log_preprocessing_fallback(template_kind, e)
        record = _fallback_record(resume)

    if isinstance(record, ProcessedResume) and record.layout_config is not None:
        config = record.layout_config
        hints = record.layout.to_dict()
        metrics = record.content_metrics.to_dict()
    else:
        config = optimize_layout(record, template_kind)
        hints = None
        metrics = None

    log_template_context(template_kind, record.name, config)

    return {
        "template_kind": template_kind,
        "resume": apply_layout_caps(record, config),
        "layout": config.to_dict(),
        "hints": hints,
        "metrics": metrics,
        "styles": get_print_styles(config),
        "classes": get_responsive_classes(config),
        "print_css": render_print_css(config.compact_mode),
        "preprocessed": isinstance(record, ProcessedResume),
    }
