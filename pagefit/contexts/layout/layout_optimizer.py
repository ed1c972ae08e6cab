"""
Layout Optimization for A4 Templates

Maps a resume and a template kind to a concrete LayoutConfig: font sizes,
spacing, content caps and a scale factor chosen so the rendered page neither
overflows nor leaves large empty areas.

Each template kind starts from its own base configuration (template_bases.yaml,
loaded with OmegaConf). The optimizer re-runs the content analyzer and applies
a fixed set of adjustments per density bucket:

    overflow -> shrink fonts, spacing and caps; compact mode; scale 0.95
    dense    -> trim name size, spacing and bullets; compact mode; scale 0.98
    sparse   -> grow fonts and spacing; scale 1.02
    normal   -> base configuration unchanged

Every adjusted value is finally clamped into LAYOUT_BOUNDS, so no input
(however empty or huge) can push a size or spacing outside its documented
range.
"""

import os
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Set, Tuple

from dotenv import load_dotenv
from omegaconf import OmegaConf

from pagefit.contexts.layout.content_analyzer import (
    A4_HEIGHT_PX,
    ContentDensity,
    analyze_content,
)
from pagefit.contexts.layout.exceptions import InvalidTemplateConfigError, UnknownTemplateError
from pagefit.contexts.layout.logger import log_layout_decision
from pagefit.utils.text_processing import clamp

load_dotenv()
DEFAULT_TEMPLATE_BASES_PATH = Path(__file__).parent / "template_bases.yaml"
TEMPLATE_BASES_PATH = Path(os.getenv("TEMPLATE_BASES_PATH", str(DEFAULT_TEMPLATE_BASES_PATH)))


class TemplateKind:
    """Enum-like class for template kinds"""

    MINIMAL = "minimal"
    MODERN = "modern"
    CREATIVE = "creative"

    @classmethod
    def get_all(cls) -> Set[str]:
        return {cls.MINIMAL, cls.MODERN, cls.CREATIVE}


# Fields every base configuration must define
BASE_FIELDS = (
    "name_font_size",
    "title_font_size",
    "section_title_font_size",
    "body_font_size",
    "small_font_size",
    "section_spacing",
    "item_spacing",
    "line_height",
    "container_padding",
    "sidebar_width",
    "max_experience_items",
    "max_education_items",
    "max_bullets_per_exp",
    "max_skills_display",
    "max_achievements",
)

# Documented (floor, ceiling) for every size and spacing value
LAYOUT_BOUNDS: Dict[str, Tuple[float, float]] = {
    "name_font_size": (26, 40),
    "title_font_size": (15, 22),
    "section_title_font_size": (13, 17),
    "body_font_size": (11, 14),
    "small_font_size": (10, 12),
    "section_spacing": (16, 36),
    "item_spacing": (10, 22),
    "line_height": (1.3, 1.6),
    "container_padding": (24, 40),
    "sidebar_width": (180, 250),
}

# field -> (delta, limit). A negative delta is floored at limit, a positive one capped at it.
DENSITY_ADJUSTMENTS: Dict[str, Dict[str, Tuple[float, float]]] = {
    ContentDensity.OVERFLOW: {
        "name_font_size": (-6, 26),
        "title_font_size": (-3, 15),
        "section_title_font_size": (-2, 13),
        "body_font_size": (-1, 11),
        "small_font_size": (-1, 10),
        "section_spacing": (-8, 16),
        "item_spacing": (-4, 10),
        "line_height": (-0.1, 1.3),
        "container_padding": (-8, 24),
        "max_experience_items": (-2, 3),
        "max_bullets_per_exp": (-1, 2),
        "max_achievements": (-2, 4),
        "sidebar_width": (-30, 180),
    },
    ContentDensity.DENSE: {
        "name_font_size": (-2, 28),
        "section_spacing": (-4, 18),
        "item_spacing": (-2, 12),
        "max_bullets_per_exp": (-1, 3),
    },
    ContentDensity.SPARSE: {
        "name_font_size": (4, 40),
        "title_font_size": (2, 22),
        "section_title_font_size": (1, 17),
        "body_font_size": (1, 14),
        "section_spacing": (6, 36),
        "item_spacing": (4, 22),
        "line_height": (0.1, 1.6),
        "sidebar_width": (20, 250),
    },
    ContentDensity.NORMAL: {},
}

# density -> (compact_mode, scale_factor)
DENSITY_MODES: Dict[str, Tuple[bool, float]] = {
    ContentDensity.OVERFLOW: (True, 0.95),
    ContentDensity.DENSE: (True, 0.98),
    ContentDensity.SPARSE: (False, 1.02),
    ContentDensity.NORMAL: (False, 1.0),
}


@dataclass
class PrintSafety:
    """
    Print-safety styling derived from a layout; interpreted by the renderer only.

    Attributes:
        max_height_px: Container height cap (one A4 page)
        overflow: CSS overflow policy for the page container
        transform: CSS scale transform applying the layout's scale factor
    """

    max_height_px: int = A4_HEIGHT_PX
    overflow: str = "hidden"
    transform: str = "scale(1.0)"

    @classmethod
    def for_scale(cls, scale_factor: float) -> "PrintSafety":
        return cls(transform=f"scale({scale_factor})")


@dataclass
class LayoutConfig:
    """
    Concrete layout for one (resume, template kind) pair.

    Font sizes and spacing are in px; line_height is a multiplier. The max_*
    fields cap how much of each section the template shows.
    """

    template_type: str
    name_font_size: int
    title_font_size: int
    section_title_font_size: int
    body_font_size: int
    small_font_size: int
    section_spacing: int
    item_spacing: int
    line_height: float
    container_padding: int
    max_experience_items: int
    max_education_items: int
    max_bullets_per_exp: int
    max_skills_display: int
    max_achievements: int
    sidebar_width: Optional[int] = None
    compact_mode: bool = False
    scale_factor: float = 1.0
    print_safety: PrintSafety = field(default_factory=PrintSafety)

    @property
    def has_sidebar(self) -> bool:
        return self.sidebar_width is not None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@lru_cache(maxsize=None)
def load_template_bases(config_path: Path = TEMPLATE_BASES_PATH) -> Dict[str, Dict[str, Any]]:
    """
    Load and validate the per-template base configurations.

    Args:
        config_path: YAML file mapping template kind -> base values
            (defaults to TEMPLATE_BASES_PATH env variable or the packaged file)

    Returns:
        Dict mapping template kind to a dict of base values

    Raises:
        InvalidTemplateConfigError: If a template is missing fields
    """
    bases = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)

    if not isinstance(bases, dict) or not bases:
        raise InvalidTemplateConfigError("Template bases must be a non-empty mapping", config_path)

    for kind, values in bases.items():
        missing = [name for name in BASE_FIELDS if name not in (values or {})]
        if missing:
            raise InvalidTemplateConfigError(
                f"Template '{kind}' is missing fields: {', '.join(missing)}", config_path
            )

    return bases


def _adjust(value: float, delta: float, limit: float) -> float:
    """Apply delta, stopping at limit (a floor when shrinking, a ceiling when growing)."""
    if delta < 0:
        return max(value + delta, limit)
    return min(value + delta, limit)


def _clamp_to_bounds(values: Dict[str, Any]) -> Dict[str, Any]:
    """Clamp every bounded field into LAYOUT_BOUNDS, leaving absent sidebars alone."""
    for name, (floor, ceiling) in LAYOUT_BOUNDS.items():
        if values.get(name) is not None:
            values[name] = clamp(values[name], floor, ceiling)
    return values


def build_layout_config(
    template_kind: str,
    density: str,
    config_path: Path = TEMPLATE_BASES_PATH,
) -> LayoutConfig:
    """
    Build the LayoutConfig for a template kind and an already-known density.

    Args:
        template_kind: One of the template kinds in the base configuration
        density: One of ContentDensity
        config_path: Base configuration file

    Raises:
        UnknownTemplateError: If template_kind has no base configuration
    """
    bases = load_template_bases(config_path)
    if template_kind not in bases:
        raise UnknownTemplateError(template_kind, bases.keys())

    values = {name: bases[template_kind][name] for name in BASE_FIELDS}

    for name, (delta, limit) in DENSITY_ADJUSTMENTS[density].items():
        # Sidebar adjustments only apply to sidebar-bearing templates
        if values[name] is None:
            continue
        values[name] = _adjust(values[name], delta, limit)

    values = _clamp_to_bounds(values)
    values["line_height"] = round(values["line_height"], 2)

    compact_mode, scale_factor = DENSITY_MODES[density]

    return LayoutConfig(
        template_type=template_kind,
        compact_mode=compact_mode,
        scale_factor=scale_factor,
        print_safety=PrintSafety.for_scale(scale_factor),
        **values,
    )


def optimize_layout(resume: Any, template_kind: str) -> LayoutConfig:
    """
    Compute the layout for a resume rendered with a given template.

    Args:
        resume: ResumeRecord or raw resume mapping
        template_kind: "minimal", "modern" or "creative"

    Returns:
        LayoutConfig with every size and spacing inside LAYOUT_BOUNDS

    Raises:
        InvalidResumeInputError: If resume is None
        UnknownTemplateError: If template_kind has no base configuration
    """
    metrics = analyze_content(resume)

    config = build_layout_config(template_kind, metrics.content_density)
    log_layout_decision(template_kind, metrics, config)
    return config
