"""
Print-safe styling derived from a LayoutConfig.

Everything here is a pure mapping from one LayoutConfig to what a template
needs to apply it: per-element CSS declarations, utility class names, and the
@media print stylesheet that keeps the page container on one A4 sheet.
"""

from pathlib import Path
from typing import Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from pagefit.contexts.layout import LayoutConfig
from pagefit.contexts.layout.content_analyzer import A4_HEIGHT_PX

TEMPLATES_DIR = Path(__file__).parent / "templates"
PRINT_CSS_TEMPLATE = "print.css.jinja"

# Print-time cap on the page container
MAX_CONTENT_HEIGHT = "270mm"

COMPACT_SECTION_MARGIN = "8px"
SECTION_MARGIN = "12px"

# (minimum px, utility class), checked top-down
FONT_SIZE_CLASSES = (
    (36, "text-4xl"),
    (30, "text-3xl"),
    (24, "text-2xl"),
    (20, "text-xl"),
    (18, "text-lg"),
    (16, "text-base"),
    (14, "text-sm"),
)
SMALLEST_FONT_CLASS = "text-xs"

SPACING_CLASSES = (
    (32, "mb-8"),
    (24, "mb-6"),
    (16, "mb-4"),
    (12, "mb-3"),
)
SMALLEST_SPACING_CLASS = "mb-2"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    # Catches silent failures
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def _px(value: float) -> str:
    return f"{value}px"


def get_print_styles(config: LayoutConfig) -> Dict[str, Optional[Dict[str, object]]]:
    """
    CSS declarations for each page element.

    The container is scaled by config.scale_factor and widened by the inverse
    factor so the scaled page still spans the full width. Its height is capped
    at one A4 page with overflow hidden.

    Returns:
        Dict of element -> CSS property dict; "sidebar" is None for templates
        without a sidebar
    """
    return {
        "container": {
            "font-size": _px(config.body_font_size),
            "line-height": config.line_height,
            "max-height": _px(A4_HEIGHT_PX),
            "overflow": "hidden",
            "padding": _px(config.container_padding),
            "transform": f"scale({config.scale_factor})",
            "transform-origin": "top left",
            "width": f"{100 / config.scale_factor:.6g}%",
            "page-break-inside": "avoid",
            "-webkit-print-color-adjust": "exact",
        },
        "name": {"font-size": _px(config.name_font_size), "line-height": 1.2},
        "title": {"font-size": _px(config.title_font_size), "line-height": 1.3},
        "section_title": {
            "font-size": _px(config.section_title_font_size),
            "margin-bottom": _px(config.item_spacing),
            "line-height": 1.3,
        },
        "section": {"margin-bottom": _px(config.section_spacing)},
        "item": {"margin-bottom": _px(config.item_spacing)},
        "sidebar": (
            {"width": _px(config.sidebar_width), "min-width": _px(config.sidebar_width)}
            if config.has_sidebar
            else None
        ),
    }


def font_size_class(size: float) -> str:
    for minimum, css_class in FONT_SIZE_CLASSES:
        if size >= minimum:
            return css_class
    return SMALLEST_FONT_CLASS


def spacing_class(spacing: float) -> str:
    for minimum, css_class in SPACING_CLASSES:
        if spacing >= minimum:
            return css_class
    return SMALLEST_SPACING_CLASS


def get_responsive_classes(config: LayoutConfig) -> Dict[str, str]:
    """Utility CSS classes approximating the layout's font sizes and spacing."""
    return {
        "name": f"{font_size_class(config.name_font_size)} font-bold",
        "title": f"{font_size_class(config.title_font_size)} text-gray-600",
        "section_title": f"{font_size_class(config.section_title_font_size)} font-semibold",
        "body": font_size_class(config.body_font_size),
        "small": f"{font_size_class(config.small_font_size)} text-gray-500",
        "section_spacing": spacing_class(config.section_spacing),
        "item_spacing": spacing_class(config.item_spacing),
        "compact": "space-y-1" if config.compact_mode else "space-y-2",
    }


def render_print_css(compact_mode: bool = False) -> str:
    """
    Render the @media print stylesheet.

    Args:
        compact_mode: Use tighter section margins

    Returns:
        CSS text
    """
    template = _env.get_template(PRINT_CSS_TEMPLATE)
    return template.render(
        max_content_height=MAX_CONTENT_HEIGHT,
        section_margin=COMPACT_SECTION_MARGIN if compact_mode else SECTION_MARGIN,
    )
