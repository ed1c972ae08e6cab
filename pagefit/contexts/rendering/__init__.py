"""
Rendering Context

Responsibilities:
- Derives print-safe styles and utility classes from a LayoutConfig
- Renders the @media print stylesheet that keeps a resume on one A4 page
- Assembles the single context dict a page template renders from

Owns: Template context, print styling
Never: Changes layout decisions or generates PDF binaries
"""

from pagefit.contexts.rendering.print_styles import (
    MAX_CONTENT_HEIGHT,
    get_print_styles,
    get_responsive_classes,
    render_print_css,
)
from pagefit.contexts.rendering.template_context import (
    build_template_context,
    limit_bullet_points,
    limit_content,
)

__all__ = [
    "build_template_context",
    "get_print_styles",
    "get_responsive_classes",
    "render_print_css",
    "limit_content",
    "limit_bullet_points",
    "MAX_CONTENT_HEIGHT",
]
