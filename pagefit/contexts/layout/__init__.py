"""
Layout Context

Responsibilities:
- Measures resume content (counts, estimated rendered height, density)
- Chooses per-template font sizes, spacing and content caps for one A4 page
- Holds the per-template base configurations

Owns: Height model, density classification, layout adjustment rules
Never: Mutates resume records
"""

from pagefit.contexts.layout.content_analyzer import (
    ContentDensity,
    ContentMetrics,
    analyze_content,
    classify_density,
)
from pagefit.contexts.layout.exceptions import InvalidTemplateConfigError, UnknownTemplateError
from pagefit.contexts.layout.layout_optimizer import (
    LAYOUT_BOUNDS,
    LayoutConfig,
    PrintSafety,
    TemplateKind,
    optimize_layout,
)

__all__ = [
    # Content analysis
    "analyze_content",
    "classify_density",
    "ContentDensity",
    "ContentMetrics",
    # Layout optimization
    "optimize_layout",
    "LayoutConfig",
    "PrintSafety",
    "TemplateKind",
    "LAYOUT_BOUNDS",
    # Errors
    "UnknownTemplateError",
    "InvalidTemplateConfigError",
]
