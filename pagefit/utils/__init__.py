"""
Shared utilities for PAGEFIT.

Common functionality used across contexts:
- Logger setup
- Text helpers (truncation, de-duplication, clamping)
- LLM provider abstraction
"""

from pagefit.utils.text_processing import clamp, round_half_up, truncate_with_ellipsis, unique_strings

__all__ = ["clamp", "round_half_up", "truncate_with_ellipsis", "unique_strings"]
