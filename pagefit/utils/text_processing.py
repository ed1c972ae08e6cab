"""Text and numeric helpers shared by the layout and preprocessing contexts."""

import math
from typing import Iterable, List, Optional

ELLIPSIS = "…"


def clamp(value: float, lower: float, upper: float) -> float:
    """Bound value to the closed interval [lower, upper]."""
    return max(lower, min(upper, value))


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves going up.

    Font-size constants were tuned against this rounding rule, so the builtin
    round() (half-to-even) would shift some sizes by a pixel.

    Example:
        >>> round_half_up(12.5)
        13
        >>> round(12.5)
        12
    """
    return math.floor(value + 0.5)


def truncate_with_ellipsis(text: str, max_len: int) -> str:
    """
    Truncate text to at most max_len characters, ending with an ellipsis.

    Args:
        text: Text to truncate
        max_len: Maximum length including the ellipsis marker

    Returns:
        Original text if within max_len, otherwise the first max_len - 1
        characters (trailing whitespace stripped) followed by "…"

    Example:
        >>> truncate_with_ellipsis("Shipped the billing service", 12)
        'Shipped the…'
    """
    if len(text) <= max_len:
        return text
    return text[: max_len - 1].strip() + ELLIPSIS


def unique_strings(items: Optional[Iterable[object]]) -> List[str]:
    """
    Trim, drop empties and de-duplicate strings, keeping first occurrences.

    Comparison is case-sensitive and happens after trimming.

    Example:
        >>> unique_strings([" Python", "Python", "python", "", None])
        ['Python', 'python']
    """
    seen = set()
    result = []
    for item in items or []:
        text = (item if isinstance(item, str) else "").strip()
        if text and text not in seen:
            seen.add(text)
            result.append(text)
    return result
