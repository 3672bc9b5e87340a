"""
==============================================================================
Measure Parsing Module
==============================================================================

Defensive parsing of display strings such as "10g" or "$1,250".

Weight and price are stored as free text. Parsing strips every character
that is not a digit, '.' or '-', then reads the longest leading decimal
number. Anything unreadable parses to None; these helpers never raise.

Examples:
---------
    "10g"      -> 10.0
    "1.2.3 g"  -> 1.2
    "10-20g"   -> 10.0
    "-.5"      -> -0.5
    "abc"      -> None
    "-"        -> None

==============================================================================
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional


_STRIP_PATTERN = re.compile(r"[^\d.\-]")
_NUMBER_PATTERN = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)")


def parse_measure(value: Any) -> Optional[float]:
    """
    Parse a display string into a float.

    Args:
        value: Raw field value (usually a string, may be None)

    Returns:
        The parsed number, or None when nothing numeric can be read
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None

    cleaned = _STRIP_PATTERN.sub("", str(value))
    match = _NUMBER_PATTERN.match(cleaned)
    if not match:
        return None

    return float(match.group(0))


def parse_measure_or_zero(value: Any) -> float:
    """Parse a display string, treating failure as 0."""
    parsed = parse_measure(value)
    return 0.0 if parsed is None else parsed
