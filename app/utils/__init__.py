"""
==============================================================================
Utilities Package
==============================================================================

Utility classes and functions for the application.

Modules:
--------
- parsing: Defensive parsing of weight/price display strings
- validators: Required-field and client id validation

==============================================================================
"""

from .parsing import parse_measure, parse_measure_or_zero
from .validators import ClientIdValidator, RequiredFieldValidator

__all__ = [
    "parse_measure",
    "parse_measure_or_zero",
    "ClientIdValidator",
    "RequiredFieldValidator",
]
