"""
==============================================================================
Validation Utilities Module
==============================================================================

Validation classes for input data.

This module implements:
- RequiredFieldValidator: Checks the mandatory product form fields
- ClientIdValidator: Validates client identifiers used for local storage

Validation Rules for Client IDs:
-------------------------------
- Length: 1-64 characters
- Allowed: letters, numbers, underscore, hyphen
- Used verbatim as a storage file name

==============================================================================
"""

from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Optional, Tuple


class RequiredFieldValidator:
    """
    Validator for required text fields.

    A field counts as missing when it is absent, None, or blank after
    stripping whitespace.

    Example:
        >>> validator = RequiredFieldValidator(("name", "weight", "category"))
        >>> validator.validate({"name": "Ring", "weight": " ", "category": "Rings"})
        (False, ['weight'])
    """

    def __init__(self, required: Iterable[str]) -> None:
        self._required = tuple(required)

    def validate(self, values: Mapping[str, Optional[str]]) -> Tuple[bool, List[str]]:
        """
        Check every required field.

        Args:
            values: Field name to submitted value

        Returns:
            Tuple of (is_valid, missing_field_names) in declaration order
        """
        missing = [
            field for field in self._required
            if not str(values.get(field) or "").strip()
        ]
        return not missing, missing


class ClientIdValidator:
    """
    Validator for client identifiers.

    Example:
        >>> ClientIdValidator().validate("browser-42")
        (True, None)
    """

    PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

    def validate(self, client_id: Optional[str]) -> Tuple[bool, Optional[str]]:
        """
        Validate a client identifier.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not client_id:
            return False, "Client id is required"

        if not self.PATTERN.match(client_id):
            return False, "Client id can only contain letters, numbers, underscores, and hyphens"

        return True, None
