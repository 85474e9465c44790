"""
RegexValidator - validates field values against a regular expression pattern.
"""

import re
from collections.abc import Mapping
from re import Pattern
from typing import Any

from .base_validator import FieldValidator


class RegexValidator(FieldValidator):
    """
    Validates that a field value fully matches a regular expression pattern.

    Parameters:
    - pattern: Regular expression pattern (string or compiled Pattern)
    - flags: Optional regex flags (e.g., re.IGNORECASE)
    - message: Optional message shown instead of the pattern text
    """

    rule_type = "regex"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None, **rule):
        super().__init__(field_name, parameters, **rule)

        pattern = self.parameters.get("pattern")
        if not pattern:
            raise ValueError("RegexValidator requires 'pattern' parameter")

        flags = self.parameters.get("flags", 0)
        self.message = self.parameters.get("message")

        try:
            if isinstance(pattern, str):
                self.pattern: Pattern = re.compile(pattern, flags)
            elif isinstance(pattern, Pattern):
                self.pattern = pattern
            else:
                raise ValueError(f"Pattern must be string or compiled Pattern, got {type(pattern)}")
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}")

    def check(self, value: Any, values: Mapping[str, Any]) -> str | None:
        # Empty values are the required_field rule's concern
        if value is None or value == "":
            return None

        value_str = value if isinstance(value, str) else str(value)

        if self.pattern.fullmatch(value_str):
            return None
        return self.message or f"Value '{value_str}' does not match pattern '{self.pattern.pattern}'"
