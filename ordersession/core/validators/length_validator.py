"""
LengthValidator - validates string values are within a length range.
"""

from collections.abc import Mapping
from typing import Any

from .base_validator import FieldValidator


class LengthValidator(FieldValidator):
    """
    Validates that a string field's length is within a range.

    Parameters:
    - min: Minimum length (inclusive)
    - max: Maximum length (inclusive)
    """

    rule_type = "length"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None, **rule):
        super().__init__(field_name, parameters, **rule)

        self.min_length = self.parameters.get("min")
        self.max_length = self.parameters.get("max")

        if self.min_length is None and self.max_length is None:
            raise ValueError("LengthValidator requires at least one of: min, max")

    def check(self, value: Any, values: Mapping[str, Any]) -> str | None:
        if value is None or value == "":
            return None

        if not isinstance(value, str):
            return f"Value must be a string, got {type(value).__name__}"

        if self.min_length is not None and len(value) < self.min_length:
            return f"Value must be at least {self.min_length} characters"

        if self.max_length is not None and len(value) > self.max_length:
            return f"Value exceeds maximum length of {self.max_length} characters"

        return None
