"""
RequiredFieldValidator - ensures a field is present and not null/empty.
"""

from collections.abc import Mapping
from typing import Any

from .base_validator import FieldValidator


class RequiredFieldValidator(FieldValidator):
    """
    Validates that a required field is present and not null/empty.

    Fails if:
    - Field is missing from the sub-resource
    - Field value is None
    - Field value is an empty or whitespace-only string (configurable)

    Parameters:
    - allow_empty_string: Accept "" as a value
    - unless: Name of another field; when that field is truthy the
              requirement is waived (e.g. end_date unless current)
    """

    rule_type = "required_field"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None, **rule):
        super().__init__(field_name, parameters, **rule)
        self.allow_empty_string = self.parameters.get("allow_empty_string", False)
        self.unless = self.parameters.get("unless")

    def check(self, value: Any, values: Mapping[str, Any]) -> str | None:
        if self.unless and values.get(self.unless):
            return None

        if self.field_name not in values:
            return "Field is missing from record"

        if value is None:
            return "Field value is null"

        if not self.allow_empty_string and isinstance(value, str) and value.strip() == "":
            return "Field value is empty string"

        return None
