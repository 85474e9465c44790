"""
CustomValidator - validates using a caller-supplied Python function.
"""

from collections.abc import Mapping
from typing import Any

from .base_validator import FieldValidator


class CustomValidator(FieldValidator):
    """
    Validates using a custom validation function.

    Only available to rules built in code (RuleConfigBuilder), since YAML
    rule files cannot carry callables.

    Parameters:
    - validator_func: A callable taking (value, values) that raises
                      ValueError on failure
    - error_message: Optional prefix for the failure message

    Example:
        def within_ten_years(value, values):
            if value and value < "2015":
                raise ValueError("more than ten years ago")
    """

    rule_type = "custom"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None, **rule):
        super().__init__(field_name, parameters, **rule)

        self.validator_func = self.parameters.get("validator_func")
        if not self.validator_func:
            raise ValueError("CustomValidator requires 'validator_func' parameter")

        if not callable(self.validator_func):
            raise ValueError("validator_func must be callable")

        self.error_message = self.parameters.get("error_message", "Custom validation failed")

    def check(self, value: Any, values: Mapping[str, Any]) -> str | None:
        try:
            self.validator_func(value, values)
        except (ValueError, TypeError) as e:
            return f"{self.error_message}: {e}"
        return None
