"""
TypeValidator - validates field types, accepting form-style string input.
"""

from collections.abc import Mapping
from typing import Any

from .base_validator import FieldValidator


class TypeValidator(FieldValidator):
    """
    Validates that a field holds (or can be read as) the expected type.

    Form input arrives as strings, so with coerce enabled (the default)
    "true"/"no"/"12" are accepted for boolean and integer fields.

    Supported types: boolean/bool, integer/int, string/str
    """

    rule_type = "type_check"

    TYPE_MAPPING = {
        "boolean": bool,
        "bool": bool,
        "integer": int,
        "int": int,
        "string": str,
        "str": str,
    }

    TRUE_STRINGS = ("true", "1", "yes", "on")
    FALSE_STRINGS = ("false", "0", "no", "off")

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None, **rule):
        super().__init__(field_name, parameters, **rule)

        expected_type = self.parameters.get("expected_type")
        if not expected_type:
            raise ValueError("TypeValidator requires 'expected_type' parameter")

        if isinstance(expected_type, str):
            self.expected_type = self.TYPE_MAPPING.get(expected_type.lower())
            if not self.expected_type:
                raise ValueError(f"Unsupported type: {expected_type}")
        else:
            self.expected_type = expected_type

        self.coerce = self.parameters.get("coerce", True)

    def check(self, value: Any, values: Mapping[str, Any]) -> str | None:
        # None is the required_field rule's concern
        if value is None:
            return None

        # bool is a subclass of int; an integer field must not accept True
        if self.expected_type is int and isinstance(value, bool):
            return "Expected int, got bool"

        if isinstance(value, self.expected_type):
            return None

        if not self.coerce:
            return f"Expected {self.expected_type.__name__}, got {type(value).__name__}"

        try:
            self._coerce_type(value)
        except (ValueError, TypeError) as e:
            return f"Cannot coerce {type(value).__name__} to {self.expected_type.__name__}: {e}"
        return None

    def _coerce_type(self, value: Any) -> Any:
        """
        Attempt to read value as the expected type.

        Raises:
            ValueError: If coercion fails
        """
        if self.expected_type is bool:
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in self.TRUE_STRINGS:
                    return True
                if lowered in self.FALSE_STRINGS:
                    return False
                raise ValueError(f"Cannot parse '{value}' as boolean")
            if isinstance(value, int):
                return bool(value)
            raise TypeError(f"Cannot read {type(value).__name__} as boolean")

        if self.expected_type is int and isinstance(value, str):
            return int(value.strip())

        return self.expected_type(value)
