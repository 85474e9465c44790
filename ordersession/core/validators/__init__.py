"""
Validation rule implementations.

Provides validators for required fields, type checking, lengths, regex
patterns, ISO dates, cross-field date ordering and custom validation logic.
"""

from .base_validator import SEVERITIES, FieldValidator
from .custom_validator import CustomValidator
from .date_validator import DateOrderValidator, DateValidator, parse_iso_date
from .length_validator import LengthValidator
from .regex_validator import RegexValidator
from .required_field_validator import RequiredFieldValidator
from .type_validator import TypeValidator

__all__ = [
    "FieldValidator",
    "SEVERITIES",
    "RequiredFieldValidator",
    "TypeValidator",
    "LengthValidator",
    "RegexValidator",
    "DateValidator",
    "DateOrderValidator",
    "CustomValidator",
    "parse_iso_date",
]
