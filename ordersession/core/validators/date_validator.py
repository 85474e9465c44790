"""
Date validators - ISO date format checks and cross-field date ordering.

Dates are stored as strings in either month ("2016-05") or day
("2016-05-20") precision.
"""

import re
from collections.abc import Mapping
from datetime import date
from typing import Any

from .base_validator import FieldValidator

ISO_DATE_PATTERN = re.compile(r"(\d{4})-(\d{2})(?:-(\d{2}))?", re.ASCII)


def parse_iso_date(value: str) -> date:
    """
    Parse a YYYY-MM or YYYY-MM-DD string.

    Raises:
        ValueError: If the value is not a valid date in either form
    """
    match = ISO_DATE_PATTERN.fullmatch(value.strip())
    if not match:
        raise ValueError(f"'{value}' is not in YYYY-MM or YYYY-MM-DD format")

    year, month, day = match.groups()
    return date(int(year), int(month), int(day or 1))


class DateValidator(FieldValidator):
    """
    Validates that a field holds a parseable ISO date.

    Parameters:
    - not_future: Reject dates after today (default False)
    """

    rule_type = "date"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None, **rule):
        super().__init__(field_name, parameters, **rule)
        self.not_future = self.parameters.get("not_future", False)

    def check(self, value: Any, values: Mapping[str, Any]) -> str | None:
        if value is None or value == "":
            return None

        try:
            parsed = parse_iso_date(str(value))
        except ValueError as e:
            return f"Invalid date: {e}"

        if self.not_future and parsed > date.today():
            return f"Date '{value}' is in the future"
        return None


class DateOrderValidator(FieldValidator):
    """
    Validates that a date is not before another date field of the same entry.

    Parameters:
    - field: Name of the earlier date field (required)

    Unparseable or empty values on either side are skipped; the date rule
    reports format problems.
    """

    rule_type = "date_after"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None, **rule):
        super().__init__(field_name, parameters, **rule)
        self.other_field = self.parameters.get("field")
        if not self.other_field:
            raise ValueError("DateOrderValidator requires 'field' parameter")

    def check(self, value: Any, values: Mapping[str, Any]) -> str | None:
        other = values.get(self.other_field)
        if not value or not other:
            return None

        try:
            this_date = parse_iso_date(str(value))
            other_date = parse_iso_date(str(other))
        except ValueError:
            return None

        if this_date < other_date:
            return f"Value '{value}' must not be before {self.other_field} '{other}'"
        return None
