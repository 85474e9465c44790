"""
Sub-resource models: the individual entries that make up an order section.
"""

import uuid
from typing import Any, ClassVar

from pydantic import BaseModel


def is_blank(value: Any) -> bool:
    """Return True for values a form would consider "not filled in"."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, dict, tuple, set)):
        return len(value) == 0
    return False


class SubResource(BaseModel):
    """
    One entry within an order section (e.g. one education entry).

    Subclasses name their identifier field through KEY_NAME. All other
    fields are flat values: strings, ISO dates stored as strings, booleans
    and enumerated codes.
    """

    KEY_NAME: ClassVar[str] = "id"

    # String fields holding codes that are shown upper-cased
    CODE_FIELDS: ClassVar[tuple[str, ...]] = ()

    class Config:
        validate_assignment = True

    @classmethod
    def make(cls, **values: Any) -> "SubResource":
        """Build an empty instance with a fresh identity."""
        values.setdefault(cls.KEY_NAME, str(uuid.uuid4()))
        return cls(**values)

    @property
    def identifier(self) -> str:
        return getattr(self, self.KEY_NAME)

    def field_values(self) -> dict[str, Any]:
        """Editable field values, excluding the identifier."""
        values = self.model_dump()
        values.pop(self.KEY_NAME, None)
        return values

    def filled_fields(self) -> list[str]:
        """Names of editable fields whose value is not blank."""
        return [name for name, value in self.field_values().items() if not is_blank(value)]

    def format_for_display(self) -> None:
        """Normalise string fields in place (trim whitespace, upper-case codes)."""
        for name in type(self).model_fields:
            if name == self.KEY_NAME:
                continue
            value = getattr(self, name)
            if not isinstance(value, str):
                continue
            value = value.strip()
            if name in self.CODE_FIELDS:
                value = value.upper()
            setattr(self, name, value)


class Personal(SubResource):
    """Applicant's personal details (single sub-resource section)."""

    KEY_NAME: ClassVar[str] = "personal_id"

    personal_id: str
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    date_of_birth: str | None = None


class Educator(SubResource):
    """
    One education history entry.

    Attributes:
        education_id: Identifier unique within the education section
        school_name: Institution name
        country_code / region: ISO-style codes, upper-cased for display
        degree, major, minor: Codes from the options lists
        start_date / end_date: ISO dates (YYYY-MM or YYYY-MM-DD)
        current: Still attending (end date not required)
        graduated: Degree was awarded
    """

    KEY_NAME: ClassVar[str] = "education_id"
    CODE_FIELDS: ClassVar[tuple[str, ...]] = ("country_code", "region")

    education_id: str
    school_name: str | None = None
    branch: str | None = None
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country_code: str | None = None
    degree: str | None = None
    major: str | None = None
    minor: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    current: bool | None = None
    graduated: bool | None = None
    comments: str | None = None

    class Config:
        json_schema_extra = {
            "example": {
                "education_id": "4b1c7f0e-0d4e-4c55-9a38-6f1f0b7bb0c1",
                "school_name": "State University",
                "city": "Springfield",
                "region": "IL",
                "country_code": "US",
                "degree": "BS",
                "major": "Mathematics",
                "start_date": "2012-09",
                "end_date": "2016-05",
                "current": False,
                "graduated": True
            }
        }


class Employer(SubResource):
    """One employment history entry."""

    KEY_NAME: ClassVar[str] = "employment_id"
    CODE_FIELDS: ClassVar[tuple[str, ...]] = ("country_code", "region")

    employment_id: str
    employer_name: str | None = None
    position: str | None = None
    supervisor_name: str | None = None
    phone: str | None = None
    city: str | None = None
    region: str | None = None
    country_code: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    current: bool | None = None
    reason_for_leaving: str | None = None


class Address(SubResource):
    """One residence history entry."""

    KEY_NAME: ClassVar[str] = "address_id"
    CODE_FIELDS: ClassVar[tuple[str, ...]] = ("country_code", "region")

    address_id: str
    line1: str | None = None
    line2: str | None = None
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country_code: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    current: bool | None = None
