"""
Order model: the aggregate record edited across the order wizard.
"""

from typing import ClassVar

from pydantic import BaseModel, Field

from .sub_resource import Address, Educator, Employer, Personal, SubResource


class ServiceInfo(BaseModel):
    """Per-section settings stored on the order."""

    confirmed_gaps: bool = False

    class Config:
        validate_assignment = True


class Order(BaseModel):
    """
    The multi-section record being edited.

    Sections are either a single sub-resource (personal) or an ordered list
    of sub-resources (education, employment, addresses). Identifiers are
    unique within a section.

    Attributes:
        order_id: Order identifier
        invite_id: Invitation the order was created from (keys requirements)
        company_name: Requesting company, shown in page headers
        personal: Single personal-details sub-resource
        education / employment / addresses: Collection sections
        service_info: Per-section settings such as the gap confirmation flag
    """

    SECTION_TYPES: ClassVar[dict[str, type[SubResource]]] = {
        "personal": Personal,
        "education": Educator,
        "employment": Employer,
        "addresses": Address,
    }

    order_id: str = Field(..., min_length=1)
    invite_id: str = Field(..., min_length=1)
    company_name: str | None = None
    personal: Personal | None = None
    education: list[Educator] = Field(default_factory=list)
    employment: list[Employer] = Field(default_factory=list)
    addresses: list[Address] = Field(default_factory=list)
    service_info: dict[str, ServiceInfo] = Field(default_factory=dict)

    class Config:
        validate_assignment = True
        json_schema_extra = {
            "example": {
                "order_id": "ORD-1001",
                "invite_id": "INV-2001",
                "company_name": "Acme Screening",
                "education": [
                    {
                        "education_id": "edu-1",
                        "school_name": "State University",
                        "start_date": "2012-09",
                        "end_date": "2016-05"
                    }
                ],
                "service_info": {"education": {"confirmed_gaps": False}}
            }
        }

    @classmethod
    def resource_class(cls, section_key: str) -> type[SubResource]:
        try:
            return cls.SECTION_TYPES[section_key]
        except KeyError:
            raise KeyError(f"Unknown order section: {section_key}") from None

    @classmethod
    def is_collection(cls, section_key: str) -> bool:
        return section_key in cls.SECTION_TYPES and section_key != "personal"

    def section(self, section_key: str) -> list[SubResource]:
        """Entries of a section as a list (a single sub-resource becomes a 0/1-item list)."""
        self.resource_class(section_key)
        value = getattr(self, section_key)
        if isinstance(value, list):
            return value
        return [] if value is None else [value]

    def count(self, section_key: str) -> int:
        return len(self.section(section_key))

    def gaps_confirmed(self, section_key: str) -> bool:
        info = self.service_info.get(section_key)
        return bool(info and info.confirmed_gaps)

    def set_gaps_confirmed(self, section_key: str, value: bool) -> None:
        self.service_info.setdefault(section_key, ServiceInfo()).confirmed_gaps = value

    def format_for_display(self) -> None:
        for section_key in self.SECTION_TYPES:
            for resource in self.section(section_key):
                resource.format_for_display()
