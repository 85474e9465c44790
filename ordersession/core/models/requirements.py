"""
Requirements model: per-invitation cardinality and validation metadata.
"""

from typing import Any

from pydantic import BaseModel, Field


class RequirementComponent(BaseModel):
    """
    Requirements for one service/section of an order.

    Attributes:
        name: Service key (matches an order section, e.g. "education")
        min: Minimum number of entries, or years of history for year ranges
        max: Maximum number of entries
        constraints: Free-form constraints; a "rules" mapping of
                     field -> rule definitions adds validation rules
    """

    name: str = Field(..., min_length=1)
    min: int | None = Field(None, ge=0)
    max: int | None = Field(None, ge=0)
    constraints: dict[str, Any] = Field(default_factory=dict)


class Requirements(BaseModel):
    """
    Requirements attached to an invitation.

    Read-only from the session's point of view; fetched once per session load.
    """

    invitation_id: str = Field(..., min_length=1)
    components: list[RequirementComponent] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "invitation_id": "INV-2001",
                "components": [
                    {"name": "personal"},
                    {"name": "education", "min": 1, "max": 3},
                    {"name": "addresses", "min": 7},
                ]
            }
        }

    def component(self, name: str) -> RequirementComponent | None:
        """First component with the given name, if any."""
        for component in self.components:
            if component.name == name:
                return component
        return None

    @property
    def service_keys(self) -> list[str]:
        return [component.name for component in self.components]
