"""
Navigation models: the service pages of an order wizard and computed links.
"""

from pydantic import BaseModel, Field


class NavigationEntry(BaseModel):
    """
    One service page in the order wizard.

    Attributes:
        service_key: Service the page edits (e.g. "education")
        step_index: Position of the page in the wizard, starting at 0
        route_id: Route name of the page
        title: Page title shown on navigation links
        completed_count: Entries currently recorded for the service
        total_count: Entries the service expects
    """

    service_key: str = Field(..., min_length=1)
    step_index: int = Field(..., ge=0)
    route_id: str = Field(..., min_length=1)
    title: str
    completed_count: int = Field(0, ge=0)
    total_count: int = Field(0, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "service_key": "education",
                "step_index": 1,
                "route_id": "order.education",
                "title": "Education",
                "completed_count": 1,
                "total_count": 3
            }
        }


class NavigationLink(BaseModel):
    """A computed previous/next destination."""

    route_id: str
    url: str
    title: str
