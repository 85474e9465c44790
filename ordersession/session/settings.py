"""
Service catalog and order settings.

The catalog is an explicit mapping of service key -> page (route, title,
section, range type), loaded once and handed to each session. OrderSettings
combines it with an order and its requirements to assemble the wizard's
service pages.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from ordersession.core.models import NavigationEntry, Order, RangeType, Requirements


class ServiceDefinition(BaseModel):
    """
    One service page of the wizard.

    Attributes:
        service_key: Requirement component name
        route_id: Route name of the page editing the service
        title: Page title
        section: Order section the page edits (defaults to service_key)
        range_type: How the section's collection range is expressed
    """

    service_key: str = Field(..., min_length=1)
    route_id: str = Field(..., min_length=1)
    title: str
    section: str | None = None
    range_type: RangeType = RangeType.MIN_MAX

    @property
    def section_key(self) -> str:
        return self.section or self.service_key


class ServiceCatalog:
    """Ordered service definitions; page order follows catalog order."""

    def __init__(self, services: list[ServiceDefinition]):
        self.services = list(services)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ServiceCatalog":
        """
        Load a catalog from YAML.

        Expected format:
        ```yaml
        services:
          - service_key: education
            route_id: order.education
            title: Education
            range_type: min_max
        ```

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the services section is missing or malformed
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Service catalog file not found: {path}")

        with open(path) as f:
            config = yaml.safe_load(f)

        if not config or not isinstance(config.get("services"), list):
            raise ValueError("Service catalog must contain a 'services' list")

        return cls([ServiceDefinition(**entry) for entry in config["services"]])

    def get(self, service_key: str) -> ServiceDefinition | None:
        return next((s for s in self.services if s.service_key == service_key), None)

    def for_route(self, route_id: str) -> ServiceDefinition | None:
        return next((s for s in self.services if s.route_id == route_id), None)

    def for_section(self, section_key: str) -> ServiceDefinition | None:
        return next((s for s in self.services if s.section_key == section_key), None)


class OrderSettings:
    """Compiled page information for one order and its requirements."""

    def __init__(self, order: Order, requirements: Requirements, catalog: ServiceCatalog):
        self.order = order
        self.requirements = requirements
        self.catalog = catalog

    def get_pages(self) -> list[NavigationEntry]:
        """
        Service pages for the services the invitation requires, in catalog order.

        Services without a catalog entry get no page.
        """
        required = set(self.requirements.service_keys)
        pages = []

        for service in self.catalog.services:
            if service.service_key not in required:
                continue

            component = self.requirements.component(service.service_key)
            completed = self.order.count(service.section_key) if service.section_key in Order.SECTION_TYPES else 0

            total = component.max or 0
            if not total and service.range_type == RangeType.MIN_MAX:
                total = component.min or 0

            pages.append(NavigationEntry(
                service_key=service.service_key,
                step_index=len(pages),
                route_id=service.route_id,
                title=service.title,
                completed_count=completed,
                total_count=max(total, completed),
            ))

        return pages

    def are_services_supported(self) -> bool:
        """True when every required service has a page in the catalog."""
        return all(self.catalog.get(key) is not None for key in self.requirements.service_keys)
