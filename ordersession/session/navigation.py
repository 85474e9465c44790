"""
Previous/next navigation across the service pages of an order wizard.
"""

from collections.abc import Callable, Sequence
from enum import IntEnum

from ordersession.core.models import NavigationEntry, NavigationLink
from ordersession.session.errors import PageNotFoundError

APPLICATION_SUMMARY_ROUTE = "order.application-summary"
SERVICES_REVIEW_ROUTE = "order.services-review"
CONSENT_ROUTE = "order.consent"
ORDER_COMPLETE_ROUTE = "order.complete"

# Pages whose neighbours do not depend on the order's services
NON_SERVICE_ROUTES = frozenset({
    APPLICATION_SUMMARY_ROUTE,
    SERVICES_REVIEW_ROUTE,
    CONSENT_ROUTE,
    ORDER_COMPLETE_ROUTE,
})

DEFAULT_URL_TEMPLATE = "/orders/{order_id}/{route_id}"


class Direction(IntEnum):
    PREVIOUS = -1
    NEXT = 1


def template_url_builder(template: str = DEFAULT_URL_TEMPLATE) -> Callable[[str, str], str]:
    """URL builder filling route_id and order_id into a format string."""
    def build(route_id: str, order_id: str) -> str:
        return template.format(route_id=route_id, order_id=order_id)
    return build


class NavigationPlanner:
    """
    Computes the destination one step before or after the current page.

    Stepping off either end of the service pages lands on the application
    summary page.
    """

    def __init__(
        self,
        summary_route: str = APPLICATION_SUMMARY_ROUTE,
        summary_title: str = "Summary",
        url_builder: Callable[[str, str], str] | None = None,
    ):
        self.summary_route = summary_route
        self.summary_title = summary_title
        self.url_builder = url_builder or template_url_builder()

    def plan(
        self,
        pages: Sequence[NavigationEntry],
        current_route_id: str,
        direction: Direction,
        order_id: str = "",
    ) -> NavigationLink:
        """
        Link for the page adjacent to current_route_id.

        Raises:
            PageNotFoundError: If current_route_id is not one of pages
        """
        current = next((page for page in pages if page.route_id == current_route_id), None)
        if current is None:
            raise PageNotFoundError(current_route_id)

        target_step = current.step_index + int(direction)
        target = next((page for page in pages if page.step_index == target_step), None)

        if target is None:
            return NavigationLink(
                route_id=self.summary_route,
                url=self.url_builder(self.summary_route, order_id),
                title=self.summary_title,
            )

        return NavigationLink(
            route_id=target.route_id,
            url=self.url_builder(target.route_id, order_id),
            title=target.title,
        )

    def plan_adjacent(
        self,
        pages: Sequence[NavigationEntry],
        current_route_id: str,
        order_id: str = "",
    ) -> tuple[NavigationLink, NavigationLink] | None:
        """
        (previous, next) links for a service page.

        Returns None for non-service pages, which keep fixed links.
        """
        if current_route_id in NON_SERVICE_ROUTES:
            return None
        return (
            self.plan(pages, current_route_id, Direction.PREVIOUS, order_id),
            self.plan(pages, current_route_id, Direction.NEXT, order_id),
        )
