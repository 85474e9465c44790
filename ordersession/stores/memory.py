"""
In-memory stores.

Orders are deep-copied on the way in and out, so callers never share
objects with the store.
"""

from collections.abc import Iterable, Mapping, Sequence

from ordersession.core.models import Option, Order, Requirements
from ordersession.observability.logger import get_logger

logger = get_logger(__name__)


class InMemoryOrderStore:
    """
    Dict-backed OrderStore.

    Setting fail_updates makes update() reject every write, which is how
    tests exercise the session's failure paths.
    """

    def __init__(self, orders: Iterable[Order] = (), fail_updates: bool = False):
        self.orders: dict[str, Order] = {order.order_id: order.model_copy(deep=True) for order in orders}
        self.fail_updates = fail_updates
        self.update_calls = 0

    def find(self, order_id: str) -> Order | None:
        order = self.orders.get(order_id)
        return order.model_copy(deep=True) if order else None

    def update(self, order: Order) -> bool:
        self.update_calls += 1
        if self.fail_updates:
            logger.debug("Update rejected", extra={"order_id": order.order_id})
            return False
        if order.order_id not in self.orders:
            return False
        self.orders[order.order_id] = order.model_copy(deep=True)
        return True

    def add(self, order: Order) -> None:
        self.orders[order.order_id] = order.model_copy(deep=True)


class InMemoryRequirementsProvider:
    def __init__(self, requirements: Iterable[Requirements] = ()):
        self.requirements = {item.invitation_id: item for item in requirements}

    def find_requirements(self, invitation_id: str) -> Requirements | None:
        requirements = self.requirements.get(invitation_id)
        return requirements.model_copy(deep=True) if requirements else None


class InMemoryOptionsProvider:
    """
    OptionsProvider over fixed lists.

    States are keyed by list variant; unknown variants fall back to "default".
    """

    def __init__(
        self,
        countries: Sequence[Option] = (),
        states: Mapping[str, Sequence[Option]] | None = None,
        degrees: Sequence[Option] = (),
        majors: Sequence[Option] = (),
        minors: Sequence[Option] = (),
    ):
        self.countries = list(countries)
        self.states = {key: list(value) for key, value in (states or {}).items()}
        self.degrees = list(degrees)
        self.majors = list(majors)
        self.minors = list(minors)

    def get_country_list(self) -> list[Option]:
        return list(self.countries)

    def get_degree_list(self) -> list[Option]:
        return list(self.degrees)

    def get_major_list(self) -> list[Option]:
        return list(self.majors)

    def get_minor_list(self) -> list[Option]:
        return list(self.minors)

    def get_state_list(self, variant: str) -> list[Option]:
        return list(self.states.get(variant, self.states.get("default", [])))
