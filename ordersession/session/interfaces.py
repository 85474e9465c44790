"""
Collaborator contracts consumed by the order session.

Implementations live outside the core; ordersession.stores ships simple
in-memory and file-backed versions.
"""

from collections.abc import Sequence
from typing import Protocol

from ordersession.core.models import Option, Order, Requirements


class OrderStore(Protocol):
    def find(self, order_id: str) -> Order | None:
        """Return the persisted order, or None when it does not exist."""
        ...

    def update(self, order: Order) -> bool:
        """Persist order; False when the store rejects the update."""
        ...


class RequirementsProvider(Protocol):
    def find_requirements(self, invitation_id: str) -> Requirements | None:
        ...


class OptionsProvider(Protocol):
    def get_country_list(self) -> Sequence[Option]: ...

    def get_degree_list(self) -> Sequence[Option]: ...

    def get_major_list(self) -> Sequence[Option]: ...

    def get_minor_list(self) -> Sequence[Option]: ...

    def get_state_list(self, variant: str) -> Sequence[Option]: ...


class ResourceSorter(Protocol):
    def sort(self, order: Order) -> None:
        """Re-order the order's sections in place."""
        ...
