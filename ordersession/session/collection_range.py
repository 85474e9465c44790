"""
Collection range support: min/max entry limits for an order section.

Limits come from the invitation's requirement component for the section.
The derived state drives whether more entries may be added (max_met), the
introduction copy shown above the section, and the gap confirmation toggle.
"""

from collections.abc import Callable

from ordersession.core.models import (
    CollectionRangeState,
    Notification,
    RangeType,
    Requirements,
    Severity,
)
from ordersession.observability.logger import get_logger
from ordersession.observability.metrics import record_operation
from ordersession.session.errors import OrderNotFoundError
from ordersession.session.interfaces import OrderStore
from ordersession.session.phrases import PhraseBook

logger = get_logger(__name__)

SAVE_FAILED_MESSAGE = "order.errors.saveOrder"


def introduction_text(
    section_key: str,
    minimum: int,
    maximum: int,
    range_type: RangeType,
    phrases: PhraseBook,
) -> str:
    """
    Derive the introduction copy for a section's range.

    Year ranges only ever use the year phrase (pluralised on min); count
    ranges pick min_only, max_only or min_max by which bounds are set.
    """
    params = {"min": minimum, "max": maximum}

    if range_type == RangeType.YEARS:
        if minimum > 0:
            return phrases.choice(PhraseBook.key_for(section_key, "years"), minimum, family="years", **params)
        return ""

    if not minimum and not maximum:
        return ""

    if not minimum:
        family, count = "max_only", maximum
    elif not maximum:
        family, count = "min_only", minimum
    else:
        family, count = "min_max", maximum

    return phrases.choice(PhraseBook.key_for(section_key, family), count, family=family, **params)


def compute(
    requirements: Requirements,
    section_key: str,
    current_count: int,
    range_type: RangeType = RangeType.MIN_MAX,
    gaps_confirmed: bool = False,
    phrases: PhraseBook | None = None,
) -> CollectionRangeState:
    """
    Compute the range state of a section holding current_count entries.

    A missing or zero max never counts as met.
    """
    component = requirements.component(section_key)
    minimum = (component.min or 0) if component else 0
    maximum = (component.max or 0) if component else 0

    return CollectionRangeState(
        min=minimum,
        max=maximum,
        max_met=bool(maximum) and current_count >= maximum,
        intro_text=introduction_text(section_key, minimum, maximum, range_type, phrases or PhraseBook()),
        gaps_confirmed=gaps_confirmed,
        range_type=range_type,
    )


class CollectionRangeGuard:
    """
    Keeps the range state of one section of a persisted order current.

    Counts are taken from the store's copy of the order, so the state
    reflects saved entries only.
    """

    def __init__(
        self,
        store: OrderStore,
        section_key: str,
        range_type: RangeType = RangeType.MIN_MAX,
        phrases: PhraseBook | None = None,
        notify: Callable[[Notification], None] | None = None,
    ):
        self.store = store
        self.section_key = section_key
        self.range_type = range_type
        self.phrases = phrases or PhraseBook()
        self.notify = notify
        self.state = CollectionRangeState(range_type=range_type)

    def set_range_type(self, range_type: RangeType) -> None:
        self.range_type = range_type
        self.state = self.state.model_copy(update={"range_type": range_type})

    def refresh(self, order_id: str, requirements: Requirements) -> CollectionRangeState:
        """
        Recompute the state from the persisted order.

        Raises:
            OrderNotFoundError: If the store no longer has the order
        """
        order = self.store.find(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        self.state = compute(
            requirements,
            self.section_key,
            order.count(self.section_key),
            self.range_type,
            gaps_confirmed=order.gaps_confirmed(self.section_key),
            phrases=self.phrases,
        )
        return self.state

    def confirm_gaps(self, order_id: str, value: bool) -> bool:
        """
        Persist the gap confirmation flag for the section.

        On a rejected update the local flag is rolled back to its prior value
        and an error notification is emitted.

        Raises:
            OrderNotFoundError: If the store no longer has the order
        """
        order = self.store.find(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        previous = self.state.gaps_confirmed
        self.state.gaps_confirmed = value
        order.set_gaps_confirmed(self.section_key, value)

        if not self.store.update(order):
            self.state.gaps_confirmed = previous
            logger.warning(
                "Gap confirmation update rejected",
                extra={"order_id": order_id, "section": self.section_key, "value": value},
            )
            record_operation("confirm_gaps", "failure")
            if self.notify:
                self.notify(Notification(message=SAVE_FAILED_MESSAGE, severity=Severity.ERROR))
            return False

        record_operation("confirm_gaps", "success")
        return True
