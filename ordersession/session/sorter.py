"""
Default section ordering for orders.
"""

from ordersession.core.models import Order


class StartDateSorter:
    """
    Orders collection sections current-first, then by start date descending.

    Undated entries sort last. Both passes are stable, so entries with equal
    keys keep their insertion order.
    """

    def sort(self, order: Order) -> None:
        for section_key in Order.SECTION_TYPES:
            entries = getattr(order, section_key)
            if not isinstance(entries, list):
                continue
            entries.sort(key=lambda entry: getattr(entry, "start_date", None) or "", reverse=True)
            entries.sort(key=lambda entry: 0 if getattr(entry, "current", None) else 1)
