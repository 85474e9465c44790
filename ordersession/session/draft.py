"""
Draft-new-entry sub-session: a not yet saved sub-resource being composed.
"""

from ordersession.core.models import SubResource
from ordersession.core.snapshot import CleanDirtyPair


class DraftEntry:
    """
    A clean/dirty pair scoped to one new sub-resource of a section.

    The clean side is always an empty instance sharing the draft's
    identity, so the pair is clean until the user types something.
    """

    def __init__(self, resource_class: type[SubResource], section_key: str):
        self.resource_class = resource_class
        self.section_key = section_key
        self.pair = CleanDirtyPair(resource_class.make())

    @property
    def entry(self) -> SubResource:
        return self.pair.dirty

    @property
    def is_clean(self) -> bool:
        return self.pair.is_clean

    def reset(self) -> None:
        """Replace the draft with an empty instance with a new identity."""
        self.pair.reset(self.resource_class.make())
