"""
Dropdown option sets handed to the presentation layer.

Options are not used by validation; they only populate form dropdowns.
"""

from enum import Enum

from ordersession.core.models import Option
from ordersession.session.interfaces import OptionsProvider


class StateListVariant(str, Enum):
    """Which filter the provider applies to the state list."""

    DEFAULT = "default"
    RESIDENCE = "residence"
    PROFESSIONAL_LICENSE = "professional_license"


class ListKind(str, Enum):
    COUNTRIES = "countries"
    STATES = "states"
    DEGREES = "degrees"
    MAJORS = "majors"
    MINORS = "minors"


def coded_labels(options) -> list[Option]:
    """Options relabelled as "CODE: Name"."""
    return [Option(code=option.code, label=f"{option.code}: {option.label}") for option in options]


class DropdownOptions:
    """Builds named option lists from an OptionsProvider."""

    def __init__(self, provider: OptionsProvider):
        self.provider = provider

    def build(
        self,
        kinds: set[ListKind],
        state_variant: StateListVariant = StateListVariant.DEFAULT,
    ) -> dict[str, list[Option]]:
        """
        Option lists for the requested kinds, keyed by ListKind value.

        Countries and states are labelled "CODE: Name"; degrees, majors and
        minors keep the provider's labels.
        """
        options: dict[str, list[Option]] = {}

        if ListKind.COUNTRIES in kinds:
            options[ListKind.COUNTRIES.value] = coded_labels(self.provider.get_country_list())
        if ListKind.STATES in kinds:
            options[ListKind.STATES.value] = coded_labels(self.provider.get_state_list(state_variant.value))
        if ListKind.DEGREES in kinds:
            options[ListKind.DEGREES.value] = list(self.provider.get_degree_list())
        if ListKind.MAJORS in kinds:
            options[ListKind.MAJORS.value] = list(self.provider.get_major_list())
        if ListKind.MINORS in kinds:
            options[ListKind.MINORS.value] = list(self.provider.get_minor_list())

        return options
