"""
CollectionRangeState model: derived min/max cardinality state for a section.
"""

from enum import Enum

from pydantic import BaseModel


class RangeType(str, Enum):
    """How a section's range is expressed to the applicant."""

    MIN_MAX = "min_max"  # entry counts
    YEARS = "years"  # years of history, keyed by min


class CollectionRangeState(BaseModel):
    """
    Derived (never persisted) range state for one order section.

    Attributes:
        min: Minimum entries (or years for YEARS ranges); 0 when unset
        max: Maximum entries; 0 when unset
        max_met: True once the section holds max entries
        intro_text: Introduction copy derived from the bounds
        gaps_confirmed: Applicant confirmed the history has gaps
        range_type: Template family used for intro_text
    """

    min: int = 0
    max: int = 0
    max_met: bool = False
    intro_text: str = ""
    gaps_confirmed: bool = False
    range_type: RangeType = RangeType.MIN_MAX
