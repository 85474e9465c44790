"""
Core data models for the order editing session.

All models use Pydantic for runtime validation and type safety.
"""

from .collection_range import CollectionRangeState, RangeType
from .navigation_entry import NavigationEntry, NavigationLink
from .notification import Notification, Severity
from .option import Option
from .order import Order, ServiceInfo
from .requirements import RequirementComponent, Requirements
from .sub_resource import Address, Educator, Employer, Personal, SubResource, is_blank
from .validation_result import ValidationResult

__all__ = [
    "Order",
    "ServiceInfo",
    "SubResource",
    "Personal",
    "Educator",
    "Employer",
    "Address",
    "is_blank",
    "Requirements",
    "RequirementComponent",
    "ValidationResult",
    "NavigationEntry",
    "NavigationLink",
    "CollectionRangeState",
    "RangeType",
    "Notification",
    "Severity",
    "Option",
]
