"""
Order editing session: snapshot tracking, validation, collection ranges and navigation.
"""

from .collection_range import CollectionRangeGuard, compute, introduction_text
from .draft import DraftEntry
from .errors import (
    NotFoundError,
    OrderNotFoundError,
    PageNotFoundError,
    RequirementsNotFoundError,
    SessionError,
    SessionNotLoadedError,
)
from .navigation import Direction, NavigationPlanner
from .options import DropdownOptions, ListKind, StateListVariant
from .order_session import DRAFT_SCOPE, OrderSession, SessionState, SessionView
from .phrases import PhraseBook
from .settings import OrderSettings, ServiceCatalog, ServiceDefinition
from .sorter import StartDateSorter
from .validation import ValidationOrchestrator

__all__ = [
    "OrderSession",
    "SessionState",
    "SessionView",
    "DRAFT_SCOPE",
    "CollectionRangeGuard",
    "compute",
    "introduction_text",
    "DraftEntry",
    "ValidationOrchestrator",
    "NavigationPlanner",
    "Direction",
    "OrderSettings",
    "ServiceCatalog",
    "ServiceDefinition",
    "DropdownOptions",
    "ListKind",
    "StateListVariant",
    "PhraseBook",
    "StartDateSorter",
    "SessionError",
    "NotFoundError",
    "OrderNotFoundError",
    "RequirementsNotFoundError",
    "PageNotFoundError",
    "SessionNotLoadedError",
]
