"""
Order editing session.

Composes snapshot tracking, validation, collection ranges and navigation
around one loaded order for the lifetime of one editing session.

Flow:
1. load() fetches the order and its requirements (missing either is fatal)
2. mutate() edits the dirty copy (or the draft entry) and refreshes order_clean
3. render() re-validates the whole dirty record
4. save() / cancel() / delete_sub_resource() / save_new_entry() commit or discard
"""

import functools
from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ordersession.core.models import (
    CollectionRangeState,
    NavigationEntry,
    NavigationLink,
    Notification,
    Option,
    Order,
    RangeType,
    Requirements,
    Severity,
)
from ordersession.core.snapshot import CleanDirtyPair, SnapshotDiffer
from ordersession.observability.logger import get_logger, log_operation
from ordersession.observability.metrics import (
    record_operation,
    session_operation_duration_seconds,
    track_duration,
)
from ordersession.session.collection_range import SAVE_FAILED_MESSAGE, CollectionRangeGuard
from ordersession.session.draft import DraftEntry
from ordersession.session.errors import (
    OrderNotFoundError,
    RequirementsNotFoundError,
    SessionNotLoadedError,
)
from ordersession.session.interfaces import OptionsProvider, OrderStore, RequirementsProvider, ResourceSorter
from ordersession.session.navigation import Direction, NavigationPlanner
from ordersession.session.options import DropdownOptions, ListKind, StateListVariant
from ordersession.session.phrases import PhraseBook
from ordersession.session.settings import OrderSettings, ServiceCatalog
from ordersession.session.sorter import StartDateSorter
from ordersession.session.validation import ValidationOrchestrator
from ordersession.utils.paths import set_path
from ordersession.utils.validation import InputValidationError, validate_field_path, validate_order_id

logger = get_logger(__name__)

# Paths under this prefix address the draft entry instead of the order
DRAFT_SCOPE = "new_entry"


class SessionState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    VALIDATING = "validating"
    SAVING = "saving"


class SessionView(BaseModel):
    """Signals exposed to the presentation layer after a render."""

    order_clean: bool
    errors: dict[str, list[str]] = Field(default_factory=dict)
    warnings: dict[str, list[str]] = Field(default_factory=dict)
    collection_range: CollectionRangeState | None = None
    pages: list[NavigationEntry] = Field(default_factory=list)
    previous: NavigationLink | None = None
    next: NavigationLink | None = None
    are_services_supported: bool = False


def single_flight(operation: str, rejected: Any = False):
    """
    Reject the call while another guarded operation of the session is in flight.

    Rejected calls return `rejected` without running.
    """
    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            if self._message_in_flight:
                logger.warning(
                    f"Rejected {operation}: another operation is in flight",
                    extra={"operation": operation, "order_id": self.order_id},
                )
                record_operation(operation, "rejected")
                return rejected

            self._message_in_flight = True
            try:
                return method(self, *args, **kwargs)
            finally:
                self._message_in_flight = False
        return wrapper
    return decorator


class OrderSession:
    """
    One editing session over one order.

    Args:
        store: Loads and persists orders
        requirements_provider: Loads an invitation's requirements
        catalog: Service key -> page mapping
        rules: Base validation rules (scoped to the requirements on use)
        route_id: Route of the page this session backs; selects the section,
                  range type and navigation neighbours from the catalog
        section_key: Section edited by the page, overriding the catalog's
        range_type: Range type, overriding the catalog's
        sorter: Section ordering policy (StartDateSorter by default)
        planner: Navigation planner
        phrases: Introduction phrase templates
        options_provider / option_lists / state_variant: Dropdown data
        notifier: Receives notifications as they are raised
        cache_full_pass: Skip render validation when nothing changed
    """

    def __init__(
        self,
        store: OrderStore,
        requirements_provider: RequirementsProvider,
        catalog: ServiceCatalog,
        rules: list[dict[str, Any]],
        *,
        route_id: str | None = None,
        section_key: str | None = None,
        range_type: RangeType | None = None,
        sorter: ResourceSorter | None = None,
        planner: NavigationPlanner | None = None,
        phrases: PhraseBook | None = None,
        options_provider: OptionsProvider | None = None,
        option_lists: frozenset[ListKind] = frozenset(),
        state_variant: StateListVariant = StateListVariant.DEFAULT,
        notifier: Callable[[Notification], None] | None = None,
        cache_full_pass: bool = True,
    ):
        self.store = store
        self.requirements_provider = requirements_provider
        self.catalog = catalog
        self.route_id = route_id
        self.sorter = sorter or StartDateSorter()
        self.planner = planner or NavigationPlanner()
        self.orchestrator = ValidationOrchestrator(rules, cache_full_pass=cache_full_pass)
        self.options_provider = options_provider
        self.option_lists = option_lists
        self.state_variant = state_variant
        self.notifier = notifier

        service = catalog.for_route(route_id) if route_id else None
        if service is None and section_key:
            service = catalog.for_section(section_key)
        self.section_key = section_key or (service.section_key if service else None)
        range_type = range_type or (service.range_type if service else RangeType.MIN_MAX)

        self.range_guard: CollectionRangeGuard | None = None
        if self.section_key and Order.is_collection(self.section_key):
            self.range_guard = CollectionRangeGuard(
                store, self.section_key, range_type, phrases=phrases, notify=self._notify
            )

        self.state = SessionState.LOADING
        self.order_id: str | None = None
        self.requirements: Requirements | None = None
        self.order_clean = True
        self.draft: DraftEntry | None = None
        self.pages: list[NavigationEntry] = []
        self.previous_link: NavigationLink | None = None
        self.next_link: NavigationLink | None = None
        self.are_services_supported = False
        self.options: dict[str, list[Option]] = {}
        self.notifications: list[Notification] = []
        self._pair: CleanDirtyPair | None = None
        self._message_in_flight = False

    # =======================
    # STATE ACCESS
    # =======================

    def _loaded_pair(self) -> CleanDirtyPair:
        if self._pair is None:
            raise SessionNotLoadedError("No order has been loaded into this session")
        return self._pair

    @property
    def clean(self) -> Order:
        return self._loaded_pair().clean

    @property
    def dirty(self) -> Order:
        return self._loaded_pair().dirty

    @property
    def errors(self) -> dict[str, list[str]]:
        return self.orchestrator.errors.errors

    @property
    def collection_range(self) -> CollectionRangeState | None:
        return self.range_guard.state if self.range_guard else None

    @property
    def message_in_flight(self) -> bool:
        return self._message_in_flight

    def _notify(self, notification: Notification) -> None:
        self.notifications.append(notification)
        if self.notifier:
            self.notifier(notification)

    # =======================
    # LOADING
    # =======================

    def load(self, order_id: str) -> "OrderSession":
        """
        Load an order and its requirements into the session.

        Raises:
            InputValidationError: If order_id is malformed
            OrderNotFoundError: If the store has no such order
            RequirementsNotFoundError: If the invitation has no requirements
            PageNotFoundError: If route_id is a service page the order does not use
        """
        order_id = validate_order_id(order_id)
        self.state = SessionState.LOADING

        with log_operation("load", logger, order_id=order_id), \
                track_duration(session_operation_duration_seconds, operation="load"):
            order = self.store.find(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)

            requirements = self.requirements_provider.find_requirements(order.invite_id)
            if requirements is None:
                raise RequirementsNotFoundError(order.invite_id)

            order.format_for_display()
            self.sorter.sort(order)

            self.order_id = order_id
            self.requirements = requirements
            self._pair = CleanDirtyPair(order)
            self.order_clean = True
            self.orchestrator.reset()
            self.notifications = []

            if self.section_key and Order.is_collection(self.section_key):
                self.draft = DraftEntry(Order.resource_class(self.section_key), self.section_key)
                self.orchestrator.register_draft_scope(DRAFT_SCOPE)

            settings = OrderSettings(order, requirements, self.catalog)
            self.are_services_supported = settings.are_services_supported()
            self._refresh_pages()

            if self.range_guard:
                self.range_guard.refresh(order_id, requirements)

            if self.options_provider and self.option_lists:
                self.options = DropdownOptions(self.options_provider).build(set(self.option_lists), self.state_variant)

        logger.info(
            "Order session loaded",
            extra={"order_id": order_id, "invite_id": order.invite_id, "pages": len(self.pages)},
        )
        record_operation("load", "success")
        self.state = SessionState.READY
        return self

    def _refresh_pages(self) -> None:
        self.pages = OrderSettings(self.clean, self.requirements, self.catalog).get_pages()

        adjacent = None
        if self.route_id:
            adjacent = self.planner.plan_adjacent(self.pages, self.route_id, self.order_id)
        self.previous_link, self.next_link = adjacent or (None, None)

    # =======================
    # EDITING
    # =======================

    def mutate(self, path: str, value: Any) -> None:
        """
        Write value at path in the dirty order, or in the draft for "new_entry.*" paths.

        Raises:
            InputValidationError: If the path is malformed or does not exist,
                or the value does not fit the field
        """
        validate_field_path(path)
        head, _, rest = path.partition(".")

        if head == DRAFT_SCOPE:
            if self.draft is None or not rest:
                raise InputValidationError(f"No draft entry to write '{path}' into")
            target, target_path = self.draft.entry, rest
        else:
            target, target_path = self.dirty, path

        try:
            set_path(target, target_path, value)
        except (KeyError, TypeError) as e:
            raise InputValidationError(str(e)) from None
        except ValidationError as e:
            raise InputValidationError(f"Invalid value for '{path}': {e.errors()[0]['msg']}") from None

        self.updated(path)

    def updated(self, path: str) -> None:
        """
        React to an edit already written at path.

        Recomputes order_clean from the whole affected pair; draft edits
        also run a live validation pass.
        """
        head, _, rest = path.partition(".")

        if head == DRAFT_SCOPE and self.draft is not None:
            self.draft.entry.format_for_display()
            self.order_clean = self.draft.is_clean
            self.orchestrator.validate_edit(self.draft.entry, self.requirements, rest, scope=DRAFT_SCOPE)
        else:
            self.dirty.format_for_display()
            self.order_clean = self._loaded_pair().is_clean

        logger.debug("Field updated", extra={"order_id": self.order_id, "path": path, "order_clean": self.order_clean})

    def validate_field(self, path: str) -> dict[str, list[str]]:
        """Live-validate an edit of an existing order field; returns that pass's errors."""
        validate_field_path(path)
        return self.orchestrator.validate_edit(self.dirty, self.requirements, path).errors

    def render(self) -> SessionView:
        """Run the full validation pass and collect the outward signals."""
        self._loaded_pair()
        self.state = SessionState.VALIDATING
        try:
            standing = self.orchestrator.validate_render(self.dirty, self.requirements)
        finally:
            self.state = SessionState.READY

        return SessionView(
            order_clean=self.order_clean,
            errors={path: list(messages) for path, messages in standing.errors.items()},
            warnings={path: list(messages) for path, messages in standing.warnings.items()},
            collection_range=self.collection_range.model_copy() if self.collection_range else None,
            pages=list(self.pages),
            previous=self.previous_link,
            next=self.next_link,
            are_services_supported=self.are_services_supported,
        )

    # =======================
    # PERSISTENCE
    # =======================

    def _save(self, operation: str) -> bool:
        pair = self._loaded_pair()

        if pair.is_clean:
            self.order_clean = True
            record_operation(operation, "noop")
            return True

        changed = sorted(pair.changed_paths())
        candidate = SnapshotDiffer.clone(pair.dirty)
        self.sorter.sort(candidate)

        self.state = SessionState.SAVING
        try:
            with track_duration(session_operation_duration_seconds, operation=operation):
                updated = self.store.update(candidate)
        finally:
            self.state = SessionState.READY

        if not updated:
            logger.warning(
                "Order update rejected by store",
                extra={"order_id": self.order_id, "operation": operation, "changed_paths": changed},
            )
            record_operation(operation, "failure")
            self._notify(Notification(message=SAVE_FAILED_MESSAGE, severity=Severity.ERROR))
            return False

        # The store now holds candidate
        pair.dirty = candidate
        pair.commit()
        self.order_clean = True
        logger.info(
            "Order saved",
            extra={"order_id": self.order_id, "operation": operation, "changed_paths": changed},
        )
        record_operation(operation, "success")

        self._refresh_pages()
        if self.range_guard:
            self.range_guard.refresh(self.order_id, self.requirements)
        return True

    @single_flight("save")
    def save(self) -> bool:
        """
        Persist the dirty order.

        Returns:
            True on success (or when there was nothing to save); False when the
            store rejected the update, in which case dirty is left as it was
        """
        return self._save("save")

    @single_flight("cancel")
    def cancel(self) -> bool:
        """Discard unsaved edits to the order and the draft entry."""
        pair = self._loaded_pair()
        self._reset_draft()
        pair.revert()
        self.order_clean = True
        logger.info("Order changes cancelled", extra={"order_id": self.order_id})
        record_operation("cancel", "success")
        return True

    @single_flight("delete")
    def delete_sub_resource(self, section_key: str, resource_id: str) -> bool:
        """
        Remove a sub-resource from the dirty order and save.

        Returns:
            False without touching the order when no such entry exists, or
            when the save fails
        """
        dirty = self.dirty

        if section_key not in Order.SECTION_TYPES:
            record_operation("delete", "not_found")
            return False

        entries = getattr(dirty, section_key)
        if isinstance(entries, list):
            index = next((i for i, entry in enumerate(entries) if entry.identifier == resource_id), None)
            if index is None:
                record_operation("delete", "not_found")
                return False
            entries.pop(index)
        elif entries is not None and entries.identifier == resource_id:
            setattr(dirty, section_key, None)
        else:
            record_operation("delete", "not_found")
            return False

        return self._save("delete")

    # =======================
    # DRAFT NEW ENTRY
    # =======================

    def _reset_draft(self) -> None:
        if self.draft is not None:
            self.draft.reset()
        self.orchestrator.clear_scope(DRAFT_SCOPE)

    def reset_new_entry(self) -> bool:
        """Replace the draft with an empty entry and drop its errors."""
        self._reset_draft()
        return True

    @single_flight("save_new_entry")
    def save_new_entry(self) -> bool:
        """
        Append the draft to its section and save.

        On success the draft is reset. On failure the draft keeps the user's
        input and the appended entry is withdrawn from the dirty order.
        """
        if self.draft is None:
            return False

        if self.range_guard and self.range_guard.state.max_met:
            logger.warning(
                "Rejected new entry: section maximum reached",
                extra={"order_id": self.order_id, "section": self.draft.section_key},
            )
            record_operation("save_new_entry", "rejected")
            return False

        entries = getattr(self.dirty, self.draft.section_key)
        entries.append(SnapshotDiffer.clone(self.draft.entry))

        if self._save("save_new_entry"):
            self._reset_draft()
            return True

        entries.pop()
        return False

    # =======================
    # COLLECTION RANGE / NAVIGATION
    # =======================

    @single_flight("confirm_gaps")
    def confirm_gaps(self, value: bool) -> bool:
        """
        Persist the section's gap confirmation flag.

        The session's own copies follow a successful update so a later save
        does not overwrite the flag.
        """
        if self.range_guard is None:
            return False

        pair = self._loaded_pair()
        if not self.range_guard.confirm_gaps(self.order_id, value):
            return False

        pair.clean.set_gaps_confirmed(self.range_guard.section_key, value)
        pair.dirty.set_gaps_confirmed(self.range_guard.section_key, value)
        return True

    @single_flight("navigate", rejected=None)
    def navigate(self, direction: Direction) -> NavigationLink | None:
        """Destination for a previous/next click; None while an operation is in flight."""
        self._loaded_pair()
        return self.previous_link if direction == Direction.PREVIOUS else self.next_link
