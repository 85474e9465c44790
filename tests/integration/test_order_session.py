"""
Integration tests for OrderSession against in-memory stores.

Covers the session lifecycle: load, edit, render, save, cancel, delete,
draft new entries, gap confirmation and navigation.
"""

import pytest

from ordersession.core.models import Educator, Option, Order, Severity
from ordersession.core.snapshot import SnapshotDiffer
from ordersession.session import (
    Direction,
    ListKind,
    OrderNotFoundError,
    OrderSession,
    PageNotFoundError,
    RequirementsNotFoundError,
    SessionNotLoadedError,
    SessionState,
    StartDateSorter,
)
from ordersession.session.collection_range import SAVE_FAILED_MESSAGE
from ordersession.session.navigation import APPLICATION_SUMMARY_ROUTE, SERVICES_REVIEW_ROUTE
from ordersession.stores import InMemoryOptionsProvider, InMemoryOrderStore
from ordersession.utils.validation import InputValidationError


class HookedOrderStore(InMemoryOrderStore):
    """In-memory store that runs a callback inside every update"""

    def __init__(self, orders, on_update):
        super().__init__(orders)
        self.on_update = on_update
        self.observed = []

    def update(self, order: Order) -> bool:
        self.observed.append(self.on_update())
        return super().update(order)


class FailingSorter(StartDateSorter):
    """Sorter that raises once armed"""

    armed = False

    def sort(self, order: Order) -> None:
        if self.armed:
            raise RuntimeError("sort failed")
        super().sort(order)


@pytest.mark.integration
class TestLoad:
    """Tests for session loading"""

    def test_load_sets_ready_state(self, education_session):
        assert education_session.state == SessionState.READY
        assert education_session.order_clean is True
        assert SnapshotDiffer.is_equal(education_session.clean, education_session.dirty)
        assert education_session.clean is not education_session.dirty

    def test_load_sorts_sections(self, education_session):
        """Test the current school is listed first"""
        assert [e.education_id for e in education_session.dirty.education] == ["edu-2", "edu-1"]

    def test_load_computes_range_and_navigation(self, education_session):
        assert education_session.collection_range.max == 3
        assert education_session.collection_range.max_met is False
        assert education_session.previous_link.route_id == "order.personal"
        assert education_session.next_link.route_id == "order.addresses"
        assert education_session.next_link.url == "/orders/ORD-1001/order.addresses"
        assert [p.route_id for p in education_session.pages] == [
            "order.personal", "order.education", "order.addresses",
        ]

    def test_load_creates_draft(self, education_session):
        assert education_session.draft is not None
        assert education_session.draft.is_clean

    def test_single_section_has_no_range_or_draft(self, make_session):
        session = make_session(route_id="order.personal")

        assert session.collection_range is None
        assert session.draft is None
        assert session.previous_link.route_id == APPLICATION_SUMMARY_ROUTE

    def test_non_service_route_has_no_links(self, make_session):
        session = make_session(route_id=SERVICES_REVIEW_ROUTE)

        assert session.previous_link is None
        assert session.next_link is None

    def test_missing_order_is_fatal(self, make_session):
        session = make_session(load=False)

        with pytest.raises(OrderNotFoundError):
            session.load("ORD-404")

    def test_missing_requirements_is_fatal(self, sample_order, sample_catalog, sample_rules, requirements_provider):
        sample_order.invite_id = "INV-404"
        store = InMemoryOrderStore([sample_order])
        session = OrderSession(store, requirements_provider, sample_catalog, sample_rules)

        with pytest.raises(RequirementsNotFoundError) as exc_info:
            session.load("ORD-1001")
        assert exc_info.value.identifier == "INV-404"

    def test_route_without_page_is_fatal(self, make_session):
        """Test the employment page is not part of this invitation"""
        with pytest.raises(PageNotFoundError):
            make_session(route_id="order.employment")

    def test_malformed_order_id(self, make_session):
        with pytest.raises(InputValidationError):
            make_session(load=False).load("ORD 1")

    def test_operations_before_load(self, make_session):
        session = make_session(load=False)

        with pytest.raises(SessionNotLoadedError):
            session.render()
        with pytest.raises(SessionNotLoadedError):
            session.mutate("company_name", "Globex")

    def test_options_built_on_load(self, make_session):
        provider = InMemoryOptionsProvider(countries=[Option(code="US", label="United States")])

        session = make_session(options_provider=provider, option_lists=frozenset({ListKind.COUNTRIES}))

        assert session.options == {"countries": [Option(code="US", label="US: United States")]}


@pytest.mark.integration
class TestEditing:
    """Tests for mutate/updated and order_clean tracking"""

    def test_mutation_marks_dirty(self, education_session):
        education_session.mutate("education.0.school_name", "Other College")

        assert education_session.order_clean is False
        assert education_session.clean.education[0].school_name == "Tech Institute"

    def test_reverting_value_marks_clean(self, education_session):
        education_session.mutate("education.0.school_name", "Other College")
        education_session.mutate("education.0.school_name", "Tech Institute")

        assert education_session.order_clean is True

    def test_mutation_is_formatted(self, education_session):
        education_session.mutate("education.1.country_code", " ca ")

        assert education_session.dirty.education[1].country_code == "CA"

    def test_updated_after_direct_edit(self, education_session):
        education_session.dirty.company_name = "Globex"
        assert education_session.order_clean is True

        education_session.updated("company_name")

        assert education_session.order_clean is False

    @pytest.mark.parametrize("path", ["education.7.school_name", "education.0.nickname", "new_entry"])
    def test_invalid_paths(self, education_session, path):
        with pytest.raises(InputValidationError):
            education_session.mutate(path, "x")

    @pytest.mark.parametrize("path,value", [
        ("education.0.start_date", 2030),
        ("education.0", {"school_name": "X"}),
        ("education", "not a list"),
        ("service_info.education", True),
        ("service_info", {"education": True}),
        ("order_id", ""),
        ("new_entry.current", "maybe"),
    ])
    def test_mistyped_values_are_rejected(self, education_session, path, value):
        """Test a value that does not fit the field never reaches the order"""
        with pytest.raises(InputValidationError):
            education_session.mutate(path, value)

        assert education_session.order_clean is True
        assert SnapshotDiffer.is_equal(education_session.dirty, education_session.clean)
        assert education_session.dirty.gaps_confirmed("education") is False
        assert education_session.render().errors == {}
        assert education_session.save() is True

    def test_entry_replaced_by_same_model(self, education_session):
        replacement = Educator(education_id="edu-9", school_name="Night School", start_date="2019-09", current=True)

        education_session.mutate("education.0", replacement)

        assert education_session.dirty.education[0].education_id == "edu-9"
        assert education_session.order_clean is False

    def test_render_reports_dirty_errors(self, education_session):
        education_session.mutate("education.1.school_name", "")

        view = education_session.render()

        assert set(view.errors) == {"education.1.school_name"}
        assert view.order_clean is False
        assert view.collection_range.max == 3
        assert view.next.route_id == "order.addresses"
        assert view.are_services_supported is True

    def test_render_clears_fixed_errors(self, education_session):
        education_session.mutate("education.1.school_name", "")
        education_session.render()
        education_session.mutate("education.1.school_name", "State University")

        assert education_session.render().errors == {}

    def test_validate_field_merges_live_result(self, education_session):
        education_session.mutate("education.1.end_date", "2001-01")

        findings = education_session.validate_field("education.1.end_date")

        assert list(findings) == ["education.1.end_date"]
        assert "education.1.end_date" in education_session.errors


@pytest.mark.integration
class TestSave:
    """Tests for save and cancel"""

    def test_save_persists_and_marks_clean(self, education_session, order_store):
        education_session.mutate("education.0.school_name", "Other College")

        assert education_session.save() is True

        assert education_session.order_clean is True
        assert education_session.clean.education[0].school_name == "Other College"
        assert order_store.find("ORD-1001").education[0].school_name == "Other College"

    def test_save_when_clean_is_noop(self, education_session, order_store):
        assert education_session.save() is True
        assert order_store.update_calls == 0

    def test_failed_save_preserves_dirty(self, education_session, order_store):
        order_store.fail_updates = True
        education_session.mutate("education.0.school_name", "Other College")

        assert education_session.save() is False

        assert education_session.order_clean is False
        assert education_session.dirty.education[0].school_name == "Other College"
        assert education_session.clean.education[0].school_name == "Tech Institute"
        assert education_session.notifications[-1].message == SAVE_FAILED_MESSAGE
        assert education_session.notifications[-1].severity == Severity.ERROR

    def test_session_recovers_after_failed_save(self, education_session, order_store):
        order_store.fail_updates = True
        education_session.mutate("company_name", "Globex")
        education_session.save()

        order_store.fail_updates = False

        assert education_session.save() is True
        assert order_store.find("ORD-1001").company_name == "Globex"

    def test_notifier_receives_notifications(self, make_session, order_store):
        received = []
        session = make_session(route_id="order.education", notifier=received.append)
        order_store.fail_updates = True
        session.mutate("company_name", "Globex")

        session.save()

        assert received == session.notifications

    def test_cancel_reverts(self, education_session):
        education_session.mutate("education.0.school_name", "Other College")
        education_session.mutate("new_entry.school_name", "Draft College")

        assert education_session.cancel() is True

        assert education_session.order_clean is True
        assert education_session.dirty.education[0].school_name == "Tech Institute"
        assert education_session.draft.entry.school_name is None

    def test_save_then_cancel_is_noop(self, education_session):
        """Test cancel right after a save keeps the saved values"""
        education_session.mutate("education.0.school_name", "Other College")
        education_session.save()
        saved = SnapshotDiffer.clone(education_session.clean)

        education_session.cancel()

        assert SnapshotDiffer.is_equal(education_session.dirty, education_session.clean)
        assert SnapshotDiffer.is_equal(education_session.clean, saved)

    def test_sort_failure_leaves_store_untouched(self, make_session, order_store):
        """Test a save that fails before the store update changes nothing"""
        sorter = FailingSorter()
        session = make_session(route_id="order.education", sorter=sorter)
        session.mutate("education.0.school_name", "Other College")
        sorter.armed = True

        with pytest.raises(RuntimeError):
            session.save()

        assert order_store.update_calls == 0
        assert session.order_clean is False
        assert session.clean.education[0].school_name == "Tech Institute"
        assert session.dirty.education[0].school_name == "Other College"

    def test_clean_follows_store_when_refresh_fails(self, education_session, order_store, monkeypatch):
        """Test clean matches the stored order even if a post-save step raises"""
        def broken_refresh():
            raise RuntimeError("catalog unavailable")

        education_session.mutate("education.0.school_name", "Other College")
        monkeypatch.setattr(education_session, "_refresh_pages", broken_refresh)

        with pytest.raises(RuntimeError):
            education_session.save()

        stored = order_store.find("ORD-1001")
        assert education_session.order_clean is True
        assert SnapshotDiffer.is_equal(education_session.clean, stored)
        assert SnapshotDiffer.is_equal(education_session.dirty, stored)

        education_session.cancel()

        assert education_session.dirty.education[0].school_name == "Other College"

    def test_save_resorts_sections(self, education_session):
        education_session.mutate("education.1.start_date", "2020-01")

        education_session.save()

        assert [e.education_id for e in education_session.clean.education] == ["edu-2", "edu-1"]
        education_session.mutate("education.0.current", False)
        education_session.save()
        assert [e.education_id for e in education_session.clean.education] == ["edu-1", "edu-2"]


@pytest.mark.integration
class TestDelete:
    """Tests for delete_sub_resource"""

    def test_delete_existing_entry(self, education_session, order_store):
        assert education_session.delete_sub_resource("education", "edu-1") is True

        assert [e.education_id for e in education_session.clean.education] == ["edu-2"]
        assert order_store.find("ORD-1001").count("education") == 1
        assert education_session.pages[1].completed_count == 1

    def test_delete_unknown_id(self, education_session, order_store):
        before = SnapshotDiffer.clone(education_session.dirty)

        assert education_session.delete_sub_resource("education", "edu-404") is False

        assert SnapshotDiffer.is_equal(education_session.dirty, before)
        assert order_store.update_calls == 0

    def test_delete_unknown_section(self, education_session):
        assert education_session.delete_sub_resource("vehicles", "edu-1") is False

    def test_delete_single_resource(self, education_session, order_store):
        assert education_session.delete_sub_resource("personal", "p-1") is True
        assert order_store.find("ORD-1001").personal is None


@pytest.mark.integration
class TestDraftNewEntry:
    """Tests for the draft-new-entry sub-session"""

    def test_draft_edit_marks_dirty_and_validates(self, education_session):
        education_session.mutate("new_entry.start_date", "2019-09")

        assert education_session.order_clean is False
        # only the edited field is examined, so the blank school name is not reported yet
        assert education_session.errors == {}

    def test_draft_errors_are_tagged(self, education_session):
        education_session.mutate("new_entry.school_name", "")

        assert set(education_session.errors) == {"new_entry.school_name"}

    def test_draft_errors_survive_render(self, education_session):
        education_session.mutate("new_entry.school_name", "")

        view = education_session.render()

        assert "new_entry.school_name" in view.errors

    def test_reset_new_entry(self, education_session):
        education_session.mutate("new_entry.school_name", "")
        old_id = education_session.draft.entry.identifier

        assert education_session.reset_new_entry() is True

        assert education_session.draft.entry.identifier != old_id
        assert education_session.draft.is_clean
        assert education_session.errors == {}

    def test_save_new_entry_success(self, education_session, order_store):
        education_session.mutate("new_entry.school_name", "Night School")
        education_session.mutate("new_entry.start_date", "2021-01")
        education_session.mutate("new_entry.current", True)
        draft_id = education_session.draft.entry.identifier

        assert education_session.save_new_entry() is True

        saved = order_store.find("ORD-1001")
        assert saved.count("education") == 3
        assert draft_id in [e.education_id for e in saved.education]
        assert education_session.draft.entry.school_name is None
        assert education_session.draft.entry.identifier != draft_id
        assert education_session.collection_range.max_met is True
        assert education_session.order_clean is True

    def test_save_new_entry_failure_keeps_draft(self, education_session, order_store):
        order_store.fail_updates = True
        education_session.mutate("new_entry.school_name", "Night School")

        assert education_session.save_new_entry() is False

        assert education_session.draft.entry.school_name == "Night School"
        assert education_session.dirty.count("education") == 2
        assert SnapshotDiffer.is_equal(education_session.dirty, education_session.clean)

    def test_save_new_entry_rejected_at_max(self, education_session, order_store):
        education_session.mutate("new_entry.school_name", "Night School")
        education_session.save_new_entry()
        education_session.mutate("new_entry.school_name", "Fourth School")

        assert education_session.save_new_entry() is False

        assert order_store.find("ORD-1001").count("education") == 3
        assert education_session.draft.entry.school_name == "Fourth School"


@pytest.mark.integration
class TestGapConfirmation:
    """Tests for confirm_gaps"""

    def test_confirm_gaps_persists(self, make_session, order_store):
        session = make_session(route_id="order.addresses")

        assert session.confirm_gaps(True) is True

        assert session.collection_range.gaps_confirmed is True
        assert order_store.find("ORD-1001").gaps_confirmed("addresses") is True
        assert session.order_clean is True

    def test_later_save_keeps_flag(self, make_session, order_store):
        session = make_session(route_id="order.addresses")
        session.confirm_gaps(True)
        session.mutate("company_name", "Globex")

        session.save()

        assert order_store.find("ORD-1001").gaps_confirmed("addresses") is True

    def test_failed_confirmation_rolls_back(self, make_session, order_store):
        session = make_session(route_id="order.addresses")
        order_store.fail_updates = True

        assert session.confirm_gaps(True) is False

        assert session.collection_range.gaps_confirmed is False
        assert session.notifications[-1].severity == Severity.ERROR

    def test_years_intro(self, make_session):
        session = make_session(route_id="order.addresses")

        assert session.collection_range.intro_text == "Please provide at least 2 years of history."

    def test_no_range_section(self, make_session):
        assert make_session(route_id="order.personal").confirm_gaps(True) is False


@pytest.mark.integration
class TestSingleFlight:
    """Tests for the message-in-flight guard"""

    def test_reentrant_save_is_rejected(self, sample_order, requirements_provider, sample_catalog, sample_rules):
        holder = {}
        store = HookedOrderStore([sample_order], on_update=lambda: (holder["session"].state, holder["session"].save()))
        session = OrderSession(store, requirements_provider, sample_catalog, sample_rules, route_id="order.education")
        holder["session"] = session
        session.load("ORD-1001")
        session.mutate("company_name", "Globex")

        assert session.save() is True

        assert store.observed == [(SessionState.SAVING, False)]
        assert session.message_in_flight is False
        assert session.state == SessionState.READY

    def test_navigation_rejected_while_saving(self, sample_order, requirements_provider, sample_catalog, sample_rules):
        holder = {}
        store = HookedOrderStore(
            [sample_order],
            on_update=lambda: (holder["session"].navigate(Direction.NEXT), holder["session"].cancel()),
        )
        session = OrderSession(store, requirements_provider, sample_catalog, sample_rules, route_id="order.education")
        holder["session"] = session
        session.load("ORD-1001")
        session.mutate("company_name", "Globex")

        session.save()

        assert store.observed == [(None, False)]
        assert session.clean.company_name == "Globex"

    def test_navigate(self, education_session):
        assert education_session.navigate(Direction.NEXT).route_id == "order.addresses"
        assert education_session.navigate(Direction.PREVIOUS).route_id == "order.personal"
