"""
Unit tests for service pages, dropdown options and section sorting.
"""

import pytest

from ordersession.core.models import Educator, Employer, Option, RangeType, RequirementComponent, Requirements
from ordersession.session import (
    DropdownOptions,
    ListKind,
    OrderSettings,
    ServiceCatalog,
    StartDateSorter,
    StateListVariant,
)
from ordersession.stores import InMemoryOptionsProvider


class TestServiceCatalog:
    """Tests for ServiceCatalog"""

    def test_lookup(self, sample_catalog):
        assert sample_catalog.get("education").route_id == "order.education"
        assert sample_catalog.for_route("order.addresses").section_key == "addresses"
        assert sample_catalog.get("vehicles") is None
        assert sample_catalog.for_route("order.vehicles") is None
        assert sample_catalog.for_section("addresses").range_type == RangeType.YEARS

    def test_from_yaml(self, config_dir):
        catalog = ServiceCatalog.from_yaml(f"{config_dir}/services.yaml")

        assert [s.service_key for s in catalog.services] == ["personal", "education", "employment", "addresses"]
        assert catalog.get("addresses").range_type == RangeType.YEARS

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ServiceCatalog.from_yaml(tmp_path / "absent.yaml")

    def test_missing_services_list(self, tmp_path):
        config_file = tmp_path / "services.yaml"
        config_file.write_text("services: {}\n")

        with pytest.raises(ValueError, match="'services' list"):
            ServiceCatalog.from_yaml(config_file)


class TestOrderSettings:
    """Tests for OrderSettings page assembly"""

    def test_pages_follow_catalog_order(self, sample_order, sample_requirements, sample_catalog):
        pages = OrderSettings(sample_order, sample_requirements, sample_catalog).get_pages()

        assert [page.route_id for page in pages] == ["order.personal", "order.education", "order.addresses"]
        assert [page.step_index for page in pages] == [0, 1, 2]

    def test_page_progress(self, sample_order, sample_requirements, sample_catalog):
        pages = {page.service_key: page for page in
                 OrderSettings(sample_order, sample_requirements, sample_catalog).get_pages()}

        assert (pages["education"].completed_count, pages["education"].total_count) == (2, 3)
        assert (pages["personal"].completed_count, pages["personal"].total_count) == (1, 1)
        # years ranges count entries, never years
        assert (pages["addresses"].completed_count, pages["addresses"].total_count) == (0, 0)

    def test_total_falls_back_to_min(self, sample_order, sample_catalog):
        requirements = Requirements(
            invitation_id="INV-2001",
            components=[RequirementComponent(name="education", min=4)],
        )

        pages = OrderSettings(sample_order, requirements, sample_catalog).get_pages()

        assert pages[0].total_count == 4

    def test_are_services_supported(self, sample_order, sample_requirements, sample_catalog):
        assert OrderSettings(sample_order, sample_requirements, sample_catalog).are_services_supported() is True

        sample_requirements.components.append(RequirementComponent(name="drug_screen"))
        settings = OrderSettings(sample_order, sample_requirements, sample_catalog)

        assert settings.are_services_supported() is False
        assert "drug_screen" not in [page.service_key for page in settings.get_pages()]


class TestDropdownOptions:
    """Tests for DropdownOptions"""

    @pytest.fixture
    def provider(self) -> InMemoryOptionsProvider:
        return InMemoryOptionsProvider(
            countries=[Option(code="US", label="United States")],
            states={
                "default": [Option(code="CA", label="California")],
                "residence": [Option(code="NY", label="New York")],
            },
            degrees=[Option(code="BS", label="Bachelor of Science")],
            majors=[Option(code="MATH", label="Mathematics")],
        )

    def test_coded_labels(self, provider):
        options = DropdownOptions(provider).build({ListKind.COUNTRIES, ListKind.DEGREES})

        assert options["countries"] == [Option(code="US", label="US: United States")]
        assert options["degrees"] == [Option(code="BS", label="Bachelor of Science")]
        assert "states" not in options

    def test_state_variant(self, provider):
        builder = DropdownOptions(provider)

        residence = builder.build({ListKind.STATES}, StateListVariant.RESIDENCE)
        license_states = builder.build({ListKind.STATES}, StateListVariant.PROFESSIONAL_LICENSE)

        assert residence["states"] == [Option(code="NY", label="NY: New York")]
        assert license_states["states"] == [Option(code="CA", label="CA: California")]


class TestStartDateSorter:
    """Tests for StartDateSorter"""

    def test_current_first_then_latest_start(self, sample_order):
        sample_order.education = [
            Educator(education_id="old", start_date="2005-09"),
            Educator(education_id="undated"),
            Educator(education_id="new", start_date="2015-09"),
            Educator(education_id="now", start_date="2001-01", current=True),
        ]

        StartDateSorter().sort(sample_order)

        assert [e.education_id for e in sample_order.education] == ["now", "new", "old", "undated"]

    def test_stable_for_equal_keys(self, sample_order):
        sample_order.employment = [
            Employer(employment_id="first", start_date="2010-01"),
            Employer(employment_id="second", start_date="2010-01"),
        ]

        StartDateSorter().sort(sample_order)

        assert [e.employment_id for e in sample_order.employment] == ["first", "second"]
