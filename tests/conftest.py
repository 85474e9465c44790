"""
Pytest configuration and fixtures for order-session tests

This module provides shared fixtures for unit and integration tests.
"""
import os
from collections.abc import Callable

import pytest

from ordersession.core.models import (
    Educator,
    Order,
    Personal,
    RangeType,
    RequirementComponent,
    Requirements,
)
from ordersession.core.rules import RuleConfigBuilder
from ordersession.session import OrderSession, ServiceCatalog, ServiceDefinition
from ordersession.stores import InMemoryOrderStore, InMemoryRequirementsProvider


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that drive a full session against in-memory stores"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# MODEL FIXTURES
# =======================

@pytest.fixture
def sample_order() -> Order:
    """
    Order with personal details and two education entries

    The second entry is current, so it has no end date.
    """
    return Order(
        order_id="ORD-1001",
        invite_id="INV-2001",
        company_name="Acme Screening",
        personal=Personal(personal_id="p-1", first_name="Ada", last_name="Lovelace"),
        education=[
            Educator(
                education_id="edu-1",
                school_name="State University",
                country_code="US",
                start_date="2012-09",
                end_date="2016-05",
            ),
            Educator(
                education_id="edu-2",
                school_name="Tech Institute",
                country_code="US",
                start_date="2018-09",
                current=True,
            ),
        ],
    )


@pytest.fixture
def sample_requirements() -> Requirements:
    """Requirements for INV-2001: personal, 1-3 schools, 2 years of addresses"""
    return Requirements(
        invitation_id="INV-2001",
        components=[
            RequirementComponent(name="personal"),
            RequirementComponent(name="education", min=1, max=3),
            RequirementComponent(name="addresses", min=2),
        ],
    )


@pytest.fixture
def sample_rules() -> list[dict]:
    """Rule set covering personal and education fields"""
    return (
        RuleConfigBuilder()
        .for_resource("personal")
        .add_required_field("first_name")
        .add_required_field("last_name")
        .for_resource("education")
        .add_required_field("school_name")
        .add_length("school_name", max_length=100)
        .add_required_field("start_date")
        .add_date("start_date")
        .add_required_field("end_date", unless="current")
        .add_date_after("end_date", "start_date")
        .for_resource("employment")
        .add_required_field("employer_name")
        .build()
    )


@pytest.fixture
def sample_catalog() -> ServiceCatalog:
    """Catalog with one page per order section"""
    return ServiceCatalog([
        ServiceDefinition(service_key="personal", route_id="order.personal", title="Personal Information"),
        ServiceDefinition(service_key="education", route_id="order.education", title="Education"),
        ServiceDefinition(service_key="employment", route_id="order.employment", title="Employment"),
        ServiceDefinition(
            service_key="addresses",
            route_id="order.addresses",
            title="Residence History",
            range_type=RangeType.YEARS,
        ),
    ])


# =======================
# STORE FIXTURES
# =======================

@pytest.fixture
def order_store(sample_order) -> InMemoryOrderStore:
    return InMemoryOrderStore([sample_order])


@pytest.fixture
def requirements_provider(sample_requirements) -> InMemoryRequirementsProvider:
    return InMemoryRequirementsProvider([sample_requirements])


# =======================
# SESSION FIXTURES
# =======================

@pytest.fixture
def make_session(order_store, requirements_provider, sample_catalog, sample_rules) -> Callable[..., OrderSession]:
    """
    Factory for sessions over the shared in-memory stores

    Keyword arguments are passed to OrderSession; the session is loaded
    with ORD-1001 unless load=False.
    """
    def factory(load: bool = True, **kwargs) -> OrderSession:
        session = OrderSession(order_store, requirements_provider, sample_catalog, sample_rules, **kwargs)
        if load:
            session.load("ORD-1001")
        return session

    return factory


@pytest.fixture
def education_session(make_session) -> OrderSession:
    """Loaded session backing the education page"""
    return make_session(route_id="order.education")


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture(scope="session")
def config_dir() -> str:
    """Path to the repository's config directory"""
    return os.path.join(os.path.dirname(os.path.dirname(__file__)), "config")


@pytest.fixture(scope="session")
def test_env_vars(config_dir):
    """
    Set test environment variables

    This fixture loads test.env and sets environment variables
    """
    from dotenv import load_dotenv

    env_path = os.path.join(config_dir, "test.env")

    if os.path.exists(env_path):
        load_dotenv(env_path, override=True)
