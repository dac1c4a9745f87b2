"""Shared pytest fixtures and Hypothesis configuration."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from hypothesis import Verbosity, settings
from sqlalchemy.orm import Session

from address_records import AddressConfig, Country, SessionManager, reset_config, set_config

# Maps and registers the owner models before any session is created
import tests.doubles  # noqa: F401

# Configure Hypothesis settings for the test suite
settings.register_profile("ci", max_examples=200, deadline=None)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.register_profile("debug", max_examples=10, deadline=None, verbosity=Verbosity.verbose)


@pytest.fixture(autouse=True)
def default_config() -> Iterator[AddressConfig]:
    """Run every test against a known configuration."""
    config = AddressConfig()
    set_config(config)
    yield config
    reset_config()


@pytest.fixture
def session() -> Iterator[Session]:
    manager = SessionManager("sqlite://")
    manager.create_all()
    session = manager.get_session()
    session.add_all(
        [
            Country(id=826, name="UK", iso_3166_2="GB", iso_3166_3="GBR"),
            Country(id=840, name="USA", iso_3166_2="US", iso_3166_3="USA"),
        ]
    )
    session.flush()
    yield session
    session.close()
    manager.engine.dispose()


@pytest.fixture
def baker_street() -> dict[str, object]:
    return {
        "line_1": "221B Baker St",
        "city": "London",
        "post_code": "NW16XE",
        "country_id": 826,
    }
