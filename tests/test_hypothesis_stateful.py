"""Stateful property-based tests for the soft delete lifecycle.

A RuleBasedStateMachine drives an AddressStore through arbitrary sequences
of create, soft delete, restore and force delete, and checks that the
default, with_trashed and only_trashed views always agree with a model of
which records are live and which are trashed.
"""

from __future__ import annotations

import hypothesis.strategies as st
from hypothesis import HealthCheck, settings
from hypothesis.stateful import Bundle, RuleBasedStateMachine, consumes, invariant, rule

from address_records import AddressConfig, AddressStore, Country, SessionManager
from tests.doubles import Person, RecordingGeocoder
from tests.strategies import CITIES, post_code_strategy, street_line_strategy


class SoftDeleteStateMachine(RuleBasedStateMachine):
    """Model the live/trashed partition of stored addresses."""

    records = Bundle("records")

    def __init__(self) -> None:
        super().__init__()
        self.manager = SessionManager("sqlite://")
        self.manager.create_all()
        self.session = self.manager.get_session()
        self.session.add(Country(id=826, name="UK"))
        self.owner = Person(name="Owner")
        self.session.add(self.owner)
        self.session.flush()
        self.store = AddressStore(
            self.session,
            config=AddressConfig(geocode_enabled=True),
            geocoder=RecordingGeocoder(),
        )
        self.live: set[int] = set()
        self.trashed: set[int] = set()

    def teardown(self) -> None:
        self.session.close()
        self.manager.engine.dispose()

    # =========================================================================
    # Rules
    # =========================================================================

    @rule(
        target=records,
        line_1=street_line_strategy(),
        city=st.sampled_from(CITIES),
        post_code=post_code_strategy(),
    )
    def create(self, line_1: str, city: str, post_code: str) -> int:
        record = self.store.create(
            {"line_1": line_1, "city": city, "post_code": post_code, "country_id": 826},
            owner=self.owner,
        )
        self.live.add(record.id)
        return record.id

    @rule(address_id=records)
    def soft_delete(self, address_id: int) -> None:
        record = self.store.get(address_id, with_trashed=True)
        if record is None:
            return
        self.store.delete(record)
        self.live.discard(address_id)
        self.trashed.add(address_id)

    @rule(address_id=records)
    def restore(self, address_id: int) -> None:
        record = self.store.get(address_id, with_trashed=True)
        if record is None:
            return
        self.store.restore(record)
        self.trashed.discard(address_id)
        self.live.add(address_id)

    @rule(address_id=consumes(records))
    def force_delete(self, address_id: int) -> None:
        record = self.store.get(address_id, with_trashed=True)
        if record is None:
            return
        self.store.force_delete(record)
        self.live.discard(address_id)
        self.trashed.discard(address_id)

    # =========================================================================
    # Invariants
    # =========================================================================

    @invariant()
    def default_view_hides_trashed(self) -> None:
        assert {r.id for r in self.store.query()} == self.live

    @invariant()
    def trashed_views_agree(self) -> None:
        assert {r.id for r in self.store.query(only_trashed=True)} == self.trashed
        assert {r.id for r in self.store.query(with_trashed=True)} == self.live | self.trashed

    @invariant()
    def owner_view_matches(self) -> None:
        assert {r.id for r in self.store.for_owner(self.owner)} == self.live

    @invariant()
    def live_records_are_geocoded(self) -> None:
        for record in self.store.query():
            assert record.lat is not None and record.lng is not None


# Create pytest test case
TestSoftDelete = SoftDeleteStateMachine.TestCase
TestSoftDelete.settings = settings(
    max_examples=30,
    stateful_step_count=15,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
