from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from address_records import AddressRecordsError, OwnerRegistry, get_owner_registry
from tests.doubles import Organisation, Person


@pytest.fixture
def registry() -> OwnerRegistry:
    return OwnerRegistry()


def test_models_register_under_table_name_or_owner_type() -> None:
    registry = get_owner_registry()
    assert registry.owner_type_for(Person(name="x")) == "people"
    assert registry.owner_type_for(Organisation(name="x")) == "organisation"
    assert {"people", "organisation"} <= set(registry.available_types())


def test_register_model_resolves_through_session(registry: OwnerRegistry, session: Session) -> None:
    person = Person(id=7, name="Irene")
    session.add(person)
    session.flush()

    assert registry.register_model(Person, owner_type="person") == "person"
    assert registry.resolve(session, "person", 7) is person
    assert registry.resolve(session, "person", 8) is None


def test_custom_resolver(registry: OwnerRegistry) -> None:
    calls: list[tuple[object, object]] = []

    def resolver(session, owner_id):
        calls.append((session, owner_id))
        return {"legacy": owner_id}

    registry.register("legacy", resolver)
    sentinel = object()

    assert registry.resolve(sentinel, "legacy", 3) == {"legacy": 3}  # type: ignore[arg-type]
    assert calls == [(sentinel, 3)]


@pytest.mark.parametrize(
    ("owner_type", "owner_id"),
    [(None, 1), ("", 1), ("people", None), ("ghosts", 1)],
)
def test_incomplete_or_unknown_pairs_resolve_to_none(
    registry: OwnerRegistry, session: Session, owner_type: str | None, owner_id: int | None
) -> None:
    registry.register_model(Person)
    assert registry.resolve(session, owner_type, owner_id) is None


def test_resolve_without_session(registry: OwnerRegistry) -> None:
    registry.register_model(Person)
    assert registry.resolve(None, "people", 1) is None


def test_unregistered_owner_class_raises(registry: OwnerRegistry) -> None:
    with pytest.raises(AddressRecordsError) as excinfo:
        registry.owner_type_for(Person(name="x"))

    assert excinfo.value.type == "unknown_owner_type"
    assert excinfo.value.context["package"] == "address_records"
    assert "Person" in excinfo.value.message()


def test_unregister_and_clear(registry: OwnerRegistry) -> None:
    registry.register_model(Person)
    registry.register_model(Organisation)
    assert registry.available_types() == ["organisation", "people"]

    registry.unregister("people")
    registry.unregister("never-registered")
    assert registry.available_types() == ["organisation"]
    with pytest.raises(AddressRecordsError):
        registry.owner_type_for(Person(name="x"))

    registry.clear()
    assert registry.available_types() == []


def test_store_uses_injected_registry(registry: OwnerRegistry, session: Session) -> None:
    from address_records import AddressConfig, AddressStore

    registry.register_model(Person, owner_type="client")
    store = AddressStore(session, config=AddressConfig(), registry=registry)
    person = Person(name="Mycroft")

    record = store.create(
        {"line_1": "Diogenes Club", "city": "London", "post_code": "SW1", "country_id": 826},
        owner=person,
        validate=False,
    )

    assert record.owner_type == "client"
    assert record.owner(registry=registry) is person
    assert store.for_owner(person) == [record]
