"""Mixin for entities that own addresses."""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from sqlalchemy import and_
from sqlalchemy.orm import foreign, object_session, relationship, remote

from address_records.core.registry import get_owner_registry
from address_records.models.address import AddressRecord


class Addressable:
    """Give a mapped class an ``addresses`` collection.

    Mapped subclasses are registered with the default OwnerRegistry under
    ``__owner_type__`` (defaulting to the table name), and get a read-only
    ``addresses`` relationship listing their live (not soft-deleted)
    addresses.

    Example:
        class Person(Addressable, Base):
            __tablename__ = "people"
            id: Mapped[int] = mapped_column(primary_key=True)

        person.add_address(AddressRecord(line_1="1 Main St", ...))
    """

    __owner_type__: ClassVar[Optional[str]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "__tablename__" not in cls.__dict__:
            return

        owner_type = get_owner_registry().register_model(cls)
        cls.addresses = relationship(  # type: ignore[attr-defined]
            AddressRecord,
            primaryjoin=lambda: and_(
                foreign(remote(AddressRecord.owner_id)) == cls.id,  # type: ignore[attr-defined]
                AddressRecord.owner_type == owner_type,
                AddressRecord.deleted_at.is_(None),
            ),
            viewonly=True,
            order_by=AddressRecord.id,
        )

    @property
    def owner_type_name(self) -> str:
        """Owner type this entity's addresses are stored under."""
        return get_owner_registry().owner_type_for(self)

    def add_address(self, record: AddressRecord) -> AddressRecord:
        """Attach ``record`` to this owner and add it to the owner's session."""
        session = object_session(self)
        if session is not None and getattr(self, "id", None) is None:
            session.flush()
        record.set_owner(self)
        if session is not None:
            session.add(record)
            if "addresses" in self.__dict__:
                session.expire(self, ["addresses"])
        return record
