"""Registry of owner types for polymorphic address ownership.

An address points at its owner with an ``(owner_type, owner_id)`` pair and
no foreign key. The registry maps each ``owner_type`` string to a resolver
that loads the owning entity, so the concrete class is decided at lookup
time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from address_records.core.errors import AddressRecordsError

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

OwnerResolver = Callable[["Session", Any], Optional[Any]]


class OwnerRegistry:
    """Maps owner type names to resolver callables.

    Example:
        >>> registry = OwnerRegistry()
        >>> registry.register_model(Person)             # owner_type "persons"
        >>> registry.register("legacy", lambda session, owner_id: ...)
        >>> registry.resolve(session, "persons", 7)
    """

    def __init__(self) -> None:
        self._resolvers: dict[str, OwnerResolver] = {}
        self._types: dict[type, str] = {}

    def register(self, owner_type: str, resolver: OwnerResolver) -> None:
        """Register a resolver for an owner type.

        Args:
            owner_type: Value stored in ``AddressRecord.owner_type``.
            resolver: Callable taking (session, owner_id) and returning the
                owner or None.
        """
        self._resolvers[owner_type] = resolver

    def register_model(self, model: type, owner_type: str | None = None) -> str:
        """Register a mapped class as an owner type.

        The owner type defaults to ``model.__owner_type__`` and then to the
        model's table name.

        Returns:
            The owner type the model was registered under.
        """
        name = owner_type or getattr(model, "__owner_type__", None) or model.__tablename__

        def resolve(session: Session, owner_id: Any) -> Any:
            return session.get(model, owner_id)

        self.register(name, resolve)
        self._types[model] = name
        logger.debug("Registered owner type %s -> %s", name, model.__name__)
        return name

    def unregister(self, owner_type: str) -> None:
        """Remove an owner type. Unknown names are ignored."""
        self._resolvers.pop(owner_type, None)
        for model, name in list(self._types.items()):
            if name == owner_type:
                del self._types[model]

    def resolve(self, session: Session | None, owner_type: str | None, owner_id: Any) -> Any:
        """Load the owner identified by (owner_type, owner_id).

        Returns:
            The owner entity, or None when the pair is incomplete, the type is
            not registered, there is no session, or no row matches.
        """
        if not owner_type or owner_id is None or session is None:
            return None
        resolver = self._resolvers.get(owner_type)
        if resolver is None:
            logger.debug("No resolver registered for owner type %s", owner_type)
            return None
        return resolver(session, owner_id)

    def owner_type_for(self, owner: Any) -> str:
        """Return the owner type a registered entity is stored under.

        Raises:
            AddressRecordsError: If the entity's class was never registered.
        """
        for model in type(owner).__mro__:
            if model in self._types:
                return self._types[model]
        raise AddressRecordsError(
            "unknown_owner_type",
            "{owner_class} is not a registered address owner",
            {"owner_class": type(owner).__name__},
        )

    def available_types(self) -> list[str]:
        """Registered owner type names, sorted."""
        return sorted(self._resolvers)

    def clear(self) -> None:
        """Forget every registration (mainly for testing)."""
        self._resolvers.clear()
        self._types.clear()


_default_registry = OwnerRegistry()


def get_owner_registry() -> OwnerRegistry:
    """Get the process-wide owner registry used by default."""
    return _default_registry
