"""Base Entity class for the domain model."""

from abc import ABC


class Entity(ABC):
    """Base class for domain entities.

    Entities are compared by storage identity, not by attribute values.
    A freshly created entity has ``id=None`` until the repository assigns
    one; two unsaved entities are equal only if they are the same object.

    Example:
        >>> a = Position(id=1, ...)
        >>> b = Position(id=1, ...)
        >>> a == b  # True (same storage key)
    """

    def __init__(self, id: int | None = None) -> None:
        """Initialize entity.

        Args:
            id: Storage key. None for entities not yet persisted.
        """
        self._id = id

    @property
    def id(self) -> int | None:
        """Get storage key."""
        return self._id

    @id.setter
    def id(self, value: int) -> None:
        """Assign storage key (repositories call this after INSERT)."""
        self._id = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return False

        if self._id is None and other._id is None:
            return self is other

        return self._id == other._id

    def __hash__(self) -> int:
        if self._id is None:
            return hash(id(self))
        return hash(self._id)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id})"
