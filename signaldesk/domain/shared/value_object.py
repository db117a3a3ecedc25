"""Base ValueObject class for the domain model."""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True, eq=True)
class ValueObject(ABC):
    """Base class for immutable value objects.

    Value objects have no identity and are compared by their attributes.
    Subclasses validate themselves in ``__post_init__``.

    Example:
        >>> @dataclass(frozen=True)
        ... class ExitDecision(ValueObject):
        ...     should_exit: bool
        ...     reason: ExitReason | None = None

        >>> ExitDecision(False) == ExitDecision(False)  # True
    """

    def __post_init__(self) -> None:
        """Validation hook.

        Raises:
            ValueError: If validation fails.
        """
        pass


def validate_value_object(condition: bool, message: str) -> None:
    """Raise ValueError with ``message`` unless ``condition`` holds.

    Example:
        >>> validate_value_object(price > 0, "Exit price must be positive")
    """
    if not condition:
        raise ValueError(message)
