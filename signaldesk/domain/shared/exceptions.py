"""Base domain exceptions.

Domain exceptions describe broken business rules, not technical failures.
They carry a human-readable message plus keyword context that ends up in
structured log records.
"""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain errors.

    Example:
        >>> raise DomainException("Position is not open", position_id="T-1")
    """

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize domain exception.

        Args:
            message: Human-readable error message.
            **context: Additional context (position_id, ticker, etc).
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class BusinessRuleViolation(DomainException):
    """Raised when a business rule is violated."""

    pass


class AggregateNotFound(DomainException):
    """Raised when an aggregate cannot be loaded.

    Example:
        >>> position = await positions.get_by_position_id("T-404")
        >>> if position is None:
        ...     raise AggregateNotFound("Position not found", position_id="T-404")
    """

    pass


class InvalidStateTransition(DomainException):
    """Raised for lifecycle transitions the state machine does not allow.

    Example:
        >>> # CLOSED -> CLOSED is not a transition
        >>> raise InvalidStateTransition(
        ...     "Position already closed",
        ...     from_status=PositionStatus.CLOSED,
        ...     to_status=PositionStatus.CLOSED,
        ... )
    """

    pass

