"""Exceptions for the Trading bounded context."""

from signaldesk.domain.shared import AggregateNotFound, DomainException, InvalidStateTransition


class PositionNotFoundError(AggregateNotFound):
    """Raised when no position exists for the given position_id."""

    pass


class PositionAlreadyClosedError(InvalidStateTransition):
    """Raised when closing a position that is no longer OPEN."""

    pass


class PriceUnavailableError(DomainException):
    """Raised when no price provider could quote the ticker.

    Only the manual-close path raises this; the monitor skips the ticker.
    """

    pass
