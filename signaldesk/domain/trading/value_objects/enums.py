"""Enums for the Trading bounded context."""

from enum import Enum


class PositionStatus(str, Enum):
    """Position lifecycle status.

    State machine:
        OPEN → CLOSED (terminal, happens exactly once)
    """

    OPEN = "OPEN"
    """Position is live and monitored every pass."""

    CLOSED = "CLOSED"
    """Position exited; outcome fields are final."""


class PositionSide(str, Enum):
    """Position direction."""

    LONG = "LONG"
    """Profits when price rises."""

    SHORT = "SHORT"
    """Profits when price falls."""


class ExitReason(str, Enum):
    """Why a position was closed."""

    STOP_LOSS = "STOP_LOSS"
    """Price crossed the static protective stop."""

    TARGET_1 = "TARGET_1"
    """First profit target reached."""

    TARGET_2 = "TARGET_2"
    """Second profit target reached."""

    TRAILING = "TRAILING"
    """Price fell back through the trailing-stop watermark."""

    MANUAL = "MANUAL"
    """Closed on operator request."""

    EXPIRED = "EXPIRED"
    """Closed by an upstream expiry job (never produced by the monitor)."""
