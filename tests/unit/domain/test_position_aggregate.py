"""Unit tests for the Position aggregate."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from signaldesk.domain.shared import InvalidStateTransition
from signaldesk.domain.trading.events import PositionClosedEvent
from signaldesk.domain.trading.exceptions import PositionAlreadyClosedError
from signaldesk.domain.trading.value_objects import ExitReason, PositionSide, PositionStatus


class TestPositionAggregate:
    """Unit tests for Position lifecycle."""

    def test_open_position_has_no_outcome(self, make_position):
        position = make_position()

        assert position.status == PositionStatus.OPEN
        assert position.is_open
        assert not position.is_closed
        assert position.exit_reason is None
        assert position.pnl is None
        assert position.id is None
        assert not position.has_domain_events

    def test_entry_value(self, make_position):
        position = make_position()

        assert position.entry_value == Decimal("1755.00")

    def test_close_fills_outcome(self, make_position):
        entered_at = datetime(2026, 1, 2, 14, 30, tzinfo=timezone.utc)
        position = make_position(entered_at=entered_at)

        position.close(
            Decimal("182.50"),
            ExitReason.TARGET_1,
            closed_at=entered_at + timedelta(minutes=95, seconds=59),
        )

        assert position.status == PositionStatus.CLOSED
        assert position.exit_reason == ExitReason.TARGET_1
        assert position.exit_price == Decimal("182.50")
        assert position.exit_value == Decimal("1825.00")
        assert position.pnl == Decimal("70.00")
        assert position.r_multiple == Decimal("2")
        assert position.holding_period_minutes == 95  # floored

    def test_close_emits_closed_event(self, make_position):
        position = make_position()

        position.close(Decimal("172.00"), ExitReason.STOP_LOSS)

        events = position.get_domain_events()
        assert len(events) == 1
        event = events[0]
        assert isinstance(event, PositionClosedEvent)
        assert event.position_id == "TRD-AAPL-1"
        assert event.exit_reason == "STOP_LOSS"
        assert event.pnl == Decimal("-35.00")

    def test_close_twice_raises(self, make_position):
        position = make_position()
        position.close(Decimal("172.00"), ExitReason.STOP_LOSS)

        with pytest.raises(PositionAlreadyClosedError):
            position.close(Decimal("170.00"), ExitReason.MANUAL)

        # Outcome of the first close is untouched
        assert position.exit_reason == ExitReason.STOP_LOSS
        assert position.exit_price == Decimal("172.00")
        assert len(position.get_domain_events()) == 1

    def test_already_closed_is_an_invalid_transition(self):
        assert issubclass(PositionAlreadyClosedError, InvalidStateTransition)

    def test_short_close_pnl(self, short_position):
        short_position.close(Decimal("240.00"), ExitReason.TARGET_1)

        assert short_position.side == PositionSide.SHORT
        assert short_position.pnl == Decimal("40.00")
        assert short_position.r_multiple == Decimal("2")

    def test_holding_minutes_floor(self, make_position):
        entered_at = datetime(2026, 1, 2, 9, 0, tzinfo=timezone.utc)
        position = make_position(entered_at=entered_at)

        assert position.holding_minutes_at(entered_at + timedelta(seconds=59)) == 0
        assert position.holding_minutes_at(entered_at + timedelta(minutes=1)) == 1
        assert position.holding_minutes_at(entered_at + timedelta(hours=2, seconds=30)) == 120
