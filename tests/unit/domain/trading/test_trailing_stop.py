"""Unit tests for the trailing stop tracker."""

from decimal import Decimal

import pytest

from signaldesk.domain.trading.services import TRAILING_ATR_MULTIPLIER, TrailingStopTracker
from signaldesk.domain.trading.value_objects import PositionSide


@pytest.fixture
def tracker():
    return TrailingStopTracker()


@pytest.fixture
def aapl(make_position):
    return make_position(trailing_enabled=True)


class TestTrailingStopTracker:
    def test_multiplier(self):
        assert TRAILING_ATR_MULTIPLIER == Decimal("1.5")

    def test_first_check_starts_from_stop_loss(self, tracker, aapl):
        # 174.00 - 3.0 = 171.00 is below the stop, so the stop stays
        result = tracker.check(aapl, Decimal("174.00"))

        assert result.should_exit is False
        assert result.watermark == Decimal("172.00")
        assert tracker.get(aapl.position_id) == Decimal("172.00")

    def test_advances_on_favourable_move(self, tracker, aapl):
        result = tracker.check(aapl, Decimal("176.00"))

        assert result.watermark == Decimal("173.00")
        assert not result.should_exit

    def test_long_watermark_never_moves_down(self, tracker, aapl):
        prices = ["176.00", "179.00", "177.50", "178.20", "180.40", "179.10"]
        previous = aapl.stop_loss

        for price in prices:
            result = tracker.check(aapl, Decimal(price))
            assert result.watermark >= previous
            previous = result.watermark

        assert tracker.get(aapl.position_id) == Decimal("180.40") - Decimal("3.0")

    def test_short_watermark_never_moves_up(self, tracker, short_position):
        short = short_position
        prices = ["248.00", "245.00", "247.00", "244.00", "246.50"]
        previous = short.stop_loss

        for price in prices:
            result = tracker.check(short, Decimal(price))
            assert result.watermark <= previous
            previous = result.watermark

        # 244.00 + 4.5
        assert tracker.get(short.position_id) == Decimal("248.50")

    def test_long_exit_when_price_falls_to_watermark(self, tracker, aapl):
        tracker.check(aapl, Decimal("179.00"))  # watermark 176.00

        result = tracker.check(aapl, Decimal("176.00"))

        assert result.should_exit is True
        assert result.exit_price == Decimal("176.00")
        assert result.watermark == Decimal("176.00")

    def test_short_exit_when_price_rises_to_watermark(self, tracker, short_position):
        tracker.check(short_position, Decimal("244.00"))  # watermark 248.50

        result = tracker.check(short_position, Decimal("248.60"))

        assert result.should_exit is True
        assert result.exit_price == Decimal("248.60")

    def test_zero_atr_never_advances(self, tracker, make_position):
        position = make_position(atr=Decimal("0"), trailing_enabled=True)

        result = tracker.check(position, Decimal("185.00"))

        assert result.watermark == Decimal("172.00")
        assert not result.should_exit

    def test_release_removes_state(self, tracker, aapl):
        tracker.check(aapl, Decimal("176.00"))
        assert aapl.position_id in tracker
        assert len(tracker) == 1

        tracker.release(aapl.position_id)
        tracker.release(aapl.position_id)  # idempotent

        assert aapl.position_id not in tracker
        assert tracker.get(aapl.position_id) is None
        assert len(tracker) == 0

    def test_retain_drops_positions_outside_open_set(self, tracker, make_position):
        first = make_position(position_id="A", trailing_enabled=True)
        second = make_position(position_id="B", trailing_enabled=True)
        tracker.check(first, Decimal("179.00"))
        tracker.check(second, Decimal("176.00"))

        tracker.retain({"B", "C"})

        assert "A" not in tracker
        assert tracker.get("B") == Decimal("173.00")
        assert len(tracker) == 1

    def test_retain_empty_set_clears_everything(self, tracker, aapl):
        tracker.check(aapl, Decimal("176.00"))

        tracker.retain(())

        assert len(tracker) == 0

    def test_state_rebuilt_from_stop_after_release(self, tracker, aapl):
        tracker.check(aapl, Decimal("179.00"))
        tracker.release(aapl.position_id)

        result = tracker.check(aapl, Decimal("174.00"))

        assert result.watermark == Decimal("172.00")

    def test_positions_are_tracked_independently(self, tracker, make_position):
        first = make_position(position_id="A", trailing_enabled=True)
        second = make_position(position_id="B", trailing_enabled=True)

        tracker.check(first, Decimal("179.00"))
        tracker.check(second, Decimal("176.00"))

        assert tracker.get("A") == Decimal("176.00")
        assert tracker.get("B") == Decimal("173.00")

    def test_instances_do_not_share_state(self, aapl):
        one, two = TrailingStopTracker(), TrailingStopTracker()

        one.check(aapl, Decimal("179.00"))

        assert aapl.position_id in one
        assert aapl.position_id not in two

    @pytest.mark.parametrize("side", [PositionSide.LONG, PositionSide.SHORT])
    def test_custom_multiplier(self, make_position, side):
        tracker = TrailingStopTracker(atr_multiplier=Decimal("1"))
        if side == PositionSide.LONG:
            position = make_position(trailing_enabled=True)
            expected = Decimal("177.00")
            price = Decimal("179.00")
        else:
            position = make_position(
                side=side,
                entry_price=Decimal("100"),
                stop_loss=Decimal("104"),
                target1=Decimal("90"),
                atr=Decimal("2.0"),
                trailing_enabled=True,
            )
            expected = Decimal("97.0")
            price = Decimal("95")

        assert tracker.check(position, price).watermark == expected
