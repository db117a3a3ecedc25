"""Position Monitor - the recurring exit-checking loop.

One pass:
1. Load every OPEN position
2. Group by ticker and resolve one price per ticker
3. Evaluate each position still OPEN; close it on an exit decision,
   otherwise publish an unrealized P&L snapshot
4. Drop trailing-stop state of positions no longer OPEN

A ticker without a price is skipped for the pass: no closes and no
trailing-stop updates happen for it. Passes never overlap.
"""

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from signaldesk.application.shared import UnitOfWorkFactory
from signaldesk.config.logging import bind_pass_context, clear_pass_context, get_logger
from signaldesk.domain.market_data.ports import PriceSource
from signaldesk.domain.trading.entities import Position
from signaldesk.domain.trading.events import PnLSnapshotEvent
from signaldesk.domain.trading.services import (
    ExitConditionEvaluator,
    TrailingStopTracker,
    pnl_calculator,
)
from signaldesk.domain.trading.value_objects import PnLSnapshot
from signaldesk.infrastructure.messaging import EventBus

from .position_closer import PositionCloser

logger = get_logger(__name__)

DEFAULT_INTERVAL_SECONDS = 30.0


class MonitorState(str, Enum):
    """Scheduler lifecycle."""

    STOPPED = "STOPPED"
    RUNNING = "RUNNING"


class PositionMonitor:
    """Drives monitoring passes on a fixed interval.

    ``start()`` runs one pass immediately, then one every
    ``interval_seconds``. The next pass is scheduled only after the previous
    one finished, so a slow pass delays the schedule instead of stacking.
    A failing pass is logged and the loop keeps going.

    Example:
        >>> monitor = PositionMonitor(
        ...     uow_factory, price_source, evaluator, closer, event_bus, tracker
        ... )
        >>> monitor.start()
        True
        >>> monitor.is_running
        True
        >>> await monitor.aclose()  # stop + wait for the in-flight pass
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        price_source: PriceSource,
        evaluator: ExitConditionEvaluator,
        closer: PositionCloser,
        event_bus: EventBus,
        trailing_tracker: TrailingStopTracker,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self._uow_factory = uow_factory
        self._price_source = price_source
        self._evaluator = evaluator
        self._closer = closer
        self._event_bus = event_bus
        self._trailing = trailing_tracker
        self._interval = interval_seconds

        self._state = MonitorState.STOPPED
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._pass_lock = asyncio.Lock()

        self._passes_completed = 0
        self._passes_failed = 0
        self._last_pass_at: Optional[datetime] = None

    # --- lifecycle ---

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == MonitorState.RUNNING

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def passes_completed(self) -> int:
        return self._passes_completed

    @property
    def passes_failed(self) -> int:
        return self._passes_failed

    @property
    def last_pass_at(self) -> Optional[datetime]:
        return self._last_pass_at

    def start(self) -> bool:
        """Start the loop on the running event loop.

        Returns:
            False if the monitor was already running (no-op).
        """
        if self._state == MonitorState.RUNNING:
            logger.info("position_monitor.already_running")
            return False

        stop_event = asyncio.Event()
        self._stop_event = stop_event
        self._state = MonitorState.RUNNING
        self._task = asyncio.get_running_loop().create_task(
            self._run(stop_event), name="position-monitor"
        )

        logger.info("position_monitor.started", interval_seconds=self._interval)
        return True

    def stop(self) -> bool:
        """Signal the loop to end. An in-flight pass is allowed to finish.

        Returns:
            False if the monitor was not running (no-op).
        """
        if self._state == MonitorState.STOPPED:
            return False

        self._state = MonitorState.STOPPED
        if self._stop_event is not None:
            self._stop_event.set()

        logger.info("position_monitor.stopped", passes_completed=self._passes_completed)
        return True

    async def wait_stopped(self) -> None:
        """Wait until the loop task has exited."""
        task = self._task
        if task is not None:
            await task
            if self._task is task:
                self._task = None

    async def aclose(self) -> None:
        """Stop and wait; for shutdown hooks."""
        self.stop()
        await self.wait_stopped()

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            await self._run_pass_safely()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass

    async def _run_pass_safely(self) -> None:
        bind_pass_context(pass_id=uuid4().hex[:12])
        try:
            await self.run_pass()
        except Exception:
            self._passes_failed += 1
            logger.exception("position_monitor.pass_failed")
        finally:
            clear_pass_context()

    # --- one pass ---

    async def run_pass(self) -> list[PnLSnapshot]:
        """Run one monitoring pass.

        Returns:
            Unrealized P&L snapshots of positions that did not exit.

        Raises:
            Exception: Persistence errors abort the pass.
        """
        async with self._pass_lock:
            snapshots = await self._execute_pass()
            self._passes_completed += 1
            self._last_pass_at = datetime.now(timezone.utc)
            return snapshots

    async def _execute_pass(self) -> list[PnLSnapshot]:
        async with self._uow_factory() as uow:
            positions = await uow.positions.list_open()

        if not positions:
            logger.debug("position_monitor.no_open_positions")
            self._trailing.retain(())
            return []

        by_ticker = group_by_ticker(positions)
        snapshots: list[PnLSnapshot] = []
        skipped: list[str] = []
        closed = 0

        for ticker, group in by_ticker.items():
            price = await self._price_source.get_price(ticker)
            if price is None or price <= 0:
                logger.warning(
                    "position_monitor.ticker_skipped",
                    ticker=ticker,
                    positions=len(group),
                )
                skipped.append(ticker)
                continue

            # The price lookup awaited; a manual close may have landed meanwhile
            open_ids = await self._load_open_ids()
            for position in group:
                if position.position_id not in open_ids:
                    logger.info(
                        "position_monitor.closed_during_pass",
                        position_id=position.position_id,
                        ticker=ticker,
                    )
                    continue

                snapshot = await self._process_position(position, price)
                if snapshot is None:
                    closed += 1
                else:
                    snapshots.append(snapshot)

        self._trailing.retain(await self._load_open_ids())

        logger.info(
            "position_monitor.pass_completed",
            positions=len(positions),
            tickers=len(by_ticker),
            closed=closed,
            snapshots=len(snapshots),
            skipped_tickers=skipped,
        )
        return snapshots

    async def _load_open_ids(self) -> set[str]:
        async with self._uow_factory() as uow:
            return await uow.positions.list_open_ids()

    async def _process_position(
        self, position: Position, price: Decimal
    ) -> Optional[PnLSnapshot]:
        # None means the position left the open set this pass
        decision = self._evaluator.evaluate(position, price)

        if decision.should_exit:
            await self._closer.close(position, decision.exit_price, decision.reason)
            return None

        snapshot = pnl_calculator.snapshot(position, price)
        await self._event_bus.publish(
            PnLSnapshotEvent(
                position_id=snapshot.position_id,
                ticker=position.ticker,
                current_price=snapshot.current_price,
                unrealized_pnl=snapshot.unrealized_pnl,
                unrealized_pnl_percent=snapshot.unrealized_pnl_percent,
                r_multiple=snapshot.r_multiple,
            )
        )
        return snapshot


def group_by_ticker(positions: list[Position]) -> dict[str, list[Position]]:
    """Group positions by ticker, keeping first-seen ticker order."""
    groups: dict[str, list[Position]] = {}
    for position in positions:
        groups.setdefault(position.ticker, []).append(position)
    return groups
