"""
Polling loop for the TurboVax dashboard.

Цикл мониторинга:
- тик с фиксированным периодом (пропущенные тики догоняются подряд)
- загрузка и разбор снимка дашборда
- письмо на каждую доступную локацию
- любая ошибка фатальна и пробрасывается наверх
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterator, Optional, Protocol

from .dashboard import DashboardClient
from .models import Location, MonitorState, Portal, Snapshot

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def notify(self, location: Location, portal: Optional[Portal]) -> None: ...


@dataclass(frozen=True)
class AvailableLocations:
    """
    Locations flagged ``available`` in a snapshot, in original order.

    Каждый iter() начинает новый ленивый проход. Поле active не учитывается:
    дашборд может пометить неактивную локацию доступной, и мы ему верим.
    """

    snapshot: Snapshot

    def __iter__(self) -> Iterator[Location]:
        return (location for location in self.snapshot.locations if location.available)


class Ticker:
    """
    Fixed-period ticker. The first tick fires immediately; tick n is due at start + n * period.

    Если цикл затянулся, просроченные тики срабатывают сразу, без сна.
    """

    def __init__(
        self,
        period: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.period = period
        self._clock = clock
        self._sleep = sleep
        self._next_at: Optional[float] = None

    async def tick(self) -> None:
        now = self._clock()
        if self._next_at is None:
            self._next_at = now
        delay = self._next_at - now
        if delay > 0:
            await self._sleep(delay)
        self._next_at += self.period


@dataclass
class AlertMonitor:
    """High-level fetch, filter and notify loop."""

    dashboard: DashboardClient
    notifier: Notifier
    check_interval: float = 60
    _state: MonitorState = field(default_factory=MonitorState)

    @property
    def state(self) -> MonitorState:
        return self._state

    async def run_cycle(self) -> int:
        """Run one fetch-decode-filter-notify pass and return the number of alerts sent."""
        self._state.cycles_count += 1
        self._state.last_cycle_at = datetime.now(timezone.utc)
        logger.debug("Evaluating")

        snapshot = await self.dashboard.fetch_snapshot()
        self._state.last_snapshot_at = snapshot.last_updated_at

        sent = 0
        for location in AvailableLocations(snapshot):
            portal = snapshot.find_portal(location.portal)
            logger.info(
                "Appointment found. Location: %s (%s, %s), portal: %s",
                location.name,
                location.id,
                location.area,
                portal.name if portal else None,
            )
            await self.notifier.notify(location, portal)
            sent += 1
            self._state.notifications_sent += 1

        if not sent:
            logger.debug("No available locations on this check")
        return sent

    async def run_forever(self, ticker: Optional[Ticker] = None) -> None:
        """Tick and run cycles until an error propagates or the task is cancelled."""
        if ticker is None:
            ticker = Ticker(self.check_interval)
        logger.info("Polling %s every %ss", self.dashboard.url, ticker.period)
        while True:
            await ticker.tick()
            await self.run_cycle()


__all__ = ["AlertMonitor", "AvailableLocations", "Ticker", "Notifier"]
