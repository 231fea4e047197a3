"""Year range state and race-free application of event query results."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence, Set, Tuple

from .formatting import format_range
from .models import Event, TemporalRange, current_year
from .repository import FetchError

LOGGER = logging.getLogger(__name__)

EventsListener = Callable[[Tuple[Event, ...]], None]


class EventSource(Protocol):
    def fetch_events(self, temporal_range: TemporalRange) -> Awaitable[List[Event]]:
        ...


class TemporalRangeController:
    """Owns the selected year range and the displayed event snapshot.

    Every range change issues a new query. Queries cannot be cancelled and
    may complete in any order, so each one carries a sequence number and a
    response is applied only when its number is higher than every number
    observed in a response so far.
    """

    def __init__(
        self,
        repository: EventSource,
        initial: Optional[TemporalRange] = None,
        max_year: Optional[int] = None,
    ) -> None:
        self._repository = repository
        self.max_year = current_year() if max_year is None else max_year
        self._range = initial or TemporalRange.default(self.max_year)
        self._events: Tuple[Event, ...] = ()
        self._issued_seq = 0
        self._observed_seq = 0
        self._listeners: List[EventsListener] = []
        self._tasks: Set[asyncio.Task[None]] = set()

    @property
    def range(self) -> TemporalRange:
        return self._range

    @property
    def events(self) -> Tuple[Event, ...]:
        return self._events

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def subscribe(self, listener: EventsListener) -> Callable[[], None]:
        """Call ``listener`` with every applied snapshot; returns an unsubscribe hook."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_from(self, year: int) -> asyncio.Task[None]:
        self._range = self._range.with_start(TemporalRange.clamp(year, self.max_year))
        return self.refresh()

    def set_to(self, year: int) -> asyncio.Task[None]:
        self._range = self._range.with_end(TemporalRange.clamp(year, self.max_year))
        return self.refresh()

    def refresh(self) -> asyncio.Task[None]:
        """Issue a query for the current range."""

        self._issued_seq += 1
        seq = self._issued_seq
        temporal_range = self._range
        if temporal_range.is_inverted:
            LOGGER.debug("Querying inverted range %s", format_range(temporal_range))
        LOGGER.debug("Issuing query #%d for %s", seq, format_range(temporal_range))

        task = asyncio.create_task(self._load(seq, temporal_range))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    async def _load(self, seq: int, temporal_range: TemporalRange) -> None:
        try:
            events = await self._repository.fetch_events(temporal_range)
        except FetchError as exc:
            if self._observe(seq):
                LOGGER.error("Failed to load events for %s: %s", format_range(temporal_range), exc)
            else:
                LOGGER.debug("Ignoring failure of stale query #%d: %s", seq, exc)
            return

        if not self._observe(seq):
            LOGGER.debug("Discarding stale response #%d (latest is #%d)", seq, self._observed_seq)
            return

        self._events = tuple(events)
        LOGGER.info("Showing %d events for %s", len(self._events), format_range(temporal_range))
        for listener in list(self._listeners):
            listener(self._events)

    def _observe(self, seq: int) -> bool:
        if seq <= self._observed_seq:
            return False
        self._observed_seq = seq
        return True

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Event query task failed", exc_info=exc)

    async def wait_idle(self) -> None:
        """Wait until every in-flight query has completed."""

        while self._tasks:
            await asyncio.gather(*tuple(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        tasks: Sequence[asyncio.Task[None]] = tuple(self._tasks)
        for task in tasks:
            if not task.done():
                task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._listeners.clear()
