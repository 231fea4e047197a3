"""Wiring of the repository, range controller and map presenter."""

from __future__ import annotations

import logging
from typing import Any, Optional

import aiohttp

from .config import Settings, load_settings
from .formatting import format_range
from .presenter import MapPresenter, MapSurface, MediaFactory
from .range_controller import TemporalRangeController
from .repository import EventRepository

LOGGER = logging.getLogger(__name__)


class HistoryViewer:
    """Async context manager running one viewer against the backend.

    >>> async with HistoryViewer(surface, media_factory) as viewer:
    ...     viewer.controller.set_from(1789)
    """

    def __init__(
        self,
        surface: MapSurface,
        media_factory: MediaFactory,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.presenter = MapPresenter(surface, media_factory)
        self._session: Optional[aiohttp.ClientSession] = None
        self._controller: Optional[TemporalRangeController] = None

    @property
    def controller(self) -> TemporalRangeController:
        if self._controller is None:
            raise RuntimeError("HistoryViewer is not running")
        return self._controller

    @property
    def range_label(self) -> str:
        return format_range(self.controller.range)

    async def __aenter__(self) -> "HistoryViewer":
        timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout)
        self._session = aiohttp.ClientSession(timeout=timeout)
        repository = EventRepository(
            self._session,
            self.settings.backend_url,
            limit=self.settings.limit,
        )
        self._controller = TemporalRangeController(repository)
        self._controller.subscribe(self.presenter)
        LOGGER.info("Loading events from %s", self.settings.backend_url)
        self._controller.refresh()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        try:
            self.presenter.close_all()
            if self._controller is not None:
                await self._controller.aclose()
        finally:
            if self._session is not None:
                await self._session.close()
                self._session = None
            self._controller = None
