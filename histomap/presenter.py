"""Glue between the event snapshot and an external map surface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Sequence, Tuple

from .formatting import format_year
from .models import Event
from .playback import MediaHandle, PlaybackController, PlaybackState

LOGGER = logging.getLogger(__name__)

MAP_CENTER: Tuple[float, float] = (48.8566, 2.3522)
MAP_ZOOM = 12
TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = '&copy; <a href="http://osm.org/copyright">OpenStreetMap</a> contributors'

MediaFactory = Callable[[str], MediaHandle]


@dataclass(frozen=True)
class Marker:
    key: int
    position: Tuple[float, float]
    title: str
    year_label: str
    thumbnail: Optional[str] = None


class MapSurface(Protocol):
    """Rendering surface provided by the mapping library."""

    def set_view(self, center: Tuple[float, float], zoom: int) -> None:
        ...

    def add_tile_layer(self, url_template: str, attribution: str) -> None:
        ...

    def clear_markers(self) -> None:
        ...

    def add_marker(self, marker: Marker) -> None:
        ...


class DetailView:
    """Content of an open marker popup."""

    close_label = "Fermer"

    def __init__(self, key: int, event: Event, playback: Optional[PlaybackController]) -> None:
        self.key = key
        self.event = event
        self.playback = playback

    @property
    def title(self) -> str:
        return self.event.title

    @property
    def year_label(self) -> str:
        return format_year(self.event.year)

    @property
    def description(self) -> str:
        return self.event.description

    @property
    def thumbnail(self) -> Optional[str]:
        return self.event.thumbnail

    @property
    def play_label(self) -> Optional[str]:
        if self.playback is None:
            return None
        verb = "Pause" if self.playback.state is PlaybackState.PLAYING else "Play"
        return f"{verb} narration"

    @property
    def cue_text(self) -> Optional[str]:
        if self.playback is None or self.playback.closed:
            return None
        return self.playback.cue_text

    def toggle(self) -> Optional[PlaybackState]:
        if self.playback is None:
            return None
        return self.playback.toggle()

    def close(self) -> None:
        if self.playback is not None:
            self.playback.close()


class MapPresenter:
    """Renders one marker per event and manages the popups' playback."""

    def __init__(self, surface: MapSurface, media_factory: MediaFactory) -> None:
        self._surface = surface
        self._media_factory = media_factory
        self._events: Tuple[Event, ...] = ()
        self._open: Dict[int, DetailView] = {}
        surface.set_view(MAP_CENTER, MAP_ZOOM)
        surface.add_tile_layer(TILE_URL, TILE_ATTRIBUTION)

    @property
    def events(self) -> Tuple[Event, ...]:
        return self._events

    @property
    def open_views(self) -> Tuple[DetailView, ...]:
        return tuple(self._open.values())

    def __call__(self, events: Sequence[Event]) -> None:
        self.render(events)

    def render(self, events: Sequence[Event]) -> None:
        """Replace every marker with the markers for ``events``."""

        self.close_all()
        self._events = tuple(events)
        self._surface.clear_markers()
        for key, event in enumerate(self._events):
            self._surface.add_marker(
                Marker(
                    key=key,
                    position=event.position,
                    title=event.title,
                    year_label=format_year(event.year),
                    thumbnail=event.thumbnail,
                )
            )
        LOGGER.debug("Rendered %d markers", len(self._events))

    def open_detail(self, key: int) -> DetailView:
        view = self._open.get(key)
        if view is not None:
            return view
        if not 0 <= key < len(self._events):
            raise KeyError(key)
        event = self._events[key]
        playback = None
        if event.audio_url:
            playback = PlaybackController(event, self._media_factory(event.audio_url))
        view = DetailView(key, event, playback)
        self._open[key] = view
        return view

    def close_detail(self, key: int) -> None:
        view = self._open.pop(key, None)
        if view is not None:
            view.close()

    def close_all(self) -> None:
        for key in list(self._open):
            self.close_detail(key)
