"""Data and interaction layer of the historical events map viewer."""

from .app import HistoryViewer
from .config import Settings, load_settings
from .cues import CueSynchronizer, active_cue
from .formatting import format_range, format_year
from .models import Cue, Event, TemporalRange
from .playback import PlaybackController, PlaybackError, PlaybackState, SessionClosedError
from .presenter import DetailView, MapPresenter, Marker
from .range_controller import TemporalRangeController
from .repository import EventRepository, FetchError, fetch_events

__all__ = [
    "Cue",
    "CueSynchronizer",
    "DetailView",
    "Event",
    "EventRepository",
    "FetchError",
    "HistoryViewer",
    "MapPresenter",
    "Marker",
    "PlaybackController",
    "PlaybackError",
    "PlaybackState",
    "SessionClosedError",
    "Settings",
    "TemporalRange",
    "TemporalRangeController",
    "active_cue",
    "fetch_events",
    "format_range",
    "format_year",
    "load_settings",
]
