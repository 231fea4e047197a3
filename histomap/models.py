"""Data models for historical events and their narration cues."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Optional, Tuple, Union

MIN_YEAR = -300


def current_year() -> int:
    """Return the wall-clock year used as the upper bound of the slider."""

    return dt.date.today().year


@dataclass(frozen=True)
class Cue:
    """A time-bounded subtitle fragment of an event narration."""

    start: float  # seconds
    end: float  # seconds
    text: str

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Cue starts after it ends: {self.start} > {self.end}")

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class Event:
    """A dated, geolocated historical record served by the backend."""

    id: Union[str, int]
    title: str
    description: str
    year: int  # negative years are BCE
    latitude: float
    longitude: float
    images: Tuple[str, ...] = ()
    audio_url: Optional[str] = None
    subtitles: Tuple[Cue, ...] = ()

    @property
    def thumbnail(self) -> Optional[str]:
        """Return the first image URL, used as the popup thumbnail."""

        return self.images[0] if self.images else None

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_url)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class TemporalRange:
    """Inclusive ``[start, end]`` window of years used to filter events.

    ``start`` and ``end`` are the slider's *from* and *to* bounds. The two
    bounds are moved independently, so an inverted window is representable.
    """

    start: int
    end: int

    @staticmethod
    def clamp(year: int, max_year: Optional[int] = None) -> int:
        """Clamp ``year`` into ``[MIN_YEAR, max_year]``."""

        upper = current_year() if max_year is None else max_year
        return max(MIN_YEAR, min(int(year), upper))

    @classmethod
    def default(cls, max_year: Optional[int] = None) -> "TemporalRange":
        return cls(MIN_YEAR, current_year() if max_year is None else max_year)

    @property
    def is_inverted(self) -> bool:
        return self.start > self.end

    def with_start(self, year: int) -> "TemporalRange":
        return TemporalRange(year, self.end)

    def with_end(self, year: int) -> "TemporalRange":
        return TemporalRange(self.start, year)
