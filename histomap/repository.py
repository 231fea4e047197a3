"""Fetching and decoding historical events from the backend."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import aiohttp
from yarl import URL

from .config import DEFAULT_BACKEND_URL, DEFAULT_EVENT_LIMIT
from .models import Cue, Event, TemporalRange

LOGGER = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_LIMIT",
    "EVENTS_PATH",
    "EventRepository",
    "FetchError",
    "build_events_url",
    "extract_events_from_json",
    "fetch_events",
]

EVENTS_PATH = "/api/events"
DEFAULT_LIMIT = DEFAULT_EVENT_LIMIT


class FetchError(Exception):
    """Raised when the event query fails in transport or in decoding."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class _MalformedEvent(ValueError):
    pass


def build_events_url(base_url: str, temporal_range: TemporalRange, limit: int) -> URL:
    """Return the range-bounded query URL for ``temporal_range``."""

    return URL(base_url).join(URL(EVENTS_PATH)).with_query(
        {
            "limit": str(int(limit)),
            "year_from": str(int(temporal_range.start)),
            "year_to": str(int(temporal_range.end)),
        }
    )


def _require(item: Dict[str, Any], key: str) -> Any:
    if key not in item or item[key] is None:
        raise _MalformedEvent(f"missing field '{key}'")
    return item[key]


def _as_number(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _MalformedEvent(f"field '{key}' is not a number: {value!r}")
    return float(value)


def _as_year(value: Any) -> int:
    if isinstance(value, bool):
        raise _MalformedEvent(f"field 'year' is not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise _MalformedEvent(f"field 'year' is not an integer: {value!r}")


def _as_text(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise _MalformedEvent(f"field '{key}' is not a string: {value!r}")
    return value


def _parse_images(raw: Any) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise _MalformedEvent(f"field 'images' is not a list: {raw!r}")
    return tuple(_as_text(url, "images") for url in raw)


def _parse_cue(raw: Any) -> Cue:
    if not isinstance(raw, dict):
        raise _MalformedEvent(f"subtitle entry is not an object: {raw!r}")
    start = _as_number(_require(raw, "start"), "start")
    end = _as_number(_require(raw, "end"), "end")
    text = _as_text(raw.get("text", ""), "text")
    try:
        return Cue(start=start, end=end, text=text)
    except ValueError as exc:
        raise _MalformedEvent(str(exc)) from exc


def _parse_subtitles(raw: Any) -> Tuple[Cue, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise _MalformedEvent(f"field 'subtitles' is not a list: {raw!r}")
    return tuple(_parse_cue(entry) for entry in raw)


def _parse_event(item: Any) -> Event:
    if not isinstance(item, dict):
        raise _MalformedEvent(f"event entry is not an object: {item!r}")

    event_id = _require(item, "id")
    if isinstance(event_id, bool) or not isinstance(event_id, (str, int)):
        raise _MalformedEvent(f"field 'id' is not a string or integer: {event_id!r}")

    audio_url = item.get("audio_url")
    if audio_url is not None:
        audio_url = _as_text(audio_url, "audio_url") or None

    return Event(
        id=event_id,
        title=_as_text(_require(item, "title"), "title"),
        description=_as_text(_require(item, "description"), "description"),
        year=_as_year(_require(item, "year")),
        latitude=_as_number(_require(item, "latitude"), "latitude"),
        longitude=_as_number(_require(item, "longitude"), "longitude"),
        images=_parse_images(item.get("images")),
        audio_url=audio_url,
        subtitles=_parse_subtitles(item.get("subtitles")),
    )


def extract_events_from_json(payload: Any) -> List[Event]:
    """Decode a JSON array of event objects into :class:`Event` records.

    Raises :class:`ValueError` when the payload or any of its entries is
    malformed; a response is either decoded entirely or not at all.
    """

    if not isinstance(payload, list):
        raise _MalformedEvent(f"expected a JSON array, got {type(payload).__name__}")

    events: List[Event] = []
    for index, item in enumerate(payload):
        try:
            events.append(_parse_event(item))
        except _MalformedEvent as exc:
            raise _MalformedEvent(f"event #{index}: {exc}") from exc
    return events


async def _json_request(session: aiohttp.ClientSession, url: str) -> Any:
    async with session.get(url) as response:
        response.raise_for_status()
        return await response.json(content_type=None)


async def fetch_events(
    session: aiohttp.ClientSession,
    temporal_range: TemporalRange,
    limit: int = DEFAULT_LIMIT,
    base_url: str = DEFAULT_BACKEND_URL,
) -> List[Event]:
    """Query the backend for events within ``temporal_range``."""

    url = str(build_events_url(base_url, temporal_range, limit))
    LOGGER.debug("Fetching events: %s", url)
    try:
        payload = await _json_request(session, url)
    except aiohttp.ClientResponseError as exc:
        raise FetchError(f"Event query failed with HTTP {exc.status}: {url}", url=url) from exc
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise FetchError(f"Event query failed: {url}: {exc!r}", url=url) from exc
    except ValueError as exc:
        raise FetchError(f"Event query returned invalid JSON: {url}", url=url) from exc

    try:
        events = extract_events_from_json(payload)
    except ValueError as exc:
        raise FetchError(f"Malformed event payload from {url}: {exc}", url=url) from exc

    LOGGER.debug("Decoded %d events from %s", len(events), url)
    return events


class EventRepository:
    """Issues range-bounded event queries against one backend."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        limit: int = DEFAULT_LIMIT,
    ) -> None:
        self._session = session
        self.base_url = base_url
        self.limit = limit

    async def fetch_events(
        self,
        temporal_range: TemporalRange,
        limit: Optional[int] = None,
    ) -> List[Event]:
        return await fetch_events(
            self._session,
            temporal_range,
            limit=self.limit if limit is None else limit,
            base_url=self.base_url,
        )
