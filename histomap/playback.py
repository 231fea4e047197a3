"""Narration playback: play/pause state machine and cue tracking."""

from __future__ import annotations

import asyncio
import enum
import inspect
import logging
from typing import Any, Callable, Optional, Protocol

from .cues import CueSynchronizer
from .models import Cue, Event

LOGGER = logging.getLogger(__name__)

TimeListener = Callable[[float], None]


class PlaybackError(Exception):
    """Raised by a media handle that refuses to start playback."""


class SessionClosedError(RuntimeError):
    pass


class MediaHandle(Protocol):
    """A native media resource bound to one audio URL.

    ``play`` may return an awaitable that fails when the platform rejects
    playback after the call returned (autoplay policies, decoding errors).
    Awaitable results are tracked on the running event loop, so handles that
    return them must be toggled from inside one.
    """

    def play(self) -> Any:
        ...

    def pause(self) -> None:
        ...

    def add_time_listener(self, listener: TimeListener) -> None:
        ...

    def remove_time_listener(self, listener: TimeListener) -> None:
        ...

    def release(self) -> None:
        ...


class PlaybackState(enum.Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


class PlaybackSession:
    """Live playback state of one open event narration."""

    def __init__(self, media: MediaHandle) -> None:
        self.media = media
        self.state = PlaybackState.IDLE
        self.current_time = 0.0
        self.closed = False

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING


class PlaybackController:
    """Drives a :class:`PlaybackSession` for one detail view.

    The controller subscribes a single time listener on construction and
    releases it, together with the media handle, in :meth:`close`. Call
    :meth:`close` (or use the controller as a context manager) on every exit
    path of the view.
    """

    def __init__(self, event: Event, media: MediaHandle) -> None:
        self.event = event
        self.session = PlaybackSession(media)
        self._cues = CueSynchronizer(event.subtitles)
        self._play_attempt = 0
        media.add_time_listener(self._on_time_update)

    @property
    def state(self) -> PlaybackState:
        return self.session.state

    @property
    def is_playing(self) -> bool:
        return self.session.is_playing

    @property
    def current_time(self) -> float:
        return self.session.current_time

    @property
    def closed(self) -> bool:
        return self.session.closed

    @property
    def active_cue(self) -> Optional[Cue]:
        return self._cues.at(self.session.current_time)

    @property
    def cue_text(self) -> Optional[str]:
        return self._cues.text_at(self.session.current_time)

    def toggle(self) -> PlaybackState:
        """Start or pause playback and return the resulting state."""

        session = self.session
        if session.closed:
            raise SessionClosedError(f"Playback of '{self.event.title}' is closed")

        if session.state is PlaybackState.PLAYING:
            session.media.pause()
            session.state = PlaybackState.PAUSED
            return session.state

        previous = session.state
        session.state = PlaybackState.PLAYING
        self._play_attempt += 1
        attempt = self._play_attempt
        try:
            result = session.media.play()
        except Exception as exc:  # noqa: BLE001
            self._revert(previous, exc)
            return session.state

        if inspect.isawaitable(result):
            future = asyncio.ensure_future(result, loop=asyncio.get_running_loop())
            future.add_done_callback(lambda fut: self._on_play_settled(fut, previous, attempt))
        return session.state

    def _on_play_settled(
        self,
        future: "asyncio.Future[Any]",
        previous: PlaybackState,
        attempt: int,
    ) -> None:
        if future.cancelled():
            exc: BaseException = asyncio.CancelledError()
        else:
            exc = future.exception()
            if exc is None:
                return
        # a newer play() owns the current state
        if attempt != self._play_attempt:
            LOGGER.debug("Ignoring outcome of superseded play of '%s': %s", self.event.title, exc)
            return
        if self.session.closed or self.session.state is not PlaybackState.PLAYING:
            return
        self._revert(previous, exc)

    def _revert(self, previous: PlaybackState, exc: BaseException) -> None:
        LOGGER.warning(
            "Playback of '%s' failed (%s); back to %s",
            self.event.title,
            exc,
            previous.value,
        )
        self.session.state = previous

    def _on_time_update(self, current_time: float) -> None:
        session = self.session
        if session.closed or session.state is not PlaybackState.PLAYING:
            return
        session.current_time = float(current_time)

    def close(self) -> None:
        """Stop playback and release the listener and media handle, once."""

        session = self.session
        if session.closed:
            return
        session.closed = True
        was_playing = session.state is PlaybackState.PLAYING
        session.state = PlaybackState.PAUSED if was_playing else session.state
        try:
            if was_playing:
                session.media.pause()
        finally:
            try:
                session.media.remove_time_listener(self._on_time_update)
            finally:
                session.media.release()
        LOGGER.debug("Closed playback of '%s'", self.event.title)

    def __enter__(self) -> "PlaybackController":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()
