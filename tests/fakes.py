from typing import Any, Callable, List, Optional, Tuple

from histomap.models import Cue, Event


def make_event(
    event_id: int = 1,
    title: str = "Prise de la Bastille",
    year: int = 1789,
    audio_url: Optional[str] = None,
    subtitles: Tuple[Cue, ...] = (),
    images: Tuple[str, ...] = (),
) -> Event:
    return Event(
        id=event_id,
        title=title,
        description="La forteresse tombe aux mains des insurgés.",
        year=year,
        latitude=48.8532,
        longitude=2.3692,
        images=images,
        audio_url=audio_url,
        subtitles=subtitles,
    )


class FakeMedia:
    """Records calls the playback controller makes on a native media handle."""

    def __init__(self, play_result: Any = None, play_error: Optional[BaseException] = None) -> None:
        self.play_result = play_result
        self.play_error = play_error
        self.calls: List[str] = []
        self.listeners: List[Callable[[float], None]] = []
        self.released = 0
        self.removed = 0

    def play(self) -> Any:
        self.calls.append("play")
        if self.play_error is not None:
            raise self.play_error
        return self.play_result

    def pause(self) -> None:
        self.calls.append("pause")

    def add_time_listener(self, listener: Callable[[float], None]) -> None:
        self.listeners.append(listener)

    def remove_time_listener(self, listener: Callable[[float], None]) -> None:
        self.listeners.remove(listener)
        self.removed += 1

    def release(self) -> None:
        self.released += 1

    def tick(self, current_time: float) -> None:
        for listener in list(self.listeners):
            listener(current_time)


class FakeSurface:
    def __init__(self) -> None:
        self.view = None
        self.tile_layers: List[Tuple[str, str]] = []
        self.markers: List[Any] = []
        self.clears = 0

    def set_view(self, center, zoom) -> None:
        self.view = (center, zoom)

    def add_tile_layer(self, url_template: str, attribution: str) -> None:
        self.tile_layers.append((url_template, attribution))

    def clear_markers(self) -> None:
        self.clears += 1
        self.markers = []

    def add_marker(self, marker) -> None:
        self.markers.append(marker)
