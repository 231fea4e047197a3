"""Mapping a playback position to the subtitle cue on screen."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .models import Cue


def active_cue(cues: Optional[Iterable[Cue]], t: float) -> Optional[Cue]:
    """Return the first cue in list order with ``start <= t <= end``.

    When two cues share an endpoint the earlier-listed one wins, so list
    order must be preserved by callers.
    """

    if not cues:
        return None
    for cue in cues:
        if cue.start <= t <= cue.end:
            return cue
    return None


class CueSynchronizer:
    """Holds one narration's cues and answers "what is shown at ``t``"."""

    def __init__(self, cues: Sequence[Cue]) -> None:
        self.cues = tuple(cues)

    def at(self, t: float) -> Optional[Cue]:
        return active_cue(self.cues, t)

    def text_at(self, t: float) -> Optional[str]:
        cue = self.at(t)
        return cue.text if cue is not None else None
