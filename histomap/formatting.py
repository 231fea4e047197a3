"""Display helpers for years and year ranges."""

from __future__ import annotations

from .models import TemporalRange

BCE_SUFFIX = "av. J.-C."


def format_year(year: int) -> str:
    """Render ``year`` the way the viewer labels it (``-250`` -> ``250 av. J.-C.``)."""

    if year > 0:
        return str(year)
    return f"{abs(year)} {BCE_SUFFIX}"


def format_range(temporal_range: TemporalRange) -> str:
    return f"{format_year(temporal_range.start)} – {format_year(temporal_range.end)}"
