import asyncio

from yarl import URL

from fakes import FakeMedia, FakeSurface

from histomap import repository
from histomap.app import HistoryViewer
from histomap.config import Settings
from histomap.models import MIN_YEAR


def test_viewer_loads_initial_range_and_follows_slider(monkeypatch):
    requested = []

    async def fake_json_request(session, url):
        query = URL(url).query
        requested.append((URL(url).host, int(query["year_from"]), int(query["year_to"])))
        year = int(query["year_from"])
        return [
            {
                "id": year,
                "title": f"Event {year}",
                "description": "",
                "year": year,
                "latitude": 48.86,
                "longitude": 2.35,
            }
        ]

    monkeypatch.setattr(repository, "_json_request", fake_json_request)
    surface = FakeSurface()

    async def scenario():
        settings = Settings(backend_url="http://backend.invalid")
        async with HistoryViewer(surface, lambda url: FakeMedia(), settings) as viewer:
            await viewer.controller.wait_idle()
            first_markers = list(surface.markers)
            viewer.controller.set_from(1789)
            await viewer.controller.wait_idle()
            return first_markers, viewer.range_label

    first_markers, label = asyncio.run(scenario())

    assert requested[0][0] == "backend.invalid"
    assert requested[0][1] == MIN_YEAR
    assert requested[1][1] == 1789
    assert first_markers[0].title == f"Event {MIN_YEAR}"
    assert surface.markers[0].title == "Event 1789"
    assert label.startswith("1789 – ")
