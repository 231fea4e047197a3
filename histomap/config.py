"""Runtime configuration for the viewer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

BACKEND_URL_ENV = "HISTOMAP_BACKEND_URL"
DEFAULT_BACKEND_URL = "http://localhost:8000"
DEFAULT_EVENT_LIMIT = 500
DEFAULT_REQUEST_TIMEOUT = 60.0


@dataclass(frozen=True)
class Settings:
    backend_url: str = DEFAULT_BACKEND_URL
    limit: int = DEFAULT_EVENT_LIMIT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT  # seconds


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (defaults to ``os.environ``).

    Only the backend base address is configurable from the environment.
    """

    env = os.environ if environ is None else environ
    backend_url = (env.get(BACKEND_URL_ENV) or "").strip() or DEFAULT_BACKEND_URL
    return Settings(backend_url=backend_url)
