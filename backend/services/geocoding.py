"""Lightweight forward geocoding helpers using OpenStreetMap Nominatim.

Turns a free-text location ("Girona", "La Masella") into coordinates so the
place provider can search around it.
"""

from __future__ import annotations

import os
import time
import threading
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional

import requests

from domain.errors import ProviderError
from settings import settings

NOMINATIM_SEARCH_URL = os.getenv(
    "NOMINATIM_SEARCH_URL", "https://nominatim.openstreetmap.org/search"
)
logger = logging.getLogger(__name__)
_session = requests.Session()
_last_request_ts: float = 0.0
_lock = threading.Lock()
_MIN_INTERVAL_SEC = float(os.getenv("NOMINATIM_MIN_INTERVAL", "1.1"))
_logged_ua = False
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT")
NOMINATIM_REFERER = os.getenv("NOMINATIM_REFERER")

FALLBACK_UA = "camper-spots-assistant/0.1 (contact: example@example.com)"
if NOMINATIM_USER_AGENT is None:
    logger.warning(
        "NOMINATIM_USER_AGENT not set in environment; using fallback UA. "
        "This may violate Nominatim usage policy."
    )

def _redact_email(ua: str) -> str:
    if "@" not in ua:
        return ua
    return re.sub(r"\S+@\S+", "<redacted>", ua)

_ua_value = NOMINATIM_USER_AGENT or FALLBACK_UA
NOMINATIM_HEADERS = {
    "User-Agent": _ua_value,
}
if NOMINATIM_REFERER:
    NOMINATIM_HEADERS["Referer"] = NOMINATIM_REFERER


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float
    display_name: Optional[str] = None


def _throttled_get(
    url: str,
    *,
    params: dict[str, Any],
    headers: dict[str, str],
    timeout: float,
) -> requests.Response:
    """Perform a GET request with a simple global rate limit."""
    global _last_request_ts
    with _lock:
        now = time.time()
        delta = now - _last_request_ts
        if delta < _MIN_INTERVAL_SEC:
            time.sleep(_MIN_INTERVAL_SEC - delta)
        _last_request_ts = time.time()
    return _session.get(url, params=params, headers=headers, timeout=timeout)


def _normalize_query(location: str) -> str:
    return " ".join(location.split()).strip()


def geocode_location(location: str) -> Optional[Coordinates]:
    """Resolve a free-text location to coordinates.

    Returns None when Nominatim knows no such place. Transport and parsing
    failures raise ProviderError.
    """
    query = _normalize_query(location or "")
    if not query:
        return None
    return _geocode_cached(query.lower())


@lru_cache(maxsize=512)
def _geocode_cached(query: str) -> Optional[Coordinates]:
    global _logged_ua
    if not _logged_ua:
        logger.debug("Nominatim User-Agent: %s", _redact_email(_ua_value))
        _logged_ua = True

    params = {
        "q": query,
        "format": "json",
        "limit": "1",
    }
    try:
        resp = _throttled_get(
            NOMINATIM_SEARCH_URL,
            params=params,
            headers=NOMINATIM_HEADERS,
            timeout=settings.GEOCODE_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as exc:
        raise ProviderError(f"Nominatim geocode error for {query!r}: {exc}") from exc
    except ValueError as exc:
        raise ProviderError(f"Nominatim geocode JSON error for {query!r}: {exc}") from exc

    if not isinstance(data, list) or not data:
        logger.info("No geocoding results for %r", query)
        return None

    first = data[0] or {}
    try:
        coords = Coordinates(
            lat=float(first["lat"]),
            lon=float(first["lon"]),
            display_name=first.get("display_name"),
        )
    except (KeyError, TypeError, ValueError):
        logger.warning("Nominatim returned an unusable result for %r: %s", query, first)
        return None
    logger.debug("Geocoded %r to %.5f, %.5f (%s)", query, coords.lat, coords.lon, coords.display_name)
    return coords


def clear_geocode_cache() -> None:
    _geocode_cached.cache_clear()
