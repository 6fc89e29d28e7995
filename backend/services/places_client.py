"""
Park4Night places client: geocode a free-text location, then list the spots around it.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

import requests

from domain.errors import ProviderError
from domain.models import Place
from services.geocoding import Coordinates, geocode_location
from settings import settings


def _first_text(item: dict, *keys: str) -> Optional[str]:
    for key in keys:
        value = item.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def place_from_park4night(item: dict, place_url_template: Optional[str] = None) -> Place:
    """
    Map one raw park4night record to a Place.

    park4night uses French field names ('titre', 'adresse', 'description_fr');
    English variants win when present.
    """
    template = place_url_template or settings.PARK4NIGHT_PLACE_URL
    place_id = _first_text(item, "id")
    return Place(
        name=_first_text(item, "titre", "name") or "Unknown place",
        description=_first_text(item, "description_en", "description_fr", "description"),
        latitude=_as_float(item.get("latitude")),
        longitude=_as_float(item.get("longitude")),
        address=_first_text(item, "adresse", "address"),
        url=template.format(id=place_id) if place_id else None,
    )


def _extract_items(data: Any) -> List[dict]:
    # The API has answered with a bare list, {"lieux": [...]} and {"places": [...]}
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict) and isinstance(data.get("lieux"), list):
        items = data["lieux"]
    elif isinstance(data, dict) and isinstance(data.get("places"), list):
        items = data["places"]
    else:
        keys = list(data.keys()) if isinstance(data, dict) else type(data).__name__
        logging.getLogger(__name__).warning("Unexpected park4night response format: %s", keys)
        items = []
    return [item for item in items if isinstance(item, dict)]


class PlacesClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        geocoder: Optional[Callable[[str], Optional[Coordinates]]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url or settings.PARK4NIGHT_BASE_URL
        self.timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT_SECONDS
        self.geocoder = geocoder or geocode_location
        self.session = session or requests.Session()
        self.logger = logging.getLogger(__name__)

    def _fetch_nearby(self, coords: Coordinates) -> List[dict]:
        params = {"latitude": str(coords.lat), "longitude": str(coords.lon)}
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise ProviderError(f"park4night request failed near {coords.lat},{coords.lon}: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(f"park4night returned invalid JSON: {exc}") from exc
        if not data:
            return []
        return _extract_items(data)

    def search_nearby(self, lat: float, lon: float, max_results: int = 10) -> List[Place]:
        items = self._fetch_nearby(Coordinates(lat=lat, lon=lon))
        return [place_from_park4night(item) for item in items[:max_results]]

    def lookup(self, location: str, max_results: int = 10) -> List[Place]:
        """
        Return up to `max_results` places near a free-text location.

        An unknown location yields an empty list; transport failures raise ProviderError.
        """
        coords = self.geocoder(location)
        if coords is None:
            self.logger.info("PlacesClient.lookup: could not geocode %r", location)
            return []
        results = self.search_nearby(coords.lat, coords.lon, max_results=max_results)
        self.logger.debug(
            "PlacesClient.lookup: location=%r lat=%.6f lon=%.6f got %d results",
            location,
            coords.lat,
            coords.lon,
            len(results),
        )
        return results


_default_places_client: Optional[PlacesClient] = None


def get_default_places_client() -> PlacesClient:
    global _default_places_client
    if _default_places_client is None:
        _default_places_client = PlacesClient()
    return _default_places_client
