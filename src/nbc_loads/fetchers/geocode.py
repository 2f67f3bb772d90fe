"""Location search over the city catalog with a Nominatim fallback."""

from __future__ import annotations

import logging

from requests import Session

from nbc_loads.config import NOMINATIM_SEARCH_URL
from nbc_loads.data.locations import MAJOR_CITIES
from nbc_loads.http import create_session
from nbc_loads.models import LocationCatalogEntry

logger = logging.getLogger(__name__)


def _nominatim_search(
    query: str, limit: int, session: Session, timeout: int, url: str,
) -> list[LocationCatalogEntry]:
    params: dict[str, str | int] = {
        "format": "json",
        "addressdetails": 1,
        "limit": limit,
        "countrycodes": "ca",
        "q": query,
    }
    resp = session.get(url, params=params, timeout=timeout)
    resp.raise_for_status()

    results: list[LocationCatalogEntry] = []
    for item in resp.json():
        address = item.get("address") or {}
        results.append(
            LocationCatalogEntry(
                name=item["display_name"],
                latitude=float(item["lat"]),
                longitude=float(item["lon"]),
                province=address.get("state") or address.get("province") or "",
            )
        )
    return results


def search_locations(
    query: str,
    session: Session | None = None,
    timeout: int = 15,
    url: str = NOMINATIM_SEARCH_URL,
) -> list[LocationCatalogEntry]:
    """Find locations matching a free-text query.

    Catalog cities whose name or province contains the query
    (case-insensitive) are returned without touching the network. Only
    when none match is Nominatim consulted (Canada only, five hits).
    Returns an empty list on network or parse failures (non-fatal).
    """
    needle = query.strip().lower()
    if not needle:
        return []

    matches = [
        city for city in MAJOR_CITIES
        if needle in city.name.lower() or needle in city.province.lower()
    ]
    if matches:
        return matches

    if session is None:
        session = create_session()
    try:
        return _nominatim_search(query, 5, session, timeout, url)
    except Exception:
        logger.warning("Geocoding failed for %r", query, exc_info=True)
        return []


def geocode_address(
    address: str,
    session: Session | None = None,
    timeout: int = 15,
    url: str = NOMINATIM_SEARCH_URL,
) -> LocationCatalogEntry | None:
    """Best Nominatim match for an address, or None."""
    if session is None:
        session = create_session()
    try:
        results = _nominatim_search(address, 1, session, timeout, url)
    except Exception:
        logger.warning("Geocoding failed for %r", address, exc_info=True)
        return None
    return results[0] if results else None
