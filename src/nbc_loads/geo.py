"""Geographic utilities: degree-space distance and catalog anchor search."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from nbc_loads.models import LocationCatalogEntry


def degree_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Euclidean distance in degree space, ``sqrt(dlat^2 + dlon^2)``.

    Not a geodesic distance. Good enough to rank city-level anchors.
    """
    return math.hypot(lat2 - lat1, lon2 - lon1)


def nearest_location(
    latitude: float,
    longitude: float,
    entries: Sequence[LocationCatalogEntry],
) -> LocationCatalogEntry | None:
    """Return the catalog entry closest to the point, or None if empty.

    Ties go to the entry that appears first.
    """
    if not entries:
        return None
    coords = np.array([(e.latitude, e.longitude) for e in entries], dtype=np.float64)
    distances = np.hypot(coords[:, 0] - latitude, coords[:, 1] - longitude)
    return entries[int(np.argmin(distances))]


def find_within_tolerance(
    latitude: float,
    longitude: float,
    entries: Sequence[LocationCatalogEntry],
    tolerance_deg: float = 0.1,
) -> LocationCatalogEntry | None:
    """First entry whose latitude and longitude are both within tolerance."""
    for entry in entries:
        if (
            abs(entry.latitude - latitude) < tolerance_deg
            and abs(entry.longitude - longitude) < tolerance_deg
        ):
            return entry
    return None
