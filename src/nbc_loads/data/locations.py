"""Static location catalog and fallback seismic hazard values.

MAJOR_CITIES doubles as the quick-pick list and as the set of anchors
searched when the CanSHM service cannot be reached. FALLBACK_HAZARD
holds precomputed NBC 2020 values (2% in 50 years, site class C) for
a subset of those cities; every key must name a MAJOR_CITIES entry.

Loaded once at import and never mutated. Refreshing the values means
a new release.
"""

from __future__ import annotations

from nbc_loads.models import LocationCatalogEntry

MAJOR_CITIES: tuple[LocationCatalogEntry, ...] = (
    LocationCatalogEntry("Toronto, ON", 43.6532, -79.3832, "Ontario"),
    LocationCatalogEntry("Montreal, QC", 45.5017, -73.5673, "Quebec"),
    LocationCatalogEntry("Vancouver, BC", 49.2827, -123.1207, "British Columbia"),
    LocationCatalogEntry("Calgary, AB", 51.0447, -114.0719, "Alberta"),
    LocationCatalogEntry("Edmonton, AB", 53.5461, -113.4938, "Alberta"),
    LocationCatalogEntry("Ottawa, ON", 45.4215, -75.6972, "Ontario"),
    LocationCatalogEntry("Winnipeg, MB", 49.8951, -97.1384, "Manitoba"),
    LocationCatalogEntry("Quebec City, QC", 46.8139, -71.2080, "Quebec"),
    LocationCatalogEntry("Hamilton, ON", 43.2557, -79.8711, "Ontario"),
    LocationCatalogEntry("Kitchener, ON", 43.4643, -80.5204, "Ontario"),
    LocationCatalogEntry("London, ON", 42.9849, -81.2453, "Ontario"),
    LocationCatalogEntry("Halifax, NS", 44.6488, -63.5752, "Nova Scotia"),
    LocationCatalogEntry("St. John's, NL", 47.5615, -52.7126, "Newfoundland and Labrador"),
    LocationCatalogEntry("Saskatoon, SK", 52.1332, -106.6700, "Saskatchewan"),
    LocationCatalogEntry("Regina, SK", 50.4452, -104.6189, "Saskatchewan"),
    LocationCatalogEntry("Charlottetown, PE", 46.2382, -63.1311, "Prince Edward Island"),
    LocationCatalogEntry("Fredericton, NB", 45.9636, -66.6431, "New Brunswick"),
    LocationCatalogEntry("Whitehorse, YT", 60.7212, -135.0568, "Yukon"),
)

# City name -> ground motion (g; PGV in m/s), 2475-year return period
FALLBACK_HAZARD: dict[str, dict[str, float]] = {
    "Toronto, ON": {
        "PGA": 0.21, "PGV": 0.15, "0.05s": 0.45, "0.1s": 0.50, "0.2s": 0.55,
        "0.3s": 0.45, "0.5s": 0.28, "1.0s": 0.12, "2.0s": 0.04, "5.0s": 0.02,
        "10.0s": 0.01,
    },
    "Montreal, QC": {
        "PGA": 0.32, "PGV": 0.22, "0.05s": 0.68, "0.1s": 0.75, "0.2s": 0.78,
        "0.3s": 0.65, "0.5s": 0.41, "1.0s": 0.18, "2.0s": 0.06, "5.0s": 0.03,
        "10.0s": 0.015,
    },
    "Vancouver, BC": {
        "PGA": 0.45, "PGV": 0.35, "0.05s": 0.95, "0.1s": 1.05, "0.2s": 1.12,
        "0.3s": 0.95, "0.5s": 0.58, "1.0s": 0.24, "2.0s": 0.08, "5.0s": 0.04,
        "10.0s": 0.02,
    },
    "Calgary, AB": {
        "PGA": 0.08, "PGV": 0.05, "0.05s": 0.18, "0.1s": 0.20, "0.2s": 0.22,
        "0.3s": 0.18, "0.5s": 0.11, "1.0s": 0.05, "2.0s": 0.02, "5.0s": 0.01,
        "10.0s": 0.005,
    },
    "Ottawa, ON": {
        "PGA": 0.28, "PGV": 0.18, "0.05s": 0.62, "0.1s": 0.68, "0.2s": 0.71,
        "0.3s": 0.58, "0.5s": 0.37, "1.0s": 0.16, "2.0s": 0.05, "5.0s": 0.025,
        "10.0s": 0.012,
    },
}

FALLBACK_RETURN_PERIOD = 2475
FALLBACK_SITE_CLASS = "C"
FALLBACK_VS30 = 760.0

GENERIC_HAZARD: dict[str, float] = {
    "PGA": 0.15, "PGV": 0.10, "0.05s": 0.30, "0.1s": 0.32, "0.2s": 0.35,
    "0.3s": 0.28, "0.5s": 0.20, "1.0s": 0.10, "2.0s": 0.03, "5.0s": 0.015,
    "10.0s": 0.008,
}
"""Conservative low-hazard values used when no anchor is near the query point."""
