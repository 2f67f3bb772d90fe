"""Seismic hazard resolver: CanSHM lookups with static fallbacks.

Resolution runs four stages in order, each attempted once and only when
the previous one failed or returned nothing usable:

1. CanSHM query by site class.
2. CanSHM query by a representative Vs30 for that site class.
3. Precomputed values for a catalog city within the fallback tolerance.
4. Generic conservative values labelled with the raw coordinates.

The resolver never raises. Every returned record is wrapped in a
:class:`~nbc_loads.models.Resolved` carrying its provenance, so callers
can tell service data from fallback approximations.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from requests import RequestException, Session

from nbc_loads.config import NbcLoadsConfig
from nbc_loads.data.locations import (
    FALLBACK_HAZARD,
    FALLBACK_RETURN_PERIOD,
    FALLBACK_SITE_CLASS,
    FALLBACK_VS30,
    GENERIC_HAZARD,
    MAJOR_CITIES,
)
from nbc_loads.fetchers.canshm import HazardServiceError, fetch_by_site_class, fetch_by_vs30
from nbc_loads.geo import find_within_tolerance, nearest_location
from nbc_loads.http import create_session
from nbc_loads.models import (
    GROUND_MOTION_FIELDS,
    HazardQuery,
    HazardRecord,
    LocationCatalogEntry,
    RemoteStrategy,
    Resolved,
    SiteClass,
)
from nbc_loads.probability import DEFAULT_RETURN_PERIOD, poe50_percent, return_period_from_poe50

logger = logging.getLogger(__name__)

VS30_BY_SITE_CLASS: dict[str, float] = {
    "A": 1500.0,  # hard rock
    "B": 1100.0,  # rock
    "C": 560.0,  # very dense soil and soft rock
    "D": 270.0,  # stiff soil
    "E": 135.0,  # soft soil
}
DEFAULT_VS30 = 760.0

# Failures that make a remote stage unusable
_STAGE_ERRORS = (
    RequestException, HazardServiceError, ValueError, KeyError, TypeError, AttributeError,
)


def vs30_from_site_class(site_class: str) -> float:
    """Representative Vs30 (m/s) for a site class; 760 for anything unknown."""
    return VS30_BY_SITE_CLASS.get(site_class, DEFAULT_VS30)


def site_class_from_vs30(vs30: float) -> SiteClass:
    if vs30 >= 1500:
        return "A"
    if vs30 >= 760:
        return "B"
    if vs30 >= 360:
        return "C"
    if vs30 >= 180:
        return "D"
    return "E"


def seismic_zone(sa_0p2: float) -> str:
    """Qualitative hazard band for Sa(0.2)."""
    if sa_0p2 >= 0.75:
        return "Very High"
    if sa_0p2 >= 0.35:
        return "High"
    if sa_0p2 >= 0.15:
        return "Moderate"
    if sa_0p2 >= 0.05:
        return "Low"
    return "Very Low"


def _coordinate_label(latitude: float, longitude: float) -> str:
    return f"{latitude:.4f}, {longitude:.4f}"


def designation_to_record(
    designation: dict,
    metadata: dict | None,
    latitude: float,
    longitude: float,
    site_class: str,
    strategy: RemoteStrategy,
) -> HazardRecord:
    """Convert one CanSHM site designation into a HazardRecord.

    Absent or null spectral fields become 0. The service reports poe50
    in percent; without it the record is assigned 2475 years.
    """
    ground_motion = {
        name: float(designation.get(key) or 0.0)
        for name, key in GROUND_MOTION_FIELDS.items()
    }

    poe50 = designation.get("poe50")
    return_period = (
        return_period_from_poe50(poe50 / 100) if poe50 else DEFAULT_RETURN_PERIOD
    )

    profile = tuple(float(v) for v in designation.get("vs30") or ())
    if strategy == "vs30" and profile:
        vs30 = profile[0]
    else:
        vs30 = vs30_from_site_class(site_class)

    raw_zones = (metadata or {}).get("zones") or ()
    zones = (raw_zones,) if isinstance(raw_zones, str) else tuple(raw_zones)

    return HazardRecord(
        location=_coordinate_label(latitude, longitude),
        latitude=latitude,
        longitude=longitude,
        ground_motion=ground_motion,
        return_period=return_period,
        site_class=site_class,
        vs30=vs30,
        soil_velocity_profile=profile,
        zones=zones,
    )


def _resolve_remote(
    query: HazardQuery,
    session: Session,
    config: NbcLoadsConfig,
) -> list[Resolved] | None:
    """Stages 1 and 2. Returns None when neither strategy is usable."""
    poe50 = [poe50_percent(rp) for rp in query.return_periods]

    try:
        point, designations = fetch_by_site_class(
            query.latitude,
            query.longitude,
            query.site_class,
            poe50,
            session=session,
            timeout=config.request_timeout,
            url=config.hazard_api_url,
        )
        return [
            Resolved(
                designation_to_record(
                    d, point.get("metadata"), query.latitude, query.longitude,
                    query.site_class, "site-class",
                ),
                provenance="remote",
                strategy="site-class",
            )
            for d in designations
        ]
    except _STAGE_ERRORS:
        logger.warning(
            "Site class query failed for (%.4f, %.4f), falling back to Vs30",
            query.latitude, query.longitude, exc_info=True,
        )

    vs30 = vs30_from_site_class(query.site_class)
    try:
        point, designations = fetch_by_vs30(
            query.latitude,
            query.longitude,
            vs30,
            poe50,
            session=session,
            timeout=config.request_timeout,
            url=config.hazard_api_url,
        )
        return [
            Resolved(
                designation_to_record(
                    d, point.get("metadata"), query.latitude, query.longitude,
                    query.site_class, "vs30",
                ),
                provenance="remote",
                strategy="vs30",
            )
            for d in designations
        ]
    except _STAGE_ERRORS:
        logger.warning(
            "Vs30 query (%.0f m/s) failed for (%.4f, %.4f), using fallback data",
            vs30, query.latitude, query.longitude, exc_info=True,
        )
    return None


def _fallback_anchors() -> list[LocationCatalogEntry]:
    return [city for city in MAJOR_CITIES if city.name in FALLBACK_HAZARD]


def _fallback_record(
    city: LocationCatalogEntry, site_class: str, vs30: float,
) -> HazardRecord:
    return HazardRecord(
        location=city.name,
        latitude=city.latitude,
        longitude=city.longitude,
        ground_motion=FALLBACK_HAZARD[city.name],
        return_period=FALLBACK_RETURN_PERIOD,
        site_class=site_class,
        vs30=vs30,
    )


def _generic_record(query: HazardQuery, vs30: float) -> HazardRecord:
    return HazardRecord(
        location=_coordinate_label(query.latitude, query.longitude),
        latitude=query.latitude,
        longitude=query.longitude,
        ground_motion=GENERIC_HAZARD,
        return_period=DEFAULT_RETURN_PERIOD,
        site_class=query.site_class,
        vs30=vs30,
    )


def resolve_hazard(
    query: HazardQuery,
    session: Session | None = None,
    config: NbcLoadsConfig | None = None,
) -> list[Resolved]:
    """Resolve hazard records for a query. Never raises; never returns empty.

    Remote stages yield one record per designation returned (normally one
    per requested return period). Fallback stages yield a single record.
    """
    if config is None:
        config = NbcLoadsConfig()
    if session is None:
        session = create_session(user_agent=config.user_agent)

    logger.info(
        "Resolving hazard for (%.4f, %.4f), site class %s",
        query.latitude, query.longitude, query.site_class,
    )
    remote = _resolve_remote(query, session, config)
    if remote:
        return remote

    vs30 = vs30_from_site_class(query.site_class)
    anchor = find_within_tolerance(
        query.latitude, query.longitude, _fallback_anchors(), config.fallback_tolerance_deg
    )
    if anchor is not None:
        logger.info("Using fallback hazard values for %s", anchor.name)
        return [
            Resolved(
                _fallback_record(anchor, query.site_class, vs30),
                provenance="fallback-nearest",
            )
        ]

    logger.warning(
        "No fallback anchor within %.2f deg of (%.4f, %.4f); using generic values",
        config.fallback_tolerance_deg, query.latitude, query.longitude,
    )
    return [Resolved(_generic_record(query, vs30), provenance="fallback-generic")]


def resolve_hazard_by_vs30(
    latitude: float,
    longitude: float,
    vs30: float = 760.0,
    return_periods: Sequence[float] = (2475.0,),
    session: Session | None = None,
    config: NbcLoadsConfig | None = None,
) -> list[Resolved]:
    """Resolve by Vs30 by first mapping it to the matching site class."""
    query = HazardQuery(
        latitude=latitude,
        longitude=longitude,
        site_class=site_class_from_vs30(vs30),
        return_periods=tuple(return_periods),
    )
    return resolve_hazard(query, session=session, config=config)


def select_reference_record(
    records: Sequence[Resolved], reference: int = DEFAULT_RETURN_PERIOD,
) -> Resolved:
    """Pick the record whose return period is closest to ``reference``.

    An exact match wins; otherwise the smallest absolute difference,
    first one on ties.
    """
    if not records:
        raise ValueError("No hazard records to select from")
    for r in records:
        if r.record.return_period == reference:
            return r
    return min(records, key=lambda r: abs(r.record.return_period - reference))


def resolve_nearest(
    latitude: float,
    longitude: float,
    return_period: float = 2475.0,
    site_class: SiteClass = "C",
    session: Session | None = None,
    config: NbcLoadsConfig | None = None,
) -> Resolved:
    """Single best-estimate record for a point.

    Tries the CanSHM strategies first. When both fail, returns the
    fallback values of the nearest catalog city (Euclidean distance in
    degrees) without regard to how far away it is; the record keeps the
    city's own site class and Vs30.
    """
    if config is None:
        config = NbcLoadsConfig()
    if session is None:
        session = create_session(user_agent=config.user_agent)

    query = HazardQuery(latitude, longitude, site_class, (float(return_period),))
    remote = _resolve_remote(query, session, config)
    if remote:
        return select_reference_record(remote, round(return_period))

    city = nearest_location(latitude, longitude, _fallback_anchors())
    if city is None:
        return Resolved(
            _generic_record(query, vs30_from_site_class(site_class)),
            provenance="fallback-generic",
        )
    logger.info("Nearest fallback city to (%.4f, %.4f) is %s", latitude, longitude, city.name)
    return Resolved(
        _fallback_record(city, FALLBACK_SITE_CLASS, FALLBACK_VS30),
        provenance="fallback-nearest",
    )
