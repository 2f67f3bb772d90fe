"""FastAPI wrapper for hazard lookups and load calculators."""

from __future__ import annotations

import logging
import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import FastAPI, HTTPException, Query

from nbc_loads import __version__
from nbc_loads.config import NbcLoadsConfig, PeriodFormula
from nbc_loads.data.locations import MAJOR_CITIES
from nbc_loads.fetchers.geocode import search_locations
from nbc_loads.hazard import resolve_hazard, resolve_nearest, seismic_zone
from nbc_loads.http import create_session
from nbc_loads.loads.live import (
    compute_live_load_area,
    get_occupancy,
    get_special_occupancy,
    live_load_results,
)
from nbc_loads.loads.seismic import compute_seismic_loads
from nbc_loads.loads.snow import compute_snow_loads, snow_load_zone
from nbc_loads.loads.wind import compute_wind_loads
from nbc_loads.models import (
    Exposure,
    HazardQuery,
    ImportanceCategory,
    RoofType,
    SeismicInputs,
    SiteClass,
    SnowInputs,
    Terrain,
    Topography,
    WindInputs,
    WindMode,
)

logger = logging.getLogger(__name__)

# Sync endpoints run in the threadpool
_counter_lock = threading.Lock()


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncGenerator[None, None]:
    """Store startup state for the /health endpoint."""
    application.state.start_time = datetime.now(tz=timezone.utc)
    application.state.hazard_requests = 0
    application.state.fallback_count = 0
    yield


app = FastAPI(
    title="NBC Loads API",
    description="Structural design loads for Canadian buildings per NBC 2020.",
    version=__version__,
    lifespan=lifespan,
)


def _record_hazard_request(approximate: bool) -> None:
    with _counter_lock:
        app.state.hazard_requests += 1
        if approximate:
            app.state.fallback_count += 1


@app.get("/health")
def health() -> dict[str, Any]:
    """Server health check with uptime, version, and hazard request counts."""
    now = datetime.now(tz=timezone.utc)
    return {
        "status": "ok",
        "version": __version__,
        "uptime_seconds": round((now - app.state.start_time).total_seconds(), 1),
        "hazard_requests": app.state.hazard_requests,
        "fallback_count": app.state.fallback_count,
    }


@app.get("/locations")
def get_locations(
    q: Annotated[str | None, Query(description="Free-text search.")] = None,
) -> list[dict[str, Any]]:
    """Quick-pick cities, or search results when ``q`` is given."""
    if not q:
        return [asdict(c) for c in MAJOR_CITIES]
    config = NbcLoadsConfig()
    session = create_session(user_agent=config.user_agent)
    results = search_locations(
        q, session=session, timeout=config.request_timeout, url=config.geocoder_url
    )
    return [asdict(c) for c in results]


@app.get("/hazard")
def get_hazard(
    latitude: Annotated[float, Query(ge=-90, le=90)],
    longitude: Annotated[float, Query(ge=-180, le=180)],
    site_class: Annotated[SiteClass, Query(description="Site class A-E.")] = "C",
    return_period: Annotated[
        list[float] | None, Query(gt=0, description="Return periods in years.")
    ] = None,
) -> list[dict[str, Any]]:
    """All hazard records for a point, each tagged with its provenance."""
    config = NbcLoadsConfig()
    periods = tuple(return_period or (float(config.reference_return_period),))
    resolved = resolve_hazard(HazardQuery(latitude, longitude, site_class, periods), config=config)
    _record_hazard_request(any(r.is_approximate for r in resolved))
    return [
        {**asdict(r), "seismic_zone": seismic_zone(r.record.sa_0p2)} for r in resolved
    ]


@app.get("/hazard/nearest")
def get_hazard_nearest(
    latitude: Annotated[float, Query(ge=-90, le=90)],
    longitude: Annotated[float, Query(ge=-180, le=180)],
    site_class: Annotated[SiteClass, Query()] = "C",
    return_period: Annotated[float, Query(gt=0)] = 2475.0,
) -> dict[str, Any]:
    """Single best-estimate record, falling back to the nearest catalog city."""
    resolved = resolve_nearest(latitude, longitude, return_period, site_class)
    _record_hazard_request(resolved.is_approximate)
    return {**asdict(resolved), "seismic_zone": seismic_zone(resolved.record.sa_0p2)}


@app.get("/snow")
def get_snow(
    ss: Annotated[float, Query(ge=0, description="Ground snow load Ss (kPa).")],
    sr: Annotated[float, Query(ge=0, description="Rain load Sr (kPa).")] = 0.0,
    length: Annotated[float, Query(gt=0)] = 20.0,
    width: Annotated[float, Query(gt=0)] = 15.0,
    slope: Annotated[float, Query(ge=0, le=90)] = 0.0,
    height: Annotated[float, Query(ge=0)] = 6.0,
    slippery: bool = False,
    terrain: Annotated[Terrain, Query()] = "open",
    importance: Annotated[ImportanceCategory, Query()] = "normal",
) -> dict[str, Any]:
    """Balanced roof snow load for ULS and SLS."""
    analysis = compute_snow_loads(
        SnowInputs(ss, sr, length, width, slope, height, slippery, terrain, importance)
    )
    return {**asdict(analysis), "zone": snow_load_zone(ss)}


@app.get("/wind")
def get_wind(
    wind_speed: Annotated[float, Query(gt=0, description="Wind speed V (m/s).")],
    length: Annotated[float, Query(gt=0)] = 30.0,
    width: Annotated[float, Query(gt=0)] = 20.0,
    height: Annotated[float, Query(gt=0)] = 12.0,
    exposure: Annotated[Exposure, Query()] = "B",
    topography: Annotated[Topography, Query()] = "normal",
    roof_type: Annotated[RoofType, Query()] = "flat",
    mode: Annotated[WindMode, Query()] = "mwfrs",
) -> dict[str, Any]:
    """Velocity pressure and surface pressures/forces."""
    analysis = compute_wind_loads(
        WindInputs(wind_speed, length, width, height, exposure, topography, roof_type, mode)
    )
    return asdict(analysis)


@app.get("/seismic")
def get_seismic(
    sa_0p2: Annotated[float, Query(ge=0, description="Sa(0.2) in g.")],
    sa_1p0: Annotated[float, Query(ge=0, description="Sa(1.0) in g.")],
    weight: Annotated[float, Query(gt=0, description="Seismic weight W (kN).")],
    height: Annotated[float, Query(gt=0)],
    structural_system: Annotated[str, Query()] = "Steel Moment Frame - Ductile",
    site_class: Annotated[SiteClass, Query()] = "C",
    importance: Annotated[ImportanceCategory, Query()] = "normal",
    pga: Annotated[float, Query(ge=0)] = 0.0,
    vertical_irregularity: bool = False,
    horizontal_irregularity: bool = False,
    period_formula: Annotated[PeriodFormula | None, Query()] = None,
) -> dict[str, Any]:
    """Equivalent static design base shear."""
    config = NbcLoadsConfig()
    inputs = SeismicInputs(
        site_class=site_class,
        sa_0p2=sa_0p2,
        sa_1p0=sa_1p0,
        weight=weight,
        height=height,
        structural_system=structural_system,
        importance=importance,
        pga=pga,
        vertical_irregularity=vertical_irregularity,
        horizontal_irregularity=horizontal_irregularity,
    )
    try:
        analysis = compute_seismic_loads(
            inputs,
            period_formula=period_formula or config.period_formula,
            irregularity_amplification=config.irregularity_amplification,
        )
    except KeyError:
        raise HTTPException(
            status_code=404, detail=f"Unknown structural system: {structural_system}"
        ) from None
    return asdict(analysis)


@app.get("/live")
def get_live(
    occupancy: Annotated[str, Query(description="Occupancy code, e.g. D.")],
    area: Annotated[float, Query(gt=0)],
    tributary_area: Annotated[float | None, Query(gt=0)] = None,
    custom_load: Annotated[float | None, Query(gt=0)] = None,
    special: Annotated[
        str | None, Query(description="Special occupancy, e.g. 'Stairs and Exits'.")
    ] = None,
) -> dict[str, Any]:
    """Reduced live load for one floor area."""
    try:
        occ = get_occupancy(occupancy)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown occupancy: {occupancy}") from None
    try:
        special_occ = get_special_occupancy(special) if special else None
    except KeyError:
        raise HTTPException(
            status_code=404, detail=f"Unknown special occupancy: {special}"
        ) from None
    result = compute_live_load_area(occ.name, area, occ, tributary_area, custom_load, special_occ)
    return {
        **asdict(result),
        "results": [asdict(r) for r in live_load_results([result])],
    }
