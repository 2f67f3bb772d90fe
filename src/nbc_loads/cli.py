"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from nbc_loads import __version__
from nbc_loads.climate import ClimateRecord, load_climate_table, wind_speed_from_pressure
from nbc_loads.config import NbcLoadsConfig, PeriodFormula
from nbc_loads.data.locations import MAJOR_CITIES
from nbc_loads.hazard import resolve_hazard, resolve_nearest, seismic_zone, select_reference_record
from nbc_loads.loads.dead import compute_dead_load
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
    LoadResult,
    Material,
    Resolved,
    RoofType,
    SeismicInputs,
    SiteClass,
    SnowInputs,
    Terrain,
    Topography,
    WindInputs,
    WindMode,
)

app = typer.Typer(
    name="nbc-loads",
    help="Structural design loads for Canadian buildings per NBC 2020.",
    add_completion=False,
)
console = Console()

JsonOption = Annotated[bool, typer.Option("--json", help="Print results as JSON.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"nbc-loads {__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )


def _print_results(title: str, results: Sequence[LoadResult], as_json: bool) -> None:
    if as_json:
        console.print_json(json.dumps([asdict(r) for r in results]))
        return
    table = Table(title=title)
    table.add_column("Parameter", style="bold")
    table.add_column("Value", justify="right", style="cyan")
    table.add_column("Unit", style="dim")
    table.add_column("Calculation")
    for r in results:
        table.add_row(r.parameter, f"{r.value:.3f}", r.unit, r.calculation or r.description)
    console.print(table)


def _climate_record(climate_file: Path, location: str) -> ClimateRecord:
    table = load_climate_table(climate_file)
    try:
        return table[location]
    except KeyError:
        console.print(f"[red]Location not in climate table:[/red] {location}")
        raise typer.Exit(code=1) from None


def _provenance_note(resolved: Resolved) -> None:
    if resolved.is_approximate:
        console.print(
            f"[yellow]Approximate hazard data ({resolved.provenance}); "
            "the CanSHM service could not be used.[/yellow]"
        )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """NBC Loads: snow, wind, seismic, dead and live load calculators."""


@app.command()
def cities() -> None:
    """List the built-in quick-pick cities."""
    table = Table(title="Major Canadian Cities")
    table.add_column("City", style="bold")
    table.add_column("Province")
    table.add_column("Latitude", justify="right")
    table.add_column("Longitude", justify="right")
    for city in MAJOR_CITIES:
        table.add_row(city.name, city.province, f"{city.latitude:.4f}", f"{city.longitude:.4f}")
    console.print(table)


@app.command()
def hazard(
    latitude: Annotated[float, typer.Option("--lat", help="Latitude (degrees).")],
    longitude: Annotated[float, typer.Option("--lon", help="Longitude (degrees).")],
    site_class: Annotated[
        SiteClass, typer.Option("--site-class", "-s", help="Site class A-E.")
    ] = "C",
    return_periods: Annotated[
        list[float] | None,
        typer.Option("--return-period", "-r", help="Return period in years (repeatable)."),
    ] = None,
    nearest: Annotated[
        bool, typer.Option("--nearest", help="Fall back to the nearest catalog city.")
    ] = False,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Resolve seismic hazard values for a point."""
    _setup_logging(verbose)
    config = NbcLoadsConfig()
    periods = tuple(return_periods or (float(config.reference_return_period),))

    if nearest:
        records = [resolve_nearest(latitude, longitude, periods[0], site_class, config=config)]
    else:
        records = resolve_hazard(
            HazardQuery(latitude, longitude, site_class, periods), config=config
        )

    if as_json:
        console.print_json(json.dumps([asdict(r) for r in records]))
        return

    for resolved in records:
        rec = resolved.record
        table = Table(title=f"{rec.location} ({rec.return_period}-year, site class {rec.site_class})")
        table.add_column("Intensity", style="bold")
        table.add_column("Value", justify="right", style="cyan")
        for name, value in rec.ground_motion.items():
            table.add_row(name, f"{value:.3f}")
        console.print(table)
        console.print(
            f"Vs30: {rec.vs30:g} m/s  Seismic zone: {seismic_zone(rec.sa_0p2)}  "
            f"Source: {resolved.provenance}"
        )
        _provenance_note(resolved)


@app.command()
def snow(
    ss: Annotated[float | None, typer.Option("--ss", help="Ground snow load Ss (kPa).")] = None,
    sr: Annotated[float, typer.Option("--sr", help="Rain load Sr (kPa).")] = 0.0,
    climate_file: Annotated[
        Path | None, typer.Option("--climate-file", help="Climate table CSV.")
    ] = None,
    location: Annotated[
        str | None, typer.Option("--location", help="Location in the climate table.")
    ] = None,
    length: Annotated[float, typer.Option(help="Roof length (m).")] = 20.0,
    width: Annotated[float, typer.Option(help="Roof width (m).")] = 15.0,
    slope: Annotated[float, typer.Option(help="Roof slope (degrees).")] = 0.0,
    height: Annotated[float, typer.Option(help="Roof height above ground (m).")] = 6.0,
    slippery: Annotated[bool, typer.Option(help="Unobstructed slippery roof.")] = False,
    terrain: Annotated[Terrain, typer.Option(help="Terrain exposure.")] = "open",
    importance: Annotated[ImportanceCategory, typer.Option(help="Importance category.")] = "normal",
    as_json: JsonOption = False,
) -> None:
    """Balanced roof snow load (ULS and SLS)."""
    if climate_file is not None and location is not None:
        record = _climate_record(climate_file, location)
        ss, sr = record.ss, record.sr
    if ss is None:
        console.print("[red]Provide --ss or --climate-file with --location.[/red]")
        raise typer.Exit(code=1)

    analysis = compute_snow_loads(
        SnowInputs(ss, sr, length, width, slope, height, slippery, terrain, importance)
    )
    _print_results(f"Snow Load (zone: {snow_load_zone(ss)})", analysis.results, as_json)


@app.command()
def wind(
    speed: Annotated[float | None, typer.Option("--speed", help="Wind speed V (m/s).")] = None,
    climate_file: Annotated[
        Path | None, typer.Option("--climate-file", help="Climate table CSV.")
    ] = None,
    location: Annotated[
        str | None, typer.Option("--location", help="Location in the climate table.")
    ] = None,
    length: Annotated[float, typer.Option(help="Building length (m).")] = 30.0,
    width: Annotated[float, typer.Option(help="Building width (m).")] = 20.0,
    height: Annotated[float, typer.Option(help="Building height (m).")] = 12.0,
    exposure: Annotated[Exposure, typer.Option(help="Exposure category A-D.")] = "B",
    topography: Annotated[Topography, typer.Option(help="Topography.")] = "normal",
    roof_type: Annotated[RoofType, typer.Option("--roof-type", help="Roof type.")] = "flat",
    mode: Annotated[
        WindMode, typer.Option(help="mwfrs (whole structure) or cc (components).")
    ] = "mwfrs",
    as_json: JsonOption = False,
) -> None:
    """Wind velocity pressure and surface loads."""
    if climate_file is not None and location is not None:
        speed = wind_speed_from_pressure(_climate_record(climate_file, location).q50)
    if speed is None:
        console.print("[red]Provide --speed or --climate-file with --location.[/red]")
        raise typer.Exit(code=1)

    analysis = compute_wind_loads(
        WindInputs(speed, length, width, height, exposure, topography, roof_type, mode)
    )
    _print_results(f"Wind Loads ({mode.upper()})", analysis.results, as_json)


@app.command()
def seismic(
    system: Annotated[str, typer.Option("--system", help="Structural system name.")] = (
        "Steel Moment Frame - Ductile"
    ),
    weight: Annotated[float, typer.Option(help="Seismic weight W (kN).")] = 10000.0,
    height: Annotated[float, typer.Option(help="Building height (m).")] = 20.0,
    floors: Annotated[int, typer.Option(help="Number of floors.")] = 5,
    site_class: Annotated[SiteClass, typer.Option("--site-class", "-s")] = "C",
    importance: Annotated[ImportanceCategory, typer.Option(help="Importance category.")] = "normal",
    sa_0p2: Annotated[float | None, typer.Option("--sa02", help="Sa(0.2) in g.")] = None,
    sa_1p0: Annotated[float | None, typer.Option("--sa10", help="Sa(1.0) in g.")] = None,
    latitude: Annotated[float | None, typer.Option("--lat", help="Resolve hazard at this latitude.")] = None,
    longitude: Annotated[float | None, typer.Option("--lon", help="Resolve hazard at this longitude.")] = None,
    vertical_irregularity: Annotated[bool, typer.Option("--vertical-irregularity")] = False,
    horizontal_irregularity: Annotated[bool, typer.Option("--horizontal-irregularity")] = False,
    period_formula: Annotated[
        PeriodFormula | None, typer.Option("--period-formula", help="standard or spectral.")
    ] = None,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Equivalent static base shear."""
    _setup_logging(verbose)
    config = NbcLoadsConfig()
    pga = 0.0

    if latitude is not None and longitude is not None:
        query = HazardQuery(latitude, longitude, site_class, (float(config.reference_return_period),))
        resolved = select_reference_record(
            resolve_hazard(query, config=config), config.reference_return_period
        )
        _provenance_note(resolved)
        sa_0p2, sa_1p0, pga = resolved.record.sa_0p2, resolved.record.sa_1p0, resolved.record.pga
    if sa_0p2 is None or sa_1p0 is None:
        console.print("[red]Provide --sa02 and --sa10, or --lat and --lon.[/red]")
        raise typer.Exit(code=1)

    inputs = SeismicInputs(
        site_class=site_class,
        sa_0p2=sa_0p2,
        sa_1p0=sa_1p0,
        weight=weight,
        height=height,
        structural_system=system,
        importance=importance,
        pga=pga,
        floors=floors,
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
        console.print(f"[red]Unknown structural system:[/red] {system}")
        raise typer.Exit(code=1) from None
    _print_results(f"Seismic Loads (zone: {seismic_zone(sa_0p2)})", analysis.results, as_json)


def _parse_layer(raw: str) -> tuple[Material, float | None]:
    """Parse 'name:value:units[:thickness_mm]'."""
    parts = raw.split(":")
    if len(parts) not in (3, 4) or parts[2] not in ("kPa", "kN/m3"):
        raise typer.BadParameter(f"Expected name:value:kPa|kN/m3[:thickness_mm], got {raw!r}")
    thickness = float(parts[3]) if len(parts) == 4 else None
    return Material(parts[0], float(parts[1]), parts[2]), thickness  # type: ignore[arg-type]


@app.command()
def dead(
    layers: Annotated[
        list[str],
        typer.Option("--layer", "-l", help="Layer as name:value:kPa|kN/m3[:thickness_mm]."),
    ],
    as_json: JsonOption = False,
) -> None:
    """Dead load of a layered assembly."""
    analysis = compute_dead_load(_parse_layer(raw) for raw in layers)
    _print_results("Dead Load Assembly", analysis.results, as_json)


@app.command()
def live(
    occupancy: Annotated[str, typer.Option("--occupancy", "-o", help="Occupancy code, e.g. D.")],
    area: Annotated[float, typer.Option(help="Floor area (m²).")],
    tributary_area: Annotated[
        float | None, typer.Option("--tributary-area", help="Tributary area (m²).")
    ] = None,
    custom_load: Annotated[
        float | None, typer.Option("--custom-load", help="Override uniform load (kN/m²).")
    ] = None,
    special: Annotated[
        str | None,
        typer.Option("--special", help="Special occupancy, e.g. 'Corridors and Lobbies'."),
    ] = None,
    name: Annotated[str, typer.Option(help="Area name.")] = "Area 1",
    as_json: JsonOption = False,
) -> None:
    """Reduced live load for a floor area."""
    try:
        occ = get_occupancy(occupancy)
    except KeyError:
        console.print(f"[red]Unknown occupancy:[/red] {occupancy}")
        raise typer.Exit(code=1) from None
    try:
        special_occ = get_special_occupancy(special) if special else None
    except KeyError:
        console.print(f"[red]Unknown special occupancy:[/red] {special}")
        raise typer.Exit(code=1) from None
    result = compute_live_load_area(name, area, occ, tributary_area, custom_load, special_occ)
    _print_results(f"Live Load ({occ.name})", live_load_results([result]), as_json)
