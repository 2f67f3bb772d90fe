"""Wind velocity pressure and surface loads, NBC 2020 Section 4.1.7 (simplified)."""

from __future__ import annotations

from dataclasses import dataclass

from nbc_loads.models import (
    Exposure,
    LoadResult,
    Topography,
    WindAnalysis,
    WindInputs,
    WindSurfaceResult,
)

DIRECTIONALITY_FACTOR = 0.85
ROUGH_TOPOGRAPHY_FACTOR = 1.15
CC_EFFECTIVE_AREA = 10.0  # m², typical cladding panel


@dataclass(frozen=True)
class ExposureCategory:
    name: str
    description: str
    alpha: float
    zg: float  # gradient height, m


EXPOSURE_CATEGORIES: dict[str, ExposureCategory] = {
    "A": ExposureCategory("Urban/Forest", "Dense urban areas, forest", 0.15, 460),
    "B": ExposureCategory("Suburban", "Suburban areas, wooded terrain", 0.20, 370),
    "C": ExposureCategory("Open", "Open terrain with scattered obstructions", 0.28, 270),
    "D": ExposureCategory("Flat Open", "Flat, unobstructed areas", 0.40, 210),
}


@dataclass(frozen=True)
class PressureCoefficient:
    surface: str
    cp: float
    description: str
    zones: tuple[str, ...]


# First six entries act on the whole structure (MWFRS); the rest are
# components and cladding.
PRESSURE_COEFFICIENTS: tuple[PressureCoefficient, ...] = (
    PressureCoefficient("Windward Wall", 0.8, "Wall facing the wind", ("1", "2")),
    PressureCoefficient("Leeward Wall", -0.5, "Wall opposite to wind", ("3",)),
    PressureCoefficient("Side Wall", -0.7, "Walls parallel to wind", ("4", "5")),
    PressureCoefficient("Flat Roof", -0.7, "Flat or low-slope roof", ("1", "2", "3")),
    PressureCoefficient("Windward Roof", -0.9, "Windward slope of pitched roof", ("1",)),
    PressureCoefficient("Leeward Roof", -0.5, "Leeward slope of pitched roof", ("2",)),
    PressureCoefficient("Wall Corner", -1.0, "Corner regions of walls", ("4", "5")),
    PressureCoefficient("Wall Interior", -0.6, "Interior regions of walls", ("4", "5")),
    PressureCoefficient("Roof Corner", -2.0, "Roof corner regions", ("1",)),
    PressureCoefficient("Roof Edge", -1.2, "Roof edge regions", ("2",)),
    PressureCoefficient("Roof Interior", -0.9, "Interior roof regions", ("3",)),
)
_MWFRS_COUNT = 6


def exposure_coefficient(height: float, exposure: Exposure) -> float:
    """Kz = (z/10)^(2 alpha)."""
    return (height / 10) ** (2 * EXPOSURE_CATEGORIES[exposure].alpha)


def topographic_factor(topography: Topography) -> float:
    return 1.0 if topography == "normal" else ROUGH_TOPOGRAPHY_FACTOR


def velocity_pressure(
    height: float, wind_speed: float, exposure: Exposure, topography: Topography = "normal",
) -> float:
    """q = 0.613 Kz Kzt Kd V^2 / 1000, in kN/m²."""
    kz = exposure_coefficient(height, exposure)
    kzt = topographic_factor(topography)
    return 0.613 * kz * kzt * DIRECTIONALITY_FACTOR * wind_speed**2 / 1000


def _surface(
    id_: str, surface: str, cp: float, q: float, area: float, description: str,
) -> WindSurfaceResult:
    pressure = q * cp
    return WindSurfaceResult(
        id=id_,
        surface=surface,
        coefficient=cp,
        pressure=pressure,
        area=area,
        force=pressure * area,
        description=description,
    )


def _mwfrs_surfaces(inputs: WindInputs, q: float) -> list[WindSurfaceResult]:
    length, width, height = inputs.length, inputs.width, inputs.height
    wall_area = width * height
    side_area = length * height
    roof_area = length * width
    flat = inputs.roof_type == "flat"
    roof_cp = -0.7 if flat else -0.9

    return [
        _surface("windward", "Windward Wall", 0.8, q, wall_area,
                 f"Wind pressure on {width}m × {height}m wall"),
        _surface("leeward", "Leeward Wall", -0.5, q, wall_area,
                 f"Suction on opposite {width}m × {height}m wall"),
        _surface("sidewall1", "Side Wall 1", -0.7, q, side_area,
                 f"Suction on {length}m × {height}m side wall"),
        _surface("sidewall2", "Side Wall 2", -0.7, q, side_area,
                 f"Suction on {length}m × {height}m side wall"),
        _surface("roof", "Flat Roof" if flat else "Roof", roof_cp, q, roof_area,
                 f"{inputs.roof_type} roof pressure on {length}m × {width}m area"),
    ]


def _cc_surfaces(q: float) -> list[WindSurfaceResult]:
    return [
        _surface(
            f"cc_{i}", coeff.surface, coeff.cp, q, CC_EFFECTIVE_AREA,
            f"{coeff.description} ({CC_EFFECTIVE_AREA:g}m² effective area)",
        )
        for i, coeff in enumerate(PRESSURE_COEFFICIENTS[_MWFRS_COUNT:])
    ]


def total_wind_force(surfaces: list[WindSurfaceResult], mode: str) -> float:
    """Windward + |leeward| for MWFRS; the largest single |force| for C&C."""
    if mode == "mwfrs":
        by_id = {s.id: s for s in surfaces}
        windward = by_id["windward"].force if "windward" in by_id else 0.0
        leeward = by_id["leeward"].force if "leeward" in by_id else 0.0
        return windward + abs(leeward)
    return max((abs(s.force) for s in surfaces), default=0.0)


def compute_wind_loads(inputs: WindInputs) -> WindAnalysis:
    """Velocity pressure, per-surface pressures/forces, and summary metrics."""
    exposure = EXPOSURE_CATEGORIES[inputs.exposure]
    kz = exposure_coefficient(inputs.height, inputs.exposure)
    kzt = topographic_factor(inputs.topography)
    q = velocity_pressure(inputs.height, inputs.wind_speed, inputs.exposure, inputs.topography)

    surfaces = _mwfrs_surfaces(inputs, q) if inputs.mode == "mwfrs" else _cc_surfaces(q)
    max_pressure = max((abs(s.pressure) for s in surfaces), default=0.0)
    total_force = total_wind_force(surfaces, inputs.mode)

    results = [
        LoadResult("Design Wind Speed", inputs.wind_speed, "m/s", "Reference wind speed, V"),
        LoadResult(
            "Exposure Coefficient", kz, "",
            f"Kz, exposure {inputs.exposure} ({exposure.name})",
            f"Kz = ({inputs.height}/10)^(2 × {exposure.alpha}) = {kz:.3f}",
        ),
        LoadResult("Topographic Factor", kzt, "", f"Kzt, {inputs.topography} topography"),
        LoadResult("Directionality Factor", DIRECTIONALITY_FACTOR, "", "Kd"),
        LoadResult(
            "Velocity Pressure", q, "kN/m²", "q = 0.613 Kz Kzt Kd V² / 1000",
            f"q = 0.613 × {kz:.3f} × {kzt} × {DIRECTIONALITY_FACTOR} × {inputs.wind_speed}² / 1000"
            f" = {q:.3f} kN/m²",
        ),
    ]
    for s in surfaces:
        results.append(
            LoadResult(
                s.surface, s.pressure, "kN/m²", s.description,
                f"p = {q:.3f} × {s.coefficient} = {s.pressure:.3f} kN/m², "
                f"F = {s.force:.1f} kN over {s.area:g} m²",
            )
        )
    results.append(LoadResult("Maximum Pressure", max_pressure, "kN/m²", "Largest |p| on any surface"))
    results.append(
        LoadResult(
            "Total Wind Force", total_force, "kN",
            "Windward + |leeward|" if inputs.mode == "mwfrs" else "Largest |F| on one component",
        )
    )

    return WindAnalysis(
        velocity_pressure=q,
        surfaces=tuple(surfaces),
        max_pressure=max_pressure,
        total_force=total_force,
        results=tuple(results),
    )
