"""Balanced roof snow load, NBC 2020 Article 4.1.6.2.

S = Is * [Ss * (Cb * Cw * Cs * Ca) + Sr], evaluated for ULS and SLS.
"""

from __future__ import annotations

import math

from nbc_loads.models import (
    ImportanceCategory,
    LoadResult,
    SnowAnalysis,
    SnowFactors,
    SnowInputs,
    Terrain,
)

# Category -> (ULS, SLS)
SNOW_IMPORTANCE_FACTORS: dict[str, tuple[float, float]] = {
    "low": (0.8, 0.9),
    "normal": (1.0, 0.9),
    "high": (1.15, 0.9),
    "post-disaster": (1.25, 0.9),
}

_REDUCED_CW: dict[str, float] = {"rural": 0.75, "exposed_north": 0.5}


def specific_weight(ss: float) -> float:
    """Specific weight of snow, lesser of 4.0 and 0.43 Ss + 2.2 (kN/m3)."""
    return min(4.0, 0.43 * ss + 2.2)


def characteristic_length(length: float, width: float) -> float:
    """lc = 2w - w^2/l with w the smaller and l the larger plan dimension."""
    w = min(length, width)
    l = max(length, width)  # noqa: E741
    return 2 * w - (w * w) / l


def wind_exposure_factor(terrain: Terrain, importance: ImportanceCategory) -> float:
    """Cw is 1.0 unless a low or normal importance building sits on exposed terrain."""
    if importance in ("low", "normal"):
        return _REDUCED_CW.get(terrain, 1.0)
    return 1.0


def basic_roof_factor(ss: float, height: float, lc: float, cw: float) -> float:
    """Cb for the roof.

    Roofs lower than 1 + Ss/gamma above grade keep Cb = 1.0. Otherwise
    Cb is 0.8 up to lc = 70/Cw^2 and grows exponentially beyond it; the
    two branches meet at the threshold.
    """
    if height < 1 + ss / specific_weight(ss):
        return 1.0
    if lc <= 70 / (cw * cw):
        return 0.8
    return (1 / cw) * (1 - (1 - 0.8 * cw) * math.exp(-(lc * cw * cw - 70) / 100))


def slope_factor(slope: float, slippery: bool) -> float:
    """Cs, linear decay with roof slope in degrees; 0 on steep roofs."""
    if slippery:
        if slope <= 15:
            return 1.0
        if slope <= 60:
            return (60 - slope) / 45
        return 0.0
    if slope <= 30:
        return 1.0
    if slope <= 70:
        return (70 - slope) / 40
    return 0.0


def accumulation_factor() -> float:
    """Ca for the balanced case. Drift and valley accumulation are not modelled."""
    return 1.0


def importance_factors(importance: ImportanceCategory) -> tuple[float, float]:
    """(Is ULS, Is SLS) for an importance category."""
    return SNOW_IMPORTANCE_FACTORS[importance]


def snow_load_zone(ss: float) -> str:
    if ss <= 1.0:
        return "Very Low"
    if ss <= 2.0:
        return "Low"
    if ss <= 3.0:
        return "Moderate"
    if ss <= 4.0:
        return "High"
    return "Very High"


def compute_snow_factors(inputs: SnowInputs) -> SnowFactors:
    ss = inputs.ground_snow_load
    lc = characteristic_length(inputs.length, inputs.width)
    cw = wind_exposure_factor(inputs.terrain, inputs.importance)
    is_uls, is_sls = importance_factors(inputs.importance)
    return SnowFactors(
        gamma=specific_weight(ss),
        lc=lc,
        cw=cw,
        cb=basic_roof_factor(ss, inputs.height, lc, cw),
        cs=slope_factor(inputs.slope, inputs.slippery),
        ca=accumulation_factor(),
        is_uls=is_uls,
        is_sls=is_sls,
    )


def compute_snow_loads(inputs: SnowInputs) -> SnowAnalysis:
    """Run the full cascade and return factors, loads and display lines."""
    f = compute_snow_factors(inputs)
    ss, sr = inputs.ground_snow_load, inputs.rain_load
    product = f.cb * f.cw * f.cs * f.ca

    uls = f.is_uls * (ss * product + sr)
    sls = f.is_sls * (ss * product + sr)

    def _trace(is_: float, total: float) -> str:
        return (
            f"S = {is_:.2f} × [{ss} × ({f.cb:.3f} × {f.cw} × {f.cs:.2f} × {f.ca}) + {sr}]"
            f" = {total:.2f} kPa"
        )

    results = (
        LoadResult("Ground Snow Load", ss, "kPa", "1-in-50 year ground snow load, Ss"),
        LoadResult("Rain Load", sr, "kPa", "Associated 1-in-50 year rain load, Sr"),
        LoadResult(
            "Specific Weight of Snow", f.gamma, "kN/m³", "Lesser of 4.0 and 0.43Ss + 2.2",
            f"γ = min(4.0, 0.43 × {ss} + 2.2) = {f.gamma:.2f} kN/m³",
        ),
        LoadResult(
            "Characteristic Length", f.lc, "m", "lc = 2w - w²/l",
            f"lc = 2 × {min(inputs.length, inputs.width)} - "
            f"{min(inputs.length, inputs.width)}² / {max(inputs.length, inputs.width)}"
            f" = {f.lc:.2f} m",
        ),
        LoadResult("Wind Exposure Factor", f.cw, "", f"Cw for {inputs.terrain} terrain"),
        LoadResult(
            "Basic Roof Snow Load Factor", f.cb, "", "Cb",
            f"threshold 70/Cw² = {70 / (f.cw * f.cw):.2f} m, lc = {f.lc:.2f} m",
        ),
        LoadResult(
            "Slope Factor", f.cs, "",
            f"Cs for a {'slippery' if inputs.slippery else 'regular'} roof at {inputs.slope}°",
        ),
        LoadResult("Accumulation Factor", f.ca, "", "Ca, balanced load case"),
        LoadResult("Importance Factor (ULS)", f.is_uls, "", f"Is, {inputs.importance} importance"),
        LoadResult("Importance Factor (SLS)", f.is_sls, "", f"Is, {inputs.importance} importance"),
        LoadResult("Snow Load (ULS)", uls, "kPa", "Specified roof snow load, ULS", _trace(f.is_uls, uls)),
        LoadResult("Snow Load (SLS)", sls, "kPa", "Specified roof snow load, SLS", _trace(f.is_sls, sls)),
    )
    return SnowAnalysis(factors=f, uls=uls, sls=sls, results=results)
