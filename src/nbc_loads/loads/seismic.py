"""Equivalent static force procedure, NBC 2020 Article 4.1.8.11 (simplified)."""

from __future__ import annotations

import logging

from nbc_loads.config import PeriodFormula
from nbc_loads.models import (
    LoadResult,
    SeismicAnalysis,
    SeismicInputs,
    StructuralSystem,
)

logger = logging.getLogger(__name__)

# Site coefficients by site class; softer soils amplify more.
FA_BY_SITE_CLASS: dict[str, float] = {"A": 0.8, "B": 1.0, "C": 1.2, "D": 1.6, "E": 2.5}
FV_BY_SITE_CLASS: dict[str, float] = {"A": 0.8, "B": 1.0, "C": 1.8, "D": 2.4, "E": 3.5}

SEISMIC_IMPORTANCE_FACTORS: dict[str, float] = {
    "low": 0.8,
    "normal": 1.0,
    "high": 1.3,
    "post-disaster": 1.5,
}

# Ta = coefficient * hn^0.75. Both variants are in use; neither is
# preferred without the governing code edition at hand.
PERIOD_COEFFICIENTS: dict[str, float] = {"standard": 0.1, "spectral": 0.05}

IRREGULARITY_FACTOR = 1.5
MINIMUM_BASE_SHEAR_RATIO = 0.005

STRUCTURAL_SYSTEMS: tuple[StructuralSystem, ...] = (
    StructuralSystem("Steel Moment Frame - Ductile", "Steel", 5.0, 1.5,
                     "Ductile moment-resisting frame", 60, "Ductile"),
    StructuralSystem("Steel Moment Frame - Limited Ductility", "Steel", 3.5, 1.3,
                     "Limited ductility moment frame", 40, "Limited"),
    StructuralSystem("Steel Braced Frame - Ductile", "Steel", 4.0, 1.5,
                     "Ductile concentrically braced frame", 60, "Ductile"),
    StructuralSystem("Steel Braced Frame - Limited Ductility", "Steel", 2.0, 1.3,
                     "Limited ductility braced frame", 40, "Limited"),
    StructuralSystem("RC Moment Frame - Ductile", "Concrete", 4.0, 1.6,
                     "Ductile reinforced concrete moment frame", 60, "Ductile"),
    StructuralSystem("RC Shear Wall - Ductile", "Concrete", 3.5, 1.6,
                     "Ductile reinforced concrete shear wall", 60, "Ductile"),
    StructuralSystem("RC Shear Wall - Moderate Ductility", "Concrete", 2.0, 1.4,
                     "Moderate ductility shear wall", 40, "Moderate"),
    StructuralSystem("Wood Frame - Conventional", "Wood", 3.0, 1.7,
                     "Conventional wood frame construction", 15, "Moderate"),
    StructuralSystem("Wood Shear Wall", "Wood", 2.0, 1.5,
                     "Wood structural panel shear wall", 20, "Limited"),
    StructuralSystem("Masonry Shear Wall - Ductile", "Masonry", 2.0, 1.5,
                     "Ductile reinforced masonry shear wall", 40, "Ductile"),
    StructuralSystem("Unreinforced Masonry", "Masonry", 1.0, 1.0,
                     "Unreinforced masonry bearing wall", 15, "Limited"),
)


def get_structural_system(name: str) -> StructuralSystem:
    """Look up a structural system by name. Raises KeyError if unknown."""
    for system in STRUCTURAL_SYSTEMS:
        if system.name == name:
            return system
    raise KeyError(name)


def systems_by_category(category: str) -> list[StructuralSystem]:
    return [s for s in STRUCTURAL_SYSTEMS if s.category == category]


def site_coefficients(site_class: str) -> tuple[float, float]:
    """(Fa, Fv) for a site class."""
    return FA_BY_SITE_CLASS[site_class], FV_BY_SITE_CLASS[site_class]


def design_spectral_accelerations(
    site_class: str, sa_0p2: float, sa_1p0: float,
) -> tuple[float, float]:
    """S(0.2) = 2/3 Fa Sa(0.2) and S(1.0) = 2/3 Fv Sa(1.0)."""
    fa, fv = site_coefficients(site_class)
    return (2 / 3) * fa * sa_0p2, (2 / 3) * fv * sa_1p0


def fundamental_period(height: float, formula: PeriodFormula = "standard") -> float:
    """Approximate fundamental period Ta (s) for a building height in metres."""
    return PERIOD_COEFFICIENTS[formula] * height**0.75


def design_spectrum(period: float, s_0p2: float, s_1p0: float) -> float:
    """Design spectrum ordinate S(T) from the two design accelerations.

    Plateau at S(0.2) up to 0.2 s, linear between 0.2 s and 1.0 s, and
    S(1.0)/T beyond 1.0 s.
    """
    if period <= 0.2:
        return s_0p2
    if period < 1.0:
        return s_0p2 + (s_1p0 - s_0p2) * (period - 0.2) / 0.8
    return s_1p0 / period


def minimum_base_shear(s_1p0: float, ie: float, weight: float, rd: float, ro: float) -> float:
    """Lower bound on design base shear for long-period structures."""
    return max(MINIMUM_BASE_SHEAR_RATIO * weight, s_1p0 * ie * weight / (rd * ro))


def irregularity_factor(vertical: bool, horizontal: bool, enabled: bool) -> float:
    if enabled and (vertical or horizontal):
        return IRREGULARITY_FACTOR
    return 1.0


def compute_seismic_loads(
    inputs: SeismicInputs,
    period_formula: PeriodFormula = "standard",
    irregularity_amplification: bool = False,
) -> SeismicAnalysis:
    """Design spectral values, period, and design base shear.

    V = S(0.2) Ie W / (Rd Ro), floored at max(0.005 W, S(1.0) Ie W / (Rd Ro)).
    When ``irregularity_amplification`` is on, the design value is scaled
    by 1.5 for buildings flagged with a vertical or horizontal irregularity.
    """
    system = get_structural_system(inputs.structural_system)
    if inputs.height > system.height_limit:
        logger.warning(
            "%s is limited to %.0f m; building height is %.1f m",
            system.name, system.height_limit, inputs.height,
        )

    fa, fv = site_coefficients(inputs.site_class)
    s_0p2, s_1p0 = design_spectral_accelerations(inputs.site_class, inputs.sa_0p2, inputs.sa_1p0)
    ie = SEISMIC_IMPORTANCE_FACTORS[inputs.importance]
    ta = fundamental_period(inputs.height, period_formula)
    s_ta = design_spectrum(ta, s_0p2, s_1p0)

    w = inputs.weight
    rd_ro = system.rd * system.ro
    v = s_0p2 * ie * w / rd_ro
    v_min = minimum_base_shear(s_1p0, ie, w, system.rd, system.ro)
    factor = irregularity_factor(
        inputs.vertical_irregularity, inputs.horizontal_irregularity, irregularity_amplification
    )
    v_design = max(v, v_min) * factor

    coefficient = PERIOD_COEFFICIENTS[period_formula]
    results = [
        LoadResult("Peak Ground Acceleration", inputs.pga, "g", "PGA at the site"),
        LoadResult(
            "Site Coefficients", fa, "",
            f"Fa = {fa}, Fv = {fv} for site class {inputs.site_class}",
        ),
        LoadResult(
            "Site-Modified Spectral Acceleration (0.2s)", s_0p2, "g",
            "Design spectral acceleration at 0.2s period",
            f"S(0.2) = (2/3) × {fa} × {inputs.sa_0p2:.3f} = {s_0p2:.3f}",
        ),
        LoadResult(
            "Site-Modified Spectral Acceleration (1.0s)", s_1p0, "g",
            "Design spectral acceleration at 1.0s period",
            f"S(1.0) = (2/3) × {fv} × {inputs.sa_1p0:.3f} = {s_1p0:.3f}",
        ),
        LoadResult(
            "Fundamental Period", ta, "s", "Approximate fundamental period of the structure",
            f"Ta = {coefficient} × {inputs.height}^0.75 = {ta:.3f} s",
        ),
        LoadResult(
            "Design Spectral Acceleration S(Ta)", s_ta, "g",
            "Design spectrum ordinate at the fundamental period",
        ),
        LoadResult(
            "Importance Factor", ie, "", "Seismic importance factor",
            f"Ie = {ie} ({inputs.importance} importance)",
        ),
        LoadResult(
            "Force Modification Factors", rd_ro, "",
            f"Rd × Ro for {system.name}",
            f"Rd × Ro = {system.rd} × {system.ro} = {rd_ro:.2f}",
        ),
        LoadResult(
            "Minimum Base Shear", v_min, "kN", "Lower bound on design base shear",
            f"Vmin = max(0.005 × {w}, {s_1p0:.3f} × {ie} × {w} / {rd_ro:.2f}) = {v_min:.1f} kN",
        ),
    ]
    if irregularity_amplification:
        results.append(
            LoadResult("Irregularity Factor", factor, "", "Amplification for irregular buildings")
        )
    results.append(
        LoadResult(
            "Base Shear", v_design, "kN", "Design base shear force",
            f"V = max({v:.1f}, {v_min:.1f}) × {factor} = {v_design:.1f} kN"
            if irregularity_amplification
            else f"V = max({v:.1f}, {v_min:.1f}) = {v_design:.1f} kN",
        )
    )

    return SeismicAnalysis(
        fa=fa,
        fv=fv,
        s_0p2=s_0p2,
        s_1p0=s_1p0,
        importance_factor=ie,
        period=ta,
        spectral_ordinate=s_ta,
        base_shear=v,
        minimum_base_shear=v_min,
        irregularity_factor=factor,
        design_base_shear=v_design,
        results=tuple(results),
    )
