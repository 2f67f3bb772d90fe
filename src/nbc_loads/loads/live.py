"""Specified live loads by occupancy, with tributary area reduction (NBC 4.1.5)."""

from __future__ import annotations

from dataclasses import dataclass

from nbc_loads.models import LiveLoadArea, LoadResult, Occupancy

OCCUPANCY_TYPES: tuple[Occupancy, ...] = (
    Occupancy("A1", "Assembly - Fixed Seating", "Assembly", 2.4,
              "Theatres, churches, auditoriums with fixed seating", True, 1.3,
              ("Movie theatre", "Church sanctuary", "Concert hall")),
    Occupancy("A2", "Assembly - Movable Seating", "Assembly", 4.8,
              "Assembly areas with movable seating", True, 1.3,
              ("Banquet hall", "Conference room", "Gym with bleachers")),
    Occupancy("A3", "Assembly - Without Seating", "Assembly", 4.8,
              "Assembly areas without fixed seating", True, 1.3,
              ("Dance floor", "Lobby", "Museum gallery")),
    Occupancy("B1", "Care or Detention", "Institutional", 1.9,
              "Hospitals, nursing homes, detention facilities", True, 1.3,
              ("Hospital room", "Nursing home", "Prison cell")),
    Occupancy("C", "Residential", "Residential", 1.9,
              "Dwelling units, hotel rooms, dormitories", True, 1.8,
              ("Apartment", "Hotel room", "House", "Dormitory")),
    Occupancy("D", "Business and Personal Services", "Commercial", 2.4,
              "Offices, banks, professional services", True, 1.3,
              ("Office space", "Bank", "Medical clinic", "Hair salon")),
    Occupancy("E", "Mercantile", "Commercial", 4.8,
              "Retail stores, shops, markets", True, 1.3,
              ("Retail store", "Shopping mall", "Grocery store")),
    Occupancy("F1", "Industrial - Low Hazard", "Industrial", 6.0,
              "Light manufacturing, low hazard industrial", False, 4.5,
              ("Electronics assembly", "Food processing", "Textile mill")),
    Occupancy("F2", "Industrial - Medium Hazard", "Industrial", 12.0,
              "Heavy manufacturing, medium hazard industrial", False, 9.0,
              ("Auto assembly", "Heavy machinery", "Chemical plant")),
)


@dataclass(frozen=True)
class SpecialOccupancy:
    name: str
    load: float  # kN/m²
    description: str


SPECIAL_OCCUPANCIES: tuple[SpecialOccupancy, ...] = (
    SpecialOccupancy("Corridors and Lobbies", 4.8,
                     "Same as occupancy served but not less than 4.8 kN/m²"),
    SpecialOccupancy("Stairs and Exits", 4.8, "4.8 kN/m² minimum for egress components"),
    SpecialOccupancy("Storage Areas", 6.0,
                     "6.0 kN/m² or actual anticipated load, whichever is greater"),
    SpecialOccupancy("Parking Garages", 2.4, "2.4 kN/m² for passenger cars, 3.6 kN/m² for trucks"),
)

REDUCTION_THRESHOLD_AREA = 20.0  # m²
MAX_REDUCTION_PERCENT = 40.0


def get_occupancy(code: str) -> Occupancy:
    """Look up an occupancy by code. Raises KeyError if unknown."""
    for occupancy in OCCUPANCY_TYPES:
        if occupancy.code == code:
            return occupancy
    raise KeyError(code)


def get_special_occupancy(name: str) -> SpecialOccupancy:
    """Look up a special occupancy by name, ignoring case. Raises KeyError if unknown."""
    for special in SPECIAL_OCCUPANCIES:
        if special.name.lower() == name.strip().lower():
            return special
    raise KeyError(name)


def live_load_reduction(occupancy: Occupancy, tributary_area: float) -> float:
    """Reduction in percent: 0.5% per m² beyond 20 m², capped at 40%."""
    if not occupancy.reduction_allowed or tributary_area < REDUCTION_THRESHOLD_AREA:
        return 0.0
    return min(MAX_REDUCTION_PERCENT, (tributary_area - REDUCTION_THRESHOLD_AREA) * 0.5)


def compute_live_load_area(
    name: str,
    area: float,
    occupancy: Occupancy,
    tributary_area: float | None = None,
    custom_load: float | None = None,
    special: SpecialOccupancy | None = None,
) -> LiveLoadArea:
    """Reduced live load for one area. The tributary area defaults to the area itself.

    A special occupancy (corridor, stair, storage, parking) sets a floor
    on the base load before any reduction.
    """
    trib = tributary_area if tributary_area else area
    reduction = live_load_reduction(occupancy, trib)
    base = custom_load if custom_load is not None else occupancy.uniform_load
    if special is not None:
        base = max(base, special.load)
    final = base * (1 - reduction / 100)
    return LiveLoadArea(
        name=name,
        area=area,
        occupancy_code=occupancy.code,
        tributary_area=trib,
        reduction=reduction,
        base_load=base,
        final_load=final,
        total_load=final * area,
        special=special.name if special is not None else None,
    )


def live_load_results(areas: list[LiveLoadArea]) -> list[LoadResult]:
    """Display lines for each area plus the building total."""
    results = [
        LoadResult(
            a.name, a.final_load, "kN/m²",
            f"Occupancy {a.occupancy_code}"
            + (f" ({a.special})" if a.special else "")
            + f", {a.area:g} m²",
            f"{a.base_load} × (1 - {a.reduction:.1f}/100) = {a.final_load:.2f} kN/m²; "
            f"× {a.area:g} m² = {a.total_load:.1f} kN",
        )
        for a in areas
    ]
    results.append(
        LoadResult("Total Live Load", sum(a.total_load for a in areas), "kN", "Sum over all areas")
    )
    return results
