"""Data models for hazard resolution and load calculations."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

SiteClass = Literal["A", "B", "C", "D", "E"]
ImportanceCategory = Literal["low", "normal", "high", "post-disaster"]
Provenance = Literal["remote", "fallback-nearest", "fallback-generic"]
RemoteStrategy = Literal["site-class", "vs30"]
Terrain = Literal["open", "rural", "exposed_north"]
Exposure = Literal["A", "B", "C", "D"]
Topography = Literal["normal", "other"]
RoofType = Literal["flat", "gable", "hip"]
WindMode = Literal["mwfrs", "cc"]

# Named spectral periods carried by every HazardRecord, with the
# CanSHM field each one is read from.
GROUND_MOTION_FIELDS: dict[str, str] = {
    "PGA": "pga",
    "PGV": "pgv",
    "0.05s": "sa0p05",
    "0.1s": "sa0p1",
    "0.2s": "sa0p2",
    "0.3s": "sa0p3",
    "0.5s": "sa0p5",
    "1.0s": "sa1p0",
    "2.0s": "sa2p0",
    "5.0s": "sa5p0",
    "10.0s": "sa10p0",
}


@dataclass(frozen=True)
class HazardQuery:
    """A request for site hazard parameters at a geographic point."""

    latitude: float
    longitude: float
    site_class: SiteClass = "C"
    return_periods: tuple[float, ...] = (2475.0,)


@dataclass(frozen=True)
class HazardRecord:
    """Seismic hazard values for one location and return period.

    ``ground_motion`` maps a named period ("0.2s", "1.0s", "PGA", ...)
    to g, or m/s for PGV. Every name in GROUND_MOTION_FIELDS is present.
    The record keeps its own copy of the mapping; treat it as read-only.
    """

    location: str
    latitude: float
    longitude: float
    ground_motion: Mapping[str, float]
    return_period: int
    site_class: str
    vs30: float
    soil_velocity_profile: tuple[float, ...] = ()
    zones: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "ground_motion", dict(self.ground_motion))

    @property
    def pga(self) -> float:
        return self.ground_motion["PGA"]

    @property
    def sa_0p2(self) -> float:
        return self.ground_motion["0.2s"]

    @property
    def sa_1p0(self) -> float:
        return self.ground_motion["1.0s"]


@dataclass(frozen=True)
class Resolved:
    """A HazardRecord tagged with where it came from.

    Only ``provenance == "remote"`` is authoritative; the fallback
    variants are approximations and should be shown as such.
    """

    record: HazardRecord
    provenance: Provenance
    strategy: RemoteStrategy | None = None

    @property
    def is_approximate(self) -> bool:
        return self.provenance != "remote"


@dataclass(frozen=True)
class LocationCatalogEntry:
    """A static reference point (quick-pick city and fallback anchor)."""

    name: str
    latitude: float
    longitude: float
    province: str = ""


@dataclass(frozen=True)
class LoadResult:
    """One displayed line of a calculation: inputs, factors, final values."""

    parameter: str
    value: float
    unit: str
    description: str
    calculation: str | None = None


@dataclass(frozen=True)
class StructuralSystem:
    """Seismic force resisting system with its force modification factors."""

    name: str
    category: str
    rd: float
    ro: float
    description: str
    height_limit: float  # m
    ductility: Literal["Limited", "Moderate", "Ductile"]


@dataclass(frozen=True)
class SnowInputs:
    """Site and roof parameters for the balanced snow load."""

    ground_snow_load: float  # Ss, kPa
    rain_load: float  # Sr, kPa
    length: float = 20.0  # m
    width: float = 15.0  # m
    slope: float = 0.0  # degrees
    height: float = 6.0  # m above ground
    slippery: bool = False
    terrain: Terrain = "open"
    importance: ImportanceCategory = "normal"


@dataclass(frozen=True)
class SnowFactors:
    """Intermediate factors of the snow load cascade."""

    gamma: float
    lc: float
    cw: float
    cb: float
    cs: float
    ca: float
    is_uls: float
    is_sls: float


@dataclass(frozen=True)
class SnowAnalysis:
    factors: SnowFactors
    uls: float  # kPa
    sls: float  # kPa
    results: tuple[LoadResult, ...]


@dataclass(frozen=True)
class WindInputs:
    """Building and site parameters for wind pressures."""

    wind_speed: float  # m/s
    length: float = 30.0  # m
    width: float = 20.0  # m
    height: float = 12.0  # m
    exposure: Exposure = "B"
    topography: Topography = "normal"
    roof_type: RoofType = "flat"
    mode: WindMode = "mwfrs"


@dataclass(frozen=True)
class WindSurfaceResult:
    """Pressure and force on one surface or component zone."""

    id: str
    surface: str
    coefficient: float
    pressure: float  # kN/m²
    area: float  # m²
    force: float  # kN
    description: str


@dataclass(frozen=True)
class WindAnalysis:
    velocity_pressure: float  # kN/m²
    surfaces: tuple[WindSurfaceResult, ...]
    max_pressure: float
    total_force: float
    results: tuple[LoadResult, ...]


@dataclass(frozen=True)
class SeismicInputs:
    """Building parameters for the equivalent static force procedure."""

    site_class: SiteClass
    sa_0p2: float  # g
    sa_1p0: float  # g
    weight: float  # kN
    height: float  # m
    structural_system: str
    importance: ImportanceCategory = "normal"
    pga: float = 0.0  # g
    floors: int = 1
    vertical_irregularity: bool = False
    horizontal_irregularity: bool = False


@dataclass(frozen=True)
class SeismicAnalysis:
    fa: float
    fv: float
    s_0p2: float  # g, design
    s_1p0: float  # g, design
    importance_factor: float
    period: float  # s
    spectral_ordinate: float  # g, S(Ta)
    base_shear: float  # kN, before the floor
    minimum_base_shear: float  # kN
    irregularity_factor: float
    design_base_shear: float  # kN
    results: tuple[LoadResult, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Material:
    """A dead load material: an area load (kPa) or a unit weight (kN/m3)."""

    name: str
    value: float
    units: Literal["kPa", "kN/m3"]
    category: str = "Custom"


@dataclass(frozen=True)
class AssemblyLayer:
    material: Material
    thickness_mm: float | None  # only for kN/m3 materials
    load: float  # kPa


@dataclass(frozen=True)
class DeadLoadAnalysis:
    layers: tuple[AssemblyLayer, ...]
    total: float  # kPa
    results: tuple[LoadResult, ...]


@dataclass(frozen=True)
class Occupancy:
    """Occupancy classification with its specified uniform live load."""

    code: str
    name: str
    category: str
    uniform_load: float  # kN/m²
    description: str
    reduction_allowed: bool
    concentrated_load: float | None = None  # kN
    examples: tuple[str, ...] = ()


@dataclass(frozen=True)
class LiveLoadArea:
    """A floor area with its reduced live load."""

    name: str
    area: float  # m²
    occupancy_code: str
    tributary_area: float  # m²
    reduction: float  # percent
    base_load: float  # kN/m²
    final_load: float  # kN/m²
    total_load: float  # kN
    special: str | None = None
