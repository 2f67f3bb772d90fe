"""Per-city climatic design data (snow, rain, wind pressure) loaded from CSV."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)

_REQUIRED_COLUMNS = ("location", "province", "ss", "sr", "q50")


@dataclass(frozen=True)
class ClimateRecord:
    """Climatic design values for one location."""

    location: str
    province: str
    ss: float  # ground snow load, kPa
    sr: float  # associated rain load, kPa
    q50: float  # 1-in-50 hourly wind pressure, kPa
    q10: float | None = None
    elevation: float | None = None


def _optional(value: object) -> float | None:
    return float(value) if pd.notna(value) else None  # type: ignore[arg-type]


def load_climate_table(path: Path | str) -> dict[str, ClimateRecord]:
    """Read a climate CSV into records keyed by location name.

    Required columns: location, province, ss, sr, q50. Optional: q10,
    elevation. Rows missing a required value are skipped.
    """
    df = pd.read_csv(path)
    missing = [c for c in _REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Climate table {path} is missing columns: {', '.join(missing)}")

    complete = df.dropna(subset=list(_REQUIRED_COLUMNS))
    skipped = len(df) - len(complete)
    if skipped:
        logger.warning("Skipped %d incomplete rows in %s", skipped, path)

    table: dict[str, ClimateRecord] = {}
    for _, row in complete.iterrows():
        table[str(row["location"])] = ClimateRecord(
            location=str(row["location"]),
            province=str(row["province"]),
            ss=float(row["ss"]),
            sr=float(row["sr"]),
            q50=float(row["q50"]),
            q10=_optional(row.get("q10")),
            elevation=_optional(row.get("elevation")),
        )
    logger.debug("Loaded %d climate records from %s", len(table), path)
    return table


def wind_speed_from_pressure(pressure_kpa: float) -> float:
    """Reference wind speed (m/s) for a velocity pressure, from q = 0.613 V^2 / 1000."""
    return math.sqrt(pressure_kpa * 1000 / 0.613)
