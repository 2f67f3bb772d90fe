"""Configuration model for hazard resolution and load calculations."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from nbc_loads import __version__

PeriodFormula = Literal["standard", "spectral"]

CANSHM_GRAPHQL_URL = "https://www.earthquakescanada.nrcan.gc.ca/api/canshm/graphql"
NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"


class NbcLoadsConfig(BaseSettings):
    """All configurable parameters for hazard lookups and load engines.

    Values can be set via constructor arguments, environment variables
    prefixed with NBC_LOADS_, or defaults.
    """

    model_config = {"env_prefix": "NBC_LOADS_"}

    hazard_api_url: str = Field(
        default=CANSHM_GRAPHQL_URL, description="CanSHM GraphQL endpoint."
    )
    geocoder_url: str = Field(
        default=NOMINATIM_SEARCH_URL, description="Nominatim search endpoint."
    )
    request_timeout: int = Field(
        default=15, ge=1, le=300, description="HTTP request timeout in seconds."
    )
    reference_return_period: int = Field(
        default=2475, gt=0, description="Return period (years) used to pick a hazard record."
    )
    fallback_tolerance_deg: float = Field(
        default=0.1, gt=0.0, description="Max lat/lon offset (degrees) for a fallback anchor."
    )
    period_formula: PeriodFormula = Field(
        default="standard",
        description="Fundamental period formula: 'standard' (0.1 h^0.75) or 'spectral' (0.05 h^0.75).",
    )
    irregularity_amplification: bool = Field(
        default=False,
        description="Amplify base shear by 1.5 when the building is flagged irregular.",
    )
    user_agent: str = Field(
        default=f"nbc-loads/{__version__}", description="User-Agent sent to the geocoder."
    )
