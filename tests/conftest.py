"""Shared fixtures for nbc_loads tests."""

from __future__ import annotations

import copy

import pytest

from nbc_loads.config import NbcLoadsConfig
from nbc_loads.models import SeismicInputs, SnowInputs, WindInputs

_METADATA = {"projX": 7198540.3, "projY": 1143011.9, "zones": ["CAN", "ECC"]}

_DESIGNATION = {
    "sa0p05": 0.412,
    "sa0p1": 0.478,
    "sa0p2": 0.404,
    "sa0p3": 0.321,
    "sa0p5": 0.228,
    "sa1p0": 0.121,
    "sa2p0": 0.058,
    "sa5p0": None,
    "poe50": 2.0,
    "foe": None,
    "pga": 0.229,
    "pgv": 0.178,
}


@pytest.fixture
def config() -> NbcLoadsConfig:
    return NbcLoadsConfig(request_timeout=5)


@pytest.fixture
def site_class_payload() -> dict:
    """CanSHM response for a siteDesignationsXs query (sa10p0 absent, sa5p0 null)."""
    return {
        "data": {
            "NBC2020": {
                "geometry": {"type": "Point", "coordinates": [-75.6972, 45.4215]},
                "metadata": copy.deepcopy(_METADATA),
                "siteDesignationsXs": [dict(_DESIGNATION)],
            }
        }
    }


@pytest.fixture
def vs30_payload() -> dict:
    """CanSHM response for a siteDesignationsXv query."""
    designation = dict(_DESIGNATION, sa0p2=0.512, sa1p0=0.144, vs30=[560.0])
    return {
        "data": {
            "NBC2020": {
                "geometry": {"type": "Point", "coordinates": [-75.6972, 45.4215]},
                "metadata": copy.deepcopy(_METADATA),
                "siteDesignationsXv": [designation],
            }
        }
    }


@pytest.fixture
def multi_period_payload() -> dict:
    """Three designations at 2%, 5% and 10% in 50 years."""
    designations = [
        dict(_DESIGNATION, poe50=10.0, sa0p2=0.15),
        dict(_DESIGNATION, poe50=5.0, sa0p2=0.25),
        dict(_DESIGNATION, poe50=2.0, sa0p2=0.404),
    ]
    return {
        "data": {
            "NBC2020": {
                "geometry": {"type": "Point", "coordinates": [-75.6972, 45.4215]},
                "metadata": copy.deepcopy(_METADATA),
                "siteDesignationsXs": designations,
            }
        }
    }


@pytest.fixture
def snow_inputs() -> SnowInputs:
    """20 m x 15 m flat roof, 6 m high, Ss = 2.0 kPa, Sr = 0.4 kPa."""
    return SnowInputs(ground_snow_load=2.0, rain_load=0.4)


@pytest.fixture
def wind_inputs() -> WindInputs:
    """Exposure B, 10 m high, V = 30 m/s."""
    return WindInputs(wind_speed=30.0, length=30.0, width=20.0, height=10.0, exposure="B")


@pytest.fixture
def seismic_inputs() -> SeismicInputs:
    """Five-storey ductile steel moment frame on site class C (Toronto-like hazard)."""
    return SeismicInputs(
        site_class="C",
        sa_0p2=0.55,
        sa_1p0=0.12,
        weight=10000.0,
        height=20.0,
        structural_system="Steel Moment Frame - Ductile",
        pga=0.21,
        floors=5,
    )
