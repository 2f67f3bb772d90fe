"""Earthquakes Canada CanSHM GraphQL client (NBC 2020 site designations)."""

from __future__ import annotations

import logging
from typing import Any

from requests import Session

from nbc_loads.config import CANSHM_GRAPHQL_URL
from nbc_loads.http import create_session

logger = logging.getLogger(__name__)

_DESIGNATION_FIELDS = """
        sa0p05
        sa0p1
        sa0p2
        sa0p3
        sa0p5
        sa1p0
        sa2p0
        sa5p0
        sa10p0
        poe50
        foe
        pga
        pgv"""

_POINT_FIELDS = """
      geometry {
        type
        coordinates
      }
      metadata {
        projX
        projY
        zones
      }"""

SITE_CLASS_QUERY = f"""
  query GetSeismicDataBySiteClass($latitude: Float!, $longitude: Float!, $siteClass: CanSHM6SiteClass!, $poe50: [Float!]) {{
    NBC2020(latitude: $latitude, longitude: $longitude) {{{_POINT_FIELDS}
      siteDesignationsXs(siteClass: $siteClass, poe50: $poe50) {{{_DESIGNATION_FIELDS}
      }}
    }}
  }}
"""

VS30_QUERY = f"""
  query GetSeismicDataByVs30($latitude: Float!, $longitude: Float!, $vs30: Float!, $poe50: [Float!]) {{
    NBC2020(latitude: $latitude, longitude: $longitude) {{{_POINT_FIELDS}
      siteDesignationsXv(vs30: $vs30, poe50: $poe50) {{{_DESIGNATION_FIELDS}
        vs30
      }}
    }}
  }}
"""


class HazardServiceError(Exception):
    """The hazard service answered, but without usable site designations."""


def _post_query(
    query: str,
    variables: dict[str, Any],
    designation_key: str,
    session: Session,
    timeout: int,
    url: str,
) -> tuple[dict, list[dict]]:
    resp = session.post(
        url,
        json={"query": query, "variables": variables},
        timeout=timeout,
    )
    resp.raise_for_status()
    payload = resp.json()
    if not isinstance(payload, dict):
        raise HazardServiceError(f"Expected a JSON object, got {type(payload).__name__}")

    errors = payload.get("errors")
    if errors:
        if not isinstance(errors, list):
            errors = [errors]
        messages = "; ".join(
            str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
        )
        raise HazardServiceError(f"GraphQL errors: {messages}")

    data = payload.get("data")
    point = data.get("NBC2020") if isinstance(data, dict) else None
    if not isinstance(point, dict) or not point:
        raise HazardServiceError("No NBC2020 data in response")

    designations = point.get(designation_key)
    if not isinstance(designations, list) or not designations:
        raise HazardServiceError(f"No {designation_key} for this location")
    if not all(isinstance(d, dict) for d in designations):
        raise HazardServiceError(f"Malformed entry in {designation_key}")

    logger.debug("%s returned %d designations", designation_key, len(designations))
    return point, designations


def fetch_by_site_class(
    latitude: float,
    longitude: float,
    site_class: str,
    poe50: list[float],
    session: Session | None = None,
    timeout: int = 15,
    url: str = CANSHM_GRAPHQL_URL,
) -> tuple[dict, list[dict]]:
    """Query site designations for a site class (A-E).

    Returns:
        (point, designations): the NBC2020 point (geometry, metadata) and
        its non-empty ``siteDesignationsXs`` list.

    Raises:
        HazardServiceError: the response carries no usable designations.
        requests.RequestException: transport or HTTP status failure.
    """
    if session is None:
        session = create_session()
    variables = {
        "latitude": latitude,
        "longitude": longitude,
        "siteClass": site_class,
        "poe50": poe50,
    }
    return _post_query(
        SITE_CLASS_QUERY, variables, "siteDesignationsXs", session, timeout, url
    )


def fetch_by_vs30(
    latitude: float,
    longitude: float,
    vs30: float,
    poe50: list[float],
    session: Session | None = None,
    timeout: int = 15,
    url: str = CANSHM_GRAPHQL_URL,
) -> tuple[dict, list[dict]]:
    """Query site designations for a numeric Vs30 (m/s).

    Same contract as :func:`fetch_by_site_class`, reading
    ``siteDesignationsXv``.
    """
    if session is None:
        session = create_session()
    variables = {
        "latitude": latitude,
        "longitude": longitude,
        "vs30": vs30,
        "poe50": poe50,
    }
    return _post_query(VS30_QUERY, variables, "siteDesignationsXv", session, timeout, url)
