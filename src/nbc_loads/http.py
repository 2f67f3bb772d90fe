"""Shared HTTP session with retry/backoff."""

from __future__ import annotations

from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def create_session(
    retries: int = 2,
    backoff_factor: float = 0.5,
    status_forcelist: tuple[int, ...] = (429, 500, 502, 503, 504),
    user_agent: str | None = None,
) -> Session:
    """Create a requests Session with exponential backoff retry.

    Retries only GET requests (geocoder lookups). Hazard queries are
    GraphQL POSTs, so each resolver stage hits the network exactly once
    and a failure falls straight through to the next stage.
    """
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session = Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    if user_agent:
        session.headers["User-Agent"] = user_agent
    return session
