"""
Country Facts - Flag, capital, region and common name for a shape.

Facts are enrichment only: the game loop turns any failure here into the
minimal fallback record, so nothing raised by this module reaches a player.
"""

from __future__ import annotations
import logging
from typing import Any, Protocol

import requests

from ..engine_core.state import CountryFacts


logger = logging.getLogger(__name__)


class FactsUnavailable(Exception):
    """Facts could not be fetched for a shape."""


class CountryFactsProvider(Protocol):
    def fetch(self, shape_id: str) -> CountryFacts:
        ...


def facts_from_payload(payload: Any) -> CountryFacts:
    """
    Parse a REST Countries response (a list with one country).

    Raises FactsUnavailable on a missing payload or missing common name.
    """
    if isinstance(payload, list):
        payload = payload[0] if payload else None
    if not isinstance(payload, dict):
        raise FactsUnavailable("Empty facts payload")

    name = ((payload.get("name") or {}).get("common") or "").strip()
    if not name:
        raise FactsUnavailable("Facts payload has no common name")

    flags = payload.get("flags") or {}
    capitals = payload.get("capital") or []
    return CountryFacts(
        name=name,
        capital=capitals[0] if capitals else None,
        region=payload.get("region") or None,
        flag=flags.get("svg") or flags.get("png") or None,
    )


class RestCountriesFacts:
    """
    Facts from the REST Countries API, looked up by alpha code.

    Usage:
        facts = RestCountriesFacts(Config.FACTS_URL).fetch("FRA")
    """

    def __init__(
        self,
        base_url: str = "https://restcountries.com/v3.1/alpha",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, shape_id: str) -> CountryFacts:
        url = f"{self.base_url}/{shape_id}"
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise FactsUnavailable(f"Country details not found for {shape_id}: {e}") from e

        return facts_from_payload(payload)
