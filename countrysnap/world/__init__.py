"""
World - Collaborators that supply shapes and per-country facts.

Both talk to remote services over HTTP. The engine only sees GeoShape and
CountryFacts records and never waits on these directly.
"""

from .catalog import (
    CatalogUnavailable, WorldCatalogProvider, GeoJsonCatalog, StaticCatalog, CachedCatalog,
    shapes_from_geojson,
)
from .facts import FactsUnavailable, CountryFactsProvider, RestCountriesFacts, facts_from_payload

__all__ = [
    "CatalogUnavailable",
    "WorldCatalogProvider",
    "GeoJsonCatalog",
    "StaticCatalog",
    "CachedCatalog",
    "shapes_from_geojson",
    "FactsUnavailable",
    "CountryFactsProvider",
    "RestCountriesFacts",
    "facts_from_payload",
]
