"""
World Catalog - Loads country outlines once at startup.

Reads a GeoJSON FeatureCollection from a URL or a local file and turns
each feature into a GeoShape. Playability filtering happens in the engine
when the catalog is loaded into state.
"""

from __future__ import annotations
import json
import logging
import threading
from pathlib import Path
from typing import Any, Protocol

import requests
from shapely.errors import ShapelyError
from shapely.geometry import shape as to_geometry

from ..engine_core.state import GeoShape


logger = logging.getLogger(__name__)


class CatalogUnavailable(Exception):
    """The world boundary data could not be loaded."""


class WorldCatalogProvider(Protocol):
    def load(self) -> list[GeoShape]:
        ...


def shapes_from_geojson(collection: dict[str, Any]) -> list[GeoShape]:
    """
    Convert a FeatureCollection into shapes.

    The id may sit on the feature or in its properties. Features without
    a name or a readable geometry are skipped.
    """
    features = collection.get("features")
    if not isinstance(features, list):
        raise CatalogUnavailable("GeoJSON has no feature list")

    shapes = []
    for feature in features:
        properties = feature.get("properties") or {}
        name = (properties.get("name") or "").strip()
        geometry_data = feature.get("geometry")
        if not name or not geometry_data:
            continue

        try:
            geometry = to_geometry(geometry_data)
        except (ShapelyError, ValueError, TypeError, AttributeError, KeyError) as e:
            logger.debug("Skipping %s: unreadable geometry (%s)", name, e)
            continue

        shape_id = feature.get("id") or properties.get("id")
        shapes.append(GeoShape(
            shape_id=str(shape_id) if shape_id else None,
            name=name,
            geometry=geometry,
        ))
    return shapes


class GeoJsonCatalog:
    """
    Catalog backed by a GeoJSON document.

    Usage:
        catalog = GeoJsonCatalog(Config.WORLD_URL)
        shapes = catalog.load()
    """

    def __init__(
        self,
        source: str | Path,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.source = str(source)
        self.timeout = timeout
        self.session = session or requests.Session()

    def load(self) -> list[GeoShape]:
        collection = self._read()
        shapes = shapes_from_geojson(collection)
        logger.info("Loaded %d shapes from %s", len(shapes), self.source)
        return shapes

    def _read(self) -> dict[str, Any]:
        if self.source.startswith(("http://", "https://")):
            try:
                resp = self.session.get(self.source, timeout=self.timeout)
                resp.raise_for_status()
                return resp.json()
            except (requests.exceptions.RequestException, ValueError) as e:
                raise CatalogUnavailable(f"Failed to load map data: {e}") from e

        try:
            with open(Path(self.source).expanduser(), "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise CatalogUnavailable(f"Failed to load map data: {e}") from e


class StaticCatalog:
    """Catalog over an in-memory list of shapes."""

    def __init__(self, shapes: list[GeoShape]):
        self.shapes = list(shapes)

    def load(self) -> list[GeoShape]:
        return list(self.shapes)


class CachedCatalog:
    """
    Loads the wrapped catalog once and reuses the shapes.

    Failed loads are not cached, so a later game can retry.
    """

    def __init__(self, provider: WorldCatalogProvider):
        self.provider = provider
        self._shapes: list[GeoShape] | None = None
        self._lock = threading.Lock()

    def load(self) -> list[GeoShape]:
        with self._lock:
            if self._shapes is None:
                self._shapes = self.provider.load()
            return list(self._shapes)
