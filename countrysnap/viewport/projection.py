"""
World projection used for both the full map and framing.

Natural Earth I, scaled to a sixth of the canvas width and centred on the
canvas, with y growing downwards like screen space. The projection object
is owned by whoever renders and is passed alongside the shape.
"""

from __future__ import annotations
from dataclasses import dataclass

import numpy as np
import shapely


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned box in projected (canvas) units."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        return (self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2


def natural_earth_raw(lam: np.ndarray, phi: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Natural Earth I polynomial (Savric et al.), radians in, unit plane out."""
    phi2 = phi * phi
    phi4 = phi2 * phi2
    x = lam * (0.8707 - 0.131979 * phi2 + phi4 * (-0.013791 + phi4 * (0.003971 * phi2 - 0.001529 * phi4)))
    y = phi * (1.007226 + phi2 * (0.015085 + phi4 * (-0.044475 + 0.028874 * phi2 - 0.005916 * phi4)))
    return x, y


@dataclass(frozen=True)
class WorldProjection:
    """
    Projection for a canvas of the given size.

    Usage:
        projection = WorldProjection(width=1280, height=720)
        bounds = projection.bounds(shape.geometry)
    """
    width: float
    height: float
    scale: float | None = None

    @property
    def k(self) -> float:
        return self.scale if self.scale is not None else self.width / 6

    def project(self, lon, lat) -> tuple[np.ndarray, np.ndarray]:
        """Project lon/lat degrees to canvas coordinates."""
        lam = np.radians(np.asarray(lon, dtype=float))
        phi = np.radians(np.asarray(lat, dtype=float))
        x, y = natural_earth_raw(lam, phi)
        return self.width / 2 + self.k * x, self.height / 2 - self.k * y

    def bounds(self, geometry) -> Bounds:
        """Projected bounding box of every vertex of the geometry."""
        coords = shapely.get_coordinates(geometry)
        if len(coords) == 0:
            raise ValueError("Cannot project an empty geometry")

        xs, ys = self.project(coords[:, 0], coords[:, 1])
        return Bounds(
            min_x=float(xs.min()),
            min_y=float(ys.min()),
            max_x=float(xs.max()),
            max_y=float(ys.max()),
        )
