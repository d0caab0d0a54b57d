"""
Viewport Framer - Computes the camera transform that frames a shape.

The transform is applied as: translate to the canvas centre, scale, then
translate by the negated shape centre. The engine only computes target
transforms; animating towards them is the renderer's job.
"""

from __future__ import annotations
from dataclasses import dataclass
import math

from .projection import Bounds, WorldProjection
from ..engine_core.state import GameState, RoundStatus


PADDING = 0.85  # Leaves 15% of the canvas around the shape
MIN_SCALE = 1.0
MAX_SCALE = 50.0

FRAMED_STATUSES = {RoundStatus.PLAYING, RoundStatus.SUCCESS, RoundStatus.FAILURE}


@dataclass(frozen=True)
class CameraTransform:
    """Uniform zoom plus translation, in canvas units."""
    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0

    def apply(self, x: float, y: float) -> tuple[float, float]:
        """Map a projected point to its on-screen position."""
        return self.translate_x + self.scale * x, self.translate_y + self.scale * y


WORLD_OVERVIEW = CameraTransform(translate_x=0.0, translate_y=0.0, scale=1.0)


def zoom_scale(dx: float, dy: float, width: float, height: float) -> float:
    """
    Scale that fits a dx by dy box into the canvas with padding.

    A degenerate box (zero extent) zooms to MAX_SCALE.
    """
    ratio = max(dx / width, dy / height)
    if not math.isfinite(ratio) or ratio <= 0:
        return MAX_SCALE
    return min(MAX_SCALE, max(MIN_SCALE, PADDING / ratio))


def frame_bounds(bounds: Bounds, width: float, height: float) -> CameraTransform:
    """Centre and zoom on a projected bounding box."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Canvas must have positive size, got {width}x{height}")

    scale = zoom_scale(bounds.width, bounds.height, width, height)
    cx, cy = bounds.center
    return CameraTransform(
        translate_x=width / 2 - scale * cx,
        translate_y=height / 2 - scale * cy,
        scale=scale,
    )


def frame_shape(
    geometry,
    width: float,
    height: float,
    projection: WorldProjection | None = None,
) -> CameraTransform:
    """Frame a lon/lat geometry using the world projection for this canvas."""
    projection = projection or WorldProjection(width=width, height=height)
    return frame_bounds(projection.bounds(geometry), width, height)


def camera_for(
    state: GameState,
    width: float,
    height: float,
    projection: WorldProjection | None = None,
) -> CameraTransform:
    """
    Target camera for the current state.

    Only an active round in playing or resolved status is framed; menus
    and the loading pause show the whole world.
    """
    target = state.target
    if target is None or state.status not in FRAMED_STATUSES:
        return WORLD_OVERVIEW
    return frame_shape(target.shape.geometry, width, height, projection)
