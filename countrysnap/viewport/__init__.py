"""
Viewport - Projection and camera framing for the world map.
"""

from .projection import Bounds, WorldProjection, natural_earth_raw
from .framer import (
    CameraTransform, WORLD_OVERVIEW, MIN_SCALE, MAX_SCALE,
    zoom_scale, frame_bounds, frame_shape, camera_for,
)

__all__ = [
    "Bounds",
    "WorldProjection",
    "natural_earth_raw",
    "CameraTransform",
    "WORLD_OVERVIEW",
    "MIN_SCALE",
    "MAX_SCALE",
    "zoom_scale",
    "frame_bounds",
    "frame_shape",
    "camera_for",
]
