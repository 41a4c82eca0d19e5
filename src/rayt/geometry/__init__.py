"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, the shared HitInfo record and ray-sphere
        intersection
    rect: Axis-aligned rectangle primitive on the XY, XZ or YZ plane

All intersection routines are Taichi functions with the signature:
    hit_<shape>(ray_origin, ray_direction, shape_data, t_min, t_max) -> HitInfo
"""

from .rect import PLANE_AXIS, Plane, RectData, hit_rect
from .sphere import HitInfo, SphereData, hit_sphere, make_miss

__all__ = [
    "HitInfo",
    "make_miss",
    "SphereData",
    "hit_sphere",
    "Plane",
    "PLANE_AXIS",
    "RectData",
    "hit_rect",
]
