"""Axis-aligned rectangle primitive.

A rectangle lies on one of three canonical planes at a fixed value ``k`` of
the remaining coordinate and spans ``[a0, a1] x [b0, b1]`` in the two
in-plane coordinates:

=========  ==========  =====  =====
plane      fixed (k)   a      b
=========  ==========  =====  =====
XY         z           x      y
XZ         y           x      z
YZ         x           y      z
=========  ==========  =====  =====

The normal is stored per rectangle rather than derived, since the side a
rectangle faces is a property of the scene (for example the inward-facing
walls of an enclosure).
"""

from enum import IntEnum

import taichi as ti

from rayt.core.vector import real, vec3
from rayt.geometry.sphere import HitInfo

# Rays whose direction component along the plane axis is at most this are
# treated as parallel to the plane
PARALLEL_EPSILON = 1e-12


class Plane(IntEnum):
    """Canonical plane of an axis-aligned rectangle."""

    XY = 0
    XZ = 1
    YZ = 2


# Index of the fixed axis for each plane
PLANE_AXIS = {Plane.XY: 2, Plane.XZ: 1, Plane.YZ: 0}


@ti.dataclass
class RectData:
    """An axis-aligned rectangle.

    Attributes:
        plane: The Plane value as an integer.
        a0, a1: Bounds along the first in-plane axis, a0 <= a1.
        b0, b1: Bounds along the second in-plane axis, b0 <= b1.
        k: Value of the fixed coordinate.
        normal: Unit normal reported for every hit.
    """

    plane: ti.i32
    a0: real
    a1: real
    b0: real
    b1: real
    k: real
    normal: vec3


@ti.func
def hit_rect(
    ray_origin: vec3,
    ray_direction: vec3,
    rect: RectData,
    t_min: real,
    t_max: real,
) -> HitInfo:
    """Intersect a ray with an axis-aligned rectangle.

    Solves for t where the ray's fixed coordinate equals rect.k, rejects t
    outside (t_min, t_max), then tests the in-plane coordinates against the
    closed bounds.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray.
        rect: The rectangle to test.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        A HitInfo carrying rect.normal, with material_id = -1.
    """
    # Project the ray onto (fixed, a, b) coordinates of the plane
    o_k = ray_origin.z
    d_k = ray_direction.z
    o_a = ray_origin.x
    d_a = ray_direction.x
    o_b = ray_origin.y
    d_b = ray_direction.y

    if rect.plane == int(Plane.XZ):
        o_k = ray_origin.y
        d_k = ray_direction.y
        o_b = ray_origin.z
        d_b = ray_direction.z
    elif rect.plane == int(Plane.YZ):
        o_k = ray_origin.x
        d_k = ray_direction.x
        o_a = ray_origin.y
        d_a = ray_direction.y
        o_b = ray_origin.z
        d_b = ray_direction.z

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)

    if ti.abs(d_k) > PARALLEL_EPSILON:
        t = (rect.k - o_k) / d_k
        if t > t_min and t < t_max:
            a = o_a + t * d_a
            b = o_b + t * d_b
            if a >= rect.a0 and a <= rect.a1 and b >= rect.b0 and b <= rect.b1:
                did_hit = 1
                hit_t = t
                hit_point = ray_origin + t * ray_direction

    return HitInfo(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=rect.normal,
        material_id=-1,
    )
