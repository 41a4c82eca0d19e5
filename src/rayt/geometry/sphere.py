"""Sphere primitive with robust ray-sphere intersection.

This module provides the ``HitInfo`` record shared by all primitives, the
``SphereData`` struct and ``hit_sphere``. Roots of the intersection quadratic
are computed without catastrophic cancellation (one root from q, the other
from c / q), which stays accurate when b^2 is nearly equal to 4ac.

The reported normal is ``(point - center) / radius``: unit length and
outward-facing. It is not flipped toward the ray, so a ray starting inside
the sphere sees a normal pointing along its own direction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.geometry.sphere import SphereData, hit_sphere
    >>> from rayt.core.vector import vec3
    >>> @ti.kernel
    ... def first_hit() -> ti.f64:
    ...     sphere = SphereData(center=vec3(0.0, 0.0, 0.0), radius=1.0)
    ...     rec = hit_sphere(vec3(0.0, 0.0, -5.0), vec3(0.0, 0.0, 1.0), sphere, 0.001, 1e10)
    ...     return rec.t  # 4.0
"""

import taichi as ti
import taichi.math as tm

from rayt.core.vector import real, vec3


@ti.dataclass
class SphereData:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    center: vec3
    radius: real


@ti.dataclass
class HitInfo:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray intersected the primitive, 0 on a miss. The other
            fields are only meaningful when hit == 1.
        t: The ray parameter of the intersection.
        point: The world-space intersection point.
        normal: Unit surface normal, following the primitive's convention.
        material_id: Index into the material table, -1 if not assigned.
    """

    hit: ti.i32
    t: real
    point: vec3
    normal: vec3
    material_id: ti.i32


@ti.func
def make_miss() -> HitInfo:
    """Create a HitInfo indicating no intersection."""
    return HitInfo(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def _sphere_roots(half_b: real, a: real, c: real, root_disc: real):
    """Both roots of a*t^2 + 2*half_b*t + c = 0, smallest first.

    One root comes from q = -(half_b + sign(half_b) * root_disc) and the other
    from Vieta's c / q, so neither subtracts two nearly equal values.
    """
    q = -half_b - ti.select(half_b < 0.0, -root_disc, root_disc)

    near = 0.0
    far = 0.0
    if ti.abs(q) < 1e-12:
        near = (-half_b - root_disc) / a
        far = (-half_b + root_disc) / a
    else:
        near = ti.min(q / a, c / q)
        far = ti.max(q / a, c / q)
    return near, far


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: SphereData,
    t_min: real,
    t_max: real,
) -> HitInfo:
    """Find the nearest intersection of a ray with a sphere in (t_min, t_max).

    With oc = origin - center the ray meets the sphere where
    a*t^2 + 2*half_b*t + c = 0 for a = |direction|^2, half_b = direction . oc
    and c = |oc|^2 - radius^2. The smaller root wins when it lies strictly
    inside the interval; otherwise the larger one is tried. A tangent ray
    (zero discriminant) counts as a hit.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (need not be normalized).
        sphere: The sphere to test.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        A HitInfo with material_id = -1; the caller assigns the material.
    """
    rec = make_miss()

    oc = ray_origin - sphere.center
    a = tm.dot(ray_direction, ray_direction)
    half_b = tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    disc = half_b * half_b - a * c

    if disc >= 0.0:
        near, far = _sphere_roots(half_b, a, c, ti.sqrt(disc))
        root = near
        if root <= t_min or root >= t_max:
            root = far
        if root > t_min and root < t_max:
            point = ray_origin + root * ray_direction
            rec.hit = 1
            rec.t = root
            rec.point = point
            rec.normal = (point - sphere.center) / sphere.radius

    return rec
