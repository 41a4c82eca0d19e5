"""Scene-level primitive storage and nearest-hit search.

Primitives live in Structure-of-Arrays Taichi fields. A unified primitive
table records, in scan order, each primitive's kind, its index into the
sphere or rectangle table, whether its normal is flipped and its material
arena index. ``intersect_scene`` walks that table front to back, shrinking the
upper bound of the search interval to the best t found so far, which makes it
return the nearest hit and keep the earliest-scanned primitive on exact ties.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.scene.intersection import add_sphere, clear_scene, intersect_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti

from rayt.core.device import device_lock
from rayt.core.vector import real, vec3
from rayt.geometry.rect import RectData, hit_rect
from rayt.geometry.sphere import HitInfo, SphereData, hit_sphere, make_miss


class PrimitiveKind(IntEnum):
    """Kind tag of an entry in the primitive table."""

    SPHERE = 0
    RECT = 1


# Maximum number of primitives supported in the scene
MAX_SPHERES = 1024
MAX_RECTS = 1024
MAX_PRIMITIVES = MAX_SPHERES + MAX_RECTS

# Sphere storage
sphere_centers = ti.Vector.field(3, dtype=real, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=real, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Rectangle storage
rect_planes = ti.field(dtype=ti.i32, shape=MAX_RECTS)
rect_bounds = ti.Vector.field(4, dtype=real, shape=MAX_RECTS)  # a0, a1, b0, b1
rect_k = ti.field(dtype=real, shape=MAX_RECTS)
rect_normals = ti.Vector.field(3, dtype=real, shape=MAX_RECTS)
num_rects = ti.field(dtype=ti.i32, shape=())

# Primitive table in scan order
primitive_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
primitive_indices = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
primitive_flips = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
primitive_material_ids = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
num_primitives = ti.field(dtype=ti.i32, shape=())

# Radiance returned for rays that escape the scene
scene_background = ti.Vector.field(3, dtype=real, shape=())

# Bumped by every clear_scene(); a Scene whose upload predates the current
# generation is no longer in the tables
_table_generation = 0


def clear_scene() -> None:
    """Remove all primitives and reset the background to black.

    Any Scene uploaded before the call stops being active and re-uploads on
    its next use.
    """
    global _table_generation
    with device_lock:
        num_spheres[None] = 0
        num_rects[None] = 0
        num_primitives[None] = 0
        scene_background[None] = [0.0, 0.0, 0.0]
        _table_generation += 1


def get_table_generation() -> int:
    """Number of times the primitive tables have been cleared."""
    return _table_generation


def set_background(color: tuple[float, float, float]) -> None:
    """Set the radiance returned for rays that hit nothing."""
    scene_background[None] = [float(color[0]), float(color[1]), float(color[2])]


def get_background() -> tuple[float, float, float]:
    """Get the current background color."""
    bg = scene_background[None]
    return (float(bg[0]), float(bg[1]), float(bg[2]))


def _add_primitive(kind: PrimitiveKind, index: int, material_id: int, flip: bool) -> int:
    idx = num_primitives[None]
    if idx >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    primitive_kinds[idx] = int(kind)
    primitive_indices[idx] = index
    primitive_flips[idx] = 1 if flip else 0
    primitive_material_ids[idx] = material_id
    num_primitives[None] = idx + 1
    return idx


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material_id: int = 0,
    flip: bool = False,
) -> int:
    """Append a sphere to the scan order.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: Arena index of the sphere's material.
        flip: Negate the reported normal.

    Returns:
        The index of the primitive in scan order.

    Raises:
        RuntimeError: If the maximum number of spheres or primitives is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [float(c) for c in center]
    sphere_radii[idx] = radius
    num_spheres[None] = idx + 1
    return _add_primitive(PrimitiveKind.SPHERE, idx, material_id, flip)


def add_rect(
    plane: int,
    a0: float,
    a1: float,
    b0: float,
    b1: float,
    k: float,
    normal: tuple[float, float, float],
    material_id: int = 0,
    flip: bool = False,
) -> int:
    """Append an axis-aligned rectangle to the scan order.

    Args:
        plane: The Plane value of the rectangle.
        a0, a1, b0, b1: In-plane bounds with a0 <= a1 and b0 <= b1.
        k: Value of the fixed coordinate.
        normal: Unit normal reported for hits.
        material_id: Arena index of the rectangle's material.
        flip: Negate the reported normal.

    Returns:
        The index of the primitive in scan order.

    Raises:
        RuntimeError: If the maximum number of rectangles or primitives is exceeded.
    """
    idx = num_rects[None]
    if idx >= MAX_RECTS:
        raise RuntimeError(f"Maximum number of rectangles ({MAX_RECTS}) exceeded")
    rect_planes[idx] = int(plane)
    rect_bounds[idx] = [a0, a1, b0, b1]
    rect_k[idx] = k
    rect_normals[idx] = [float(c) for c in normal]
    num_rects[None] = idx + 1
    return _add_primitive(PrimitiveKind.RECT, idx, material_id, flip)


def get_primitive_count() -> int:
    """Get the number of primitives in the scan order."""
    return int(num_primitives[None])


@ti.func
def get_background_color() -> vec3:
    """Background radiance for escaped rays."""
    return scene_background[None]


@ti.func
def _hit_primitive(p: ti.i32, ray_origin: vec3, ray_direction: vec3, t_min: real, t_max: real) -> HitInfo:
    idx = primitive_indices[p]
    rec = make_miss()
    if primitive_kinds[p] == int(PrimitiveKind.SPHERE):
        sphere = SphereData(center=sphere_centers[idx], radius=sphere_radii[idx])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
    else:
        bounds = rect_bounds[idx]
        rect = RectData(
            plane=rect_planes[idx],
            a0=bounds[0],
            a1=bounds[1],
            b0=bounds[2],
            b1=bounds[3],
            k=rect_k[idx],
            normal=rect_normals[idx],
        )
        rec = hit_rect(ray_origin, ray_direction, rect, t_min, t_max)
    return rec


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: real,
    t_max: real,
) -> HitInfo:
    """Find the nearest primitive hit in (t_min, t_max).

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        The closest HitInfo with its material_id and flipped normal applied,
        or a miss record.
    """
    closest_t = t_max
    result = make_miss()

    for p in range(num_primitives[None]):
        rec = _hit_primitive(p, ray_origin, ray_direction, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            normal = rec.normal
            if primitive_flips[p] == 1:
                normal = -normal
            result = HitInfo(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=normal,
                material_id=primitive_material_ids[p],
            )

    return result
