"""Scene container.

A ``Scene`` owns the root ``ShapeList`` and the background color. It is built
once in Python, then uploaded to the Taichi primitive and material tables by
``activate()``. Only one scene is active on the device at a time; render
entry points activate their scene on demand, so switching between scenes is
transparent to callers.

Materials are collected from the shapes in scan order and deduplicated by
identity: a material object shared by many shapes occupies a single slot of
the material table.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.materials import Lambertian
    >>> from rayt.scene.scene import Scene
    >>> from rayt.scene.shapes import Sphere
    >>> grey = Lambertian(albedo=(0.5, 0.5, 0.5))
    >>> scene = Scene([Sphere((0.0, 0.0, 1.0), 0.5, grey)], background=(1.0, 1.0, 1.0))
    >>> hit = scene.hit((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
    >>> hit.material is grey
    True
"""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import taichi as ti

from rayt.core.device import device_lock
from rayt.core.vector import real, vec3
from rayt.materials.material import Material, Vec3Tuple, as_color
from rayt.materials.registry import add_material, clear_materials
from rayt.scene.intersection import (
    add_rect,
    add_sphere,
    clear_scene,
    get_table_generation,
    intersect_scene,
    set_background,
)
from rayt.scene.shapes import Rect, Shape, ShapeList, Sphere

logger = logging.getLogger(__name__)

# Scene whose data is currently in the device tables
_active_scene: "Scene | None" = None


@dataclass(frozen=True)
class HitResult:
    """Nearest intersection found by Scene.hit().

    Attributes:
        t: The ray parameter of the hit.
        point: World-space hit point.
        normal: Unit normal, after any FlipFace wrappers.
        material: The material object attached to the hit shape.
    """

    t: float
    point: Vec3Tuple
    normal: Vec3Tuple
    material: Material


class Scene:
    """Root shape list plus background color.

    Args:
        shapes: A ShapeList or an iterable of shapes. The list is used
            directly, not copied.
        background: Radiance returned for rays that hit nothing.
    """

    def __init__(
        self,
        shapes: ShapeList | Iterable[Shape] | None = None,
        background: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> None:
        if isinstance(shapes, ShapeList):
            self.root = shapes
        else:
            self.root = ShapeList(list(shapes) if shapes is not None else [])
        self.background: Vec3Tuple = as_color(background, "background")
        self._uploaded: tuple | None = None
        self._generation = -1

    def add(self, shape: Shape) -> "Scene":
        """Append a shape to the root list and return self."""
        self.root.add(shape)
        return self

    def primitives(self) -> list:
        """The (primitive, flipped) pairs of the scene in scan order."""
        return list(self.root.flatten())

    @property
    def materials(self) -> list[Material]:
        """Distinct materials in order of first use."""
        seen: dict[int, Material] = {}
        for primitive, _ in self.root.flatten():
            seen.setdefault(id(primitive.material), primitive.material)
        return list(seen.values())

    def _signature(self) -> tuple:
        return (
            self.background,
            tuple((id(primitive), flip) for primitive, flip in self.root.flatten()),
        )

    @property
    def is_active(self) -> bool:
        """Whether the device tables hold this scene's current contents."""
        return (
            _active_scene is self
            and self._generation == get_table_generation()
            and self._uploaded == self._signature()
        )

    def activate(self) -> None:
        """Upload the scene to the device tables if it is not already there.

        Raises:
            RuntimeError: If a primitive or material table overflows.
        """
        with device_lock:
            if not self.is_active:
                self._upload()

    def _upload(self) -> None:
        global _active_scene
        _active_scene = None
        clear_scene()
        clear_materials()

        material_ids: dict[int, int] = {}
        for material in self.materials:
            material_ids[id(material)] = add_material(material)

        count = 0
        for primitive, flip in self.root.flatten():
            material_id = material_ids[id(primitive.material)]
            if isinstance(primitive, Sphere):
                add_sphere(primitive.center, primitive.radius, material_id, flip)
            elif isinstance(primitive, Rect):
                add_rect(
                    int(primitive.plane),
                    primitive.a0,
                    primitive.a1,
                    primitive.b0,
                    primitive.b1,
                    primitive.k,
                    primitive.normal,
                    material_id,
                    flip,
                )
            else:
                raise TypeError(f"Unsupported primitive: {type(primitive).__name__}")
            count += 1

        set_background(self.background)
        self._uploaded = self._signature()
        self._generation = get_table_generation()
        _active_scene = self
        logger.debug(
            "Activated scene with %d primitives and %d materials", count, len(material_ids)
        )

    def hit(
        self,
        origin: Sequence[float],
        direction: Sequence[float],
        t_min: float = 0.0,
        t_max: float = math.inf,
    ) -> HitResult | None:
        """Find the nearest intersection of a ray with the scene.

        Args:
            origin: Ray origin.
            direction: Ray direction (need not be normalized).
            t_min: Exclusive lower bound on t.
            t_max: Exclusive upper bound on t.

        Returns:
            The nearest HitResult, or None if the ray hits nothing.
        """
        with device_lock:
            self.activate()
            _query_hit_kernel(vec3(*origin), vec3(*direction), t_min, t_max)
            if _query_hit[None] == 0:
                return None
            t = float(_query_t[None])
            point = _query_point[None]
            normal = _query_normal[None]
            material_id = int(_query_material_id[None])
        return HitResult(
            t=t,
            point=(float(point[0]), float(point[1]), float(point[2])),
            normal=(float(normal[0]), float(normal[1]), float(normal[2])),
            material=self.materials[material_id],
        )

    def __repr__(self) -> str:
        return (
            f"Scene(primitives={len(self.primitives())}, "
            f"materials={len(self.materials)}, background={self.background})"
        )


def get_active_scene() -> Scene | None:
    """Return the scene currently uploaded to the device tables, if any."""
    return _active_scene


def reset_active_scene() -> None:
    """Forget the active scene so the next activate() uploads again."""
    global _active_scene
    _active_scene = None


# =============================================================================
# Intersection Query
# =============================================================================

_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=real, shape=())
_query_point = ti.Vector.field(3, dtype=real, shape=())
_query_normal = ti.Vector.field(3, dtype=real, shape=())
_query_material_id = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _query_hit_kernel(origin: vec3, direction: vec3, t_min: real, t_max: real):
    # Single-iteration outer loop keeps the primitive scan serial
    for _ in range(1):
        rec = intersect_scene(origin, direction, t_min, t_max)
        _query_hit[None] = rec.hit
        _query_t[None] = rec.t
        _query_point[None] = rec.point
        _query_normal[None] = rec.normal
        _query_material_id[None] = rec.material_id
