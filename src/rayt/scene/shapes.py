"""Shape descriptions.

Shapes are immutable Python objects that describe the scene graph:

- ``Sphere`` and ``Rect`` are primitives with a material.
- ``Box`` is the union of six rectangles with outward normals.
- ``FlipFace`` wraps another shape and negates its reported normals.
- ``ShapeList`` is an ordered composite.

Kernels never see this hierarchy. ``flatten`` turns any shape into the
ordered sequence of primitives (with their accumulated flip state) that the
scene uploads; scanning that sequence with a shrinking upper bound returns
the same nearest hit as recursing through the composites, including the
earliest-scanned-wins rule for equal t.

Example:
    >>> from rayt.materials import Lambertian
    >>> from rayt.scene.shapes import Box, FlipFace, Rect, ShapeList, Sphere
    >>> from rayt.geometry.rect import Plane
    >>> white = Lambertian(albedo=(0.73, 0.73, 0.73))
    >>> world = ShapeList([
    ...     Sphere(center=(0.0, 0.0, -1.0), radius=0.5, material=white),
    ...     FlipFace(Rect(Plane.XZ, -5.0, 5.0, -5.0, 5.0, 3.0, white)),
    ...     Box((0.0, 0.0, 0.0), (1.0, 1.0, 1.0), white),
    ... ])
"""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Union

import numpy as np

from rayt.geometry.rect import PLANE_AXIS, Plane
from rayt.materials.material import Material, Vec3Tuple, as_color

Shape = Union["Sphere", "Rect", "Box", "FlipFace", "ShapeList"]
Primitive = Union["Sphere", "Rect"]


def _check_material(material: Material) -> None:
    if not isinstance(material, Material):
        raise TypeError(f"Expected a Material, got {type(material).__name__}")


@dataclass(frozen=True, eq=False)
class Sphere:
    """A sphere primitive.

    The reported normal is (point - center) / radius, outward-facing.

    Attributes:
        center: Center point.
        radius: Radius (positive).
        material: Material shared by reference.
    """

    center: Vec3Tuple
    radius: float
    material: Material

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", as_color(self.center, "center"))
        radius = float(self.radius)
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        object.__setattr__(self, "radius", radius)
        _check_material(self.material)

    def flatten(self, flip: bool = False) -> Iterator[tuple[Primitive, bool]]:
        yield self, flip


@dataclass(frozen=True, eq=False)
class Rect:
    """An axis-aligned rectangle.

    Args:
        plane: Plane.XY, Plane.XZ or Plane.YZ (or the matching int/name).
        a0, a1: Bounds along the first in-plane axis (reordered if reversed).
        b0, b1: Bounds along the second in-plane axis (reordered if reversed).
        k: Value of the fixed coordinate.
        material: Material shared by reference.
        normal: Normal reported for every hit. Defaults to the positive
            direction of the fixed axis; a given normal is normalized.
    """

    plane: Plane
    a0: float
    a1: float
    b0: float
    b1: float
    k: float
    material: Material
    normal: Vec3Tuple | None = None

    def __post_init__(self) -> None:
        try:
            plane = Plane[self.plane.upper()] if isinstance(self.plane, str) else Plane(self.plane)
        except (KeyError, ValueError) as e:
            raise ValueError(f"Unknown rectangle plane: {self.plane!r}") from e
        object.__setattr__(self, "plane", plane)

        a0, a1 = sorted((float(self.a0), float(self.a1)))
        b0, b1 = sorted((float(self.b0), float(self.b1)))
        object.__setattr__(self, "a0", a0)
        object.__setattr__(self, "a1", a1)
        object.__setattr__(self, "b0", b0)
        object.__setattr__(self, "b1", b1)
        object.__setattr__(self, "k", float(self.k))

        if self.normal is None:
            normal = [0.0, 0.0, 0.0]
            normal[PLANE_AXIS[plane]] = 1.0
        else:
            n = np.asarray(as_color(self.normal, "normal"))
            norm = np.linalg.norm(n)
            if norm == 0.0:
                raise ValueError("Rectangle normal must be non-zero")
            normal = n / norm
        object.__setattr__(self, "normal", (float(normal[0]), float(normal[1]), float(normal[2])))
        _check_material(self.material)

    def flatten(self, flip: bool = False) -> Iterator[tuple[Primitive, bool]]:
        yield self, flip


@dataclass(frozen=True, eq=False)
class FlipFace:
    """Decorator that negates the normals reported by the wrapped shape."""

    shape: Shape

    def flatten(self, flip: bool = False) -> Iterator[tuple[Primitive, bool]]:
        yield from self.shape.flatten(not flip)


@dataclass(eq=False)
class ShapeList:
    """Ordered composite of shapes.

    Mutable only while the scene is being built; the scene treats it as
    read-only once activated.
    """

    shapes: list = field(default_factory=list)

    def __post_init__(self) -> None:
        self.shapes = list(self.shapes)

    def add(self, shape: Shape) -> "ShapeList":
        """Append a shape and return self."""
        self.shapes.append(shape)
        return self

    push = add

    def extend(self, shapes: Iterable[Shape]) -> "ShapeList":
        """Append several shapes and return self."""
        self.shapes.extend(shapes)
        return self

    def __len__(self) -> int:
        return len(self.shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self.shapes)

    def flatten(self, flip: bool = False) -> Iterator[tuple[Primitive, bool]]:
        for shape in self.shapes:
            yield from shape.flatten(flip)


class Box:
    """Axis-aligned box made of six rectangles.

    Faces on the maximum side of each axis use the positive axis normal; the
    faces on the minimum side are wrapped in FlipFace, so every face normal
    points out of the box.

    Args:
        p0: One corner.
        p1: The opposite corner.
        material: Material applied to all six faces.
    """

    def __init__(self, p0: Sequence[float], p1: Sequence[float], material: Material) -> None:
        _check_material(material)
        c0 = as_color(p0, "p0")
        c1 = as_color(p1, "p1")
        self.box_min: Vec3Tuple = tuple(min(a, b) for a, b in zip(c0, c1))
        self.box_max: Vec3Tuple = tuple(max(a, b) for a, b in zip(c0, c1))
        self.material = material

        (x0, y0, z0), (x1, y1, z1) = self.box_min, self.box_max
        self.sides = ShapeList(
            [
                Rect(Plane.XY, x0, x1, y0, y1, z1, material),
                FlipFace(Rect(Plane.XY, x0, x1, y0, y1, z0, material)),
                Rect(Plane.XZ, x0, x1, z0, z1, y1, material),
                FlipFace(Rect(Plane.XZ, x0, x1, z0, z1, y0, material)),
                Rect(Plane.YZ, y0, y1, z0, z1, x1, material),
                FlipFace(Rect(Plane.YZ, y0, y1, z0, z1, x0, material)),
            ]
        )

    def flatten(self, flip: bool = False) -> Iterator[tuple[Primitive, bool]]:
        yield from self.sides.flatten(flip)

    def __repr__(self) -> str:
        return f"Box(box_min={self.box_min}, box_max={self.box_max}, material={self.material!r})"


def iter_materials(shape: Shape) -> Iterator[Material]:
    """Yield the material of every primitive in scan order (with repeats)."""
    for primitive, _ in shape.flatten():
        yield primitive.material
