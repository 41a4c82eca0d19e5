"""Scene descriptions as plain dictionaries.

A description has three keys:

- ``background``: RGB list.
- ``materials``: list of material dicts (``{"type": "lambertian", "albedo":
  [...]}``, ``{"type": "metal", "albedo": [...], "fuzz": f}``,
  ``{"type": "diffuse_light", "emission": [...]}``).
- ``shapes``: list of shape dicts. Primitives and boxes reference materials
  by index, so sharing survives a round trip. Supported types are
  ``sphere``, ``rect``, ``box``, ``flip`` (with a nested ``shape``) and
  ``list`` (with nested ``shapes``).

The dicts are JSON-compatible.
"""

from typing import Any

from rayt.geometry.rect import Plane
from rayt.materials.diffuse_light import DiffuseLight
from rayt.materials.lambertian import Lambertian
from rayt.materials.material import Material
from rayt.materials.metal import Metal
from rayt.scene.scene import Scene
from rayt.scene.shapes import Box, FlipFace, Rect, Shape, ShapeList, Sphere

_MATERIAL_TYPES: dict[str, type[Material]] = {
    Lambertian.type_name: Lambertian,
    Metal.type_name: Metal,
    DiffuseLight.type_name: DiffuseLight,
}


def material_from_dict(data: dict[str, Any]) -> Material:
    """Build a material from its description.

    Raises:
        ValueError: If the type is unknown or parameters are invalid.
    """
    data = dict(data)
    type_name = data.pop("type", None)
    material_cls = _MATERIAL_TYPES.get(type_name)
    if material_cls is None:
        raise ValueError(f"Unknown material type: {type_name!r}")
    try:
        return material_cls(**data)
    except TypeError as e:
        raise ValueError(f"Invalid {type_name} material: {e}") from e


def _shape_to_dict(shape: Shape, material_index: dict[int, int]) -> dict[str, Any]:
    if isinstance(shape, Sphere):
        return {
            "type": "sphere",
            "center": list(shape.center),
            "radius": shape.radius,
            "material": material_index[id(shape.material)],
        }
    if isinstance(shape, Rect):
        return {
            "type": "rect",
            "plane": shape.plane.name,
            "a0": shape.a0,
            "a1": shape.a1,
            "b0": shape.b0,
            "b1": shape.b1,
            "k": shape.k,
            "normal": list(shape.normal),
            "material": material_index[id(shape.material)],
        }
    if isinstance(shape, Box):
        return {
            "type": "box",
            "p0": list(shape.box_min),
            "p1": list(shape.box_max),
            "material": material_index[id(shape.material)],
        }
    if isinstance(shape, FlipFace):
        return {"type": "flip", "shape": _shape_to_dict(shape.shape, material_index)}
    if isinstance(shape, ShapeList):
        return {"type": "list", "shapes": [_shape_to_dict(s, material_index) for s in shape]}
    raise TypeError(f"Unsupported shape: {type(shape).__name__}")


def scene_to_dict(scene: Scene) -> dict[str, Any]:
    """Describe a scene as a JSON-compatible dictionary."""
    materials = scene.materials
    material_index = {id(m): i for i, m in enumerate(materials)}
    return {
        "background": list(scene.background),
        "materials": [m.to_dict() for m in materials],
        "shapes": [_shape_to_dict(shape, material_index) for shape in scene.root],
    }


def _lookup_material(data: dict[str, Any], materials: list[Material]) -> Material:
    index = data.get("material")
    if not isinstance(index, int) or not 0 <= index < len(materials):
        raise ValueError(f"Invalid material index {index!r} in {data.get('type')} shape")
    return materials[index]


def _shape_from_dict(data: dict[str, Any], materials: list[Material]) -> Shape:
    shape_type = data.get("type")
    if shape_type == "sphere":
        return Sphere(data["center"], data["radius"], _lookup_material(data, materials))
    if shape_type == "rect":
        return Rect(
            data["plane"],
            data["a0"],
            data["a1"],
            data["b0"],
            data["b1"],
            data["k"],
            _lookup_material(data, materials),
            normal=data.get("normal"),
        )
    if shape_type == "box":
        return Box(data["p0"], data["p1"], _lookup_material(data, materials))
    if shape_type == "flip":
        return FlipFace(_shape_from_dict(data["shape"], materials))
    if shape_type == "list":
        return ShapeList([_shape_from_dict(s, materials) for s in data["shapes"]])
    raise ValueError(f"Unknown shape type: {shape_type!r}")


def scene_from_dict(data: dict[str, Any]) -> Scene:
    """Rebuild a scene from scene_to_dict() output.

    Raises:
        ValueError: If the description is malformed.
    """
    try:
        materials = [material_from_dict(m) for m in data.get("materials", [])]
        shapes = [_shape_from_dict(s, materials) for s in data.get("shapes", [])]
    except KeyError as e:
        raise ValueError(f"Missing field in scene description: {e}") from e
    return Scene(shapes, background=data.get("background", (0.0, 0.0, 0.0)))
