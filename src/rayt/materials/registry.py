"""Material table and type dispatch.

Every material used by the active scene occupies one slot of a unified table
holding its type tag, its color (albedo for reflective materials, emission
for lights) and its fuzz. Kernels look materials up by this arena index and
branch on the tag, calling exactly one scatter implementation per hit.

Example:
    >>> from rayt.materials.registry import add_material, clear_materials
    >>> from rayt.materials.lambertian import Lambertian
    >>> clear_materials()
    >>> red_id = add_material(Lambertian(albedo=(0.65, 0.05, 0.05)))
"""

import taichi as ti

from rayt.core.vector import real, vec3
from rayt.materials.diffuse_light import DiffuseLight
from rayt.materials.lambertian import Lambertian, scatter_lambertian
from rayt.materials.material import Material, MaterialType
from rayt.materials.metal import Metal, scatter_metal

# Maximum number of materials in the table
MAX_MATERIALS = 1024

material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_colors = ti.Vector.field(3, dtype=real, shape=MAX_MATERIALS)
material_fuzz = ti.field(dtype=real, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear the material table.

    Resets the count to zero. Stale slots are overwritten by later adds.
    """
    num_materials[None] = 0


def add_material(material: Material) -> int:
    """Append a material to the table.

    Args:
        material: A Lambertian, Metal or DiffuseLight instance.

    Returns:
        The arena index of the material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        TypeError: If the material type is not supported.
    """
    if isinstance(material, Lambertian):
        color, fuzz = material.albedo, 0.0
    elif isinstance(material, Metal):
        color, fuzz = material.albedo, material.fuzz
    elif isinstance(material, DiffuseLight):
        color, fuzz = material.emission, 0.0
    else:
        raise TypeError(f"Unsupported material type: {type(material).__name__}")

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_types[idx] = int(material.material_type)
    material_colors[idx] = list(color)
    material_fuzz[idx] = fuzz
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the table."""
    return int(num_materials[None])


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the type tag of a material by arena index."""
    return material_types[material_id]


@ti.func
def scatter_material(material_id: ti.i32, incident_direction: vec3, normal: vec3):
    """Dispatch to the scatter function of a material.

    Args:
        material_id: Arena index of the hit material.
        incident_direction: The incoming ray direction.
        normal: The unit surface normal at the hit.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). The
        scattered ray starts at the hit point. Lights never scatter.
    """
    mat_type = material_types[material_id]
    albedo = material_colors[material_id]

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered_direction, attenuation = scatter_lambertian(albedo, normal)
        did_scatter = 1
    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter = scatter_metal(
            albedo, material_fuzz[material_id], incident_direction, normal
        )

    return scattered_direction, attenuation, did_scatter


@ti.func
def emitted_material(material_id: ti.i32) -> vec3:
    """Emitted radiance of a material; zero for non-emitters."""
    emission = vec3(0.0, 0.0, 0.0)
    if material_types[material_id] == int(MaterialType.DIFFUSE_LIGHT):
        emission = material_colors[material_id]
    return emission
