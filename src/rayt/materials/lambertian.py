"""Lambertian (ideal diffuse) material.

A diffuse surface scatters every incoming ray. The outgoing direction is the
surface normal plus a random point inside the unit sphere, which biases
directions around the normal; the attenuation is the albedo.

Example:
    >>> from rayt.materials.lambertian import Lambertian
    >>> white = Lambertian(albedo=(0.73, 0.73, 0.73))
"""

from dataclasses import dataclass

import taichi as ti

from rayt.core.vector import near_zero, random_in_unit_sphere, vec3
from rayt.materials.material import Material, MaterialType, Vec3Tuple, as_color, check_unit_range


@dataclass(frozen=True, eq=False)
class Lambertian(Material):
    """Diffuse material.

    Attributes:
        albedo: Diffuse reflectance (RGB, each component in [0, 1]).
    """

    albedo: Vec3Tuple

    material_type = MaterialType.LAMBERTIAN
    type_name = "lambertian"

    def __post_init__(self) -> None:
        albedo = as_color(self.albedo, "albedo")
        check_unit_range(albedo, "Albedo")
        object.__setattr__(self, "albedo", albedo)

    def to_dict(self) -> dict:
        return {"type": self.type_name, "albedo": list(self.albedo)}


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3):
    """Sample a diffuse scatter direction.

    Args:
        albedo: The diffuse reflectance color.
        normal: The unit surface normal at the hit point.

    Returns:
        A tuple of (scattered_direction, attenuation). The direction is not
        normalized; a degenerate (near-zero) direction is replaced by the
        normal.
    """
    scattered_direction = normal + random_in_unit_sphere()
    # Only reachable for normals shorter than 1; |p| < 1 keeps a unit normal clear of zero
    if near_zero(scattered_direction):
        scattered_direction = normal
    return scattered_direction, albedo
