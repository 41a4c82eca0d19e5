"""Metal (specular reflective) material with fuzz.

Perfect metals (fuzz = 0) reflect like a mirror. A positive fuzz perturbs
the mirror direction by a random offset scaled by fuzz; when the perturbed
direction ends up below the surface the ray is absorbed.

Example:
    >>> from rayt.materials.metal import Metal
    >>> brushed = Metal(albedo=(0.8, 0.85, 0.88), fuzz=0.3)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from rayt.core.vector import normalize, random_in_unit_sphere, real, reflect, vec3
from rayt.materials.material import Material, MaterialType, Vec3Tuple, as_color, check_unit_range


@dataclass(frozen=True, eq=False)
class Metal(Material):
    """Specular material.

    Attributes:
        albedo: Reflective tint (RGB, each component in [0, 1]).
        fuzz: Perturbation radius in [0, 1]. 0 is a perfect mirror.
    """

    albedo: Vec3Tuple
    fuzz: float = 0.0

    material_type = MaterialType.METAL
    type_name = "metal"

    def __post_init__(self) -> None:
        albedo = as_color(self.albedo, "albedo")
        check_unit_range(albedo, "Albedo")
        fuzz = float(self.fuzz)
        if fuzz < 0.0 or fuzz > 1.0:
            raise ValueError(f"Fuzz {fuzz} is outside [0, 1]")
        object.__setattr__(self, "albedo", albedo)
        object.__setattr__(self, "fuzz", fuzz)

    def to_dict(self) -> dict:
        return {"type": self.type_name, "albedo": list(self.albedo), "fuzz": self.fuzz}


@ti.func
def scatter_metal(albedo: vec3, fuzz: real, incident_direction: vec3, normal: vec3):
    """Reflect an incoming ray off a metal surface.

    Args:
        albedo: The reflective color.
        fuzz: The perturbation radius in [0, 1].
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
        did_scatter is 0 when dot(scattered_direction, normal) <= 0.
    """
    reflected = reflect(normalize(incident_direction), normal)
    scattered_direction = reflected + fuzz * random_in_unit_sphere()

    did_scatter = 0
    if tm.dot(scattered_direction, normal) > 0.0:
        did_scatter = 1

    return scattered_direction, albedo, did_scatter
