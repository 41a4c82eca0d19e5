"""Diffuse area light material.

An emitter never scatters. It contributes its emission color for every hit,
whichever side of the surface the ray arrives from.
"""

from dataclasses import dataclass

from rayt.materials.material import Material, MaterialType, Vec3Tuple, as_color


@dataclass(frozen=True, eq=False)
class DiffuseLight(Material):
    """Emissive material.

    Attributes:
        emission: Emitted radiance (RGB). Components may exceed 1.
    """

    emission: Vec3Tuple

    material_type = MaterialType.DIFFUSE_LIGHT
    type_name = "diffuse_light"

    def __post_init__(self) -> None:
        emission = as_color(self.emission, "emission")
        if min(emission) < 0.0:
            raise ValueError(f"Emission must be non-negative, got {emission}")
        object.__setattr__(self, "emission", emission)

    def to_dict(self) -> dict:
        return {"type": self.type_name, "emission": list(self.emission)}
