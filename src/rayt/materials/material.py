"""Material base types.

Materials are immutable Python descriptions attached to shapes. A material
object may be shared by any number of shapes; the scene uploads each distinct
object once into the material table and shapes refer to it by index.
"""

from collections.abc import Sequence
from enum import IntEnum
from typing import ClassVar

Vec3Tuple = tuple[float, float, float]


class MaterialType(IntEnum):
    """Material type tags used for dispatch inside kernels."""

    LAMBERTIAN = 0
    METAL = 1
    DIFFUSE_LIGHT = 2


class Material:
    """Base class for material descriptions.

    Subclasses are frozen dataclasses that set ``material_type`` and
    ``type_name`` and implement ``to_dict``.
    """

    material_type: ClassVar[MaterialType]
    type_name: ClassVar[str]

    def to_dict(self) -> dict:
        raise NotImplementedError


def as_color(value: Sequence[float], name: str) -> Vec3Tuple:
    """Convert a 3-sequence to a tuple of floats.

    Raises:
        ValueError: If value does not have exactly three components.
    """
    components = tuple(float(c) for c in value)
    if len(components) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(components)}")
    return components


def check_unit_range(value: Vec3Tuple, name: str) -> None:
    """Raise ValueError if any component of value is outside [0, 1]."""
    for i, component in enumerate(value):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"{name} component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
