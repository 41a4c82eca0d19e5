"""Materials module.

Components:
    material: MaterialType tags and the Material base class
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with fuzz
    diffuse_light: Emissive area light
    registry: Material table and kernel-side dispatch

Material descriptions are plain Python objects; the registry module (which
allocates Taichi fields) is imported on demand:
    from rayt.materials.registry import add_material, scatter_material
"""

from .diffuse_light import DiffuseLight
from .lambertian import Lambertian, scatter_lambertian
from .material import Material, MaterialType
from .metal import Metal, scatter_metal

__all__ = [
    "Material",
    "MaterialType",
    "Lambertian",
    "scatter_lambertian",
    "Metal",
    "scatter_metal",
    "DiffuseLight",
]
