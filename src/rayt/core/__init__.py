"""Core rendering module.

Components:
    vector: Double-precision vec3 type, vector algebra and random sampling
    ray: Ray data structure
    device: Process-wide lock serializing access to Taichi device state
    integrator: Path tracing integrator, camera sampling and frame rendering
    progressive: Progressive accumulation wrapper around the integrator

All compute-intensive operations use Taichi kernels.
"""

from .ray import Ray, make_ray, ray_at
from .vector import (
    MAX_REJECTION_ATTEMPTS,
    color,
    cross,
    dot,
    gamma_correct,
    length,
    length_squared,
    lerp,
    near_zero,
    normalize,
    point3,
    random_in_unit_sphere,
    random_vec3,
    random_vec3_range,
    real,
    reflect,
    saturate,
    vec3,
    vsqrt,
)

# Note: integrator and progressive are NOT imported here because they allocate
# Taichi fields at import time. Import them directly when needed:
#   from rayt.core.integrator import render_frame, render_pixel
#   from rayt.core.progressive import ProgressiveRenderer

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "real",
    "vec3",
    "point3",
    "color",
    "dot",
    "cross",
    "length",
    "length_squared",
    "normalize",
    "lerp",
    "saturate",
    "vsqrt",
    "gamma_correct",
    "reflect",
    "near_zero",
    "random_vec3",
    "random_vec3_range",
    "random_in_unit_sphere",
    "MAX_REJECTION_ATTEMPTS",
]
