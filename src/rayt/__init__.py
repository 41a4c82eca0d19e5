"""Taichi-based Monte Carlo path tracer.

This package estimates the radiance reaching each pixel of a pinhole camera by
tracing randomly scattered light paths through a scene of spheres and
axis-aligned rectangles, with support for:
- Diffuse (Lambertian), fuzzy metal and emissive materials
- Composite shapes (boxes, face flipping, shape lists)
- Per-pixel sampling and progressive whole-frame accumulation
- Built-in Cornell box and two-spheres scenes

Subpackages:
    core: Vector kernel, rays, the path tracing integrator and sampling driver
    camera: Look-at pinhole camera with ray generation
    geometry: Sphere and rectangle primitives with intersection routines
    materials: Material descriptions, scattering functions and material table
    scene: Shape descriptions, scene upload and built-in scenes
    preview: Conversion of linear images to 8-bit RGBA and PNG export
"""

from rayt.config import RenderConfig

__version__ = "0.1.0"

__all__ = ["RenderConfig", "__version__"]
