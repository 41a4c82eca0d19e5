"""Path tracing integrator and per-pixel sampling driver.

``trace`` estimates the radiance arriving along a ray. It evaluates the
recurrence

    L(ray, depth) = background                              if nothing is hit
    L(ray, depth) = emitted + attenuation * L(scattered, depth - 1)
                                                if depth > 0 and it scatters
    L(ray, depth) = emitted                                 otherwise

as a bounded loop that carries the throughput (product of attenuations) and
the radiance gathered so far, so at most ``depth + 1`` intersections are made
per path. There is no Russian roulette: only absorption, escape or an
exhausted depth budget ends a path.

Pixel (i, j) of a W x H frame (row 0 at the top) is sampled at
``u = (i + ox) / W`` and ``v = 1 - (j + oy) / H``, with (ox, oy) the pixel
center unless jitter is enabled.

``render_pixel`` depends only on its arguments and may be called from any
number of threads. Device state is shared, so concurrent calls serialize on
``device_lock``; each one uploads its own scene and camera before sampling.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.config import RenderConfig
    >>> from rayt.core.integrator import render_frame, render_pixel
    >>> from rayt.scene.builtin import build_camera, build_scene
    >>> scene = build_scene("cornell")
    >>> camera = build_camera("cornell", aspect=1.0)
    >>> rgba = render_pixel(scene, camera, (100, 100), (200, 200), 16, 10)
    >>> frame = render_frame(scene, camera, RenderConfig(width=64, height=64))
"""

import logging
import math
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti

from rayt.camera.pinhole import Camera, get_active_camera, get_ray, setup_camera
from rayt.config import RenderConfig
from rayt.core.device import device_lock
from rayt.core.vector import real, vec3
from rayt.materials.registry import emitted_material, scatter_material
from rayt.preview.export import encode_rgba8
from rayt.scene.intersection import get_background_color, intersect_scene
from rayt.scene.scene import Scene

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Lower bound of the intersection interval; keeps scattered rays from
# re-hitting the surface they leave
T_MIN = 0.001
T_MAX = math.inf


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def trace(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    """Estimate the radiance arriving at origin from -direction.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        max_depth: Number of scatter events allowed. 0 returns the first
            hit's emission (or the background) without scattering.

    Returns:
        The radiance estimate for this path (linear RGB).
    """
    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    ray_origin = origin
    ray_direction = direction
    remaining = max_depth
    active = 1

    while active == 1:
        rec = intersect_scene(ray_origin, ray_direction, T_MIN, T_MAX)
        if rec.hit == 0:
            radiance += throughput * get_background_color()
            active = 0
        else:
            radiance += throughput * emitted_material(rec.material_id)
            if remaining > 0:
                scattered_direction, attenuation, did_scatter = scatter_material(
                    rec.material_id, ray_direction, rec.normal
                )
                if did_scatter == 1:
                    throughput *= attenuation
                    ray_origin = rec.point
                    ray_direction = scattered_direction
                    remaining -= 1
                else:
                    active = 0
            else:
                active = 0

    return radiance


@ti.func
def sample_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    jitter: ti.i32,
    max_depth: ti.i32,
) -> vec3:
    """Trace one camera ray through pixel (pixel_i, pixel_j).

    Args:
        pixel_i: Column, 0 = left.
        pixel_j: Row, 0 = top.
        width: Frame width in pixels.
        height: Frame height in pixels.
        jitter: 1 to draw a random position inside the pixel, 0 for its center.
        max_depth: Scatter budget of the path.

    Returns:
        One radiance sample for the pixel.
    """
    offset_u = 0.5
    offset_v = 0.5
    if jitter == 1:
        offset_u = ti.random(real)
        offset_v = ti.random(real)

    u = (ti.cast(pixel_i, real) + offset_u) / ti.cast(width, real)
    v = 1.0 - (ti.cast(pixel_j, real) + offset_v) / ti.cast(height, real)
    ray = get_ray(u, v)
    return trace(ray.origin, ray.direction, max_depth)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported frame size (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Running average of the samples of each pixel, indexed [row, column]
_color_buffer = ti.Vector.field(3, dtype=real, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Whoever called setup_render_target() last; None for one-shot frame renders
_render_target_owner: object | None = None


def setup_render_target(width: int, height: int, owner: object | None = None) -> None:
    """Set the active frame size and clear the accumulation buffers.

    Args:
        width: Frame width in pixels (max MAX_IMAGE_WIDTH).
        height: Frame height in pixels (max MAX_IMAGE_HEIGHT).
        owner: Token identifying the caller. Every call replaces the owner,
            so a holder can tell when someone else has taken the target.

    Raises:
        ValueError: If the dimensions are not positive or exceed the maximum.
    """
    global _render_target_owner
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    with device_lock:
        _image_width[None] = width
        _image_height[None] = height
        _render_target_initialized[None] = 1
        _render_target_owner = owner
        clear_render_target()


def clear_render_target() -> None:
    """Clear the accumulation buffers to zero."""
    with device_lock:
        _color_buffer.fill(0.0)
        _sample_count.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the active frame size as (width, height)."""
    with device_lock:
        return int(_image_width[None]), int(_image_height[None])


def get_render_target_owner() -> object | None:
    """The owner token passed to the latest setup_render_target() call."""
    return _render_target_owner


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_one_spp(width: ti.i32, height: ti.i32, max_depth: ti.i32, jitter: ti.i32):
    """Add one sample to every pixel of the active frame."""
    for j, i in ti.ndrange(height, width):
        color = sample_pixel(i, j, width, height, jitter, max_depth)

        # Running average: avg_n = avg_{n-1} + (x_n - avg_{n-1}) / n
        _sample_count[j, i] += 1
        n = _sample_count[j, i]
        _color_buffer[j, i] += (color - _color_buffer[j, i]) / ti.cast(n, real)


_pixel_sum = ti.Vector.field(3, dtype=real, shape=())


@ti.kernel
def _accumulate_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    num_samples: ti.i32,
    max_depth: ti.i32,
    jitter: ti.i32,
):
    """Sum num_samples radiance samples of one pixel into _pixel_sum."""
    _pixel_sum[None] = vec3(0.0, 0.0, 0.0)
    for _ in range(num_samples):
        _pixel_sum[None] += sample_pixel(pixel_i, pixel_j, width, height, jitter, max_depth)


_trace_result = ti.Vector.field(3, dtype=real, shape=())


@ti.kernel
def _trace_kernel(origin: vec3, direction: vec3, max_depth: ti.i32):
    # Single-iteration outer loop keeps the path serial
    for _ in range(1):
        _trace_result[None] = trace(origin, direction, max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def _prepare(scene: Scene, camera: Camera | None) -> None:
    scene.activate()
    if camera is not None and get_active_camera() is not camera:
        setup_camera(camera)


def trace_ray(
    scene: Scene,
    origin: Sequence[float],
    direction: Sequence[float],
    max_depth: int,
) -> tuple[float, float, float]:
    """Evaluate a single path from Python.

    Args:
        scene: The scene to trace against.
        origin: Ray origin.
        direction: Ray direction.
        max_depth: Scatter budget of the path.

    Returns:
        The (R, G, B) radiance estimate.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")
    with device_lock:
        _prepare(scene, None)
        _trace_kernel(vec3(*origin), vec3(*direction), max_depth)
        color = _trace_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def estimate_pixel(
    scene: Scene,
    camera: Camera,
    pixel_coords: tuple[int, int],
    frame_dimensions: tuple[int, int],
    sample_count: int,
    max_depth: int,
    jitter: bool = False,
) -> tuple[float, float, float]:
    """Average sample_count radiance samples of one pixel.

    Samples are traced in parallel.

    Args:
        scene: The scene to render.
        camera: The camera to render from.
        pixel_coords: (i, j) with i the column and j the row from the top.
        frame_dimensions: (width, height) of the frame.
        sample_count: Number of samples to average (positive).
        max_depth: Scatter budget per path.
        jitter: Randomize the sample position inside the pixel.

    Returns:
        The averaged linear (R, G, B) color.

    Raises:
        ValueError: If the pixel is outside the frame or the counts are invalid.
    """
    i, j = pixel_coords
    width, height = frame_dimensions
    if width <= 0 or height <= 0:
        raise ValueError(f"Frame dimensions must be positive, got {width}x{height}")
    if not (0 <= i < width and 0 <= j < height):
        raise ValueError(f"Pixel {pixel_coords} is outside the {width}x{height} frame")
    if sample_count <= 0:
        raise ValueError(f"sample_count must be positive, got {sample_count}")
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    with device_lock:
        _prepare(scene, camera)
        _accumulate_pixel(i, j, width, height, sample_count, max_depth, int(jitter))
        total = _pixel_sum[None]
    return (
        float(total[0]) / sample_count,
        float(total[1]) / sample_count,
        float(total[2]) / sample_count,
    )


def render_pixel(
    scene: Scene,
    camera: Camera,
    pixel_coords: tuple[int, int],
    frame_dimensions: tuple[int, int],
    sample_count: int,
    max_depth: int,
    gamma: float | None = None,
    jitter: bool = False,
) -> tuple[int, int, int, int]:
    """Render one pixel to an 8-bit RGBA color.

    The averaged radiance is optionally gamma corrected, clamped to [0, 1]
    and scaled by 255 with truncation. Alpha is always 255.

    Args:
        scene: The scene to render.
        camera: The camera to render from.
        pixel_coords: (i, j) with i the column and j the row from the top.
        frame_dimensions: (width, height) of the frame.
        sample_count: Number of samples to average.
        max_depth: Scatter budget per path.
        gamma: Optional display gamma.
        jitter: Randomize the sample position inside the pixel.

    Returns:
        The (R, G, B, A) channel values.
    """
    color = estimate_pixel(
        scene, camera, pixel_coords, frame_dimensions, sample_count, max_depth, jitter
    )
    rgba = encode_rgba8(np.asarray(color, dtype=np.float64), gamma=gamma)
    logger.debug("Rendered pixel %s: %s", pixel_coords, tuple(rgba))
    return (int(rgba[0]), int(rgba[1]), int(rgba[2]), int(rgba[3]))


def render_image(num_samples: int = 1, max_depth: int = 25, jitter: bool = False) -> None:
    """Accumulate num_samples more samples into every pixel of the active frame.

    Uses the active scene and camera.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    with device_lock:
        _check_render_target_initialized()
        width, height = get_image_dimensions()
        for _ in range(num_samples):
            _render_one_spp(width, height, max_depth, int(jitter))


def get_total_samples() -> int:
    """Number of samples accumulated per pixel.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    with device_lock:
        _check_render_target_initialized()
        return int(_sample_count[0, 0])


def get_image_numpy() -> npt.NDArray[np.float64]:
    """Get the accumulated linear image.

    Returns:
        Array of shape (height, width, 3), row 0 at the top, not clamped.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    with device_lock:
        _check_render_target_initialized()
        width, height = get_image_dimensions()
        return _color_buffer.to_numpy()[:height, :width, :].copy()


def render_frame_linear(
    scene: Scene, camera: Camera, config: RenderConfig
) -> npt.NDArray[np.float64]:
    """Render a full frame and return the averaged linear image.

    Takes over the render target, so a ProgressiveRenderer holding it will
    refuse further batches until it is reset.

    Returns:
        Array of shape (config.height, config.width, 3).
    """
    logger.info(
        "Rendering %dx%d frame: %d spp, depth %d",
        config.width,
        config.height,
        config.samples_per_pixel,
        config.max_depth,
    )
    with device_lock:
        _prepare(scene, camera)
        setup_render_target(config.width, config.height)
        render_image(config.samples_per_pixel, config.max_depth, config.jitter)
        return get_image_numpy()


def render_frame(scene: Scene, camera: Camera, config: RenderConfig) -> npt.NDArray[np.uint8]:
    """Render a full frame to an 8-bit RGBA buffer.

    Returns:
        Array of shape (config.height, config.width, 4), row-major RGBA with
        alpha 255. Use ``.tobytes()`` for a flat display buffer.
    """
    image = render_frame_linear(scene, camera, config)
    return encode_rgba8(image, gamma=config.gamma)
