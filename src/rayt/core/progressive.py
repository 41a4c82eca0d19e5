"""Incremental frame rendering.

``ProgressiveRenderer`` claims the integrator's accumulation buffer for one
frame and adds samples to it in batches, so callers can show or save
intermediate results while the estimate converges. Each batch adds one
sample per pixel per pass to the running average kept by the integrator.

The renderer keeps its own frame size, scene and camera and re-uploads the
scene and camera before every batch, so per-pixel renders and hit queries on
other scenes may run in between. There is only one render target, though: a
full-frame render (or another renderer) in between takes it over, after
which this renderer raises RuntimeError until reset() claims it back.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.core.progressive import ProgressiveRenderer
    >>> from rayt.scene.builtin import build_camera, build_scene
    >>> renderer = ProgressiveRenderer(
    ...     128, 128, scene=build_scene("cornell"), camera=build_camera("cornell")
    ... )
    >>> for done, total in renderer.render_progressive(64, batch_size=16):
    ...     print(f"{done}/{total}")
    >>> renderer.save_image("cornell.png", gamma=2.2)
"""

import logging
from collections.abc import Callable, Iterator
from os import PathLike

import numpy as np
import numpy.typing as npt

from rayt.camera.pinhole import Camera, setup_camera
from rayt.core import integrator
from rayt.core.device import device_lock
from rayt.preview.export import apply_gamma, encode_rgba8, save_png
from rayt.scene.scene import Scene

logger = logging.getLogger(__name__)

# Called with (samples accumulated so far, samples once the request completes)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """Accumulates path-traced samples into one frame over many calls.

    Args:
        width: Frame width in pixels, at most MAX_IMAGE_WIDTH.
        height: Frame height in pixels, at most MAX_IMAGE_HEIGHT.
        scene: Scene to render. None renders whatever scene is active.
        camera: Camera to render from. None uses the active camera.
        max_depth: Scatter budget per path.
        jitter: Sample random positions inside each pixel.

    Raises:
        ValueError: If max_depth is negative or the frame size is invalid.
    """

    def __init__(
        self,
        width: int,
        height: int,
        scene: Scene | None = None,
        camera: Camera | None = None,
        max_depth: int = 25,
        jitter: bool = True,
    ) -> None:
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        self.max_depth = max_depth
        self.jitter = jitter
        self._scene = scene
        self._camera = camera
        self._width = width
        self._height = height

        with device_lock:
            self._bind()
            integrator.setup_render_target(width, height, owner=self)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def owns_target(self) -> bool:
        """Whether the integrator's render target still holds this frame."""
        return integrator.get_render_target_owner() is self

    @property
    def sample_count(self) -> int:
        """Samples accumulated per pixel since the last reset."""
        with device_lock:
            self._check_owner()
            return integrator.get_total_samples()

    def _bind(self) -> None:
        if self._scene is not None:
            self._scene.activate()
        if self._camera is not None:
            setup_camera(self._camera)

    def _check_owner(self) -> None:
        if not self.owns_target:
            raise RuntimeError(
                "Render target was taken over by another render; call reset() to start over"
            )

    def reset(self) -> None:
        """Discard accumulated samples and reclaim the render target."""
        integrator.setup_render_target(self._width, self._height, owner=self)

    def resize(self, width: int, height: int) -> None:
        """Change the frame size, discarding accumulated samples."""
        integrator.setup_render_target(width, height, owner=self)
        self._width = width
        self._height = height

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Add num_samples samples per pixel, reporting after each batch.

        Args:
            num_samples: Samples per pixel to add.
            batch_size: Samples per pixel between two callback calls.
            callback: Optional progress hook, see ProgressCallback.
        """
        for done, total in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(done, total)

    def render_progressive(self, num_samples: int = 1, batch_size: int = 1) -> Iterator[tuple[int, int]]:
        """Generator form of render().

        Yields:
            (samples accumulated so far, samples once all batches are done)
            after every batch.

        Raises:
            ValueError: If batch_size is not positive.
            RuntimeError: If another render has taken over the render target.
        """
        if num_samples <= 0:
            return
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        total = self.sample_count + num_samples
        for start in range(0, num_samples, batch_size):
            with device_lock:
                self._check_owner()
                self._bind()
                integrator.render_image(
                    min(batch_size, num_samples - start), self.max_depth, self.jitter
                )
                done = integrator.get_total_samples()
            logger.info("Accumulated %d/%d samples per pixel", done, total)
            yield done, total

    def get_linear_image(self) -> npt.NDArray[np.float64]:
        """The averaged radiance, shape (height, width, 3), unclamped."""
        with device_lock:
            self._check_owner()
            return integrator.get_image_numpy()

    def get_image_numpy(self, gamma: float | None = None) -> npt.NDArray[np.float64]:
        """The image clamped to [0, 1] with optional display gamma."""
        return apply_gamma(self.get_linear_image(), gamma)

    def get_rgba8(self, gamma: float | None = None) -> npt.NDArray[np.uint8]:
        """The image as 8-bit RGBA, shape (height, width, 4)."""
        return encode_rgba8(self.get_linear_image(), gamma=gamma)

    def save_image(self, filepath: str | PathLike, gamma: float | None = 2.2) -> None:
        """Write the current estimate to a PNG file."""
        save_png(self.get_rgba8(gamma=gamma), filepath)

    def __repr__(self) -> str:
        samples = self.sample_count if self.owns_target else "lost"
        return f"ProgressiveRenderer({self.width}x{self.height}, samples={samples})"
