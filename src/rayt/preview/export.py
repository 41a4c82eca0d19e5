"""Display conversion and image export.

Linear radiance images become displayable 8-bit RGBA by optional gamma
correction, clamping to [0, 1] and truncating ``c * 255`` to an integer, so
1.0 maps to 255. Alpha is always 255.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> import numpy as np
    >>> from rayt.preview.export import encode_rgba8, save_png
    >>> linear = np.full((4, 4, 3), 0.5)
    >>> rgba = encode_rgba8(linear, gamma=2.2)
    >>> save_png(rgba, "out.png")
"""

import logging
from os import PathLike

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float | None,
) -> npt.NDArray[np.float64]:
    """Clamp to [0, 1] and apply display gamma: c ** (1 / gamma).

    Args:
        image: Linear image with color in the last axis.
        gamma: Display gamma, or None to only clamp.

    Returns:
        The clamped, gamma-encoded image as float64.
    """
    result = np.clip(np.asarray(image, dtype=np.float64), 0.0, 1.0)
    if gamma is not None:
        if gamma <= 0.0:
            raise ValueError(f"gamma must be positive, got {gamma}")
        result = np.power(result, 1.0 / gamma)
    return np.clip(result, 0.0, 1.0)


def image_to_uint8(
    image: npt.NDArray[np.floating],
    gamma: float | None = None,
) -> npt.NDArray[np.uint8]:
    """Convert a linear image to 8-bit channels of the same shape."""
    return (apply_gamma(image, gamma) * 255.0).astype(np.uint8)


def encode_rgba8(
    image: npt.NDArray[np.floating],
    gamma: float | None = None,
) -> npt.NDArray[np.uint8]:
    """Convert a linear RGB image (or single color) to 8-bit RGBA.

    Args:
        image: Array whose last axis holds (R, G, B), e.g. shape (H, W, 3)
            or (3,).
        gamma: Optional display gamma.

    Returns:
        uint8 array with the last axis widened to (R, G, B, 255).
    """
    rgb = image_to_uint8(image, gamma)
    alpha = np.full(rgb.shape[:-1] + (1,), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=-1)


def save_png(
    image: npt.NDArray,
    filepath: str | PathLike,
    gamma: float | None = None,
) -> None:
    """Save an image as a PNG file.

    Args:
        image: Either an 8-bit (H, W, 3) or (H, W, 4) array, saved as is, or a
            linear float (H, W, 3) image, encoded with encode_rgba8 first.
        filepath: Output file path.
        gamma: Display gamma for float input.
    """
    if image.dtype != np.uint8:
        image = encode_rgba8(image, gamma=gamma)
    PILImage.fromarray(np.ascontiguousarray(image)).save(filepath)
    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], filepath)


def compute_rmse(
    image_a: npt.NDArray,
    image_b: npt.NDArray,
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
