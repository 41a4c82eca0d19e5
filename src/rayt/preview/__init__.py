"""Preview module for output conversion and export.

Components:
    export: Gamma, clamping, 8-bit RGBA encoding and PNG export

Example:
    >>> from rayt.preview import encode_rgba8, save_png
    >>> save_png(encode_rgba8(linear_image, gamma=2.2), "output.png")
"""

from rayt.preview.export import (
    apply_gamma,
    compute_rmse,
    encode_rgba8,
    image_to_uint8,
    save_png,
)

__all__ = [
    "apply_gamma",
    "image_to_uint8",
    "encode_rgba8",
    "save_png",
    "compute_rmse",
]
