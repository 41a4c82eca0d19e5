"""Render configuration.

A ``RenderConfig`` bundles every setting a frame render needs so that no
sample count, depth or resolution lives in module-level state.

Example:
    >>> from rayt.config import RenderConfig
    >>> config = RenderConfig(width=320, height=240, samples_per_pixel=64)
    >>> config.aspect_ratio
    1.3333333333333333
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class RenderConfig:
    """Immutable settings for rendering one frame.

    Attributes:
        width: Frame width in pixels.
        height: Frame height in pixels.
        samples_per_pixel: Number of camera rays averaged per pixel.
        max_depth: Scatter budget per path. 0 means only the first hit's
            emission (or the background) is counted.
        gamma: Optional display gamma. None keeps linear output.
        jitter: Randomize the sample position inside each pixel instead of
            always sampling the pixel center.
    """

    width: int = 200
    height: int = 200
    samples_per_pixel: int = 25
    max_depth: int = 25
    gamma: float | None = None
    jitter: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Frame dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.samples_per_pixel <= 0:
            raise ValueError(
                f"samples_per_pixel must be positive, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.gamma is not None and self.gamma <= 0.0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height

    def with_overrides(self, **changes) -> "RenderConfig":
        """Return a copy with the given fields replaced (validated again)."""
        return replace(self, **changes)
