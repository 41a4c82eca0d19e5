"""Tests for RenderConfig."""

import pytest

from rayt.config import RenderConfig


class TestRenderConfig:
    """Tests for render settings validation."""

    def test_defaults(self):
        config = RenderConfig()
        assert (config.width, config.height) == (200, 200)
        assert config.samples_per_pixel == 25
        assert config.max_depth == 25
        assert config.gamma is None
        assert config.jitter is False

    def test_aspect_ratio(self):
        assert RenderConfig(width=320, height=240).aspect_ratio == pytest.approx(4 / 3)

    def test_zero_depth_allowed(self):
        """Depth 0 is valid: only direct emission is counted."""
        assert RenderConfig(max_depth=0).max_depth == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0},
            {"height": -1},
            {"samples_per_pixel": 0},
            {"max_depth": -1},
            {"gamma": 0.0},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            RenderConfig(**kwargs)

    def test_with_overrides_revalidates(self):
        """Overrides produce a new config and are validated again."""
        base = RenderConfig()
        changed = base.with_overrides(samples_per_pixel=4, gamma=2.2)
        assert changed.samples_per_pixel == 4
        assert changed.gamma == 2.2
        assert base.samples_per_pixel == 25
        with pytest.raises(ValueError):
            base.with_overrides(width=0)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            RenderConfig().width = 10
