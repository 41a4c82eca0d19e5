"""Unit tests for the Ray dataclass."""

import taichi as ti


class TestRay:
    """Tests for Ray construction and evaluation."""

    def test_ray_at_origin_and_along_direction(self):
        """ray_at(0) is the origin and ray_at(t) moves t direction lengths."""
        from rayt.core.ray import make_ray, ray_at
        from rayt.core.vector import vec3

        results = ti.Vector.field(3, dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, 2.0))
            results[0] = ray_at(ray, 0.0)
            results[1] = ray_at(ray, 1.5)

        test_kernel()
        arr = results.to_numpy()
        assert tuple(arr[0]) == (1.0, 2.0, 3.0)
        assert tuple(arr[1]) == (1.0, 2.0, 6.0)

    def test_direction_is_not_normalized(self):
        """Ray keeps the direction exactly as given."""
        from rayt.core.ray import Ray
        from rayt.core.vector import vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(3.0, 0.0, 4.0))
            result[None] = ray.direction

        test_kernel()
        assert tuple(result.to_numpy()) == (3.0, 0.0, 4.0)
