"""Unit tests for the vector kernel.

Tests cover:
- Algebraic identities (associativity, commutativity, anti-commutativity)
- Normalization, length, lerp, saturate, sqrt and gamma helpers
- Reflection
- Random sampling ranges, including the unit-sphere rejection sampler
"""

import math

import taichi as ti

A = (1.5, -2.0, 0.25)
B = (-0.75, 3.0, 4.0)


class TestVectorAlgebra:
    """Tests for vector identities."""

    def test_addition_is_associative(self):
        """(a + b) + c equals a + (b + c)."""
        from rayt.core.vector import vec3

        left = ti.Vector.field(3, dtype=ti.f64, shape=())
        right = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            a = vec3(1.5, -2.0, 0.25)
            b = vec3(-0.75, 3.0, 4.0)
            c = vec3(2.0, 0.5, -1.25)
            left[None] = (a + b) + c
            right[None] = a + (b + c)

        test_kernel()
        for k in range(3):
            assert abs(left[None][k] - right[None][k]) < 1e-12

    def test_dot_is_commutative(self):
        """dot(a, b) equals dot(b, a)."""
        from rayt.core.vector import dot, vec3

        ab = ti.field(dtype=ti.f64, shape=())
        ba = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            a = vec3(1.5, -2.0, 0.25)
            b = vec3(-0.75, 3.0, 4.0)
            ab[None] = dot(a, b)
            ba[None] = dot(b, a)

        test_kernel()
        expected = sum(x * y for x, y in zip(A, B))
        assert abs(ab[None] - ba[None]) < 1e-12
        assert abs(ab[None] - expected) < 1e-12

    def test_cross_is_anticommutative(self):
        """cross(a, b) equals -cross(b, a)."""
        from rayt.core.vector import cross, vec3

        ab = ti.Vector.field(3, dtype=ti.f64, shape=())
        ba = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            a = vec3(1.5, -2.0, 0.25)
            b = vec3(-0.75, 3.0, 4.0)
            ab[None] = cross(a, b)
            ba[None] = cross(b, a)

        test_kernel()
        for k in range(3):
            assert abs(ab[None][k] + ba[None][k]) < 1e-12

    def test_cross_of_axes(self):
        """x cross y is z."""
        from rayt.core.vector import cross, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert tuple(result.to_numpy()) == (0.0, 0.0, 1.0)

    def test_normalize_has_unit_length(self):
        """length(normalize(a)) is 1 for several non-zero vectors."""
        from rayt.core.vector import length, normalize, vec3

        lengths = ti.field(dtype=ti.f64, shape=3)

        @ti.kernel
        def test_kernel():
            lengths[0] = length(normalize(vec3(1.5, -2.0, 0.25)))
            lengths[1] = length(normalize(vec3(-0.75, 3.0, 4.0)))
            lengths[2] = length(normalize(vec3(1e-6, 0.0, 0.0)))

        test_kernel()
        for k in range(3):
            assert abs(lengths[k] - 1.0) < 1e-12

    def test_length_and_length_squared(self):
        """A 3-4-0 vector has length 5 and squared length 25."""
        from rayt.core.vector import length, length_squared, vec3

        results = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 0.0)
            results[0] = length(v)
            results[1] = length_squared(v)

        test_kernel()
        assert abs(results[0] - 5.0) < 1e-12
        assert abs(results[1] - 25.0) < 1e-12

    def test_normalize_zero_vector_is_nan(self):
        """Normalizing a zero vector is not guarded and yields NaN."""
        from rayt.core.vector import normalize, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 0.0, 0.0))

        test_kernel()
        assert math.isnan(result[None][0])


class TestVectorHelpers:
    """Tests for lerp, saturate, vsqrt, gamma_correct and reflect."""

    def test_lerp_endpoints_and_midpoint(self):
        """lerp returns a at 0, b at 1 and the average at 0.5."""
        from rayt.core.vector import lerp, vec3

        results = ti.Vector.field(3, dtype=ti.f64, shape=3)

        @ti.kernel
        def test_kernel():
            a = vec3(0.0, 2.0, -4.0)
            b = vec3(2.0, 4.0, 4.0)
            results[0] = lerp(a, b, 0.0)
            results[1] = lerp(a, b, 1.0)
            results[2] = lerp(a, b, 0.5)

        test_kernel()
        assert tuple(results.to_numpy()[0]) == (0.0, 2.0, -4.0)
        assert tuple(results.to_numpy()[1]) == (2.0, 4.0, 4.0)
        assert tuple(results.to_numpy()[2]) == (1.0, 3.0, 0.0)

    def test_saturate_clamps_components(self):
        """saturate clamps each component into [0, 1]."""
        from rayt.core.vector import saturate, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = saturate(vec3(-0.5, 0.25, 7.0))

        test_kernel()
        assert tuple(result.to_numpy()) == (0.0, 0.25, 1.0)

    def test_vsqrt_and_gamma(self):
        """vsqrt is element-wise sqrt and gamma 2 matches it."""
        from rayt.core.vector import gamma_correct, vec3, vsqrt

        roots = ti.Vector.field(3, dtype=ti.f64, shape=())
        gamma2 = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(0.25, 0.64, 1.0)
            roots[None] = vsqrt(v)
            gamma2[None] = gamma_correct(v, 2.0)

        test_kernel()
        for k, expected in enumerate((0.5, 0.8, 1.0)):
            assert abs(roots[None][k] - expected) < 1e-12
            assert abs(gamma2[None][k] - expected) < 1e-12

    def test_reflect_about_normal(self):
        """Reflecting (1, -1, 0) about +y gives (1, 1, 0)."""
        from rayt.core.vector import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert tuple(result.to_numpy()) == (1.0, 1.0, 0.0)

    def test_near_zero(self):
        """near_zero is true only when every component is below 1e-8."""
        from rayt.core.vector import near_zero, vec3

        results = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            results[0] = near_zero(vec3(1e-9, -1e-9, 0.0))
            results[1] = near_zero(vec3(1e-9, 1e-7, 0.0))
            results[2] = near_zero(vec3(0.0, 0.0, 0.0))

        test_kernel()
        assert list(results.to_numpy()) == [1, 0, 1]


class TestRandomSampling:
    """Tests for the random sampling primitives."""

    def test_random_vec3_in_unit_cube(self):
        """random_vec3 components lie in [0, 1)."""
        from rayt.core.vector import random_vec3

        n = 1000
        samples = ti.Vector.field(3, dtype=ti.f64, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = random_vec3()

        test_kernel()
        arr = samples.to_numpy()
        assert arr.min() >= 0.0
        assert arr.max() < 1.0

    def test_random_vec3_range(self):
        """random_vec3_range components lie in [lo, hi) and cover the range."""
        from rayt.core.vector import random_vec3_range

        n = 2000
        samples = ti.Vector.field(3, dtype=ti.f64, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = random_vec3_range(-3.0, 5.0)

        test_kernel()
        arr = samples.to_numpy()
        assert arr.min() >= -3.0
        assert arr.max() < 5.0
        assert arr.min() < -2.0
        assert arr.max() > 4.0

    def test_random_in_unit_sphere_inside(self):
        """Every sample lies strictly inside the unit sphere."""
        from rayt.core.vector import length_squared, random_in_unit_sphere

        n = 2000
        lengths = ti.field(dtype=ti.f64, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                lengths[i] = length_squared(random_in_unit_sphere())

        test_kernel()
        arr = lengths.to_numpy()
        assert arr.max() < 1.0
        # Uniform in the ball: E[|p|^2] = 3/5
        assert abs(arr.mean() - 0.6) < 0.05

    def test_random_in_unit_sphere_is_centered(self):
        """The sample mean is close to the origin."""
        from rayt.core.vector import random_in_unit_sphere

        n = 4000
        samples = ti.Vector.field(3, dtype=ti.f64, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = random_in_unit_sphere()

        test_kernel()
        mean = samples.to_numpy().mean(axis=0)
        assert abs(mean).max() < 0.05
