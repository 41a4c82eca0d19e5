"""Unit tests for axis-aligned rectangle intersection.

Tests cover:
- Hits on each of the XY, XZ and YZ planes
- Closed bounds, misses outside the bounds
- Parallel rays and the exclusive t interval
- The stored normal is reported unchanged
"""

import taichi as ti

from rayt.geometry.rect import Plane


def _make_hit_runner():
    """Build a kernel that intersects a ray with a rectangle."""
    from rayt.core.vector import vec3
    from rayt.geometry.rect import RectData, hit_rect

    vec4 = ti.types.vector(4, ti.f64)

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f64, shape=())
    point = ti.Vector.field(3, dtype=ti.f64, shape=())
    normal = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def hit_query(
        origin: vec3,
        direction: vec3,
        plane: ti.i32,
        bounds: vec4,
        k: ti.f64,
        rect_normal: vec3,
        t_min: ti.f64,
        t_max: ti.f64,
    ):
        rect = RectData(
            plane=plane,
            a0=bounds[0],
            a1=bounds[1],
            b0=bounds[2],
            b1=bounds[3],
            k=k,
            normal=rect_normal,
        )
        rec = hit_rect(origin, direction, rect, t_min, t_max)
        hit[None] = rec.hit
        t_val[None] = rec.t
        point[None] = rec.point
        normal[None] = rec.normal

    def run(origin, direction, plane, bounds, k, rect_normal=(0.0, 0.0, 1.0), t_min=0.001, t_max=1e10):
        hit_query(
            vec3(*origin),
            vec3(*direction),
            int(plane),
            vec4(*bounds),
            k,
            vec3(*rect_normal),
            t_min,
            t_max,
        )
        return hit[None], t_val[None], tuple(point.to_numpy()), tuple(normal.to_numpy())

    return run


class TestRectIntersection:
    """Tests for hit_rect()."""

    def test_xy_hit(self):
        """A ray along +z hits an XY rectangle at z = k."""
        run = _make_hit_runner()
        hit, t, p, n = run((0.5, 0.5, -2.0), (0.0, 0.0, 1.0), Plane.XY, (0.0, 1.0, 0.0, 1.0), 3.0)
        assert hit == 1
        assert abs(t - 5.0) < 1e-12
        assert p == (0.5, 0.5, 3.0)
        assert n == (0.0, 0.0, 1.0)

    def test_xz_hit(self):
        """A ray along -y hits an XZ rectangle; a is x and b is z."""
        run = _make_hit_runner()
        hit, t, p, n = run(
            (2.0, 10.0, -1.0),
            (0.0, -1.0, 0.0),
            Plane.XZ,
            (1.0, 3.0, -2.0, 0.0),
            4.0,
            rect_normal=(0.0, -1.0, 0.0),
        )
        assert hit == 1
        assert abs(t - 6.0) < 1e-12
        assert p == (2.0, 4.0, -1.0)
        assert n == (0.0, -1.0, 0.0)

    def test_yz_hit(self):
        """A ray along +x hits a YZ rectangle; a is y and b is z."""
        run = _make_hit_runner()
        hit, t, p, _ = run(
            (0.0, 2.0, 7.0),
            (2.0, 0.0, 0.0),
            Plane.YZ,
            (1.0, 3.0, 6.0, 8.0),
            5.0,
            rect_normal=(1.0, 0.0, 0.0),
        )
        assert hit == 1
        assert abs(t - 2.5) < 1e-12
        assert p == (5.0, 2.0, 7.0)

    def test_outside_bounds_misses(self):
        """A hit point outside [a0, a1] x [b0, b1] is rejected."""
        run = _make_hit_runner()
        hit, _, _, _ = run((1.5, 0.5, -2.0), (0.0, 0.0, 1.0), Plane.XY, (0.0, 1.0, 0.0, 1.0), 3.0)
        assert hit == 0

    def test_bounds_are_closed(self):
        """A hit exactly on the edge counts."""
        run = _make_hit_runner()
        hit, _, _, _ = run((1.0, 0.0, -2.0), (0.0, 0.0, 1.0), Plane.XY, (0.0, 1.0, 0.0, 1.0), 3.0)
        assert hit == 1

    def test_parallel_ray_misses(self):
        """A ray parallel to the plane never hits."""
        run = _make_hit_runner()
        hit, _, _, _ = run((0.5, 0.5, 3.0), (1.0, 0.0, 0.0), Plane.XY, (0.0, 1.0, 0.0, 1.0), 3.0)
        assert hit == 0

    def test_behind_origin_misses(self):
        """The plane behind the ray is outside (t_min, t_max)."""
        run = _make_hit_runner()
        hit, _, _, _ = run((0.5, 0.5, 5.0), (0.0, 0.0, 1.0), Plane.XY, (0.0, 1.0, 0.0, 1.0), 3.0)
        assert hit == 0

    def test_t_max_excludes_hit(self):
        """A hit beyond t_max is rejected."""
        run = _make_hit_runner()
        hit, _, _, _ = run(
            (0.5, 0.5, -2.0), (0.0, 0.0, 1.0), Plane.XY, (0.0, 1.0, 0.0, 1.0), 3.0, t_max=5.0
        )
        assert hit == 0

    def test_normal_is_independent_of_ray_side(self):
        """Hitting from either side reports the stored normal."""
        run = _make_hit_runner()
        _, _, _, n_front = run((0.5, 0.5, -2.0), (0.0, 0.0, 1.0), Plane.XY, (0.0, 1.0, 0.0, 1.0), 3.0)
        _, _, _, n_back = run((0.5, 0.5, 9.0), (0.0, 0.0, -1.0), Plane.XY, (0.0, 1.0, 0.0, 1.0), 3.0)
        assert n_front == n_back == (0.0, 0.0, 1.0)
