"""Three-component vector kernel for points, directions and linear colors.

All functions are Taichi functions and operate on double-precision ``vec3``
values. Addition, subtraction, component-wise multiplication, scalar
multiplication/division, negation and element access come from Taichi's own
vector operators; this module adds the geometric helpers and the random
sampling primitives used by the materials.

Arithmetic is plain IEEE-754: normalizing a zero vector yields NaN/Inf and
is left to the caller to avoid.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.core.vector import vec3, normalize, reflect
    >>> @ti.kernel
    ... def bounce() -> vec3:
    ...     return reflect(normalize(vec3(1.0, -1.0, 0.0)), vec3(0.0, 1.0, 0.0))
"""

import taichi as ti
import taichi.math as tm

# Scalar type used for all geometry and color math
real = ti.f64

# Type aliases for 3D vectors
vec3 = ti.types.vector(3, real)
point3 = vec3
color = vec3

# Upper bound on rejection sampling attempts before falling back to the origin
MAX_REJECTION_ATTEMPTS = 1000

# Threshold below which a vector component counts as zero
NEAR_ZERO_EPSILON = 1e-8


# =============================================================================
# Vector Algebra
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> real:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def length_squared(v: vec3) -> real:
    """Compute the squared Euclidean length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> real:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(tm.dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Args:
        v: The input vector. Must not be zero-length.

    Returns:
        v / length(v). A zero vector produces NaN components.
    """
    return v / length(v)


@ti.func
def lerp(a: vec3, b: vec3, t: real) -> vec3:
    """Linearly interpolate between a (t = 0) and b (t = 1)."""
    return (1.0 - t) * a + t * b


@ti.func
def saturate(v: vec3) -> vec3:
    """Clamp every component to [0, 1]."""
    return tm.clamp(v, 0.0, 1.0)


@ti.func
def vsqrt(v: vec3) -> vec3:
    """Element-wise square root."""
    return vec3(ti.sqrt(v.x), ti.sqrt(v.y), ti.sqrt(v.z))


@ti.func
def gamma_correct(v: vec3, gamma: real) -> vec3:
    """Apply display gamma to each component: v ** (1 / gamma).

    Args:
        v: Linear color with non-negative components.
        gamma: Display gamma, e.g. 2.2.

    Returns:
        The gamma-encoded color.
    """
    inv_gamma = 1.0 / gamma
    return vec3(v.x**inv_gamma, v.y**inv_gamma, v.z**inv_gamma)


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Reflect v about the unit normal n: v - 2 * dot(v, n) * n."""
    return v - 2.0 * tm.dot(v, n) * n


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Return 1 if every component of v is below NEAR_ZERO_EPSILON in magnitude."""
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


# =============================================================================
# Random Sampling
# =============================================================================


@ti.func
def random_vec3() -> vec3:
    """Uniform random vector with components in [0, 1)."""
    return vec3(ti.random(real), ti.random(real), ti.random(real))


@ti.func
def random_vec3_range(lo: real, hi: real) -> vec3:
    """Uniform random vector with components in [lo, hi)."""
    return lo + (hi - lo) * random_vec3()


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a uniformly distributed point strictly inside the unit sphere.

    Draws candidates from [-1, 1)^3 and accepts the first one with squared
    length below 1. After MAX_REJECTION_ATTEMPTS rejected candidates the
    origin is returned instead.

    Returns:
        A point p with length_squared(p) < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    attempts = 0
    while found == 0 and attempts < MAX_REJECTION_ATTEMPTS:
        candidate = random_vec3_range(-1.0, 1.0)
        if length_squared(candidate) < 1.0:
            p = candidate
            found = 1
        attempts += 1
    return p
