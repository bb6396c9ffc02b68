import math
from dataclasses import dataclass

import numpy as np
from numba import njit

from color import Color
from vector import Vector, vec_dot, vec_sub


# Specular exponent that turns the highlight term off
NO_SPECULAR = -1


@dataclass(frozen=True)
class Sphere:
    center: Vector
    radius: float
    color: Color
    specular: float = NO_SPECULAR
    reflective: float = 0.0

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError("Sphere radius must be positive, got {}".format(self.radius))
        if self.specular != NO_SPECULAR and self.specular < 0:
            raise ValueError("Sphere specular exponent must be >= 0 or {}, got {}".format(
                NO_SPECULAR, self.specular))
        if not 0.0 <= self.reflective <= 1.0:
            raise ValueError("Sphere reflectivity must be in [0, 1], got {}".format(self.reflective))


@njit(cache=True)
def sphere_roots(center, radius, origin, direction):
    """
    Roots of |origin + t*direction - center|^2 = radius^2 (JIT-compiled).
    Returns (t1, t2) with t1 the larger root, or (inf, inf) on a miss.
    """
    co = vec_sub(origin, center)

    a = vec_dot(direction, direction)
    b = 2.0 * vec_dot(co, direction)
    c = vec_dot(co, co) - radius * radius

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return math.inf, math.inf
    sqrt_disc = math.sqrt(discriminant)
    t1 = (-b + sqrt_disc) / (2.0 * a)
    t2 = (-b - sqrt_disc) / (2.0 * a)
    return t1, t2


@njit(cache=True)
def nearest_sphere(centers, radii, origin, direction, t_min, t_max):
    """
    Linear scan for the smallest root in [t_min, t_max] (JIT-compiled).

    Returns (index, t); index is -1 and t is t_max when nothing is hit.
    The first sphere wins exact ties.
    """
    best_t = t_max
    best_index = -1

    for i in range(radii.shape[0]):
        center = (centers[i, 0], centers[i, 1], centers[i, 2])
        t1, t2 = sphere_roots(center, radii[i], origin, direction)
        if t1 < best_t and t_min <= t1 <= t_max:
            best_index = i
            best_t = t1
        if t2 < best_t and t_min <= t2 <= t_max:
            best_index = i
            best_t = t2

    return best_index, best_t


def pack_spheres(spheres):
    """
    Sphere geometry as read-only numpy arrays for the JIT kernels.

    Returns (centers, radii) with shapes (N, 3) and (N,).
    """
    centers = np.array([tuple(s.center) for s in spheres], dtype=np.float64).reshape(-1, 3)
    radii = np.array([s.radius for s in spheres], dtype=np.float64)
    centers.flags.writeable = False
    radii.flags.writeable = False
    return centers, radii


def intersect_ray_sphere(origin, direction, sphere):
    """
    Solve for the parametric distances where origin + t*direction meets the sphere.

    Callers range-check both roots themselves.
    """
    t1, t2 = sphere_roots(tuple(sphere.center), float(sphere.radius),
                          tuple(origin), tuple(direction))
    return float(t1), float(t2)
