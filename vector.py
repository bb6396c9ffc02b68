import math
from collections import namedtuple

from numba import njit


class Vector(namedtuple('Vector', ['x', 'y', 'z'])):
    """A position or direction in 3D space."""
    __slots__ = ()

    def __new__(cls, x, y, z):
        return super().__new__(cls, float(x), float(y), float(z))


# =============================================================================
# Numba JIT-compiled helpers over plain (x, y, z) float tuples
# =============================================================================

@njit(cache=True)
def vec_dot(a, b):
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


@njit(cache=True)
def vec_add(a, b):
    return (a[0]+b[0], a[1]+b[1], a[2]+b[2])


@njit(cache=True)
def vec_sub(a, b):
    return (a[0]-b[0], a[1]-b[1], a[2]-b[2])


@njit(cache=True)
def vec_mul(a, b):
    return (a[0]*b[0], a[1]*b[1], a[2]*b[2])


@njit(cache=True)
def vec_scale(v, s):
    return (v[0]*s, v[1]*s, v[2]*s)


@njit(cache=True)
def vec_neg(v):
    return (-v[0], -v[1], -v[2])


@njit(cache=True)
def vec_length(v):
    return math.sqrt(vec_dot(v, v))


@njit(cache=True)
def vec_normalize(v):
    length = vec_length(v)
    if length == 0.0:
        raise ValueError("Cannot normalize a zero-length vector")
    return (v[0]/length, v[1]/length, v[2]/length)


# =============================================================================
# Vector API
# =============================================================================

def dot(a, b):
    return vec_dot(tuple(a), tuple(b))


def add(a, b):
    return Vector(*vec_add(tuple(a), tuple(b)))


def sub(a, b):
    return Vector(*vec_sub(tuple(a), tuple(b)))


def mul(a, b):
    """Component-wise product."""
    return Vector(*vec_mul(tuple(a), tuple(b)))


def scale(v, k):
    return Vector(*vec_scale(tuple(v), float(k)))


def neg(a):
    return Vector(*vec_neg(tuple(a)))


def norm(a):
    """Euclidean length."""
    return vec_length(tuple(a))


def normalize(a):
    """
    Return the unit vector pointing along a.

    Raises ValueError for a zero-length vector instead of producing NaNs.
    """
    return Vector(*vec_normalize(tuple(a)))
