from dataclasses import dataclass, field

import numpy as np

from color import Color
from light import AmbientLight, DirectionalLight, PointLight
from surfaces.sphere import Sphere, pack_spheres
from vector import Vector


@dataclass(frozen=True)
class Scene:
    """Immutable pair of spheres and lights, shared read-only while rendering."""
    spheres: tuple
    lights: tuple
    # Packed copies of the sphere geometry for the JIT kernels
    sphere_centers: np.ndarray = field(init=False, repr=False, compare=False)
    sphere_radii: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Freeze whatever sequence was passed in
        object.__setattr__(self, 'spheres', tuple(self.spheres))
        object.__setattr__(self, 'lights', tuple(self.lights))
        centers, radii = pack_spheres(self.spheres)
        object.__setattr__(self, 'sphere_centers', centers)
        object.__setattr__(self, 'sphere_radii', radii)


def sample_scene():
    """Three spheres on a giant yellow floor sphere, lit by ambient, point and directional lights."""
    spheres = [
        Sphere(Vector(0, -1, 3), 1, Color(1.0, 0.0, 0.0), 500, 0.2),
        Sphere(Vector(2, 0, 4), 1, Color(0.0, 0.0, 1.0), 500, 0.3),
        Sphere(Vector(-2, 0, 4), 1, Color(0.0, 1.0, 0.0), 10, 0.4),
        Sphere(Vector(0, -5001, 0), 5000, Color(1.0, 1.0, 0.0), 1000, 0.5),
    ]
    lights = [
        AmbientLight(0.2),
        PointLight(0.6, Vector(2, 1, 0)),
        DirectionalLight(0.2, Vector(1, 4, 4)),
    ]
    return Scene(spheres, lights)
