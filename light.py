from dataclasses import dataclass

from vector import Vector


@dataclass(frozen=True)
class AmbientLight:
    intensity: float


@dataclass(frozen=True)
class PointLight:
    intensity: float
    position: Vector


@dataclass(frozen=True)
class DirectionalLight:
    intensity: float
    direction: Vector    # Points *toward* the light, must be nonzero

    def __post_init__(self):
        if self.direction == (0.0, 0.0, 0.0):
            raise ValueError("Directional light needs a nonzero direction")


LIGHT_TYPES = (AmbientLight, PointLight, DirectionalLight)
