from dataclasses import dataclass

from color import BLACK, Color


@dataclass(frozen=True)
class SceneSettings:
    """Render configuration: viewport, canvas size, focal distance and recursion budget."""
    viewport_width: float = 1.0
    viewport_height: float = 1.0
    canvas_width: int = 1024
    canvas_height: int = 1024
    projection_plane_d: float = 1.0
    max_recursions: int = 3
    background_color: Color = BLACK

    def __post_init__(self):
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ValueError("Viewport dimensions must be positive")
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError("Canvas dimensions must be positive")
        if self.canvas_width % 2 or self.canvas_height % 2:
            raise ValueError("Canvas dimensions must be even, got {}x{}".format(
                self.canvas_width, self.canvas_height))
        if self.max_recursions < 0:
            raise ValueError("max_recursions must be >= 0, got {}".format(self.max_recursions))
