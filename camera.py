from vector import Vector


class Camera:
    def __init__(self, position, viewport_width, viewport_height, screen_distance):
        self.position = Vector(*position)
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.screen_distance = screen_distance

    @classmethod
    def from_settings(cls, position, settings):
        return cls(position, settings.viewport_width, settings.viewport_height,
                   settings.projection_plane_d)

    def canvas_to_viewport(self, x, y, canvas_width, canvas_height):
        """Direction of the ray through centered pixel (x, y)."""
        return Vector(x * self.viewport_width / canvas_width,
                      y * self.viewport_height / canvas_height,
                      self.screen_distance)

    def generate_ray(self, x, y, canvas_width, canvas_height):
        """Generate a ray through pixel (x, y)."""
        return self.position, self.canvas_to_viewport(x, y, canvas_width, canvas_height)


def pixel_coordinates(canvas_width, canvas_height):
    """Yield every centered (x, y) pixel, x in [-Cw/2, Cw/2), y in [-Ch/2, Ch/2)."""
    for x in range(-canvas_width // 2, canvas_width // 2):
        for y in range(-canvas_height // 2, canvas_height // 2):
            yield x, y
