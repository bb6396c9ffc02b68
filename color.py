from collections import namedtuple


def _clamp(value):
    return max(min(float(value), 1.0), 0.0)


class Color(namedtuple('Color', ['r', 'g', 'b'])):
    """RGB color with every channel clamped to [0, 1] on construction."""
    __slots__ = ()

    def __new__(cls, r, g, b):
        return super().__new__(cls, _clamp(r), _clamp(g), _clamp(b))


BLACK = Color(0.0, 0.0, 0.0)


def weight_color(c, w):
    """Scale all channels by w, then reclamp."""
    return Color(c.r * w, c.g * w, c.b * w)


def add_colors(c1, c2):
    return Color(c1.r + c2.r, c1.g + c2.g, c1.b + c2.b)
