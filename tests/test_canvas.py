from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from PIL import Image

from camera import Camera, pixel_coordinates
from canvas import Canvas
from color import Color
from scene_settings import SceneSettings
from vector import Vector


# --- Tests for the canvas collaborator ---

def test_centered_coordinates_map_to_buffer():
    canvas = Canvas(4, 4)
    canvas.put_pixel(0, 0, Color(1, 0, 0))
    canvas.put_pixel(-2, -2, Color(0, 1, 0))
    canvas.put_pixel(1, 1, Color(0, 0, 1))

    pixels = canvas.to_image_array()
    assert tuple(pixels[1, 2]) == (1.0, 0.0, 0.0)
    # Bottom-left and top-right corners, y up
    assert tuple(pixels[3, 0]) == (0.0, 1.0, 0.0)
    assert tuple(pixels[0, 3]) == (0.0, 0.0, 1.0)


@pytest.mark.parametrize("x, y", [(2, 0), (0, 2), (-3, 0), (0, -3)])
def test_out_of_range_pixel_raises(x, y):
    canvas = Canvas(4, 4)
    with pytest.raises(IndexError):
        canvas.put_pixel(x, y, Color(1, 1, 1))


def test_every_pixel_coordinate_fits_the_canvas():
    width, height = 6, 4
    canvas = Canvas(width, height)
    coords = list(pixel_coordinates(width, height))
    assert len(coords) == len(set(coords)) == width * height
    for x, y in coords:
        canvas.put_pixel(x, y, Color(1, 1, 1))
    assert np.all(canvas.to_image_array() == 1.0)


def test_concurrent_writes_land_once_each():
    width, height = 32, 32
    canvas = Canvas(width, height)

    def write(coords):
        x, y = coords
        canvas.put_pixel(x, y, Color((x + 16) / 32, (y + 16) / 32, 0.5))

    with ThreadPoolExecutor(max_workers=8) as executor:
        list(executor.map(write, pixel_coordinates(width, height)))

    pixels = canvas.to_image_array()
    for x, y in pixel_coordinates(width, height):
        row, column = height // 2 - 1 - y, width // 2 + x
        assert tuple(pixels[row, column]) == ((x + 16) / 32, (y + 16) / 32, 0.5)


def test_save_writes_png(tmp_path):
    canvas = Canvas(4, 2)
    canvas.put_pixel(0, 0, Color(1, 0, 0))
    output_path = tmp_path / "frame.png"
    canvas.save(str(output_path))

    image = Image.open(output_path)
    assert image.size == (4, 2)
    assert image.getpixel((2, 0)) == (255, 0, 0)
    assert image.getpixel((0, 1)) == (0, 0, 0)


# --- Tests for camera and settings ---

def test_canvas_to_viewport():
    camera = Camera((0, 0, -3), 1, 1, 1)
    assert camera.canvas_to_viewport(512, -256, 1024, 1024) == Vector(0.5, -0.25, 1)
    origin, direction = camera.generate_ray(0, 0, 1024, 1024)
    assert origin == Vector(0, 0, -3)
    assert direction == Vector(0, 0, 1)


def test_pixel_coordinates_order():
    coords = list(pixel_coordinates(4, 2))
    assert coords[0] == (-2, -1)
    assert coords[-1] == (1, 0)
    assert len(coords) == 8


def test_settings_defaults():
    settings = SceneSettings()
    assert (settings.canvas_width, settings.canvas_height) == (1024, 1024)
    assert (settings.viewport_width, settings.viewport_height) == (1.0, 1.0)
    assert settings.projection_plane_d == 1.0
    assert settings.max_recursions == 3


@pytest.mark.parametrize("kwargs", [
    {"canvas_width": 15},
    {"canvas_height": 0},
    {"viewport_width": -1},
    {"max_recursions": -1},
])
def test_invalid_settings_raise(kwargs):
    with pytest.raises(ValueError):
        SceneSettings(**kwargs)
