import numpy as np
import pytest
from PIL import Image

from camera import Camera, pixel_coordinates
from canvas import Canvas
from color import Color
from light import AmbientLight
from ray_tracer import EYE_POSITION, main, render, render_parallel
from scene import Scene, sample_scene
from scene_settings import SceneSettings
from surfaces.sphere import Sphere
from vector import Vector


class RecordingCanvas(Canvas):
    def __init__(self, width, height):
        super().__init__(width, height)
        self.writes = []

    def put_pixel(self, x, y, color):
        self.writes.append((x, y))
        super().put_pixel(x, y, color)


@pytest.fixture
def settings():
    return SceneSettings(canvas_width=16, canvas_height=16, max_recursions=2)


@pytest.fixture
def camera(settings):
    return Camera.from_settings(EYE_POSITION, settings)


def test_sequential_render_writes_every_pixel_once(settings, camera):
    canvas = RecordingCanvas(16, 16)
    render(sample_scene(), camera, settings, canvas)
    assert sorted(canvas.writes) == sorted(pixel_coordinates(16, 16))


def test_parallel_render_writes_every_pixel_once(settings, camera):
    canvas = RecordingCanvas(16, 16)
    render_parallel(sample_scene(), camera, settings, canvas, num_workers=2, chunksize=7)
    assert sorted(canvas.writes) == sorted(pixel_coordinates(16, 16))


def test_parallel_matches_sequential_bit_for_bit(settings, camera):
    scene = sample_scene()
    sequential = render(scene, camera, settings, Canvas(16, 16)).to_image_array()
    first = render_parallel(scene, camera, settings, Canvas(16, 16), num_workers=2).to_image_array()
    second = render_parallel(scene, camera, settings, Canvas(16, 16), num_workers=3,
                             chunksize=1).to_image_array()

    assert np.array_equal(sequential, first)
    assert np.array_equal(first, second)
    # Something other than background made it into the frame
    assert np.any(sequential > 0)


def test_worker_errors_propagate(settings, camera):
    blocker = Sphere(Vector(0, 0, 5), 100, Color(1, 1, 1))
    broken = Scene([blocker], [AmbientLight(0.2), object()])
    with pytest.raises(TypeError):
        render_parallel(broken, camera, settings, Canvas(16, 16), num_workers=2)


def test_main_sequential_saves_image(tmp_path):
    output_path = tmp_path / "out.png"
    main([str(output_path), "--width", "8", "--height", "8", "--max-depth", "1", "--sequential"])
    image = Image.open(output_path)
    assert image.size == (8, 8)


def test_main_parallel_saves_image(tmp_path):
    output_path = tmp_path / "out.png"
    main([str(output_path), "--width", "8", "--height", "8", "--workers", "2"])
    assert output_path.exists()
