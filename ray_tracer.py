import argparse
import math
import multiprocessing as mp
import sys
import time

from numba import njit

from camera import Camera, pixel_coordinates
from canvas import Canvas
from color import BLACK, add_colors, weight_color
from light import AmbientLight, DirectionalLight, PointLight
from scene import sample_scene
from scene_settings import SceneSettings
from surfaces.sphere import NO_SPECULAR, nearest_sphere, pack_spheres
from vector import (Vector, vec_add, vec_dot, vec_neg, vec_normalize, vec_scale,
                    vec_sub)


# Lower bound for secondary rays so they don't hit the surface they start on
EPSILON = 0.001

EYE_POSITION = (0, 0, -3)


# =============================================================================
# Numba JIT-compiled shading helpers
# =============================================================================

@njit(cache=True)
def _reflect(ray, normal):
    return vec_sub(vec_scale(normal, 2.0 * vec_dot(normal, ray)), ray)


@njit(cache=True)
def _light_contribution(centers, radii, point, normal, view, to_light, t_max,
                        intensity, specular):
    """
    Diffuse + specular intensity from one non-ambient light (JIT-compiled).
    Zero when any sphere blocks the shadow ray within [EPSILON, t_max].
    """
    # Shadows
    shadow_index, _ = nearest_sphere(centers, radii, point, to_light, EPSILON, t_max)
    if shadow_index >= 0:
        return 0.0

    # Diffuse
    n = vec_normalize(normal)
    light_dir = vec_normalize(to_light)
    contribution = intensity * max(0.0, vec_dot(n, light_dir))

    # Specular
    if specular != NO_SPECULAR:
        r = vec_normalize(_reflect(light_dir, n))
        v = vec_normalize(view)
        contribution += intensity * max(0.0, vec_dot(r, v)) ** specular

    return contribution


def _closest_hit(spheres, centers, radii, origin, direction, t_min, t_max):
    index, t = nearest_sphere(centers, radii, tuple(origin), tuple(direction),
                              float(t_min), float(t_max))
    if index < 0:
        return None, float(t)
    return spheres[index], float(t)


def closest_intersection(spheres, origin, direction, t_min, t_max):
    """
    Find the nearest sphere hit along origin + t*direction with t in [t_min, t_max].

    Returns:
        (sphere, t) for the closest hit
        (None, t_max) if nothing is hit
    """
    centers, radii = pack_spheres(spheres)
    return _closest_hit(spheres, centers, radii, origin, direction, t_min, t_max)


def reflect_ray(ray, normal):
    """Mirror ray about normal. Both should already be unit length."""
    return Vector(*_reflect(tuple(ray), tuple(normal)))


def lighting(scene, point, normal, view, specular):
    """
    Accumulate light intensity arriving at point (ambient + diffuse + specular).

    The result is not clamped; clamping happens when it weights a Color.
    """
    if specular != NO_SPECULAR and specular < 0:
        raise ValueError("Specular exponent must be >= 0 or {}, got {}".format(NO_SPECULAR, specular))

    point, normal, view = tuple(point), tuple(normal), tuple(view)
    intensity = 0.0
    for light in scene.lights:
        if isinstance(light, AmbientLight):
            intensity += light.intensity
            continue

        if isinstance(light, PointLight):
            # Unnormalized, so t = 1 lands exactly on the light
            to_light = vec_sub(tuple(light.position), point)
            t_max = 1.0
        elif isinstance(light, DirectionalLight):
            to_light = tuple(light.direction)
            t_max = math.inf
        else:
            raise TypeError("Unknown light type: {}".format(type(light).__name__))

        intensity += _light_contribution(scene.sphere_centers, scene.sphere_radii,
                                         point, normal, view, to_light, t_max,
                                         float(light.intensity), float(specular))

    return intensity


def trace_ray(scene, origin, direction, t_min, t_max, depth, background_color=BLACK):
    """
    Trace a ray through the scene and return the color.

    Reflections recurse with depth - 1 until depth reaches 0 or the surface
    is not reflective.
    """
    origin, direction = tuple(origin), tuple(direction)
    sphere, t = _closest_hit(scene.spheres, scene.sphere_centers, scene.sphere_radii,
                             origin, direction, t_min, t_max)
    if sphere is None:
        return background_color

    # Local color
    hit_point = vec_add(origin, vec_scale(direction, t))
    normal = vec_normalize(vec_sub(hit_point, tuple(sphere.center)))
    intensity = lighting(scene, hit_point, normal, vec_neg(direction), sphere.specular)
    local_color = weight_color(sphere.color, intensity)

    r = sphere.reflective
    if depth <= 0 or r <= 0:
        return local_color

    # Reflection
    reflected_direction = _reflect(vec_neg(direction), normal)
    reflected_color = trace_ray(scene, hit_point, reflected_direction, EPSILON, math.inf,
                                depth - 1, background_color)

    return add_colors(weight_color(local_color, 1 - r), weight_color(reflected_color, r))


def trace_pixel(scene, camera, settings, x, y):
    """Color of centered pixel (x, y) with the primary ray starting at the viewport (t >= 1)."""
    origin, direction = camera.generate_ray(x, y, settings.canvas_width, settings.canvas_height)
    return trace_ray(scene, origin, direction, 1.0, math.inf,
                     settings.max_recursions, settings.background_color)


def render(scene, camera, settings, canvas):
    """
    Render the scene into canvas one pixel at a time (sequential version).
    """
    width = settings.canvas_width
    height = settings.canvas_height
    print(f"Max depth: {settings.max_recursions}, Rendering {width}x{height} sequentially...")

    start_time = time.time()
    for x, y in pixel_coordinates(width, height):
        canvas.put_pixel(x, y, trace_pixel(scene, camera, settings, x, y))

    total_time = time.time() - start_time
    print(f"Rendering complete in {total_time:.1f}s")

    return canvas


# Per-process render inputs, installed once by the pool initializer
_worker_data = {}


def _init_worker(scene, camera, settings):
    _worker_data['scene'] = scene
    _worker_data['camera'] = camera
    _worker_data['settings'] = settings


def _render_pixel(coords):
    """
    Worker function for a single pixel.
    Called by multiprocessing pool; pure, the parent does the canvas write.
    """
    x, y = coords
    color = trace_pixel(_worker_data['scene'], _worker_data['camera'],
                        _worker_data['settings'], x, y)
    return x, y, color


def render_parallel(scene, camera, settings, canvas, num_workers=None, chunksize=None):
    """
    Render the scene using multiprocessing, one task per pixel.

    Returns only once every pixel has been written and the pool has shut down.

    Args:
        num_workers: number of worker processes (default: CPU count)
        chunksize: pixels handed to a worker per dispatch (default: ~4 chunks per worker)
    """
    if num_workers is None:
        num_workers = mp.cpu_count()

    width = settings.canvas_width
    height = settings.canvas_height
    total_pixels = width * height
    if chunksize is None:
        chunksize = max(1, total_pixels // (num_workers * 4))  # 4 chunks per worker for load balancing

    print(f"Max depth: {settings.max_recursions}")
    print(f"Parallel rendering {width}x{height} with {num_workers} workers (chunksize {chunksize})...")

    start_time = time.time()
    completed = 0
    with mp.Pool(num_workers, initializer=_init_worker,
                 initargs=(scene, camera, settings)) as pool:
        for x, y, color in pool.imap_unordered(_render_pixel, pixel_coordinates(width, height),
                                               chunksize):
            canvas.put_pixel(x, y, color)
            completed += 1
            if completed % height == 0 or completed == total_pixels:
                elapsed = time.time() - start_time
                progress = completed / total_pixels
                eta = (elapsed / progress) * (1 - progress)
                print(f"Pixels {completed}/{total_pixels} ({progress*100:.1f}%) - ETA: {eta:.0f}s", end='\r')
                sys.stdout.flush()
        pool.close()
        pool.join()

    print()
    if completed != total_pixels:
        raise RuntimeError("Frame incomplete: {} of {} pixels rendered".format(completed, total_pixels))

    total_time = time.time() - start_time
    print(f"Parallel rendering complete in {total_time:.1f}s")

    return canvas


def main(argv=None):
    parser = argparse.ArgumentParser(description='Whitted-style sphere ray tracer')
    parser.add_argument('output_image', type=str, nargs='?', default='out.png',
                        help='Name of the output image file')
    parser.add_argument('--width', type=int, default=1024, help='Canvas width')
    parser.add_argument('--height', type=int, default=1024, help='Canvas height')
    parser.add_argument('--max-depth', type=int, default=3,
                        help='Maximum number of reflection bounces')
    parser.add_argument('--sequential', action='store_true',
                        help='Render in a single process')
    parser.add_argument('--workers', type=int, default=None,
                        help='Number of worker processes (default: CPU count)')
    parser.add_argument('--chunksize', type=int, default=None,
                        help='Pixels per task dispatch in parallel mode')
    args = parser.parse_args(argv)

    settings = SceneSettings(canvas_width=args.width, canvas_height=args.height,
                             max_recursions=args.max_depth)
    camera = Camera.from_settings(EYE_POSITION, settings)
    scene = sample_scene()
    canvas = Canvas(settings.canvas_width, settings.canvas_height)

    print(f"Scene loaded: {len(scene.spheres)} spheres, {len(scene.lights)} lights")

    if args.sequential:
        render(scene, camera, settings, canvas)
    else:
        render_parallel(scene, camera, settings, canvas, args.workers, args.chunksize)

    canvas.save(args.output_image)


if __name__ == '__main__':
    main()
