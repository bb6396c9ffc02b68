import threading

import numpy as np
from PIL import Image


class Canvas:
    """
    Frame buffer addressed by centered coordinates (origin at the middle, y up).

    put_pixel is serialized with a lock so concurrent writers never interleave.
    """

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self._pixels = np.zeros((height, width, 3), dtype=np.float64)
        self._lock = threading.Lock()

    def _to_buffer_coords(self, x, y):
        # [-C/2, C/2) -> [0, C), flipping y so row 0 is the top
        column = self.width // 2 + x
        row = self.height // 2 - 1 - y
        if not (0 <= column < self.width and 0 <= row < self.height):
            raise IndexError("Pixel ({}, {}) is outside a {}x{} canvas".format(
                x, y, self.width, self.height))
        return row, column

    def put_pixel(self, x, y, color):
        row, column = self._to_buffer_coords(x, y)
        with self._lock:
            self._pixels[row, column] = color

    def to_image_array(self):
        """Copy of the (height, width, 3) float buffer."""
        with self._lock:
            return self._pixels.copy()

    def save(self, output_path):
        """Save the rendered image to a file."""
        save_image(self.to_image_array(), output_path)


def save_image(image_array, output_path):
    # Clamp values to [0, 1] then scale to [0, 255]
    image_array = np.clip(image_array, 0, 1)
    image_array = (image_array * 255).astype(np.uint8)

    image = Image.fromarray(image_array)
    image.save(output_path)
    print(f"Image saved to {output_path}")
