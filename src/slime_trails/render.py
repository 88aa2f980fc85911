"""Render pass: turn the trail field into pixels.

The field stores premultiplied RGBA; it is shown composited over a black
background.
"""

import imageio.v3 as iio
import numpy as np
import pygame
from PIL import Image

BACKGROUND = (0, 0, 0)


def field_to_rgb(field):
    """Return an (height, width, 3) uint8 image of the field over black."""
    buffer = field.buffer
    alpha = buffer[:, :, 3:4] / np.float32(255.0)
    background = np.array(BACKGROUND, dtype=np.float32)
    rgb = buffer[:, :, :3] + background * (np.float32(1.0) - alpha)
    return np.clip(rgb, 0, 255).astype(np.uint8)


def scale_image(rgb, pixel_scale):
    if pixel_scale == 1:
        return rgb
    return np.repeat(np.repeat(rgb, pixel_scale, axis=0), pixel_scale, axis=1)


def draw(screen, field):
    """Blit the field onto a pygame surface, stretched to fill it."""
    # pygame surfaces are indexed (x, y)
    surface = pygame.surfarray.make_surface(field_to_rgb(field).transpose(1, 0, 2))
    if surface.get_size() != screen.get_size():
        surface = pygame.transform.scale(surface, screen.get_size())
    screen.blit(surface, (0, 0))


def render_image(field, pixel_scale=1):
    return Image.fromarray(scale_image(field_to_rgb(field), pixel_scale), "RGB")


def save_gif(path, frames, fps=30):
    iio.imwrite(path, np.stack(list(frames)), duration=int(1000 / fps), loop=0)
