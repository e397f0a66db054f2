"""Texture loading for OpenGL. Every function here needs an active GL context."""

import numpy as np
import pygame
from OpenGL.GL import (
    glGenTextures,
    glBindTexture,
    glTexImage2D,
    glTexParameteri,
    glGenerateMipmap,
    GL_TEXTURE_2D,
    GL_RGBA,
    GL_RGB,
    GL_UNSIGNED_BYTE,
    GL_TEXTURE_MIN_FILTER,
    GL_TEXTURE_MAG_FILTER,
    GL_LINEAR,
    GL_LINEAR_MIPMAP_LINEAR,
    GL_TEXTURE_WRAP_S,
    GL_TEXTURE_WRAP_T,
    GL_NEAREST,
    GL_CLAMP_TO_EDGE,
    GL_REPEAT,
)

def _apply_sampling(repeat: bool, mipmaps: bool) -> None:
    wrap = GL_REPEAT if repeat else GL_CLAMP_TO_EDGE
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, wrap)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, wrap)
    if mipmaps:
        glGenerateMipmap(GL_TEXTURE_2D)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR_MIPMAP_LINEAR)
    else:
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)


def load_texture(filename, *, repeat: bool = False, mipmaps: bool = True):
    """Load a texture from an image file.

    Parameters
    ----------
    filename : str
        Path to the image file
    repeat : bool
        Use GL_REPEAT wrapping (tiling normal maps) instead of clamping.

    Returns
    -------
    int
        OpenGL texture ID
    """
    try:
        surface = pygame.image.load(filename)
        surface = surface.convert_alpha()

        texture_data = pygame.image.tostring(surface, "RGBA", True)
        width, height = surface.get_size()

        texture_id = glGenTextures(1)
        glBindTexture(GL_TEXTURE_2D, texture_id)
        glTexImage2D(
            GL_TEXTURE_2D,
            0,
            GL_RGBA,
            width,
            height,
            0,
            GL_RGBA,
            GL_UNSIGNED_BYTE,
            texture_data,
        )
        _apply_sampling(repeat, mipmaps)

        return texture_id

    except (pygame.error, FileNotFoundError) as e:
        print(f"Failed to load texture {filename}: {e}")
        return create_test_texture()


def upload_image(image: np.ndarray, *, repeat: bool = False, mipmaps: bool = True) -> int:
    """Upload an (H, W, 3|4) uint8 array, row 0 at the top, as a 2D texture."""
    image = np.ascontiguousarray(np.flipud(image), dtype=np.uint8)
    height, width, channels = image.shape
    fmt = GL_RGBA if channels == 4 else GL_RGB

    texture_id = glGenTextures(1)
    glBindTexture(GL_TEXTURE_2D, texture_id)
    glTexImage2D(GL_TEXTURE_2D, 0, fmt, width, height, 0, fmt, GL_UNSIGNED_BYTE, image)
    _apply_sampling(repeat, mipmaps)

    return int(texture_id)


def create_test_texture():
    """Create a small magenta/black checkerboard used when an image is missing."""
    size = 64
    tile = 8
    ys, xs = np.mgrid[0:size, 0:size]
    mask = ((xs // tile) + (ys // tile)) % 2 == 0
    image = np.zeros((size, size, 4), dtype=np.uint8)
    image[mask] = (255, 0, 255, 255)
    image[~mask] = (0, 0, 0, 255)

    texture_id = upload_image(image, repeat=True, mipmaps=False)
    glBindTexture(GL_TEXTURE_2D, texture_id)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_NEAREST)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_NEAREST)

    print(f"Created checkerboard test texture (ID: {texture_id})")
    return texture_id
