"""OpenGL context helpers for the holiday scene."""
from __future__ import annotations

from typing import Tuple

from OpenGL import GL as gl

from .surface import BlendMode

BACKGROUND_COLOR = (2 / 255.0, 2 / 255.0, 5 / 255.0, 1.0)


def initialize_gl(surface_size: Tuple[int, int]) -> None:
    """Configure OpenGL state for 2D drawing with a top-left origin."""
    width, height = surface_size
    gl.glViewport(0, 0, width, height)
    gl.glClearColor(*BACKGROUND_COLOR)

    gl.glMatrixMode(gl.GL_PROJECTION)
    gl.glLoadIdentity()
    gl.glOrtho(0, width, height, 0, -1, 1)

    gl.glMatrixMode(gl.GL_MODELVIEW)
    gl.glLoadIdentity()

    gl.glDisable(gl.GL_DEPTH_TEST)
    gl.glEnable(gl.GL_BLEND)
    apply_blend_mode(BlendMode.NORMAL)


def apply_blend_mode(mode: BlendMode) -> None:
    if mode is BlendMode.ADDITIVE:
        gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE)
    else:
        gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)


def resize_viewport(surface_size: Tuple[int, int]) -> None:
    """Update viewport and projection when the window changes size."""
    initialize_gl(surface_size)
