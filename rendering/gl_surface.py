"""OpenGL-backed drawing surface.

Frames are drawn into an off-screen colour buffer that survives between
frames (the renderer's translucent clear relies on that to leave trails)
and then copied to the window. Solid fills are collected into triangle
batches and flushed whenever the GL state has to change.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pygame
from OpenGL import GL as gl

from .opengl_context import BACKGROUND_COLOR, apply_blend_mode, initialize_gl, resize_viewport
from .surface import (
    BlendMode,
    Color,
    FontStyle,
    LinearGradient,
    Paint,
    PathBuilder,
    RadialGradient,
    SurfaceUnavailableError,
    Vec2,
)

logger = logging.getLogger(__name__)

GRADIENT_RINGS = 24
SHADOW_SEGMENTS = 32
TEXT_GLOW_STEPS = 8

_UNIT_DISCS: Dict[int, np.ndarray] = {}


def _circle_segments(radius: float) -> int:
    return max(8, min(64, int(radius * 1.5)))


def _unit_disc(segments: int) -> np.ndarray:
    """Triangle list covering a unit disc, shape ``(segments * 3, 2)``."""

    disc = _UNIT_DISCS.get(segments)
    if disc is None:
        angles = np.linspace(0.0, math.tau, segments + 1)
        ring = np.column_stack((np.cos(angles), np.sin(angles)))
        triangles = np.zeros((segments, 3, 2), dtype=np.float32)
        triangles[:, 1] = ring[:-1]
        triangles[:, 2] = ring[1:]
        disc = triangles.reshape(-1, 2)
        _UNIT_DISCS[segments] = disc
    return disc


def _clamp01(value: float) -> float:
    if value <= 0.0:
        return 0.0
    if value >= 1.0:
        return 1.0
    return value


@dataclass
class _StyleState:
    alpha: float = 1.0
    blend: BlendMode = BlendMode.NORMAL
    shadow_color: Optional[Color] = None
    shadow_blur: float = 0.0


class _TriangleBatch:
    """Coloured triangles accumulated between GL state changes."""

    def __init__(self) -> None:
        self._vertices: List[np.ndarray] = []
        self._colors: List[np.ndarray] = []

    def add(self, vertices: np.ndarray, color: Color) -> None:
        self.add_shaded(vertices, np.broadcast_to(np.asarray(color, dtype=np.float32), (len(vertices), 4)))

    def add_shaded(self, vertices: np.ndarray, colors: np.ndarray) -> None:
        """Triangles with one RGBA colour per vertex."""

        self._vertices.append(vertices)
        self._colors.append(colors)

    def flush(self) -> None:
        if not self._vertices:
            return
        vertices = np.ascontiguousarray(np.concatenate(self._vertices), dtype=np.float32)
        colors = np.ascontiguousarray(np.concatenate(self._colors), dtype=np.float32)
        self._vertices.clear()
        self._colors.clear()

        gl.glEnableClientState(gl.GL_VERTEX_ARRAY)
        gl.glEnableClientState(gl.GL_COLOR_ARRAY)
        gl.glVertexPointer(2, gl.GL_FLOAT, 0, vertices)
        gl.glColorPointer(4, gl.GL_FLOAT, 0, colors)
        gl.glDrawArrays(gl.GL_TRIANGLES, 0, len(vertices))
        gl.glDisableClientState(gl.GL_COLOR_ARRAY)
        gl.glDisableClientState(gl.GL_VERTEX_ARRAY)


class TrailBuffer:
    """Off-screen colour buffer that keeps its contents between frames."""

    def __init__(self) -> None:
        self.framebuffer = 0
        self.texture = 0
        self.size: Tuple[int, int] = (0, 0)

    def allocate(self, size: Tuple[int, int]) -> None:
        self.release()
        width, height = max(1, size[0]), max(1, size[1])

        self.texture = gl.glGenTextures(1)
        gl.glBindTexture(gl.GL_TEXTURE_2D, self.texture)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MIN_FILTER, gl.GL_LINEAR)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MAG_FILTER, gl.GL_LINEAR)
        gl.glTexImage2D(
            gl.GL_TEXTURE_2D,
            0,
            gl.GL_RGBA8,
            width,
            height,
            0,
            gl.GL_RGBA,
            gl.GL_UNSIGNED_BYTE,
            None,
        )
        gl.glBindTexture(gl.GL_TEXTURE_2D, 0)

        self.framebuffer = gl.glGenFramebuffers(1)
        gl.glBindFramebuffer(gl.GL_FRAMEBUFFER, self.framebuffer)
        gl.glFramebufferTexture2D(
            gl.GL_FRAMEBUFFER,
            gl.GL_COLOR_ATTACHMENT0,
            gl.GL_TEXTURE_2D,
            self.texture,
            0,
        )
        status = gl.glCheckFramebufferStatus(gl.GL_FRAMEBUFFER)
        if status != gl.GL_FRAMEBUFFER_COMPLETE:
            gl.glBindFramebuffer(gl.GL_FRAMEBUFFER, 0)
            self.release()
            raise SurfaceUnavailableError(f"Trail framebuffer incomplete (status 0x{int(status):x})")

        gl.glClearColor(*BACKGROUND_COLOR)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT)
        gl.glBindFramebuffer(gl.GL_FRAMEBUFFER, 0)
        self.size = (width, height)
        logger.debug("Allocated %dx%d trail buffer", width, height)

    def release(self) -> None:
        if self.framebuffer:
            gl.glDeleteFramebuffers(1, [self.framebuffer])
            self.framebuffer = 0
        if self.texture:
            gl.glDeleteTextures([self.texture])
            self.texture = 0

    def bind(self) -> None:
        gl.glBindFramebuffer(gl.GL_FRAMEBUFFER, self.framebuffer)

    def present(self) -> None:
        """Copy the buffer onto the window's back buffer."""

        gl.glBindFramebuffer(gl.GL_FRAMEBUFFER, 0)
        width, height = self.size
        initialize_gl(self.size)
        gl.glDisable(gl.GL_BLEND)
        gl.glEnable(gl.GL_TEXTURE_2D)
        gl.glBindTexture(gl.GL_TEXTURE_2D, self.texture)
        gl.glColor4f(1.0, 1.0, 1.0, 1.0)
        gl.glBegin(gl.GL_QUADS)
        gl.glTexCoord2f(0.0, 1.0)
        gl.glVertex2f(0.0, 0.0)
        gl.glTexCoord2f(1.0, 1.0)
        gl.glVertex2f(width, 0.0)
        gl.glTexCoord2f(1.0, 0.0)
        gl.glVertex2f(width, height)
        gl.glTexCoord2f(0.0, 0.0)
        gl.glVertex2f(0.0, height)
        gl.glEnd()
        gl.glBindTexture(gl.GL_TEXTURE_2D, 0)
        gl.glDisable(gl.GL_TEXTURE_2D)
        gl.glEnable(gl.GL_BLEND)


class GLSurface:
    """``DrawingSurface`` implemented with immediate-mode OpenGL."""

    def __init__(self, size: Tuple[int, int]) -> None:
        pygame.font.init()
        self._size = size
        self._style = _StyleState()
        self._stack: List[_StyleState] = []
        self._batch = _TriangleBatch()
        self._fonts: Dict[FontStyle, pygame.font.Font] = {}
        self._trail = TrailBuffer()
        initialize_gl(size)
        self._trail.allocate(size)

    # ------------------------------------------------------------------
    # Lifecycle
    @property
    def size(self) -> Tuple[int, int]:
        return self._size

    def resize(self, size: Tuple[int, int]) -> None:
        self._batch.flush()
        self._size = size
        resize_viewport(size)
        self._trail.allocate(size)

    def begin_frame(self) -> None:
        self._trail.bind()
        initialize_gl(self._size)
        self._style = _StyleState()
        self._stack.clear()

    def end_frame(self) -> None:
        self._batch.flush()
        self._trail.present()

    def release(self) -> None:
        self._trail.release()

    # ------------------------------------------------------------------
    # State
    def set_blend_mode(self, mode: BlendMode) -> None:
        if mode is self._style.blend:
            return
        self._batch.flush()
        self._style.blend = mode
        apply_blend_mode(mode)

    def set_alpha(self, alpha: float) -> None:
        self._style.alpha = _clamp01(alpha)

    def set_shadow(self, color: Optional[Color], blur: float = 0.0) -> None:
        self._style.shadow_color = color
        self._style.shadow_blur = max(0.0, blur)

    def save(self) -> None:
        self._batch.flush()
        self._stack.append(replace(self._style))
        gl.glPushMatrix()

    def restore(self) -> None:
        if not self._stack:
            return
        self._batch.flush()
        gl.glPopMatrix()
        self._style = self._stack.pop()
        apply_blend_mode(self._style.blend)

    def translate(self, dx: float, dy: float) -> None:
        self._batch.flush()
        gl.glTranslatef(dx, dy, 0.0)

    def rotate(self, radians: float) -> None:
        self._batch.flush()
        gl.glRotatef(math.degrees(radians), 0.0, 0.0, 1.0)

    def transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        self._batch.flush()
        matrix = np.array(
            [
                [a, c, 0.0, e],
                [b, d, 0.0, f],
                [0.0, 0.0, 1.0, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ],
            dtype=np.float32,
        )
        gl.glMultMatrixf(np.transpose(matrix).flatten())

    # ------------------------------------------------------------------
    # Fills
    def fill_rect(self, x: float, y: float, width: float, height: float, paint: Paint) -> None:
        self._fill_polygon(
            [(x, y), (x + width, y), (x + width, y + height), (x, y + height)],
            paint,
        )

    def fill_circle(self, center: Vec2, radius: float, paint: Paint) -> None:
        self.fill_ellipse(center, radius, radius, paint)

    def fill_circles(self, centers: np.ndarray, radii: np.ndarray, colors: np.ndarray) -> None:
        radii = np.asarray(radii, dtype=np.float32)
        if radii.size == 0:
            return
        disc = _unit_disc(_circle_segments(float(radii.max())))
        vertices = disc[np.newaxis, :, :] * radii[:, np.newaxis, np.newaxis]
        vertices += np.asarray(centers, dtype=np.float32)[:, np.newaxis, :]

        shaded = np.array(colors, dtype=np.float32).reshape(-1, 4)
        shaded[:, 3] = np.clip(shaded[:, 3] * self._style.alpha, 0.0, 1.0)
        self._batch.add_shaded(vertices.reshape(-1, 2), np.repeat(shaded, len(disc), axis=0))

    def fill_ellipse(self, center: Vec2, radius_x: float, radius_y: float, paint: Paint) -> None:
        if radius_x <= 0.0 or radius_y <= 0.0:
            return
        self._draw_shadow(center, max(radius_x, radius_y))
        if isinstance(paint, RadialGradient):
            self._fill_gradient_ellipse(center, radius_x, radius_y, paint)
            return
        disc = _unit_disc(_circle_segments(max(radius_x, radius_y)))
        vertices = disc * np.array((radius_x, radius_y), dtype=np.float32)
        vertices += np.array(center, dtype=np.float32)
        if isinstance(paint, LinearGradient):
            self._draw_shaded_triangles(vertices, paint)
            return
        self._batch.add(vertices, self._apply_alpha(paint))

    def fill_path(self, path: PathBuilder, paint: Paint) -> None:
        for polygon in path.polygons():
            self._fill_polygon(polygon, paint)

    def fill_text(
        self,
        text: str,
        position: Vec2,
        font: FontStyle,
        paint: Paint,
    ) -> None:
        if not text or self._style.alpha <= 0.0:
            return
        self._batch.flush()
        typeface = self._font(font)
        image = typeface.render(text, True, (255, 255, 255))
        width, height = image.get_size()
        left = position[0] - width * 0.5
        # ``position`` is the baseline, like a canvas.
        top = position[1] - typeface.get_ascent()

        color = self._style.shadow_color
        if color is not None and self._style.shadow_blur > 0.0:
            glow = image.copy()
            self._tint(glow, color, left, top, 2.0 / TEXT_GLOW_STEPS)
            for step in range(TEXT_GLOW_STEPS):
                angle = step / TEXT_GLOW_STEPS * math.tau
                reach = self._style.shadow_blur * 0.25
                self._blit(glow, left + math.cos(angle) * reach, top + math.sin(angle) * reach)

        self._tint(image, paint, left, top, 1.0)
        self._blit(image, left, top)

    # ------------------------------------------------------------------
    # Helpers
    def _apply_alpha(self, color: Color) -> Color:
        return (color[0], color[1], color[2], _clamp01(color[3] * self._style.alpha))

    def _paint_at(self, paint: Paint, point: Vec2) -> Color:
        if isinstance(paint, (LinearGradient, RadialGradient)):
            return self._apply_alpha(paint.color_at(point))
        return self._apply_alpha(paint)

    def _fill_polygon(self, points: Sequence[Vec2], paint: Paint) -> None:
        if len(points) < 3:
            return
        center_x = sum(point[0] for point in points) / len(points)
        center_y = sum(point[1] for point in points) / len(points)
        extent = max(math.hypot(x - center_x, y - center_y) for x, y in points)
        self._draw_shadow((center_x, center_y), extent)

        ring = np.asarray(points, dtype=np.float32)
        following = np.roll(ring, -1, axis=0)
        triangles = np.empty((len(ring), 3, 2), dtype=np.float32)
        triangles[:, 0] = (center_x, center_y)
        triangles[:, 1] = ring
        triangles[:, 2] = following
        vertices = triangles.reshape(-1, 2)
        if isinstance(paint, (LinearGradient, RadialGradient)):
            self._draw_shaded_triangles(vertices, paint)
            return
        self._batch.add(vertices, self._apply_alpha(paint))

    def _draw_shaded_triangles(self, vertices: np.ndarray, paint: Paint) -> None:
        self._batch.flush()
        gl.glBegin(gl.GL_TRIANGLES)
        for x, y in vertices:
            gl.glColor4f(*self._paint_at(paint, (float(x), float(y))))
            gl.glVertex2f(x, y)
        gl.glEnd()

    def _fill_gradient_ellipse(
        self,
        center: Vec2,
        radius_x: float,
        radius_y: float,
        gradient: RadialGradient,
    ) -> None:
        self._batch.flush()
        segments = _circle_segments(max(radius_x, radius_y))
        angles = np.linspace(0.0, math.tau, segments + 1)
        for ring in range(GRADIENT_RINGS):
            inner = ring / GRADIENT_RINGS
            outer = (ring + 1) / GRADIENT_RINGS
            gl.glBegin(gl.GL_TRIANGLE_STRIP)
            for angle in angles:
                cos_a = math.cos(angle)
                sin_a = math.sin(angle)
                for fraction in (inner, outer):
                    point = (
                        center[0] + cos_a * radius_x * fraction,
                        center[1] + sin_a * radius_y * fraction,
                    )
                    gl.glColor4f(*self._paint_at(gradient, point))
                    gl.glVertex2f(*point)
            gl.glEnd()

    def _draw_shadow(self, center: Vec2, extent: float) -> None:
        color = self._style.shadow_color
        blur = self._style.shadow_blur
        if color is None or blur <= 0.0 or color[3] <= 0.0:
            return
        self._batch.flush()
        radius = extent + blur
        gl.glBegin(gl.GL_TRIANGLE_FAN)
        gl.glColor4f(*self._apply_alpha(color))
        gl.glVertex2f(*center)
        gl.glColor4f(color[0], color[1], color[2], 0.0)
        for index in range(SHADOW_SEGMENTS + 1):
            angle = index / SHADOW_SEGMENTS * math.tau
            gl.glVertex2f(center[0] + math.cos(angle) * radius, center[1] + math.sin(angle) * radius)
        gl.glEnd()

    def _font(self, style: FontStyle) -> pygame.font.Font:
        font = self._fonts.get(style)
        if font is None:
            font = pygame.font.SysFont(style.faces, style.size)
            self._fonts[style] = font
        return font

    def _tint(self, image: pygame.Surface, paint: Paint, left: float, top: float, strength: float) -> None:
        """Colour a white text image row by row and fold in the global alpha."""

        width, height = image.get_size()
        rows = np.array(
            [
                paint.color_at((left + width * 0.5, top + row + 0.5))
                if isinstance(paint, (LinearGradient, RadialGradient))
                else paint
                for row in range(height)
            ],
            dtype=np.float32,
        )
        rgb = pygame.surfarray.pixels3d(image)
        rgb[:] = (np.clip(rows[:, :3], 0.0, 1.0) * 255.0).astype(np.uint8)[np.newaxis, :, :]
        del rgb
        alpha = pygame.surfarray.pixels_alpha(image)
        scale = np.clip(rows[:, 3] * self._style.alpha * strength, 0.0, 1.0)
        alpha[:] = (alpha * scale[np.newaxis, :]).astype(np.uint8)
        del alpha

    def _blit(self, image: pygame.Surface, left: float, top: float) -> None:
        width, height = image.get_size()
        data = pygame.image.tobytes(image, "RGBA", True)
        gl.glRasterPos2f(left, top + height)
        gl.glDrawPixels(width, height, gl.GL_RGBA, gl.GL_UNSIGNED_BYTE, data)
