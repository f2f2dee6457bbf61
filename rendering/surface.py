"""Drawing-surface contract used by the frame renderer.

The renderer only talks to a ``DrawingSurface``: a 2D canvas-like target
with fills, gradients, text, a save/restore state stack, affine
transforms and two blend modes. ``rendering.gl_surface.GLSurface`` is the
OpenGL implementation used by the application window.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple, Union

import numpy as np

Vec2 = Tuple[float, float]
Color = Tuple[float, float, float, float]
ColorStop = Tuple[float, Color]

CURVE_SEGMENTS = 12


class SurfaceUnavailableError(RuntimeError):
    """No drawing surface or graphics context could be created."""


class BlendMode(str, Enum):
    NORMAL = "source-over"
    ADDITIVE = "lighter"


def _lerp_color(a: Color, b: Color, t: float) -> Color:
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
        a[3] + (b[3] - a[3]) * t,
    )


def sample_stops(stops: Sequence[ColorStop], offset: float) -> Color:
    """Interpolate a colour along gradient ``stops`` (offsets clamp to ``[0, 1]``)."""

    if not stops:
        return (0.0, 0.0, 0.0, 0.0)
    offset = max(0.0, min(1.0, offset))
    previous_offset, previous_color = stops[0]
    if offset <= previous_offset:
        return previous_color
    for stop_offset, stop_color in stops[1:]:
        if offset <= stop_offset:
            span = stop_offset - previous_offset
            if span <= 0.0:
                return stop_color
            return _lerp_color(previous_color, stop_color, (offset - previous_offset) / span)
        previous_offset, previous_color = stop_offset, stop_color
    return previous_color


def _same_point(a: Vec2, b: Vec2) -> bool:
    return abs(a[0] - b[0]) <= 1e-9 and abs(a[1] - b[1]) <= 1e-9


@dataclass(frozen=True)
class LinearGradient:
    start: Vec2
    end: Vec2
    stops: Tuple[ColorStop, ...]

    def color_at(self, point: Vec2) -> Color:
        dx = self.end[0] - self.start[0]
        dy = self.end[1] - self.start[1]
        length_sq = dx * dx + dy * dy
        if length_sq <= 0.0:
            return sample_stops(self.stops, 0.0)
        t = ((point[0] - self.start[0]) * dx + (point[1] - self.start[1]) * dy) / length_sq
        return sample_stops(self.stops, t)


@dataclass(frozen=True)
class RadialGradient:
    center: Vec2
    inner_radius: float
    outer_radius: float
    stops: Tuple[ColorStop, ...]

    def color_at(self, point: Vec2) -> Color:
        distance = math.hypot(point[0] - self.center[0], point[1] - self.center[1])
        return self.color_at_distance(distance)

    def color_at_distance(self, distance: float) -> Color:
        span = self.outer_radius - self.inner_radius
        if span <= 0.0:
            return sample_stops(self.stops, 1.0 if distance >= self.outer_radius else 0.0)
        return sample_stops(self.stops, (distance - self.inner_radius) / span)


Paint = Union[Color, LinearGradient, RadialGradient]


@dataclass(frozen=True)
class FontStyle:
    faces: str  # comma separated, first installed face wins
    size: int


class PathBuilder:
    """Canvas-style path recorder; curves are flattened into polygons."""

    def __init__(self, curve_segments: int = CURVE_SEGMENTS) -> None:
        self._curve_segments = curve_segments
        self._subpaths: List[List[Vec2]] = []

    def _current(self) -> List[Vec2]:
        if not self._subpaths:
            self._subpaths.append([(0.0, 0.0)])
        return self._subpaths[-1]

    def move_to(self, x: float, y: float) -> "PathBuilder":
        self._subpaths.append([(x, y)])
        return self

    def line_to(self, x: float, y: float) -> "PathBuilder":
        self._current().append((x, y))
        return self

    def quadratic_curve_to(self, cx: float, cy: float, x: float, y: float) -> "PathBuilder":
        points = self._current()
        x0, y0 = points[-1]
        for step in range(1, self._curve_segments + 1):
            t = step / self._curve_segments
            u = 1.0 - t
            points.append(
                (
                    u * u * x0 + 2.0 * u * t * cx + t * t * x,
                    u * u * y0 + 2.0 * u * t * cy + t * t * y,
                )
            )
        return self

    def bezier_curve_to(
        self,
        c1x: float,
        c1y: float,
        c2x: float,
        c2y: float,
        x: float,
        y: float,
    ) -> "PathBuilder":
        points = self._current()
        x0, y0 = points[-1]
        for step in range(1, self._curve_segments + 1):
            t = step / self._curve_segments
            u = 1.0 - t
            a = u * u * u
            b = 3.0 * u * u * t
            c = 3.0 * u * t * t
            d = t * t * t
            points.append(
                (
                    a * x0 + b * c1x + c * c2x + d * x,
                    a * y0 + b * c1y + c * c2y + d * y,
                )
            )
        return self

    def close(self) -> "PathBuilder":
        points = self._current()
        if len(points) > 1 and points[0] != points[-1]:
            points.append(points[0])
        return self

    def polygons(self) -> List[List[Vec2]]:
        """Flattened subpaths with repeated vertices dropped, at least three vertices each."""

        polygons: List[List[Vec2]] = []
        for points in self._subpaths:
            unique: List[Vec2] = []
            for point in points:
                if not unique or not _same_point(unique[-1], point):
                    unique.append(point)
            if len(unique) > 1 and _same_point(unique[0], unique[-1]):
                unique.pop()
            if len(unique) >= 3:
                polygons.append(unique)
        return polygons


class DrawingSurface(Protocol):
    """What the renderer needs from a drawing target."""

    @property
    def size(self) -> Tuple[int, int]:
        ...

    def set_blend_mode(self, mode: BlendMode) -> None:
        ...

    def set_alpha(self, alpha: float) -> None:
        """Global opacity applied to every following fill (clamped to ``[0, 1]``)."""

    def set_shadow(self, color: Optional[Color], blur: float = 0.0) -> None:
        """Glow drawn behind following fills; ``None`` or zero blur disables it."""

    def save(self) -> None:
        ...

    def restore(self) -> None:
        ...

    def translate(self, dx: float, dy: float) -> None:
        ...

    def rotate(self, radians: float) -> None:
        ...

    def transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        """Compose the canvas-style affine matrix ``[a c e; b d f]``."""

    def fill_rect(self, x: float, y: float, width: float, height: float, paint: Paint) -> None:
        ...

    def fill_circle(self, center: Vec2, radius: float, paint: Paint) -> None:
        ...

    def fill_circles(self, centers: np.ndarray, radii: np.ndarray, colors: np.ndarray) -> None:
        """Solid circles drawn in order; the global alpha applies, shadows do not.

        ``centers`` is ``(n, 2)``, ``radii`` ``(n,)`` and ``colors`` ``(n, 4)`` RGBA.
        """

    def fill_ellipse(self, center: Vec2, radius_x: float, radius_y: float, paint: Paint) -> None:
        ...

    def fill_path(self, path: PathBuilder, paint: Paint) -> None:
        ...

    def fill_text(
        self,
        text: str,
        position: Vec2,
        font: FontStyle,
        paint: Paint,
    ) -> None:
        """Draw ``text`` centred horizontally on ``position``, which sits on the baseline."""
