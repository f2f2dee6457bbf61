"""Per-category drawing of projected tree particles."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Protocol

import numpy as np

from scene.camera import ProjectedParticle, ProjectedTree
from scene.palette import Color, hex_color, rgba
from scene.particles import OrnamentShape, ParticleField, ParticleKind

import settings

from .surface import BlendMode, DrawingSurface, PathBuilder

HIGHLIGHT = rgba(255, 255, 255, 0.4)
SHINE = rgba(255, 255, 255, 0.3)

STAR_GLOW = rgba(255, 230, 150, 0.8)
STAR_CORE = rgba(255, 255, 255, 0.9)
STAR_SPIKES = 5


class ParticleStyle(Protocol):
    def draw(self, surface: DrawingSurface, projected: ProjectedParticle, now_ms: float) -> None:
        ...


@dataclass(frozen=True)
class GlowDotStyle:
    """Additive dot whose opacity flickers on a sine wave.

    The rendered opacity is ``alpha * (base + sin(now * frequency + phase) * swing)``.
    Glow dots make up most of the tree, so the renderer draws them through
    ``GlowDotBatch``; ``draw`` handles a single particle.
    """

    frequency: float
    base: float
    swing: float
    phase: float = 0.0
    clamp: bool = False

    def opacity(self, rendered_alpha, blink_offset, now_ms: float):
        """Flickered opacity for scalars or numpy columns."""

        flicker = np.sin(now_ms * self.frequency + np.add(blink_offset, self.phase))
        alpha = np.multiply(rendered_alpha, self.base + flicker * self.swing)
        if self.clamp:
            alpha = np.clip(alpha, 0.0, 1.0)
        return alpha

    def draw(self, surface: DrawingSurface, projected: ProjectedParticle, now_ms: float) -> None:
        particle = projected.particle
        alpha = float(self.opacity(projected.rendered_alpha, particle.blink_offset, now_ms))
        surface.set_blend_mode(BlendMode.ADDITIVE)
        surface.set_alpha(alpha)
        surface.fill_circle((projected.x2d, projected.y2d), particle.radius * projected.scale, particle.color)


class GlowDotBatch:
    """Draws every glow-dot particle of a field with a few array operations.

    ``members`` marks the particles whose style is a ``GlowDotStyle``; their
    flicker constants are gathered into columns once per field.
    """

    def __init__(self, field: ParticleField, styles: Mapping[ParticleKind, ParticleStyle]) -> None:
        self.field = field
        count = len(field)
        self.members = np.zeros(count, dtype=bool)
        self.frequency = np.zeros(count)
        self.base = np.zeros(count)
        self.swing = np.zeros(count)
        self.phase = np.zeros(count)
        self.clamp = np.zeros(count, dtype=bool)
        for index, particle in enumerate(field.particles):
            style = styles[particle.kind]
            if not isinstance(style, GlowDotStyle):
                continue
            self.members[index] = True
            self.frequency[index] = style.frequency
            self.base[index] = style.base
            self.swing[index] = style.swing
            self.phase[index] = style.phase
            self.clamp[index] = style.clamp

    def prepare(self, tree: ProjectedTree, now_ms: float) -> "GlowDots":
        """Screen geometry and colour for every draw position of ``tree``."""

        order = tree.order
        field = self.field
        flicker = np.sin(now_ms * self.frequency[order] + field.blink_offset[order] + self.phase[order])
        alpha = tree.rendered_alpha * (self.base[order] + flicker * self.swing[order])
        alpha = np.where(self.clamp[order], np.clip(alpha, 0.0, 1.0), alpha)

        colors = field.color[order].copy()
        colors[:, 3] *= np.clip(alpha, 0.0, 1.0)
        return GlowDots(
            drawable=self.members[order] & tree.visible,
            centers=np.column_stack((tree.x2d, tree.y2d)),
            radii=field.radius[order] * tree.scale,
            colors=colors,
        )


@dataclass(frozen=True)
class GlowDots:
    drawable: np.ndarray
    centers: np.ndarray
    radii: np.ndarray
    colors: np.ndarray

    def draw(self, surface: DrawingSurface, positions: np.ndarray) -> None:
        if positions.size == 0:
            return
        surface.set_blend_mode(BlendMode.ADDITIVE)
        surface.set_alpha(1.0)
        surface.fill_circles(self.centers[positions], self.radii[positions], self.colors[positions])


def _sphere(surface: DrawingSurface, color: Color, radius: float) -> None:
    surface.fill_circle((0.0, 0.0), radius, color)
    surface.fill_circle((-radius * 0.3, -radius * 0.3), radius * 0.3, HIGHLIGHT)


def _diamond(surface: DrawingSurface, color: Color, radius: float) -> None:
    body = (
        PathBuilder()
        .move_to(0.0, -radius * 1.2)
        .line_to(radius, 0.0)
        .line_to(0.0, radius * 1.2)
        .line_to(-radius, 0.0)
        .close()
    )
    surface.fill_path(body, color)
    shine = (
        PathBuilder()
        .move_to(0.0, -radius * 1.2)
        .line_to(radius * 0.4, 0.0)
        .line_to(0.0, radius * 0.4)
        .line_to(-radius * 0.4, 0.0)
        .close()
    )
    surface.fill_path(shine, SHINE)


def _bell(surface: DrawingSurface, color: Color, radius: float) -> None:
    body = (
        PathBuilder()
        .move_to(0.0, -radius)
        .bezier_curve_to(radius, -radius * 0.5, radius, radius * 0.8, radius * 1.2, radius)
        .quadratic_curve_to(0.0, radius * 1.2, -radius * 1.2, radius)
        .bezier_curve_to(-radius, radius * 0.8, -radius, -radius * 0.5, 0.0, -radius)
        .close()
    )
    surface.fill_path(body, color)
    surface.fill_ellipse((0.0, radius), radius * 0.8, radius * 0.2, SHINE)


ORNAMENT_SHAPES: Dict[OrnamentShape, Callable[[DrawingSurface, Color, float], None]] = {
    OrnamentShape.SPHERE: _sphere,
    OrnamentShape.DIAMOND: _diamond,
    OrnamentShape.BELL: _bell,
}


class OrnamentStyle:
    """Solid bauble shapes with a white highlight; progress only fades them in."""

    def draw(self, surface: DrawingSurface, projected: ProjectedParticle, now_ms: float) -> None:
        particle = projected.particle
        shape = ORNAMENT_SHAPES.get(particle.ornament_shape or OrnamentShape.SPHERE)
        radius = particle.radius * projected.scale
        surface.set_blend_mode(BlendMode.ADDITIVE)
        surface.save()
        surface.translate(projected.x2d, projected.y2d)
        surface.set_alpha(min(1.0, projected.rendered_alpha))
        shape(surface, particle.color, radius)
        surface.restore()


def star_points(outer_radius: float, inner_radius: float, spikes: int = STAR_SPIKES) -> PathBuilder:
    """Star outline starting at the top spike, alternating outer/inner vertices."""

    path = PathBuilder().move_to(0.0, -outer_radius)
    rotation = math.pi / 2.0 * 3.0
    step = math.pi / spikes
    for _ in range(spikes):
        path.line_to(math.cos(rotation) * outer_radius, math.sin(rotation) * outer_radius)
        rotation += step
        path.line_to(math.cos(rotation) * inner_radius, math.sin(rotation) * inner_radius)
        rotation += step
    path.line_to(0.0, -outer_radius)
    return path.close()


class StarStyle:
    """Glowing five-point topper with a pulsing core and rotating light beams.

    While revealing, the star's geometry grows with ``progress * 1.5``
    instead of only fading in.
    """

    def __init__(self) -> None:
        self._fill = hex_color(settings.STAR_COLOR)

    @staticmethod
    def reveal_scale(progress: float) -> float:
        if progress < 1.0:
            return progress * 1.5
        return 1.0

    def draw(self, surface: DrawingSurface, projected: ProjectedParticle, now_ms: float) -> None:
        particle = projected.particle
        flicker = math.sin(now_ms * 0.004 + particle.blink_offset)
        alpha = min(projected.rendered_alpha, 1.0) * (0.8 + flicker * 0.2)
        pulse = 1.0 + flicker * 0.2
        size = particle.radius * self.reveal_scale(projected.progress)

        surface.set_blend_mode(BlendMode.ADDITIVE)
        surface.save()
        surface.translate(projected.x2d, projected.y2d)

        surface.set_shadow(STAR_GLOW, 40.0 * pulse)
        surface.set_alpha(alpha)
        surface.rotate(now_ms * 0.0005)
        outer_radius = size * pulse * 2.0
        inner_radius = size * pulse * 0.8
        surface.fill_path(star_points(outer_radius, inner_radius), self._fill)

        surface.set_shadow(STAR_GLOW, 20.0 * pulse)
        surface.fill_circle((0.0, 0.0), inner_radius * 0.6, STAR_CORE)

        # Beams turn against the star.
        surface.rotate(-now_ms * 0.0008)
        surface.set_alpha(alpha * 0.7)
        ray_length = outer_radius * 3.0
        ray_width = outer_radius * 0.15
        surface.fill_rect(-ray_length / 2.0, -ray_width / 2.0, ray_length, ray_width, STAR_CORE)
        surface.fill_rect(-ray_width / 2.0, -ray_length / 2.0, ray_width, ray_length, STAR_CORE)

        surface.rotate(math.pi / 4.0)
        diagonal = ray_length * 0.6
        surface.fill_rect(-diagonal / 2.0, -ray_width / 2.0, diagonal, ray_width, STAR_CORE)
        surface.fill_rect(-ray_width / 2.0, -diagonal / 2.0, ray_width, diagonal, STAR_CORE)

        surface.restore()
        surface.set_shadow(None)


PARTICLE_STYLES: Dict[ParticleKind, ParticleStyle] = {
    ParticleKind.RIBBON: GlowDotStyle(frequency=0.003, base=0.8, swing=0.2),
    ParticleKind.RIBBON_RED: GlowDotStyle(frequency=0.003, base=0.8, swing=0.2, phase=100.0),
    ParticleKind.FLOOR: GlowDotStyle(frequency=0.002, base=0.6, swing=0.4),
    ParticleKind.FOLIAGE: GlowDotStyle(frequency=0.003, base=0.7, swing=0.4, clamp=True),
    ParticleKind.ORNAMENT: OrnamentStyle(),
    ParticleKind.STAR: StarStyle(),
}
