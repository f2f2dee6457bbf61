"""Frame renderer for the holiday scene."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import numpy as np

import settings

from scene.fireworks import FireworkState
from scene.palette import rgba, with_alpha
from scene.particles import ParticleKind
from scene.state import SceneState
from ui.caption import CaptionOverlay
from ui.layout import SceneLayout

from .particle_styles import PARTICLE_STYLES, GlowDotBatch, ParticleStyle
from .surface import BlendMode, DrawingSurface, RadialGradient

TRANSPARENT = rgba(0, 0, 0, 0.0)


@dataclass(frozen=True)
class FrameReport:
    """What one tick drew, for logging and tests."""

    layout: SceneLayout
    elapsed_ms: float
    tree_drawn: int
    tree_culled: int
    fireworks: int
    caption_visible: bool


class FrameRenderer:
    """Runs one animation tick: advance the ambient effects and draw every layer."""

    def __init__(
        self,
        caption: Optional[CaptionOverlay] = None,
        styles: Optional[Mapping[ParticleKind, ParticleStyle]] = None,
    ) -> None:
        self.caption = caption if caption is not None else CaptionOverlay()
        self._styles: Dict[ParticleKind, ParticleStyle] = dict(styles or PARTICLE_STYLES)
        self._dots: Optional[GlowDotBatch] = None

    def render(self, state: SceneState, surface: DrawingSurface, now_ms: float) -> FrameReport:
        # Anchors come from the current size each frame, never from a cache.
        layout = SceneLayout(state.size, state.dimensions, state.projector)
        elapsed = state.elapsed_ms(now_ms)

        self._draw_trails(surface, state)
        self._draw_fireworks(surface, state)
        self._draw_snow(surface, state)
        state.advance_rotation()
        self._draw_floor_glow(surface, layout, elapsed)
        drawn, culled = self._draw_tree(surface, state, layout, now_ms)

        surface.set_alpha(1.0)
        surface.set_shadow(None)
        caption_visible = self.caption.draw(surface, layout, elapsed)

        state.frame_count += 1
        return FrameReport(
            layout=layout,
            elapsed_ms=elapsed,
            tree_drawn=drawn,
            tree_culled=culled,
            fireworks=len(state.fireworks),
            caption_visible=caption_visible,
        )

    # ------------------------------------------------------------------
    # Layers
    def _draw_trails(self, surface: DrawingSurface, state: SceneState) -> None:
        surface.set_blend_mode(BlendMode.NORMAL)
        surface.set_alpha(1.0)
        surface.fill_rect(0.0, 0.0, state.width, state.height, settings.TRAIL_COLOR)

    def _draw_fireworks(self, surface: DrawingSurface, state: SceneState) -> None:
        fireworks = state.fireworks
        fireworks.maybe_launch(state.width, state.height)
        fireworks.advance()

        surface.set_blend_mode(BlendMode.ADDITIVE)
        surface.set_alpha(1.0)
        for firework in fireworks.fireworks:
            # The head is still shown on the tick it bursts; its sparks first appear a tick later.
            if firework.state is FireworkState.RISING or firework.burst:
                surface.fill_circle((firework.x, firework.y), settings.FIREWORK_HEAD_RADIUS, firework.color)
                continue
            if not firework.sparks:
                continue
            sparks = firework.sparks
            centers = np.array([(spark.x, spark.y) for spark in sparks], dtype=np.float64)
            radii = settings.FIREWORK_SPARK_RADIUS * np.array([spark.glint for spark in sparks])
            colors = np.array([spark.color for spark in sparks], dtype=np.float64)
            colors[:, 3] *= np.clip([spark.life for spark in sparks], 0.0, 1.0)
            surface.fill_circles(centers, radii, colors)

    def _draw_snow(self, surface: DrawingSurface, state: SceneState) -> None:
        snow = state.snow
        snow.advance(state.width, state.height)
        if not len(snow):
            return
        centers = np.array([(flake.x, flake.y) for flake in snow], dtype=np.float64)
        radii = np.array([flake.radius for flake in snow], dtype=np.float64)
        colors = np.tile(np.asarray(settings.SNOW_COLOR, dtype=np.float64), (len(centers), 1))
        colors[:, 3] = [flake.alpha for flake in snow]
        surface.set_blend_mode(BlendMode.NORMAL)
        surface.set_alpha(1.0)
        surface.fill_circles(centers, radii, colors)

    def _draw_floor_glow(self, surface: DrawingSurface, layout: SceneLayout, elapsed_ms: float) -> None:
        fade = max(0.0, min(elapsed_ms / settings.FLOOR_GLOW_FADE_MS, 1.0))
        center_x, _ = layout.center
        floor_y = layout.floor_y
        inner = settings.FLOOR_GLOW_INNER
        mid = settings.FLOOR_GLOW_MID
        gradient = RadialGradient(
            center=(center_x, floor_y),
            inner_radius=10.0,
            outer_radius=layout.floor_glow_radius,
            stops=(
                (0.0, with_alpha(inner, inner[3] * fade)),
                (0.3, with_alpha(mid, mid[3] * fade)),
                (1.0, TRANSPARENT),
            ),
        )

        surface.set_blend_mode(BlendMode.ADDITIVE)
        surface.set_alpha(1.0)
        surface.save()
        # Squash the glow into an ellipse lying on the floor line.
        squash = settings.FLOOR_GLOW_SQUASH
        surface.transform(1.0, 0.0, 0.0, squash, 0.0, floor_y * (1.0 - squash))
        surface.fill_circle((center_x, floor_y), layout.dimensions.max_radius * 3.0, gradient)
        surface.restore()

    def _draw_tree(
        self,
        surface: DrawingSurface,
        state: SceneState,
        layout: SceneLayout,
        now_ms: float,
    ) -> tuple[int, int]:
        tree = state.project_tree(now_ms, layout.center)
        if self._dots is None or self._dots.field is not state.particles:
            self._dots = GlowDotBatch(state.particles, self._styles)
        dots = self._dots.prepare(tree, now_ms)

        visible = tree.visible
        batched = np.flatnonzero(dots.drawable)
        singles = np.flatnonzero(visible & ~self._dots.members[tree.order])
        # Batched runs are split at every single particle so far-to-near order holds.
        runs = np.split(batched, np.searchsorted(batched, singles))
        for run, position in zip(runs, singles):
            dots.draw(surface, run)
            projected = tree.at(int(position))
            self._styles[projected.particle.kind].draw(surface, projected, now_ms)
        dots.draw(surface, runs[-1])

        drawn = int(np.count_nonzero(visible))
        return drawn, len(tree) - drawn
