"""Procedural generation of the tree particles and snowfall."""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Callable, List, Optional

import settings

from .palette import Color, hex_color, hsla
from .particles import OrnamentShape, ParticleField, ParticleKind, TreeParticle
from .snow import SnowField

logger = logging.getLogger(__name__)

ORNAMENT_SHAPES = (OrnamentShape.SPHERE, OrnamentShape.DIAMOND, OrnamentShape.BELL)


@dataclass(frozen=True)
class TreeDimensions:
    """Overall tree size, fixed when the scene is generated."""

    tree_height: float
    max_radius: float

    @classmethod
    def from_viewport(cls, width: float, height: float) -> "TreeDimensions":
        return cls(
            tree_height=min(height * settings.TREE_HEIGHT_RATIO, settings.TREE_HEIGHT_CAP),
            max_radius=min(width * settings.TREE_RADIUS_RATIO, settings.TREE_RADIUS_CAP),
        )

    @property
    def base_y(self) -> float:
        """Height of the tree base; every particle starts its reveal here."""

        return self.tree_height / 2.0

    @property
    def topper_y(self) -> float:
        return -self.tree_height / 2.0 - settings.STAR_LIFT


@dataclass
class GeneratedScene:
    dimensions: TreeDimensions
    particles: ParticleField
    snow: SnowField


class SceneGenerator:
    """Builds the static particle population for one viewport size."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    def generate(self, width: float, height: float) -> GeneratedScene:
        dimensions = TreeDimensions.from_viewport(width, height)
        particles: List[TreeParticle] = []
        particles.extend(self.golden_ribbon(dimensions))
        particles.extend(self.red_ribbon(dimensions))
        particles.extend(self.foliage(dimensions))
        particles.extend(self.ornaments(dimensions))
        particles.extend(self.floor_galaxy(dimensions))
        particles.extend(self.star_topper(dimensions))
        field = ParticleField(particles)
        snow = SnowField.scatter(settings.SNOW_COUNT, width, height, self._rng)

        counts = field.count_by_kind()
        logger.info(
            "Generated %d tree particles (%s) and %d snowflakes for %dx%d "
            "(tree height %.0f, radius %.0f)",
            len(field),
            ", ".join(f"{kind.value}={count}" for kind, count in counts.items()),
            len(snow),
            width,
            height,
            dimensions.tree_height,
            dimensions.max_radius,
        )
        return GeneratedScene(dimensions=dimensions, particles=field, snow=snow)

    # ------------------------------------------------------------------
    # Ribbons
    def golden_ribbon(self, dimensions: TreeDimensions) -> List[TreeParticle]:
        rng = self._rng
        return self._spiral(
            dimensions,
            count=settings.RIBBON_PARTICLES,
            phase=0.0,
            radius_offset=settings.RIBBON_RADIUS_OFFSET,
            spread=settings.RIBBON_WIDTH,
            kind=ParticleKind.RIBBON,
            color=lambda: hsla(45.0 + rng.random() * 10.0, 100.0, 70.0 + rng.random() * 30.0),
        )

    def red_ribbon(self, dimensions: TreeDimensions) -> List[TreeParticle]:
        rng = self._rng
        return self._spiral(
            dimensions,
            count=settings.RED_RIBBON_PARTICLES,
            phase=settings.RED_RIBBON_PHASE,
            radius_offset=settings.RED_RIBBON_RADIUS_OFFSET,
            spread=settings.RED_RIBBON_WIDTH,
            kind=ParticleKind.RIBBON_RED,
            color=lambda: hsla(345.0 + rng.random() * 20.0, 90.0, 50.0 + rng.random() * 20.0),
        )

    def _spiral(
        self,
        dimensions: TreeDimensions,
        *,
        count: int,
        phase: float,
        radius_offset: float,
        spread: float,
        kind: ParticleKind,
        color: Callable[[], Color],
    ) -> List[TreeParticle]:
        rng = self._rng
        tree_height = dimensions.tree_height
        particles: List[TreeParticle] = []
        for index in range(count):
            p = index / count
            angle = p * math.tau * settings.RIBBON_TURNS + phase
            r = dimensions.max_radius * (1.0 - p) + radius_offset

            spread_x = (rng.random() - 0.5) * spread
            spread_y = (rng.random() - 0.5) * spread
            spread_z = (rng.random() - 0.5) * spread

            x = math.cos(angle) * r + spread_x
            z = math.sin(angle) * r + spread_z
            y = tree_height / 2.0 - p * tree_height + spread_y

            particles.append(
                TreeParticle(
                    x=x,
                    y=y,
                    z=z,
                    ox=x,
                    oz=z,
                    color=color(),
                    radius=2.0 + rng.random() * 3.0,
                    kind=kind,
                    blink_offset=rng.random() * math.tau,
                    alpha=0.9 + rng.random() * 0.1,
                    delay=settings.RIBBON_DELAY_BASE + p * settings.RIBBON_DELAY_SPAN,
                )
            )
        return particles

    # ------------------------------------------------------------------
    # Foliage
    def foliage(self, dimensions: TreeDimensions) -> List[TreeParticle]:
        rng = self._rng
        tree_height = dimensions.tree_height
        particles: List[TreeParticle] = []
        for _ in range(settings.FOLIAGE_PARTICLES):
            # Biased towards the wide base of the tree.
            p = rng.random() ** settings.FOLIAGE_DEPTH_BIAS
            base_r = dimensions.max_radius * (1.0 - p)

            layer_phase = p * settings.FOLIAGE_LAYERS * math.tau
            layer_extension = (math.sin(layer_phase) + 1.0) / 2.0
            r_max = base_r * (0.85 + 0.15 * layer_extension)
            r_dist = rng.random() ** settings.FOLIAGE_RADIAL_BIAS * r_max

            angle = rng.random() * math.tau
            x = math.cos(angle) * r_dist
            z = math.sin(angle) * r_dist
            y = tree_height / 2.0 - p * tree_height

            particles.append(
                TreeParticle(
                    x=x,
                    y=y,
                    z=z,
                    ox=x,
                    oz=z,
                    color=self._foliage_color(),
                    radius=1.0 + rng.random() * 2.0,
                    kind=ParticleKind.FOLIAGE,
                    blink_offset=rng.random() * 100.0,
                    alpha=rng.random() * 0.7 + 0.3,
                    delay=(
                        settings.FOLIAGE_DELAY_BASE
                        + p * settings.FOLIAGE_DELAY_SPAN
                        + rng.random() * settings.FOLIAGE_DELAY_JITTER
                    ),
                )
            )
        return particles

    def _foliage_color(self) -> Color:
        rng = self._rng
        band = rng.random()
        if band > 0.85:
            # Golden highlights
            hue = 40.0 + rng.random() * 15.0
            sat = 90.0 + rng.random() * 10.0
            light = 60.0 + rng.random() * 25.0
        elif band > 0.6:
            # Yellow-green
            hue = 60.0 + rng.random() * 30.0
            sat = 80.0 + rng.random() * 20.0
            light = 40.0 + rng.random() * 20.0
        else:
            hue = 95.0 + rng.random() * 35.0
            sat = 70.0 + rng.random() * 20.0
            light = 20.0 + rng.random() * 20.0
        return hsla(hue, sat, light)

    # ------------------------------------------------------------------
    # Ornaments
    def ornaments(self, dimensions: TreeDimensions) -> List[TreeParticle]:
        rng = self._rng
        tree_height = dimensions.tree_height
        swatches = [hex_color(value) for value in settings.ORNAMENT_SWATCHES]
        particles: List[TreeParticle] = []
        for _ in range(settings.ORNAMENT_COUNT):
            p = rng.random()
            r_base = dimensions.max_radius * (1.0 - p)
            r = r_base * (0.85 + rng.random() * 0.25)

            angle = rng.random() * math.tau
            x = math.cos(angle) * r
            z = math.sin(angle) * r
            y = tree_height / 2.0 - p * tree_height

            shape = ORNAMENT_SHAPES[int(rng.random() * len(ORNAMENT_SHAPES))]
            swatch = swatches[min(int(rng.random() * len(swatches)), len(swatches) - 1)]

            particles.append(
                TreeParticle(
                    x=x,
                    y=y,
                    z=z,
                    ox=x,
                    oz=z,
                    color=swatch,
                    radius=4.0 + rng.random() * 4.0,
                    kind=ParticleKind.ORNAMENT,
                    ornament_shape=shape,
                    blink_offset=rng.random() * 10.0,
                    alpha=1.0,
                    delay=settings.ORNAMENT_DELAY_BASE + rng.random() * settings.ORNAMENT_DELAY_SPAN,
                )
            )
        return particles

    # ------------------------------------------------------------------
    # Floor galaxy
    def floor_galaxy(self, dimensions: TreeDimensions) -> List[TreeParticle]:
        rng = self._rng
        particles: List[TreeParticle] = []
        for _ in range(settings.FLOOR_PARTICLES):
            angle = rng.random() * math.tau
            dist = rng.random()
            r = dist * dimensions.max_radius * settings.FLOOR_SPREAD + rng.random() * settings.FLOOR_JITTER

            x = math.cos(angle) * r
            z = math.sin(angle) * r
            y = dimensions.base_y + (rng.random() - 0.5) * settings.FLOOR_THICKNESS

            # Opacity lives in the colour itself for the floor.
            hue = 40.0 + rng.random() * 10.0
            lightness = 70.0 + rng.random() * 30.0
            color = hsla(hue, 100.0, lightness, 0.6 + rng.random() * 0.4)

            particles.append(
                TreeParticle(
                    x=x,
                    y=y,
                    z=z,
                    ox=x,
                    oz=z,
                    color=color,
                    radius=1.0 + rng.random() * 3.0,
                    kind=ParticleKind.FLOOR,
                    blink_offset=rng.random() * 10.0,
                    alpha=rng.random(),
                    delay=rng.random() * settings.FLOOR_DELAY_SPAN,
                )
            )
        return particles

    # ------------------------------------------------------------------
    # Star topper
    def star_topper(self, dimensions: TreeDimensions) -> List[TreeParticle]:
        rng = self._rng
        topper_y = dimensions.topper_y
        particles: List[TreeParticle] = [
            TreeParticle(
                x=0.0,
                y=topper_y,
                z=0.0,
                ox=0.0,
                oz=0.0,
                color=hex_color(settings.STAR_COLOR),
                radius=settings.STAR_RADIUS,
                kind=ParticleKind.STAR,
                blink_offset=0.0,
                alpha=1.0,
                delay=settings.STAR_DELAY,
            )
        ]

        sparkle_color = hex_color(settings.SPARKLE_COLOR)
        for index in range(settings.SPARKLE_COUNT):
            angle = (index / settings.SPARKLE_COUNT) * math.tau + rng.random()
            dist = settings.SPARKLE_RING_MIN + rng.random() * settings.SPARKLE_RING_SPAN
            sx = math.cos(angle) * dist
            sz = math.sin(angle) * dist
            sy = topper_y + (rng.random() - 0.5) * settings.SPARKLE_HEIGHT_SPREAD
            # Sparkles reuse the simple floor glow rendering.
            particles.append(
                TreeParticle(
                    x=sx,
                    y=sy,
                    z=sz,
                    ox=sx,
                    oz=sz,
                    color=sparkle_color,
                    radius=2.0 + rng.random() * 3.0,
                    kind=ParticleKind.FLOOR,
                    blink_offset=rng.random() * 10.0,
                    alpha=settings.SPARKLE_ALPHA,
                    delay=settings.SPARKLE_DELAY_BASE + rng.random() * settings.SPARKLE_DELAY_SPAN,
                )
            )
        return particles


def create_scene(
    width: float,
    height: float,
    rng: Optional[random.Random] = None,
    *,
    seed: Optional[int] = None,
) -> GeneratedScene:
    """Generate a scene for ``width`` x ``height``; ``seed`` makes it reproducible."""

    if rng is None:
        rng = random.Random(seed)
    return SceneGenerator(rng).generate(width, height)
