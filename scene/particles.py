"""Tree particle definitions for the holiday scene."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from .palette import Color


class ParticleKind(str, Enum):
    RIBBON = "ribbon"
    RIBBON_RED = "ribbon_red"
    FOLIAGE = "foliage"
    ORNAMENT = "ornament"
    STAR = "star"
    FLOOR = "floor"


class OrnamentShape(str, Enum):
    SPHERE = "sphere"
    DIAMOND = "diamond"
    BELL = "bell"


@dataclass(frozen=True, slots=True)
class TreeParticle:
    """Single generated point of the tree.

    ``ox``/``oz`` hold the radial offsets used by the intro animation and
    rotation; they equal ``x``/``z`` at creation. Nothing here changes once
    generated, every animated quantity is derived per frame.
    """

    x: float
    y: float
    z: float
    ox: float
    oz: float
    color: Color
    radius: float
    kind: ParticleKind
    blink_offset: float
    alpha: float
    delay: float  # ms after scene start before the reveal begins
    ornament_shape: Optional[OrnamentShape] = None


class ParticleField:
    """Column view over the generated particles for per-frame maths.

    The intro animator, projector and batched dot drawing run over the
    numpy columns; the renderer maps indices back to ``particles`` for the
    few particles drawn one at a time.
    """

    def __init__(self, particles: Sequence[TreeParticle]) -> None:
        self.particles: List[TreeParticle] = list(particles)
        self.y = np.array([p.y for p in self.particles], dtype=np.float64)
        self.ox = np.array([p.ox for p in self.particles], dtype=np.float64)
        self.oz = np.array([p.oz for p in self.particles], dtype=np.float64)
        self.alpha = np.array([p.alpha for p in self.particles], dtype=np.float64)
        self.delay = np.array([p.delay for p in self.particles], dtype=np.float64)
        self.radius = np.array([p.radius for p in self.particles], dtype=np.float64)
        self.blink_offset = np.array([p.blink_offset for p in self.particles], dtype=np.float64)
        self.color = np.array([p.color for p in self.particles], dtype=np.float64).reshape(-1, 4)

    def __len__(self) -> int:
        return len(self.particles)

    def count_by_kind(self) -> dict[ParticleKind, int]:
        counts: dict[ParticleKind, int] = {}
        for particle in self.particles:
            counts[particle.kind] = counts.get(particle.kind, 0) + 1
        return counts
