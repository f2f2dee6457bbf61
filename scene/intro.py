"""Time-based reveal of the tree particles.

Every quantity here is a pure function of the elapsed time and a
particle's generated attributes; nothing is stored between frames. The
helpers accept plain floats or numpy arrays so the same maths serves a
single particle and the whole field.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

import settings

from .particles import ParticleField


def intro_progress(elapsed_ms, delay_ms, duration_ms: float = settings.INTRO_DURATION_MS):
    """Linear reveal progress in ``[0, 1]``; reaches 1 exactly ``duration_ms`` after ``delay_ms``."""

    particle_elapsed = np.maximum(0.0, np.subtract(elapsed_ms, delay_ms))
    return np.minimum(particle_elapsed / duration_ms, 1.0)


def ease_out_cubic(t):
    return 1.0 - (1.0 - t) ** 3


@dataclass
class IntroPose:
    """Per-particle animated pose for one frame (numpy columns)."""

    y: np.ndarray
    ox: np.ndarray
    oz: np.ndarray
    spiral: np.ndarray
    progress: np.ndarray
    alpha: np.ndarray


class IntroAnimator:
    """Rise from the tree base, expand outwards, spin into place, fade in."""

    def __init__(self, start_y: float) -> None:
        # Every particle starts flush with the tree base.
        self.start_y = start_y

    def pose(self, field: ParticleField, elapsed_ms: float) -> IntroPose:
        progress = intro_progress(elapsed_ms, field.delay)
        ease = ease_out_cubic(progress)
        return IntroPose(
            y=self.start_y + (field.y - self.start_y) * ease,
            ox=field.ox * ease,
            oz=field.oz * ease,
            spiral=(1.0 - ease) * settings.INTRO_SPIRAL_ANGLE,
            progress=progress,
            alpha=field.alpha * progress,
        )
