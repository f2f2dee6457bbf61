"""Background fireworks: launch, rise, burst and fade."""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import settings

from .palette import Color, hsla

logger = logging.getLogger(__name__)


class FireworkState(str, Enum):
    RISING = "rising"
    EXPLODING = "exploding"


@dataclass(slots=True)
class FireworkSpark:
    x: float
    y: float
    vx: float
    vy: float
    color: Color
    decay: float
    life: float = 1.0
    glint: float = 1.0  # radius multiplier for this tick's twinkle

    def advance(self) -> None:
        self.x += self.vx
        self.y += self.vy
        self.vy += settings.FIREWORK_SPARK_GRAVITY
        self.vx *= settings.FIREWORK_SPARK_DRAG
        self.vy *= settings.FIREWORK_SPARK_DRAG
        self.life -= self.decay

    @property
    def alive(self) -> bool:
        return self.life > 0.0


@dataclass
class Firework:
    id: int
    x: float
    y: float
    target_y: float
    vy: float
    color: Color
    hue: float
    state: FireworkState = FireworkState.RISING
    sparks: List[FireworkSpark] = field(default_factory=list)
    launch_vy: float = field(init=False)
    rise_ticks: int = field(default=0, init=False)
    burst: bool = field(default=False, init=False)  # set only on the tick it exploded

    def __post_init__(self) -> None:
        self.launch_vy = self.vy

    @property
    def finished(self) -> bool:
        return self.state is FireworkState.EXPLODING and not self.sparks


class FireworkSystem:
    """Owns the active fireworks and is the only thing that mutates them."""

    def __init__(self, rng: random.Random, launch_chance: float = settings.FIREWORK_LAUNCH_CHANCE) -> None:
        self._rng = rng
        self.launch_chance = launch_chance
        self.fireworks: List[Firework] = []
        self._next_id = 0

    def __len__(self) -> int:
        return len(self.fireworks)

    # ------------------------------------------------------------------
    # Launching
    def maybe_launch(self, width: float, height: float) -> Optional[Firework]:
        """Roll the per-tick launch chance; returns the new firework if one started."""

        if self._rng.random() < self.launch_chance:
            return self.launch(width, height)
        return None

    def launch(self, width: float, height: float) -> Firework:
        rng = self._rng
        margin = settings.FIREWORK_LAUNCH_MARGIN
        apex_min, apex_max = settings.FIREWORK_APEX_RANGE
        speed_min, speed_max = settings.FIREWORK_SPEED_RANGE
        x = (rng.random() * (1.0 - 2.0 * margin) + margin) * width
        target_y = (rng.random() * (apex_max - apex_min) + apex_min) * height
        hue = rng.random() * 360.0
        vy = -(speed_min + rng.random() * (speed_max - speed_min))
        return self.launch_at(x, height, target_y, vy, hue=hue)

    def launch_at(
        self,
        x: float,
        y: float,
        target_y: float,
        vy: float,
        *,
        hue: float = 0.0,
    ) -> Firework:
        firework = Firework(
            id=self._next_id,
            x=x,
            y=y,
            target_y=target_y,
            vy=vy,
            color=hsla(hue, 100.0, 80.0),
            hue=hue,
        )
        self._next_id += 1
        self.fireworks.append(firework)
        logger.debug("Launched firework %d at x=%.0f towards y=%.0f", firework.id, x, target_y)
        return firework

    # ------------------------------------------------------------------
    # Simulation
    def advance(self) -> None:
        """Advance every firework by one tick and retire the spent ones."""

        for firework in self.fireworks:
            firework.burst = False
            if firework.state is FireworkState.RISING:
                self._rise(firework)
            else:
                self._advance_sparks(firework)
        self.fireworks = [firework for firework in self.fireworks if not firework.finished]

    def _rise(self, firework: Firework) -> None:
        firework.y += firework.vy
        firework.rise_ticks += 1
        # Derived from the tick count so a long rise does not drift.
        firework.vy = firework.launch_vy + settings.FIREWORK_RISE_GRAVITY * firework.rise_ticks
        if firework.vy >= 0.0 or firework.y <= firework.target_y:
            self._explode(firework)

    def _explode(self, firework: Firework) -> None:
        rng = self._rng
        count_min, count_max = settings.FIREWORK_SPARK_COUNT_RANGE
        speed_min, speed_max = settings.FIREWORK_SPARK_SPEED_RANGE
        decay_min, decay_max = settings.FIREWORK_SPARK_DECAY_RANGE
        count = math.ceil(count_min + rng.random() * (count_max - count_min))
        for _ in range(count):
            angle = rng.random() * math.tau
            speed = speed_min + rng.random() * (speed_max - speed_min)
            firework.sparks.append(
                FireworkSpark(
                    x=firework.x,
                    y=firework.y,
                    vx=math.cos(angle) * speed,
                    vy=math.sin(angle) * speed,
                    color=firework.color,
                    decay=decay_min + rng.random() * (decay_max - decay_min),
                )
            )
        firework.state = FireworkState.EXPLODING
        firework.burst = True
        logger.debug(
            "Firework %d burst into %d sparks after %d ticks",
            firework.id,
            count,
            firework.rise_ticks,
        )

    def _advance_sparks(self, firework: Firework) -> None:
        survivors: List[FireworkSpark] = []
        for spark in firework.sparks:
            spark.advance()
            if not spark.alive:
                continue
            if self._rng.random() < settings.FIREWORK_GLINT_CHANCE:
                spark.glint = settings.FIREWORK_GLINT_SCALE
            else:
                spark.glint = 1.0
            survivors.append(spark)
        firework.sparks = survivors
