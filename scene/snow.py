"""Ambient snowfall."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, List

import settings


@dataclass(slots=True)
class SnowFlake:
    x: float
    y: float
    speed: float
    radius: float
    alpha: float


class SnowField:
    """Fixed pool of flakes falling straight down and recycling at the top."""

    def __init__(self, flakes: List[SnowFlake], rng: random.Random) -> None:
        self.flakes = flakes
        self._rng = rng

    @classmethod
    def scatter(cls, count: int, width: float, height: float, rng: random.Random) -> "SnowField":
        speed_min, speed_max = settings.SNOW_SPEED_RANGE
        radius_min, radius_max = settings.SNOW_RADIUS_RANGE
        alpha_min, alpha_max = settings.SNOW_ALPHA_RANGE
        flakes = [
            SnowFlake(
                x=rng.random() * width,
                y=rng.random() * height,
                speed=speed_min + rng.random() * (speed_max - speed_min),
                radius=radius_min + rng.random() * (radius_max - radius_min),
                alpha=alpha_min + rng.random() * (alpha_max - alpha_min),
            )
            for _ in range(count)
        ]
        return cls(flakes, rng)

    def __len__(self) -> int:
        return len(self.flakes)

    def __iter__(self) -> Iterator[SnowFlake]:
        return iter(self.flakes)

    def advance(self, width: float, height: float) -> None:
        """Move every flake down one tick; flakes past the bottom respawn above the top."""

        for flake in self.flakes:
            flake.y += flake.speed
            if flake.y > height:
                flake.y = settings.SNOW_RESPAWN_Y
                flake.x = self._rng.random() * width
