"""Simulation state for the holiday scene."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Optional, Tuple

import settings

from .camera import PerspectiveProjector, ProjectedTree, Vec2, depth_order
from .fireworks import FireworkSystem
from .generator import GeneratedScene, TreeDimensions, create_scene
from .intro import IntroAnimator
from .particles import ParticleField
from .snow import SnowField

logger = logging.getLogger(__name__)

Size = Tuple[int, int]


@dataclass
class SceneState:
    """Everything that changes between frames, owned by the driver.

    Particles and dimensions are generated once; ``width``/``height`` follow
    the window and may change at any time without regenerating anything.
    """

    width: int
    height: int
    start_time_ms: float
    dimensions: TreeDimensions
    particles: ParticleField
    snow: SnowField
    fireworks: FireworkSystem
    projector: PerspectiveProjector = field(default_factory=PerspectiveProjector)
    rotation: float = 0.0
    frame_count: int = 0
    animator: IntroAnimator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.animator = IntroAnimator(self.dimensions.base_y)

    @classmethod
    def from_scene(
        cls,
        scene: GeneratedScene,
        size: Size,
        start_time_ms: float,
        rng: random.Random,
    ) -> "SceneState":
        return cls(
            width=size[0],
            height=size[1],
            start_time_ms=start_time_ms,
            dimensions=scene.dimensions,
            particles=scene.particles,
            snow=scene.snow,
            fireworks=FireworkSystem(rng),
        )

    @classmethod
    def create(
        cls,
        size: Size,
        start_time_ms: float,
        rng: Optional[random.Random] = None,
    ) -> "SceneState":
        rng = rng if rng is not None else random.Random()
        scene = create_scene(size[0], size[1], rng)
        return cls.from_scene(scene, size, start_time_ms, rng)

    @property
    def size(self) -> Size:
        return (self.width, self.height)

    def resize(self, size: Size) -> None:
        self.width, self.height = size
        logger.info("Viewport resized to %dx%d", self.width, self.height)

    def elapsed_ms(self, now_ms: float) -> float:
        return now_ms - self.start_time_ms

    def advance_rotation(self) -> None:
        self.rotation += settings.ROTATION_SPEED

    def project_tree(self, now_ms: float, center: Vec2) -> ProjectedTree:
        """Animate, rotate and project every tree particle, ordered far to near."""

        pose = self.animator.pose(self.particles, self.elapsed_ms(now_ms))
        rx, rz = self.projector.rotate(pose.ox, pose.oz, self.rotation + pose.spiral)
        x2d, y2d, scale = self.projector.project(rx, pose.y, rz, center)

        order = depth_order(rz)
        return ProjectedTree(
            particles=self.particles.particles,
            order=order,
            x2d=x2d[order],
            y2d=y2d[order],
            scale=scale[order],
            rz=rz[order],
            rendered_alpha=pose.alpha[order],
            progress=pose.progress[order],
        )
