"""Screen-space layout for the holiday scene."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import settings

from scene.camera import PerspectiveProjector
from scene.generator import TreeDimensions

Vec2 = Tuple[float, float]
Size = Tuple[int, int]


@dataclass
class SceneLayout:
    """Derives anchor points from the current window size.

    Every property is recomputed on access so a resize can never leave a
    stale centre or floor line behind.
    """

    window_size: Size
    dimensions: TreeDimensions
    projector: PerspectiveProjector = field(default_factory=PerspectiveProjector)

    @property
    def center(self) -> Vec2:
        width, height = self.window_size
        return (width / 2.0, height / 2.0 - settings.CENTER_LIFT)

    @property
    def floor_y(self) -> float:
        """Screen height of the tree base on the rotation axis."""

        return self.projector.floor_y(self.center[1], self.dimensions.tree_height)

    @property
    def floor_glow_radius(self) -> float:
        return self.dimensions.max_radius * 1.2

    @property
    def caption_font_size(self) -> int:
        width, _ = self.window_size
        return max(1, int(min(width * settings.CAPTION_FONT_RATIO, settings.CAPTION_FONT_CAP)))

    @property
    def caption_anchor(self) -> Vec2:
        _, height = self.window_size
        return (self.center[0], height - settings.CAPTION_BASELINE_OFFSET)

    @property
    def caption_gradient_span(self) -> Tuple[float, float]:
        _, height = self.window_size
        return (
            height - settings.CAPTION_GRADIENT_TOP_OFFSET,
            height - settings.CAPTION_GRADIENT_BOTTOM_OFFSET,
        )
