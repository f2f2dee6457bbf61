"""Fixed perspective camera for the rotating tree."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

import numpy as np

import settings

from .particles import TreeParticle

Vec2 = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class ProjectedParticle:
    """A tree particle placed on screen for the current frame."""

    particle: TreeParticle
    x2d: float
    y2d: float
    scale: float
    rz: float
    rendered_alpha: float
    progress: float

    @property
    def visible(self) -> bool:
        return self.scale > 0.0 and self.progress > 0.0


@dataclass(frozen=True)
class ProjectedTree:
    """The whole tree placed on screen for one frame.

    Every column is already in draw order (far to near); ``order`` maps a
    draw position back to the particle's index in the field.
    """

    particles: Sequence[TreeParticle]
    order: np.ndarray
    x2d: np.ndarray
    y2d: np.ndarray
    scale: np.ndarray
    rz: np.ndarray
    rendered_alpha: np.ndarray
    progress: np.ndarray

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self) -> Iterator[ProjectedParticle]:
        for position in range(len(self.order)):
            yield self.at(position)

    @property
    def visible(self) -> np.ndarray:
        return (self.scale > 0.0) & (self.progress > 0.0)

    def at(self, position: int) -> ProjectedParticle:
        return ProjectedParticle(
            particle=self.particles[int(self.order[position])],
            x2d=float(self.x2d[position]),
            y2d=float(self.y2d[position]),
            scale=float(self.scale[position]),
            rz=float(self.rz[position]),
            rendered_alpha=float(self.rendered_alpha[position]),
            progress=float(self.progress[position]),
        )


@dataclass(frozen=True)
class PerspectiveProjector:
    """Maps rotated tree-space points to screen coordinates.

    The tree spins around its vertical axis; ``rz`` is the rotated depth and
    the projected scale is ``fov / (fov + rz + camera_z)``.
    """

    fov: float = settings.FOV
    camera_z: float = settings.CAMERA_Z

    @staticmethod
    def rotate(ox, oz, angle):
        """Rotate radial offsets about the vertical axis; returns ``(rx, rz)``."""

        cos_a = np.cos(angle)
        sin_a = np.sin(angle)
        rx = ox * cos_a - oz * sin_a
        rz = ox * sin_a + oz * cos_a
        return rx, rz

    def scale(self, rz):
        """Perspective scale; zero wherever the point sits at or behind the eye."""

        denominator = np.add(self.fov + self.camera_z, rz)
        with np.errstate(divide="ignore", invalid="ignore"):
            scale = np.divide(self.fov, denominator)
        return np.where(denominator > 0.0, scale, 0.0)

    def project(self, rx, y, rz, center: Vec2):
        """Return ``(x2d, y2d, scale)`` for scalars or numpy arrays."""

        scale = self.scale(rz)
        x2d = rx * scale + center[0]
        y2d = y * scale + center[1]
        return x2d, y2d, scale

    @property
    def base_scale(self) -> float:
        """Scale of a point on the rotation axis (``rz == 0``)."""

        return self.fov / (self.fov + self.camera_z)

    def floor_y(self, center_y: float, tree_height: float) -> float:
        return center_y + tree_height / 2.0 * self.base_scale


def depth_order(rz: np.ndarray) -> np.ndarray:
    """Indices ordering particles far to near (descending ``rz``)."""

    return np.argsort(-np.asarray(rz), kind="stable")
