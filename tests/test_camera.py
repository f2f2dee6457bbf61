"""Tests for rotation, projection and depth ordering."""
import math

import numpy as np
import pytest

from scene.camera import PerspectiveProjector, depth_order

CENTER = (640.0, 260.0)


@pytest.fixture
def projector():
    return PerspectiveProjector()


def test_scale_on_the_rotation_axis(projector):
    assert projector.base_scale == pytest.approx(350.0 / 750.0)
    assert float(projector.scale(0.0)) == pytest.approx(350.0 / 750.0)


def test_nearer_points_are_larger(projector):
    scales = projector.scale(np.array([200.0, 0.0, -200.0]))
    assert scales[0] < scales[1] < scales[2]


def test_project_offsets_from_center(projector):
    x2d, y2d, scale = projector.project(75.0, -150.0, 0.0, CENTER)
    assert float(scale) == pytest.approx(350.0 / 750.0)
    assert x2d == pytest.approx(640.0 + 35.0)
    assert y2d == pytest.approx(260.0 - 70.0)


@pytest.mark.parametrize("rz", [-750.0, -800.0, -5000.0])
def test_points_at_or_behind_the_eye_are_culled(projector, rz):
    assert float(projector.scale(rz)) == 0.0
    x2d, y2d, _scale = projector.project(10.0, 10.0, rz, CENTER)
    assert (float(x2d), float(y2d)) == CENTER


def test_rotate_quarter_turn(projector):
    rx, rz = projector.rotate(1.0, 0.0, math.pi / 2.0)
    assert rx == pytest.approx(0.0, abs=1e-12)
    assert rz == pytest.approx(1.0)


def test_rotation_preserves_radius(projector):
    ox = np.array([3.0, -4.0, 10.0])
    oz = np.array([4.0, 2.0, 0.0])
    rx, rz = projector.rotate(ox, oz, 1.234)
    assert np.allclose(rx ** 2 + rz ** 2, ox ** 2 + oz ** 2)


def test_depth_order_is_far_to_near_and_stable():
    order = depth_order(np.array([1.0, 5.0, -3.0, 5.0]))
    assert list(order) == [1, 3, 0, 2]


def test_floor_line(projector):
    assert projector.floor_y(260.0, 900.0) == pytest.approx(260.0 + 450.0 * 350.0 / 750.0)


def test_projected_tree_is_depth_sorted(scene_state):
    projected = scene_state.project_tree(10_000.0, CENTER)
    assert len(projected) == len(scene_state.particles)
    assert np.all(np.diff(projected.rz) <= 0.0)
    assert projected.visible.all()
    nearest = projected.at(len(projected) - 1)
    assert nearest.particle is scene_state.particles.particles[int(projected.order[-1])]
    assert nearest.rz == projected.rz[-1]


def test_nothing_is_visible_on_the_first_frame(scene_state):
    projected = scene_state.project_tree(0.0, CENTER)
    assert not projected.visible.any()
    assert not projected.at(0).visible
