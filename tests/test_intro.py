"""Tests for the intro reveal maths."""
import numpy as np
import pytest

from scene.generator import create_scene
from scene.intro import IntroAnimator, ease_out_cubic, intro_progress


@pytest.fixture
def field(rng):
    return create_scene(1280, 720, rng).particles


def test_progress_is_zero_before_delay():
    assert intro_progress(499.0, 500.0) == 0.0
    assert intro_progress(500.0, 500.0) == 0.0


def test_progress_saturates_exactly_after_duration():
    assert intro_progress(2499.0, 500.0) < 1.0
    assert intro_progress(2500.0, 500.0) == 1.0
    assert intro_progress(90_000.0, 500.0) == 1.0


def test_progress_is_monotonic_and_bounded():
    times = np.linspace(-1000.0, 6000.0, 500)
    values = intro_progress(times, 1200.0)
    assert np.all(values >= 0.0)
    assert np.all(values <= 1.0)
    assert np.all(np.diff(values) >= 0.0)


def test_ease_out_cubic_endpoints():
    assert ease_out_cubic(0.0) == 0.0
    assert ease_out_cubic(1.0) == 1.0
    assert ease_out_cubic(0.5) == pytest.approx(0.875)


def test_every_particle_starts_hidden_at_the_base(field):
    animator = IntroAnimator(start_y=405.0)
    pose = animator.pose(field, 0.0)
    # Floor particles may have a zero delay; they are still at progress 0.
    assert np.all(pose.progress == 0.0)
    assert np.all(pose.alpha == 0.0)
    assert np.allclose(pose.y, 405.0)
    assert np.allclose(pose.ox, 0.0)
    assert np.allclose(pose.spiral, 4.0 * np.pi)


def test_every_particle_settles_after_the_last_delay(field):
    animator = IntroAnimator(start_y=324.0)
    pose = animator.pose(field, float(field.delay.max()) + 2000.0)
    assert np.all(pose.progress == 1.0)
    assert np.allclose(pose.y, field.y)
    assert np.allclose(pose.ox, field.ox)
    assert np.allclose(pose.oz, field.oz)
    assert np.allclose(pose.spiral, 0.0)
    assert np.allclose(pose.alpha, field.alpha)
