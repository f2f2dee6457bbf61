"""Tests for the scene driver life cycle."""
import logging
import random

import pytest

from rendering.surface import SurfaceUnavailableError
from runtime.driver import SceneDriver


@pytest.fixture
def driver(surface, scheduler, clock, viewport):
    return SceneDriver(lambda: surface, scheduler, clock, viewport, rng=random.Random(8))


def test_start_draws_a_frame_and_schedules_the_next(driver, surface, scheduler, viewport):
    assert driver.start()
    assert driver.running
    assert surface.frames_begun == surface.frames_ended == 1
    assert scheduler.pending == 1
    assert len(viewport.listeners) == 1
    assert driver.state.size == (1280, 720)
    assert driver.last_report.tree_drawn == 0


def test_each_tick_schedules_exactly_one_more(driver, surface, scheduler, clock):
    driver.start()
    for _ in range(5):
        clock.advance(16.0)
        scheduler.run_pending()
        assert scheduler.pending == 1
    assert surface.frames_begun == 6
    assert driver.state.frame_count == 6


def test_start_twice_is_a_no_op(driver, scheduler):
    assert driver.start()
    assert driver.start()
    assert scheduler.pending == 1


def test_stop_cancels_and_detaches(driver, scheduler, viewport, caplog):
    driver.start()
    with caplog.at_level(logging.INFO, logger="runtime.driver"):
        driver.stop()
    assert not driver.running
    assert scheduler.pending == 0
    assert scheduler.cancelled == [1]
    assert viewport.listeners == []
    assert "stopped" in caplog.text
    driver.stop()
    assert scheduler.cancelled == [1]


def test_tick_after_stop_draws_nothing(driver, surface, scheduler):
    driver.start()
    (pending,) = scheduler.callbacks.values()
    driver.stop()
    pending()
    assert surface.frames_begun == 1
    assert scheduler.pending == 0


def test_resize_reaches_state_and_surface(driver, surface, scheduler, viewport):
    driver.start()
    count = len(driver.state.particles)
    viewport.resize((800, 600))
    assert driver.state.size == (800, 600)
    assert surface.resizes == [(800, 600)]

    scheduler.run_pending()
    assert driver.last_report.layout.window_size == (800, 600)
    assert len(driver.state.particles) == count


def test_missing_surface_aborts_start(scheduler, clock, viewport, caplog):
    driver = SceneDriver(lambda: None, scheduler, clock, viewport)
    with caplog.at_level(logging.ERROR, logger="runtime.driver"):
        assert not driver.start()
    assert not driver.running
    assert driver.state is None
    assert scheduler.pending == 0
    assert viewport.listeners == []
    assert "no drawing surface" in caplog.text


def test_surface_error_aborts_start(scheduler, clock, viewport, caplog):
    def unavailable():
        raise SurfaceUnavailableError("no OpenGL context")

    driver = SceneDriver(unavailable, scheduler, clock, viewport)
    with caplog.at_level(logging.ERROR, logger="runtime.driver"):
        assert not driver.start()
    assert scheduler.pending == 0
    assert "no OpenGL context" in caplog.text
