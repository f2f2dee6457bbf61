"""Tests for the firework life cycle."""
import random

import pytest

from scene.fireworks import FireworkState, FireworkSystem


@pytest.fixture
def system():
    return FireworkSystem(random.Random(42), launch_chance=0.0)


def test_rising_firework_explodes_when_it_stops_climbing(system):
    firework = system.launch_at(400.0, 2000.0, target_y=-5000.0, vy=-10.0)
    for _ in range(199):
        system.advance()
        assert firework.state is FireworkState.RISING
        assert firework.vy < 0.0
    system.advance()
    assert firework.state is FireworkState.EXPLODING
    assert firework.rise_ticks == 200
    assert 100 <= len(firework.sparks) <= 150


def test_firework_explodes_at_its_target_height(system):
    firework = system.launch_at(100.0, 500.0, target_y=450.0, vy=-10.0)
    for _ in range(10):
        system.advance()
    assert firework.state is FireworkState.EXPLODING
    assert firework.rise_ticks < 10


def test_sparks_only_dwindle_and_firework_is_removed(system):
    firework = system.launch_at(100.0, 500.0, target_y=450.0, vy=-10.0)
    while firework.state is FireworkState.RISING:
        system.advance()
    counts = [len(firework.sparks)]
    for _ in range(400):
        system.advance()
        counts.append(len(firework.sparks))
        if firework not in system.fireworks:
            break
    assert firework not in system.fireworks
    assert all(a >= b for a, b in zip(counts, counts[1:]))
    assert len(system) == 0


def test_spark_state_after_a_tick(system):
    firework = system.launch_at(100.0, 500.0, target_y=490.0, vy=-10.0)
    system.advance()
    assert firework.state is FireworkState.EXPLODING
    system.advance()
    for spark in firework.sparks:
        assert 0.0 < spark.life < 1.0
        assert spark.glint in (1.0, 1.5)
        assert spark.color == firework.color


def test_launch_ranges():
    system = FireworkSystem(random.Random(3), launch_chance=0.0)
    for _ in range(50):
        firework = system.launch(1000.0, 800.0)
        assert 100.0 <= firework.x <= 900.0
        assert firework.y == 800.0
        assert 80.0 <= firework.target_y <= 480.0
        assert -13.0 <= firework.vy <= -8.0
        assert firework.state is FireworkState.RISING
    assert len({f.id for f in system.fireworks}) == 50


def test_launch_chance():
    never = FireworkSystem(random.Random(5), launch_chance=0.0)
    always = FireworkSystem(random.Random(5), launch_chance=1.0)
    for _ in range(20):
        assert never.maybe_launch(800.0, 600.0) is None
        assert always.maybe_launch(800.0, 600.0) is not None
    assert len(never) == 0
    assert len(always) == 20


class _HighRolls(random.Random):
    """Rolls just under one so the spark count lands on its upper bound."""

    def random(self):
        return 0.999


def test_burst_can_reach_the_full_spark_count():
    system = FireworkSystem(_HighRolls(), launch_chance=0.0)
    firework = system.launch_at(100.0, 500.0, target_y=490.0, vy=-10.0)
    system.advance()
    assert len(firework.sparks) == 150


def test_burst_flag_marks_only_the_exploding_tick(system):
    firework = system.launch_at(100.0, 500.0, target_y=481.0, vy=-10.0)
    system.advance()
    assert firework.state is FireworkState.RISING
    assert not firework.burst
    system.advance()
    assert firework.state is FireworkState.EXPLODING
    assert firework.burst
    assert firework.y == pytest.approx(480.05)
    system.advance()
    assert not firework.burst
