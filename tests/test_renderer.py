"""Tests for the per-frame renderer and caption."""
import pytest

import settings
from rendering.draw_system import FrameRenderer
from rendering.surface import BlendMode, RadialGradient
from scene.fireworks import FireworkState
from ui.caption import CaptionOverlay


@pytest.fixture
def renderer():
    return FrameRenderer()


def test_trail_rect_is_the_first_fill(renderer, scene_state, surface):
    renderer.render(scene_state, surface, 16.0)
    first = surface.fills()[0]
    assert first.name == "fill_rect"
    assert first.blend is BlendMode.NORMAL
    assert first.args == (0.0, 0.0, 1280, 720, settings.TRAIL_COLOR)


def test_first_frame_draws_no_tree(renderer, scene_state, surface):
    report = renderer.render(scene_state, surface, 0.0)
    assert report.tree_drawn == 0
    assert report.tree_culled == len(scene_state.particles)
    assert not report.caption_visible
    assert not surface.fills("fill_text")


def test_settled_tree_is_fully_drawn(renderer, scene_state, surface):
    report = renderer.render(scene_state, surface, 7000.0)
    assert report.tree_drawn == len(scene_state.particles)
    assert report.tree_culled == 0
    assert report.caption_visible


def test_glow_dots_are_batched_and_ornaments_drawn_singly(renderer, scene_state, surface):
    renderer.render(scene_state, surface, 7000.0)
    batches = [call for call in surface.fills("fill_circles") if call.blend is BlendMode.ADDITIVE]
    batched = sum(len(call.args[1]) for call in batches)
    singles = settings.ORNAMENT_COUNT + 1
    assert batched == len(scene_state.particles) - singles
    # One translate per ornament and one for the star.
    assert len([call for call in surface.calls if call.name == "translate"]) == singles
    assert len(batches) <= singles + 1


def test_snow_is_one_normal_blend_batch(renderer, scene_state, surface):
    renderer.render(scene_state, surface, 7000.0)
    (snow,) = [call for call in surface.fills("fill_circles") if call.blend is BlendMode.NORMAL]
    centers, radii, colors = snow.args
    assert len(centers) == len(radii) == len(scene_state.snow)
    flakes = list(scene_state.snow)
    assert tuple(centers[0]) == pytest.approx((flakes[0].x, flakes[0].y))
    assert colors[0][3] == pytest.approx(flakes[0].alpha)


def test_floor_glow_is_squashed_onto_the_floor(renderer, scene_state, surface):
    report = renderer.render(scene_state, surface, 3000.0)
    glow = next(
        call for call in surface.fills("fill_circle") if isinstance(call.args[2], RadialGradient)
    )
    assert glow.blend is BlendMode.ADDITIVE
    assert glow.args[1] == pytest.approx(scene_state.dimensions.max_radius * 3.0)
    transform = next(call for call in surface.calls if call.name == "transform")
    floor_y = report.layout.floor_y
    assert transform.args == pytest.approx((1.0, 0.0, 0.0, 0.3, 0.0, floor_y * 0.7))


def test_rotation_and_frame_count_advance(renderer, scene_state, surface):
    for _ in range(3):
        renderer.render(scene_state, surface, 100.0)
    assert scene_state.frame_count == 3
    assert scene_state.rotation == pytest.approx(0.009)


def test_resize_is_picked_up_next_frame(renderer, scene_state, surface):
    count = len(scene_state.particles)
    dimensions = scene_state.dimensions
    renderer.render(scene_state, surface, 100.0)

    scene_state.resize((800, 600))
    surface.clear()
    report = renderer.render(scene_state, surface, 116.0)

    assert report.layout.window_size == (800, 600)
    assert report.layout.center == (400.0, 200.0)
    assert surface.fills()[0].args[:4] == (0.0, 0.0, 800, 600)
    assert len(scene_state.particles) == count
    assert scene_state.dimensions == dimensions


def test_fireworks_are_drawn_additively(renderer, scene_state, surface):
    firework = scene_state.fireworks.launch_at(300.0, 700.0, target_y=100.0, vy=-10.0, hue=200.0)
    report = renderer.render(scene_state, surface, 100.0)
    assert report.fireworks == 1
    head = [call for call in surface.fills("fill_circle") if call.args[2] == firework.color]
    assert head and head[0].blend is BlendMode.ADDITIVE
    assert head[0].args[0] == (300.0, 690.0)


def test_head_is_drawn_on_the_burst_tick_and_sparks_after(renderer, scene_state, surface):
    firework = scene_state.fireworks.launch_at(300.0, 500.0, target_y=490.0, vy=-10.0, hue=200.0)
    renderer.render(scene_state, surface, 100.0)
    assert firework.state is FireworkState.EXPLODING
    (head,) = [call for call in surface.fills("fill_circle") if call.args[2] == firework.color]
    assert head.args[0] == (300.0, 490.0)
    assert head.args[1] == settings.FIREWORK_HEAD_RADIUS
    # Fireworks come before snow, so no spark batch precedes the snow batch.
    assert surface.fills("fill_circles")[0].blend is BlendMode.NORMAL

    surface.clear()
    renderer.render(scene_state, surface, 116.0)
    assert not [call for call in surface.fills("fill_circle") if call.args[2] == firework.color]
    sparks = surface.fills("fill_circles")[0]
    assert sparks.blend is BlendMode.ADDITIVE
    centers, radii, colors = sparks.args
    assert len(centers) == len(firework.sparks)
    spark = firework.sparks[0]
    assert radii[0] == pytest.approx(settings.FIREWORK_SPARK_RADIUS * spark.glint)
    assert colors[0][3] == pytest.approx(firework.color[3] * spark.life)


def test_caption_fades_in_after_four_seconds():
    caption = CaptionOverlay()
    assert caption.opacity(4000.0) == 0.0
    assert caption.opacity(5000.0) == pytest.approx(0.5)
    assert caption.opacity(6000.0) == 1.0
    assert caption.opacity(60_000.0) == 1.0


def test_caption_is_drawn_at_the_bottom(renderer, scene_state, surface):
    renderer.render(scene_state, surface, 5000.0)
    (text,) = surface.fills("fill_text")
    content, position, font, _paint = text.args
    assert content == "Merry Christmas"
    assert position == (640.0, 680.0)
    assert font.size == 100
    assert text.alpha == pytest.approx(0.5)
    assert text.blend is BlendMode.NORMAL
