"""Shared fakes for the scene tests.

Nothing here opens a window or touches OpenGL: the renderer draws into a
``RecordingSurface`` and the driver runs against a hand-cranked scheduler,
clock and viewport.
"""
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from rendering.surface import BlendMode
from scene.state import SceneState


@dataclass
class Call:
    name: str
    args: tuple
    blend: BlendMode
    alpha: float


class RecordingSurface:
    """DrawingSurface that records every call with the blend mode and alpha in force."""

    def __init__(self, size: Tuple[int, int] = (1280, 720)) -> None:
        self._size = size
        self.calls: List[Call] = []
        self.blend = BlendMode.NORMAL
        self.alpha = 1.0
        self.shadow = None
        self._stack: List[tuple] = []
        self.frames_begun = 0
        self.frames_ended = 0
        self.resizes: List[Tuple[int, int]] = []

    @property
    def size(self) -> Tuple[int, int]:
        return self._size

    def _record(self, name: str, *args) -> None:
        self.calls.append(Call(name, args, self.blend, self.alpha))

    def fills(self, name: Optional[str] = None) -> List[Call]:
        return [
            call
            for call in self.calls
            if call.name.startswith("fill_") and (name is None or call.name == name)
        ]

    def clear(self) -> None:
        self.calls.clear()

    # State
    def set_blend_mode(self, mode):
        self.blend = mode
        self._record("set_blend_mode", mode)

    def set_alpha(self, alpha):
        self.alpha = max(0.0, min(1.0, alpha))
        self._record("set_alpha", alpha)

    def set_shadow(self, color, blur=0.0):
        self.shadow = color if color is not None and blur > 0.0 else None
        self._record("set_shadow", color, blur)

    def save(self):
        self._stack.append((self.blend, self.alpha, self.shadow))
        self._record("save")

    def restore(self):
        self.blend, self.alpha, self.shadow = self._stack.pop()
        self._record("restore")

    def translate(self, dx, dy):
        self._record("translate", dx, dy)

    def rotate(self, radians):
        self._record("rotate", radians)

    def transform(self, a, b, c, d, e, f):
        self._record("transform", a, b, c, d, e, f)

    # Fills
    def fill_rect(self, x, y, width, height, paint):
        self._record("fill_rect", x, y, width, height, paint)

    def fill_circle(self, center, radius, paint):
        self._record("fill_circle", center, radius, paint)

    def fill_ellipse(self, center, radius_x, radius_y, paint):
        self._record("fill_ellipse", center, radius_x, radius_y, paint)

    def fill_path(self, path, paint):
        self._record("fill_path", path, paint)

    def fill_circles(self, centers, radii, colors):
        self._record("fill_circles", centers, radii, colors)

    def fill_text(self, text, position, font, paint):
        self._record("fill_text", text, position, font, paint)

    # Frame bracketing
    def begin_frame(self):
        self.frames_begun += 1

    def end_frame(self):
        self.frames_ended += 1

    def resize(self, size):
        self._size = size
        self.resizes.append(size)


class FakeScheduler:
    def __init__(self) -> None:
        self.callbacks: Dict[int, Callable[[], None]] = {}
        self.cancelled: List[int] = []
        self._next = 1

    def request_frame(self, callback):
        handle = self._next
        self._next += 1
        self.callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle):
        self.cancelled.append(handle)
        self.callbacks.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self.callbacks)

    def run_pending(self) -> None:
        callbacks = self.callbacks
        self.callbacks = {}
        for callback in callbacks.values():
            callback()


class FakeClock:
    def __init__(self, now_ms: float = 1000.0) -> None:
        self.now = now_ms

    def now_ms(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeViewport:
    def __init__(self, size: Tuple[int, int] = (1280, 720)) -> None:
        self._size = size
        self.listeners: List[Callable[[Tuple[int, int]], None]] = []

    @property
    def size(self) -> Tuple[int, int]:
        return self._size

    def add_resize_listener(self, listener):
        self.listeners.append(listener)

    def remove_resize_listener(self, listener):
        self.listeners.remove(listener)

    def resize(self, size: Tuple[int, int]) -> None:
        self._size = size
        for listener in list(self.listeners):
            listener(size)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def viewport():
    return FakeViewport()


@pytest.fixture
def scene_state(rng):
    state = SceneState.create((1280, 720), 0.0, rng)
    # Keep frames deterministic; tests launch fireworks explicitly.
    state.fireworks.launch_chance = 0.0
    return state
