"""Start/stop lifecycle of the animated scene."""
from __future__ import annotations

import logging
import random
from typing import Callable, Optional, Protocol, Tuple

from rendering.draw_system import FrameRenderer, FrameReport
from rendering.surface import DrawingSurface, SurfaceUnavailableError
from scene.state import SceneState

logger = logging.getLogger(__name__)

Size = Tuple[int, int]
ResizeListener = Callable[[Size], None]


class FrameScheduler(Protocol):
    def request_frame(self, callback: Callable[[], None]) -> int:
        """Run ``callback`` before the next repaint; returns a cancellable handle."""

    def cancel_frame(self, handle: int) -> None:
        ...


class FrameClock(Protocol):
    def now_ms(self) -> float:
        ...


class Viewport(Protocol):
    @property
    def size(self) -> Size:
        ...

    def add_resize_listener(self, listener: ResizeListener) -> None:
        ...

    def remove_resize_listener(self, listener: ResizeListener) -> None:
        ...


class FrameSurface(DrawingSurface, Protocol):
    """A drawing surface that also brackets frames and follows the window size."""

    def begin_frame(self) -> None:
        ...

    def end_frame(self) -> None:
        ...

    def resize(self, size: Size) -> None:
        ...


class SceneDriver:
    """Owns the scene state and keeps one tick scheduled while running."""

    def __init__(
        self,
        surface_factory: Callable[[], Optional[FrameSurface]],
        scheduler: FrameScheduler,
        clock: FrameClock,
        viewport: Viewport,
        *,
        renderer: Optional[FrameRenderer] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._surface_factory = surface_factory
        self._scheduler = scheduler
        self._clock = clock
        self._viewport = viewport
        self._renderer = renderer if renderer is not None else FrameRenderer()
        self._rng = rng if rng is not None else random.Random()
        self._surface: Optional[FrameSurface] = None
        self._state: Optional[SceneState] = None
        self._pending: Optional[int] = None
        self._running = False
        self.last_report: Optional[FrameReport] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def state(self) -> Optional[SceneState]:
        return self._state

    def start(self) -> bool:
        """Generate the scene and draw the first frame.

        Returns ``False`` without drawing or scheduling anything when no
        surface can be obtained.
        """

        if self._running:
            return True
        try:
            surface = self._surface_factory()
        except SurfaceUnavailableError as exc:
            logger.error("Scene not started, no drawing surface: %s", exc)
            return False
        if surface is None:
            logger.error("Scene not started, no drawing surface")
            return False

        self._surface = surface
        self._state = SceneState.create(self._viewport.size, self._clock.now_ms(), self._rng)
        self._viewport.add_resize_listener(self._on_resize)
        self._running = True
        logger.info("Scene started at %dx%d", *self._state.size)
        self._tick()
        return True

    def stop(self) -> None:
        """Stop scheduling ticks and detach from the viewport; a running tick finishes."""

        if not self._running:
            return
        self._running = False
        if self._pending is not None:
            self._scheduler.cancel_frame(self._pending)
            self._pending = None
        self._viewport.remove_resize_listener(self._on_resize)
        frames = self._state.frame_count if self._state is not None else 0
        logger.info("Scene stopped after %d frames", frames)

    def _tick(self) -> None:
        self._pending = None
        if not self._running or self._state is None or self._surface is None:
            return
        now = self._clock.now_ms()
        self._surface.begin_frame()
        self.last_report = self._renderer.render(self._state, self._surface, now)
        self._surface.end_frame()
        if self._running:
            self._pending = self._scheduler.request_frame(self._tick)

    def _on_resize(self, size: Size) -> None:
        if self._state is None or self._surface is None:
            return
        self._state.resize(size)
        self._surface.resize(size)
