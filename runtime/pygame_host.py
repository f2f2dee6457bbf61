"""pygame window hosting the scene."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

import pygame
from OpenGL import error as gl_error

import settings

from rendering.gl_surface import GLSurface
from rendering.surface import SurfaceUnavailableError

logger = logging.getLogger(__name__)

Size = Tuple[int, int]

WINDOW_FLAGS = pygame.OPENGL | pygame.DOUBLEBUF | pygame.RESIZABLE


class PygameHost:
    """Window, frame scheduler, clock and viewport for ``SceneDriver``.

    Callbacks requested during a frame run once on the next pass of the
    event loop, which then flips the display.
    """

    def __init__(
        self,
        size: Size = settings.INITIAL_WINDOW_SIZE,
        title: str = settings.WINDOW_TITLE,
        fps: int = settings.TARGET_FPS,
    ) -> None:
        self._size = size
        self._title = title
        self._fps = fps
        self._listeners: List[Callable[[Size], None]] = []
        self._callbacks: Dict[int, Callable[[], None]] = {}
        self._next_handle = 1
        self._surface: Optional[GLSurface] = None
        self._running = False

    # ------------------------------------------------------------------
    # Clock
    def now_ms(self) -> float:
        return float(pygame.time.get_ticks())

    # ------------------------------------------------------------------
    # Viewport
    @property
    def size(self) -> Size:
        return self._size

    def add_resize_listener(self, listener: Callable[[Size], None]) -> None:
        self._listeners.append(listener)

    def remove_resize_listener(self, listener: Callable[[Size], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Scheduler
    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    # ------------------------------------------------------------------
    # Window
    def create_surface(self) -> GLSurface:
        pygame.init()
        pygame.display.set_caption(self._title)
        try:
            pygame.display.set_mode(self._size, WINDOW_FLAGS)
            self._size = pygame.display.get_surface().get_size()
            self._surface = GLSurface(self._size)
        except (pygame.error, gl_error.Error) as exc:
            raise SurfaceUnavailableError(f"Could not open an OpenGL window: {exc}") from exc
        logger.info("Opened %dx%d window", *self._size)
        return self._surface

    def run(self) -> None:
        """Pump events and deliver frame callbacks until the window closes."""

        clock = pygame.time.Clock()
        self._running = True
        while self._running:
            clock.tick(self._fps)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.type == pygame.VIDEORESIZE:
                    self._resize(event.size)
            if not self._running:
                break

            callbacks = self._callbacks
            self._callbacks = {}
            for callback in callbacks.values():
                callback()
            if callbacks:
                pygame.display.flip()

    def close(self) -> None:
        self._running = False
        self._callbacks.clear()
        if self._surface is not None:
            self._surface.release()
            self._surface = None
        pygame.quit()

    def _resize(self, size: Size) -> None:
        pygame.display.set_mode(size, WINDOW_FLAGS)
        self._size = size
        for listener in list(self._listeners):
            listener(size)
