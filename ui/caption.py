"""Timed greeting drawn over the scene."""
from __future__ import annotations

import settings

from rendering.surface import BlendMode, DrawingSurface, FontStyle, LinearGradient
from scene.palette import rgba

from .layout import SceneLayout


class CaptionOverlay:
    """Fades the greeting in once the tree has mostly assembled."""

    def __init__(
        self,
        text: str = settings.CAPTION_TEXT,
        delay_ms: float = settings.CAPTION_DELAY_MS,
        fade_ms: float = settings.CAPTION_FADE_MS,
    ) -> None:
        self.text = text
        self.delay_ms = delay_ms
        self.fade_ms = fade_ms

    def opacity(self, elapsed_ms: float) -> float:
        if elapsed_ms <= self.delay_ms:
            return 0.0
        return min((elapsed_ms - self.delay_ms) / self.fade_ms, 1.0)

    def draw(self, surface: DrawingSurface, layout: SceneLayout, elapsed_ms: float) -> bool:
        """Draw the caption; returns ``False`` while it is still hidden."""

        alpha = self.opacity(elapsed_ms)
        if alpha <= 0.0:
            return False

        top, bottom = layout.caption_gradient_span
        gradient = LinearGradient(
            start=(0.0, top),
            end=(0.0, bottom),
            stops=(
                (0.0, rgba(255, 248, 219, alpha)),
                (0.5, rgba(255, 204, 0, alpha)),
                (1.0, rgba(255, 153, 0, alpha)),
            ),
        )
        font = FontStyle(settings.CAPTION_FONT_FACES, layout.caption_font_size)

        surface.set_blend_mode(BlendMode.NORMAL)
        surface.save()
        surface.set_shadow(settings.CAPTION_GLOW_COLOR, settings.CAPTION_GLOW_BLUR)
        surface.set_alpha(alpha)
        surface.fill_text(self.text, layout.caption_anchor, font, gradient)
        surface.restore()
        return True
