"""Colour descriptors shared by the scene generator and renderer."""
from __future__ import annotations

from typing import Tuple

import pygame

Color = Tuple[float, float, float, float]


def _from_pygame(color: pygame.Color) -> Color:
    return (color.r / 255.0, color.g / 255.0, color.b / 255.0, color.a / 255.0)


def hsla(hue: float, saturation: float, lightness: float, alpha: float = 1.0) -> Color:
    """Return an RGBA float tuple for a CSS-style ``hsla()`` colour.

    ``hue`` is in degrees and wraps (345..365 is a valid red band);
    ``saturation`` and ``lightness`` are percentages; ``alpha`` is ``0..1``.
    """

    color = pygame.Color(0, 0, 0)
    color.hsla = (
        hue % 360.0,
        max(0.0, min(100.0, saturation)),
        max(0.0, min(100.0, lightness)),
        max(0.0, min(1.0, alpha)) * 100.0,
    )
    return _from_pygame(color)


def hex_color(value: str) -> Color:
    return _from_pygame(pygame.Color(value))


def rgba(red: int, green: int, blue: int, alpha: float = 1.0) -> Color:
    return (red / 255.0, green / 255.0, blue / 255.0, max(0.0, min(1.0, alpha)))


def with_alpha(color: Color, alpha: float) -> Color:
    return (color[0], color[1], color[2], max(0.0, min(1.0, alpha)))
