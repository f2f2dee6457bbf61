"""Tests for the declared dependencies."""
import re
from pathlib import Path

import pygame

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _floor(requirement: str) -> tuple:
    match = re.search(rf'"{requirement}>=([0-9.]+)"', PYPROJECT.read_text(encoding="utf-8"))
    assert match, f"{requirement} has no lower bound"
    return tuple(int(part) for part in match.group(1).split("."))


def test_pygame_floor_has_image_tobytes():
    # The caption is rasterised with pygame.image.tobytes, added in 2.1.3.
    assert _floor("pygame") >= (2, 1, 3)
    assert hasattr(pygame.image, "tobytes")
