"""Highlight color allocation with recycling.

The caller owns the pool of colors in use and passes it in; nothing here keeps
state between calls.
"""

from __future__ import annotations

from collections.abc import Sequence, Set

BASE_PALETTE: tuple[str, ...] = ("#ffeb3b", "#81c784", "#64b5f6", "#ff8a65", "#f06292")
GOLDEN_ANGLE = 137.508
DEFAULT_SATURATION = 60
DEFAULT_LIGHTNESS = 75


def synthesize_color(step: int, hue_step: float = GOLDEN_ANGLE,
                     saturation: float = DEFAULT_SATURATION,
                     lightness: float = DEFAULT_LIGHTNESS) -> str:
    hue = int(round(step * hue_step)) % 360
    return f"hsl({hue}, {saturation}%, {lightness}%)"


def allocate_color(used_colors: Set[str],
                   palette: Sequence[str] = BASE_PALETTE,
                   hue_step: float = GOLDEN_ANGLE,
                   saturation: float = DEFAULT_SATURATION,
                   lightness: float = DEFAULT_LIGHTNESS) -> str:
    """Return the first free palette color, else a synthesized pastel.

    Synthesized colors walk the hue circle in ``hue_step`` increments and skip
    any already in ``used_colors``; after a full turn without a free slot the
    next candidate is returned anyway (uniqueness is best-effort).
    """
    for color in palette:
        if color not in used_colors:
            return color

    for step in range(360):
        candidate = synthesize_color(step, hue_step, saturation, lightness)
        if candidate not in used_colors:
            return candidate
    return synthesize_color(len(used_colors), hue_step, saturation, lightness)


def is_base_color(color: str, palette: Sequence[str] = BASE_PALETTE) -> bool:
    return color in palette
