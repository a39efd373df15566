"""
Single column layout.

Every image is left aligned at ``x = margin``; the first top edge is at
``margin`` and each following one sits ``margin`` below the previous bottom
edge. The canvas is as wide as the widest image plus a margin on each side.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .models import CanvasPlan, Placement, SourceImage


def _check_margin(margin: int) -> None:
    if margin < 0:
        raise ValueError(f"margin must be >= 0, got {margin}")


def plan_canvas(images: Iterable[SourceImage], margin: int) -> CanvasPlan:
    """Canvas size for *images* stacked in one column.

    No images gives ``(2 * margin, margin)``, the same formula with every
    image term at zero.
    """
    _check_margin(margin)
    w = 0
    h = 0
    n = 0
    for im in images:
        w = max(w, im.width)
        h += im.height
        n += 1

    return CanvasPlan(width=w + 2 * margin, height=h + margin * (n + 1))


def stack_placements(images: Sequence[SourceImage], margin: int) -> List[Placement]:
    """Placements in the order of *images*."""
    _check_margin(margin)
    placements = []
    top = margin
    for im in images:
        placements.append(Placement(margin, top, im.width, im.height))
        top += im.height + margin
    return placements
