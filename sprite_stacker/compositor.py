"""
Compositor: copies every decoded image into one shared RGBA canvas.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional

from PIL import Image

from .errors import CompositeFailure
from .layout import stack_placements
from .models import CanvasPlan, ImageCollection, Placement, SourceImage

log = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


def check_bounds(name: str, p: Placement, plan: CanvasPlan) -> None:
    """Raise :class:`CompositeFailure` unless *p* lies fully inside *plan*."""
    if p.x >= 0 and p.y >= 0 and p.right <= plan.width and p.bottom <= plan.height:
        return

    reasons = []
    if p.x < 0:
        reasons.append(f"x ({p.x}) < 0")
    if p.y < 0:
        reasons.append(f"y ({p.y}) < 0")
    if p.right > plan.width:
        reasons.append(f"x+w ({p.right}) > canvas_w ({plan.width})")
    if p.bottom > plan.height:
        reasons.append(f"y+h ({p.bottom}) > canvas_h ({plan.height})")
    raise CompositeFailure(
        f"placement of {name!r} exceeds canvas {plan.width}x{plan.height}: "
        f"[x,y,w,h]=({p.x},{p.y},{p.width},{p.height}); {', '.join(reasons)}"
    )


def _copy(canvas: Image.Image, item: SourceImage, p: Placement) -> None:
    # no mask: replace the rectangle outright, alpha included
    canvas.paste(item.image, p.box)


def composite(collection: ImageCollection, plan: CanvasPlan, margin: int,
              workers: Optional[int] = None) -> Image.Image:
    """Paste every image of *collection* into a new ``plan``-sized canvas.

    Placements follow collection order. Copies run concurrently without a
    lock since the stacked rectangles never overlap; the call returns only
    after every copy has finished. Any failed copy fails the whole canvas
    and leaves every :class:`SourceImage` without a placement; otherwise
    each one gets its placement stored on it.
    """
    items = collection.snapshot()
    canvas = Image.new("RGBA", plan.size, TRANSPARENT)
    if not items:
        return canvas

    placements = stack_placements(items, margin)
    for item, p in zip(items, placements):
        check_bounds(item.name, p, plan)

    n_workers = workers or len(items)
    with ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix="composite") as ex:
        futs = {ex.submit(_copy, canvas, item, p): item for item, p in zip(items, placements)}
        wait(futs)

    for fut, item in futs.items():
        err = fut.exception()
        if err is not None:
            raise CompositeFailure(f"copying {item.name!r} failed: {err}") from err

    # only a complete canvas publishes placements
    for item, p in zip(items, placements):
        item.placement = p

    log.debug("composited %d image(s) into %dx%d", len(items), plan.width, plan.height)
    return canvas
