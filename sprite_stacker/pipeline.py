"""
decode (barrier) -> plan -> composite (barrier) -> catalog
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image

from .catalog import PlacementCatalog
from .compositor import composite
from .decode import decode_all
from .errors import PipelineAborted, SourceError
from .layout import plan_canvas
from .models import CanvasPlan
from .settings import MARGIN

log = logging.getLogger(__name__)


@dataclass
class SpriteSheet:
    canvas: Image.Image
    plan: CanvasPlan
    catalog: PlacementCatalog
    failures: List[SourceError] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.failures)


def build_sprite(paths: Sequence, margin: int = MARGIN, strict: bool = False,
                 ordered: bool = True, workers: Optional[int] = None) -> SpriteSheet:
    """Run the whole packing pipeline over *paths*.

    ``strict`` turns any decode failure into :class:`PipelineAborted` before
    anything is composited; otherwise failed sources are skipped and listed
    on the returned sheet. With ``ordered`` the sheet follows the order of
    *paths*, without it the order in which the decodes happened to finish.
    """
    paths = [Path(p) for p in paths]
    dupes = sorted(n for n, c in Counter(p.name for p in paths).items() if c > 1)
    if dupes:
        raise ValueError(f"duplicate source names: {', '.join(dupes)}")

    decoded = decode_all(paths, workers=workers)
    if decoded.failures and strict:
        raise PipelineAborted(decoded.failures)

    collection = decoded.collection
    if ordered:
        rank = {p.name: i for i, p in enumerate(paths)}
        collection.sort(key=lambda item: rank[item.name])

    plan = plan_canvas(collection, margin)
    log.info("canvas %dx%d for %d image(s)", plan.width, plan.height, len(collection))

    canvas = composite(collection, plan, margin, workers=workers)
    return SpriteSheet(
        canvas=canvas,
        plan=plan,
        catalog=PlacementCatalog.from_images(collection),
        failures=decoded.failures,
    )
