from __future__ import annotations

import json
from typing import Dict, Iterable, Iterator, List, Tuple

from .models import Placement, SourceImage


class PlacementCatalog:
    """Read-only ``name -> Placement`` table in stacking order."""

    def __init__(self, entries: Iterable[Tuple[str, Placement]] = ()):
        table: Dict[str, Placement] = {}
        for name, p in entries:
            if name in table:
                raise ValueError(f"duplicate image name in catalog: {name!r}")
            table[name] = p
        self._table = table

    @classmethod
    def from_images(cls, images: Iterable[SourceImage]) -> "PlacementCatalog":
        """Images without a placement (not composited yet) are left out."""
        return cls((im.name, im.placement) for im in images if im.placement is not None)

    def entries(self) -> List[Tuple[str, Placement]]:
        return list(self._table.items())

    def names(self) -> List[str]:
        return list(self._table)

    def get(self, name: str, default=None):
        return self._table.get(name, default)

    def as_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            name: {"x": p.x, "y": p.y, "width": p.width, "height": p.height}
            for name, p in self._table.items()
        }

    def to_json(self, sprite_filename: str, canvas_size=None) -> str:
        """Metadata table for tools that want positions without parsing CSS."""
        meta = {"image": sprite_filename}
        if canvas_size is not None:
            meta["width"], meta["height"] = canvas_size
        meta["sprites"] = [dict(name=name, **rect) for name, rect in self.as_dict().items()]
        return json.dumps(meta, indent=2)

    def __getitem__(self, name: str) -> Placement:
        return self._table[name]

    def __contains__(self, name) -> bool:
        return name in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PlacementCatalog):
            return NotImplemented
        return self.entries() == other.entries()

    def __repr__(self) -> str:
        return f"PlacementCatalog({self.entries()!r})"
