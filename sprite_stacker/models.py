from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from PIL import Image


@dataclass(frozen=True)
class Placement:
    """Rectangle an image occupies inside the sprite (top-left + size)."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def box(self):
        """Pillow style ``(left, upper, right, lower)``."""
        return (self.x, self.y, self.right, self.bottom)

    def overlaps(self, other: "Placement") -> bool:
        return (self.x < other.right and self.right > other.x and
                self.y < other.bottom and self.bottom > other.y)


@dataclass(frozen=True)
class CanvasPlan:
    width: int
    height: int

    @property
    def size(self):
        return (self.width, self.height)


@dataclass
class SourceImage:
    name: str
    image: Image.Image
    placement: Optional[Placement] = None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


class ImageCollection:
    """Decoded images of one pipeline run.

    Decode tasks only ever call :meth:`append`, which is the single
    critical section. Everything else is meant for the coordinator once the
    decode barrier has been crossed.
    """

    def __init__(self):
        self._items: List[SourceImage] = []
        self._lock = threading.Lock()

    def append(self, item: SourceImage) -> None:
        with self._lock:
            self._items.append(item)

    def snapshot(self) -> List[SourceImage]:
        with self._lock:
            return list(self._items)

    def sort(self, key: Callable[[SourceImage], object]) -> None:
        with self._lock:
            self._items.sort(key=key)

    def names(self) -> List[str]:
        return [i.name for i in self.snapshot()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[SourceImage]:
        return iter(self.snapshot())

    def __getitem__(self, idx: int) -> SourceImage:
        with self._lock:
            return self._items[idx]
