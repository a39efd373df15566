from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .errors import SourceUnreadable


def find_sources(src, extensions: Iterable[str]) -> List[Path]:
    """Absolute paths of the files directly in *src* with an allowed extension.

    Extensions are matched case-insensitively; the result is sorted by path
    so repeated runs see the same order.
    """
    root = Path(src).resolve()
    if not root.is_dir():
        raise SourceUnreadable(str(src), "not a directory")

    allowed = {"." + e.lower().lstrip(".") for e in extensions}
    return sorted(p for p in root.iterdir() if p.is_file() and p.suffix.lower() in allowed)
