"""
Decode stage: source paths -> RGBA images, one thread per source.
"""

from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image, UnidentifiedImageError

from .errors import DecodeFailure, SourceError, SourceUnreadable, UnsupportedFormat
from .models import ImageCollection, SourceImage

log = logging.getLogger(__name__)

# normalised extension -> Pillow format name
DECODERS = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".gif": "GIF",
}


@dataclass
class DecodeResult:
    collection: ImageCollection
    failures: List[SourceError] = field(default_factory=list)


def resolve_decoder(path) -> str:
    ext = Path(path).suffix.lower()
    try:
        return DECODERS[ext]
    except KeyError:
        raise UnsupportedFormat(Path(path).name, f"extension {ext or '<none>'!r}") from None


def read_source(path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise SourceUnreadable(Path(path).name, e.strerror or str(e)) from e


def decode_bytes(data: bytes, fmt: str, name: str) -> Image.Image:
    """Decode *data* with the *fmt* decoder only and return an RGBA copy.

    ``Image.open`` is lazy, so the ``convert`` call is what actually runs the
    decoder; truncated files fail there rather than later in the compositor.
    """
    try:
        with Image.open(io.BytesIO(data), formats=[fmt]) as im:
            return im.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
        raise DecodeFailure(name, str(e)) from e


def decode_source(path) -> SourceImage:
    name = Path(path).name
    fmt = resolve_decoder(path)
    img = decode_bytes(read_source(path), fmt, name)
    return SourceImage(name=name, image=img)


def _decode_into(path, collection: ImageCollection) -> SourceImage:
    item = decode_source(path)
    collection.append(item)
    log.debug("decoded %s (%dx%d)", item.name, item.width, item.height)
    return item


def decode_all(paths: Sequence, workers: Optional[int] = None) -> DecodeResult:
    """Decode every path concurrently into a fresh :class:`ImageCollection`.

    A failing source is logged and listed in ``failures``; it is never
    appended and does not stop the other tasks. Returns once every task has
    either appended or failed.
    """
    result = DecodeResult(collection=ImageCollection())
    if not paths:
        return result

    n_workers = workers or len(paths)
    with ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix="decode") as ex:
        futs = {ex.submit(_decode_into, p, result.collection): p for p in paths}
        wait(futs)

    # futures are walked in submission order so failures are reported stably
    for fut, path in futs.items():
        err = fut.exception()
        if err is None:
            continue
        if not isinstance(err, SourceError):
            err = DecodeFailure(Path(path).name, repr(err))
        log.warning("skipping %s: %s", err.name, err)
        result.failures.append(err)

    return result
