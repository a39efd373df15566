from __future__ import annotations

from pathlib import Path

from PIL import Image

from sprite_stacker.models import SourceImage


def solid(width, height, color=(255, 0, 0, 255)):
    return Image.new("RGBA", (width, height), color)


def source(name, width, height, color=(255, 0, 0, 255)):
    return SourceImage(name=name, image=solid(width, height, color))


def write_image(directory, name, width, height, color=(255, 0, 0, 255), fmt=None):
    """Save a solid image under *directory*; format follows the extension."""
    path = Path(directory) / name
    img = solid(width, height, color)
    if (fmt or path.suffix.lower()) in (".jpg", ".jpeg", "JPEG"):
        img = img.convert("RGB")
    img.save(path, format=fmt)
    return path
