"""
sprite_stacker
--------------
Stack a set of images into one single-column PNG sprite sheet and emit the
CSS that maps each source image to its rectangle.
"""

from .catalog import PlacementCatalog
from .compositor import composite
from .decode import decode_all
from .layout import plan_canvas, stack_placements
from .models import CanvasPlan, ImageCollection, Placement, SourceImage
from .pipeline import SpriteSheet, build_sprite

__version__ = "0.1.0"

__all__ = [
    "CanvasPlan",
    "ImageCollection",
    "Placement",
    "PlacementCatalog",
    "SourceImage",
    "SpriteSheet",
    "build_sprite",
    "composite",
    "decode_all",
    "plan_canvas",
    "stack_placements",
]
