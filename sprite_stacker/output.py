"""
Writing the sprite: PNG encoding (smallest lossless variant) + CSS/HTML/JSON.
"""

from __future__ import annotations

import io
import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image

from .errors import OutputError
from .markup import generate_css, generate_demo

log = logging.getLogger(__name__)


# --------------------------------------------------------------------- #
# PNG optimisation – pick the smallest lossless encoding
# --------------------------------------------------------------------- #
def _uses_alpha(img):
    """Return True if any pixel has alpha < 255."""
    if img.mode != "RGBA":
        return False
    return img.getchannel("A").getextrema()[0] < 255


def png_bytes(img):
    """Render *img* to an in-memory PNG with max Pillow compression."""
    buf = io.BytesIO()
    img.save(buf, format="PNG", optimize=True)
    return buf.getvalue()


def _palette_variant(img):
    """Indexed copy of *img* when it is pixel-exact, else None."""
    if img.width == 0 or img.height == 0 or img.getcolors(maxcolors=256) is None:
        return None
    method = Image.Quantize.FASTOCTREE if img.mode == "RGBA" else Image.Quantize.MEDIANCUT
    pal = img.quantize(colors=256, method=method, dither=Image.Dither.NONE)
    if pal.convert(img.mode).tobytes() != img.tobytes():
        return None
    return pal


def _try_external_crush(path):
    """Re-compress losslessly with oxipng (preferred) or optipng if installed."""
    oxipng = shutil.which("oxipng")
    if oxipng:
        subprocess.run(
            [oxipng, "-o", "4", "--strip", "safe", "-q", str(path)],
            capture_output=True,
        )
        return "oxipng"

    optipng = shutil.which("optipng")
    if optipng:
        subprocess.run(
            [optipng, "-o7", "-strip", "all", "-quiet", str(path)],
            capture_output=True,
        )
        return "optipng"
    return None


def optimize_and_save(img, path, crush=False):
    """Save *img* as the smallest lossless PNG.

    Strategy:
      1. Drop the alpha channel entirely when it is unused.
      2. Try true-colour (RGB / RGBA) with max zlib compression.
      3. Try palette mode, kept only if it reproduces every pixel.
      4. Write whichever is smallest.
      5. With *crush*, re-compress with oxipng / optipng.
    Returns ``(strategy, size_in_bytes)``.
    """
    base = img if _uses_alpha(img) else img.convert("RGB")

    candidates = {"truecolor": png_bytes(base)}
    pal = _palette_variant(base)
    if pal is not None:
        candidates["palette"] = png_bytes(pal)

    best_name = min(candidates, key=lambda k: len(candidates[k]))

    path = Path(path)
    path.write_bytes(candidates[best_name])

    if crush:
        tool = _try_external_crush(path)
        if tool is None:
            log.info("crush requested but neither oxipng nor optipng is installed")

    return best_name, path.stat().st_size


# --------------------------------------------------------------------- #
# Output directory + companion files
# --------------------------------------------------------------------- #
@dataclass
class WrittenFiles:
    sprite: Path
    css: Path
    html: Path
    json: Optional[Path] = None
    strategy: str = ""
    size: int = 0


def ensure_out_dir(out) -> Path:
    out = Path(out).resolve()
    if out.exists() and not out.is_dir():
        raise OutputError(f"output should be a directory: {out}")
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputError(f"cannot create {out}: {e}") from e
    return out


def write_outputs(sheet, out, name, crush=False, write_json=False) -> WrittenFiles:
    """Write ``<name>.png``, ``<name>.css``, ``<name>.html`` (+ ``<name>.json``)."""
    if sheet.plan.width == 0 or sheet.plan.height == 0:
        raise OutputError(f"nothing to write: canvas is {sheet.plan.width}x{sheet.plan.height}")
    out = ensure_out_dir(out)
    sprite_filename = name + ".png"
    css_filename = name + ".css"

    try:
        strategy, size = optimize_and_save(sheet.canvas, out / sprite_filename, crush=crush)

        css_path = out / css_filename
        css_path.write_text(generate_css(sheet.catalog, sprite_filename), encoding="utf-8")

        html_path = out / (name + ".html")
        html_path.write_text(generate_demo(sheet.catalog, sprite_filename, css_href=css_filename),
                             encoding="utf-8")

        json_path = None
        if write_json:
            json_path = out / (name + ".json")
            json_path.write_text(sheet.catalog.to_json(sprite_filename, sheet.plan.size),
                                 encoding="utf-8")
    except OSError as e:
        raise OutputError(f"writing {name} into {out} failed: {e}") from e

    return WrittenFiles(sprite=out / sprite_filename, css=css_path, html=html_path,
                        json=json_path, strategy=strategy, size=size)
