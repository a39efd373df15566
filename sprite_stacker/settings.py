from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .decode import DECODERS
from .errors import ConfigError

# --------------------------------------------------------------------- #
# Defaults – overridable from the command line
# --------------------------------------------------------------------- #
SRC_DIR = Path("./")                # folder that contains the source images
OUT_DIR = Path("./")                # folder for sprite.png, sprite.css, sprite.html
SPRITE_NAME = "sprite"              # output basename, no extension
EXTENSIONS = ("jpg", "png")         # allow-list handed to the directory scan
MARGIN = 4                          # px around the canvas and between images
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_log_level() -> str:
    return os.getenv("SPRITE_STACKER_LOG_LEVEL", "WARNING").upper().strip() or "WARNING"


def parse_extensions(raw: str) -> Tuple[str, ...]:
    """``"jpg, PNG,.gif"`` -> ``("jpg", "png", "gif")``"""
    exts = []
    for part in raw.split(","):
        ext = part.strip().lstrip(".").lower()
        if ext and ext not in exts:
            exts.append(ext)
    return tuple(exts)


@dataclass(frozen=True)
class BuildConfig:
    src: Path = SRC_DIR
    out: Path = OUT_DIR
    name: str = SPRITE_NAME
    extensions: Tuple[str, ...] = EXTENSIONS
    margin: int = MARGIN

    # abort the whole run on the first failed source instead of skipping it
    strict: bool = False
    # keep decode completion order instead of the sorted scan order
    completion_order: bool = False
    workers: Optional[int] = None

    crush: bool = False
    write_json: bool = False

    def validate(self) -> "BuildConfig":
        if self.margin < 0:
            raise ConfigError(f"margin must be >= 0, got {self.margin}")
        if not self.name or os.sep in self.name:
            raise ConfigError(f"invalid sprite name: {self.name!r}")
        if self.workers is not None and self.workers < 1:
            raise ConfigError(f"workers must be >= 1, got {self.workers}")
        if not self.extensions:
            raise ConfigError("no file extensions given")
        unknown = [e for e in self.extensions if "." + e not in DECODERS]
        if unknown:
            raise ConfigError(
                f"no decoder for extension(s): {', '.join(unknown)} "
                f"(supported: {', '.join(sorted(k[1:] for k in DECODERS))})"
            )
        return self

    @classmethod
    def from_args(cls, args) -> "BuildConfig":
        return cls(
            src=Path(args.src),
            out=Path(args.out),
            name=args.name,
            extensions=parse_extensions(args.extensions),
            margin=args.margin,
            strict=args.strict,
            completion_order=args.completion_order,
            workers=args.workers,
            crush=args.crush,
            write_json=args.json,
        ).validate()
