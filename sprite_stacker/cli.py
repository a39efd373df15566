"""
sprite-stacker: stack a folder of icons into one PNG + CSS + HTML demo.
"""

from __future__ import annotations

import argparse
import sys

from . import settings
from .errors import CompositeFailure, ConfigError, OutputError, PipelineAborted, SourceError
from .log import setup_logging
from .output import write_outputs
from .pipeline import build_sprite
from .scan import find_sources

EXIT_OK = 0
EXIT_ERROR = 1          # bad options, unreadable source dir, output not writable
EXIT_ABORTED = 2        # --strict and at least one source failed; nothing written
EXIT_PARTIAL = 3        # some sources failed; sprite written without them, or nothing left to write
EXIT_COMPOSITE = 4


def build_parser():
    parser = argparse.ArgumentParser(
        prog="sprite-stacker",
        description="Stack images into a single-column CSS sprite sheet",
    )
    parser.add_argument("--src", default=str(settings.SRC_DIR),
                        help="source dir where all the images are located")
    parser.add_argument("--out", default=str(settings.OUT_DIR),
                        help="output dir")
    parser.add_argument("--name", default=settings.SPRITE_NAME,
                        help="name for the output files, without extension")
    parser.add_argument("--extensions", default=",".join(settings.EXTENSIONS),
                        help="file extensions to include, e.g. jpg,png,gif")
    parser.add_argument("--margin", type=int, default=settings.MARGIN,
                        help="margin between images and around the sprite border (px)")
    parser.add_argument("--strict", action="store_true",
                        help="abort without writing anything if any source fails to decode")
    parser.add_argument("--completion-order", action="store_true",
                        help="stack in decode completion order instead of sorted filename order")
    parser.add_argument("--workers", type=int, default=None,
                        help="cap on decode/copy threads (default: one per image)")
    parser.add_argument("--crush", action="store_true",
                        help="re-compress the PNG with oxipng/optipng when available")
    parser.add_argument("--json", action="store_true",
                        help="also write <name>.json with the placement table")
    parser.add_argument("--log-level", type=str.upper, choices=settings.LOG_LEVELS,
                        default=settings.default_log_level())
    parser.add_argument("--log-json", action="store_true", help="log as JSON lines")
    return parser


def _report(failures):
    for f in failures:
        print(f"{f.name}: {f.kind}: {f.detail}", file=sys.stderr)


def main(argv=None):
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        # argparse exits 2 on bad options, which would read as a strict abort
        return EXIT_ERROR if e.code else EXIT_OK

    try:
        setup_logging(args.log_level, json_output=args.log_json)
    except ValueError as e:
        # an invalid SPRITE_STACKER_LOG_LEVEL default skips argparse's choices check
        print(f"invalid log level: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        cfg = settings.BuildConfig.from_args(args)
        paths = find_sources(cfg.src, cfg.extensions)
    except (ConfigError, SourceError) as e:
        print(e, file=sys.stderr)
        return EXIT_ERROR

    if not paths:
        print(f"No {'/'.join(cfg.extensions)} files found in {cfg.src}")
        return EXIT_OK

    print(f"Found {len(paths)} images.")

    try:
        sheet = build_sprite(paths, margin=cfg.margin, strict=cfg.strict,
                             ordered=not cfg.completion_order, workers=cfg.workers)
    except PipelineAborted as e:
        _report(e.failures)
        print(f"Aborted: {e}", file=sys.stderr)
        return EXIT_ABORTED
    except CompositeFailure as e:
        print(f"composite-failure: {e}", file=sys.stderr)
        return EXIT_COMPOSITE

    _report(sheet.failures)
    if not len(sheet.catalog):
        print("Every source failed; nothing written", file=sys.stderr)
        return EXIT_PARTIAL

    print(f"Sprite size: {sheet.plan.width}×{sheet.plan.height} px ({len(sheet.catalog)} images)")

    try:
        files = write_outputs(sheet, cfg.out, cfg.name, crush=cfg.crush, write_json=cfg.write_json)
    except OutputError as e:
        print(e, file=sys.stderr)
        return EXIT_ERROR

    print(f"Saved sprite: {files.sprite}  ({files.size:,} bytes, {files.strategy})")
    print(f"Saved CSS: {files.css}")
    print(f"Saved demo: {files.html}")
    if files.json is not None:
        print(f"Saved placements: {files.json}")

    if sheet.partial:
        print(f"{len(sheet.failures)} source(s) skipped", file=sys.stderr)
        return EXIT_PARTIAL
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
