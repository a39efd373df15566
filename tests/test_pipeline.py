from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from sprite_stacker.errors import DecodeFailure, PipelineAborted
from sprite_stacker.models import CanvasPlan, Placement
from sprite_stacker.pipeline import build_sprite

from tests.support import write_image


class PipelineTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.paths = [
            write_image(self.dir, "A.png", 10, 10, (255, 0, 0, 255)),
            write_image(self.dir, "B.gif", 20, 5, (0, 255, 0, 255)),
            write_image(self.dir, "C.png", 5, 30, (0, 0, 255, 200)),
        ]

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_sheet_follows_input_order(self) -> None:
        sheet = build_sprite(self.paths, margin=4)
        self.assertEqual(sheet.plan, CanvasPlan(28, 61))
        self.assertEqual(sheet.canvas.size, (28, 61))
        self.assertEqual(sheet.catalog.names(), ["A.png", "B.gif", "C.png"])
        self.assertEqual(sheet.catalog["C.png"], Placement(4, 27, 5, 30))
        self.assertFalse(sheet.partial)

        reversed_sheet = build_sprite(list(reversed(self.paths)), margin=4)
        self.assertEqual(reversed_sheet.catalog.names(), ["C.png", "B.gif", "A.png"])
        self.assertEqual(reversed_sheet.catalog["C.png"], Placement(4, 4, 5, 30))

    def test_repeated_runs_are_identical(self) -> None:
        first = build_sprite(self.paths, margin=3)
        second = build_sprite(self.paths, margin=3, workers=1)
        self.assertEqual(first.canvas.tobytes(), second.canvas.tobytes())
        self.assertEqual(first.catalog, second.catalog)

    def test_completion_order_still_stacks_every_image(self) -> None:
        sheet = build_sprite(self.paths, margin=4, ordered=False)
        self.assertEqual(sorted(sheet.catalog.names()), ["A.png", "B.gif", "C.png"])
        self.assertEqual(sheet.plan, CanvasPlan(28, 61))
        ys = sorted(p.y for _, p in sheet.catalog.entries())
        self.assertEqual(ys[0], 4)

    def test_failed_source_is_skipped_by_default(self) -> None:
        bad = self.dir / "bad.png"
        bad.write_bytes(b"nope")
        sheet = build_sprite(self.paths[:1] + [bad] + self.paths[1:], margin=4)

        self.assertTrue(sheet.partial)
        self.assertEqual([f.name for f in sheet.failures], ["bad.png"])
        self.assertIsInstance(sheet.failures[0], DecodeFailure)
        self.assertNotIn("bad.png", sheet.catalog)
        self.assertEqual(sheet.plan, CanvasPlan(28, 61))

    def test_strict_run_aborts_before_compositing(self) -> None:
        bad = self.dir / "bad.png"
        bad.write_bytes(b"nope")
        with self.assertRaises(PipelineAborted) as ctx:
            build_sprite(self.paths + [bad], strict=True)
        self.assertEqual([f.name for f in ctx.exception.failures], ["bad.png"])

    def test_duplicate_names_rejected(self) -> None:
        sub = self.dir / "sub"
        sub.mkdir()
        dupe = write_image(sub, "A.png", 1, 1)
        with self.assertRaises(ValueError):
            build_sprite(self.paths + [dupe])

    def test_empty_input(self) -> None:
        sheet = build_sprite([], margin=4)
        self.assertEqual(sheet.plan, CanvasPlan(8, 4))
        self.assertEqual(sheet.canvas.size, (8, 4))
        self.assertEqual(len(sheet.catalog), 0)
        self.assertFalse(sheet.partial)


if __name__ == "__main__":
    unittest.main()
