from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from sprite_stacker.errors import OutputError
from sprite_stacker.output import optimize_and_save, write_outputs
from sprite_stacker.pipeline import build_sprite

from tests.support import solid, write_image


class OutputTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_saved_png_is_lossless(self) -> None:
        img = Image.new("RGBA", (12, 12), (0, 0, 0, 0))
        img.paste(solid(4, 4, (10, 200, 30, 255)), (2, 2))
        img.paste(solid(4, 4, (250, 0, 90, 77)), (6, 6))

        strategy, size = optimize_and_save(img, self.dir / "s.png")

        self.assertIn(strategy, ("truecolor", "palette"))
        self.assertEqual(size, (self.dir / "s.png").stat().st_size)
        with Image.open(self.dir / "s.png") as back:
            self.assertEqual(back.convert("RGBA").tobytes(), img.tobytes())

    def test_opaque_sprite_drops_alpha_losslessly(self) -> None:
        img = Image.effect_noise((16, 16), 40).convert("RGBA")
        optimize_and_save(img, self.dir / "o.png")
        with Image.open(self.dir / "o.png") as back:
            self.assertNotEqual(back.mode, "RGBA")
            self.assertEqual(back.convert("RGBA").tobytes(), img.tobytes())

    def test_write_outputs(self) -> None:
        src = self.dir / "src"
        src.mkdir()
        paths = [write_image(src, "a.png", 3, 3), write_image(src, "b.png", 5, 2)]
        sheet = build_sprite(paths, margin=1)

        files = write_outputs(sheet, self.dir / "out" / "nested", "icons", write_json=True)

        self.assertEqual(files.sprite.name, "icons.png")
        with Image.open(files.sprite) as im:
            self.assertEqual(im.size, (7, 8))
        self.assertIn("url('icons.png')", files.css.read_text(encoding="utf-8"))
        self.assertIn('href="icons.css"', files.html.read_text(encoding="utf-8"))
        meta = json.loads(files.json.read_text(encoding="utf-8"))
        self.assertEqual([s["name"] for s in meta["sprites"]], ["a.png", "b.png"])

    def test_out_path_must_be_directory(self) -> None:
        target = self.dir / "file"
        target.write_text("x")
        sheet = build_sprite([], margin=4)
        with self.assertRaises(OutputError):
            write_outputs(sheet, target, "sprite")

    def test_zero_area_canvas_is_not_written(self) -> None:
        sheet = build_sprite([], margin=0)
        with self.assertRaises(OutputError):
            write_outputs(sheet, self.dir, "sprite")


if __name__ == "__main__":
    unittest.main()
