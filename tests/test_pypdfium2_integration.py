from __future__ import annotations

import base64
import io
import shutil
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from rasterize_pdf import RasterizationError, from_base64, from_buffer, from_path


def _make_pdf(path: Path, *, pages: int) -> None:
    # Letter-size pages (612x792 pt at 72 dpi), each with a distinct fill.
    images = [Image.new("RGB", (612, 792), (40 * i % 256, 120, 200)) for i in range(pages)]
    images[0].save(path, format="PDF", save_all=True, append_images=images[1:], resolution=72.0)


class TestPypdfium2Rendering(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.tmp = Path(tempfile.mkdtemp(prefix="rasterize_pdf_pdfium_test_"))
        cls.pdf = cls.tmp / "nine.pdf"
        _make_pdf(cls.pdf, pages=9)

    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(cls.tmp, ignore_errors=True)

    def _options(self, name: str, **kw):
        base = {"quality": 100, "format": "png", "width": 768, "height": 512, "save_path": str(self.tmp / "out")}
        base.update(kw)
        return {**base, "save_filename": name}

    def test_file_input_first_page(self) -> None:
        r = from_path(self.pdf, **self._options("test-1"))()

        self.assertEqual(r.name, "test-1.1.png")
        self.assertEqual(r.page, 1)
        self.assertEqual(r.size, "768x512")
        with Image.open(r.path) as img:
            self.assertEqual(img.format, "PNG")
            self.assertEqual(img.size, (768, 512))

    def test_buffer_input_second_page_base64(self) -> None:
        convert = from_buffer(self.pdf.read_bytes(), temp_dir=self.tmp, **self._options("test-2"))

        r = convert(2, {"responseType": "base64"})
        convert.close()

        self.assertEqual(r.page, 2)
        with Image.open(io.BytesIO(base64.b64decode(r.base64))) as img:
            self.assertEqual(img.format, "PNG")
            self.assertEqual(img.size, (768, 512))

    def test_base64_input_all_pages(self) -> None:
        payload = base64.b64encode(self.pdf.read_bytes()).decode("ascii")
        with from_base64(payload, temp_dir=self.tmp, **self._options("test-3")) as convert:
            responses = convert.bulk(-1, {"responseType": "image"})

        self.assertEqual([r.page for r in responses], list(range(1, 10)))
        for i, r in enumerate(responses, start=1):
            self.assertTrue(r.path.endswith(f"/test-3.{i}.png"))
            self.assertEqual(r.size, "768x512")

    def test_density_changes_resolution_without_box(self) -> None:
        for density in (72, 144):
            with self.subTest(density=density):
                r = from_path(self.pdf, **self._options(f"density-{density}", width=None, height=None, density=density))()
                scale = density // 72
                self.assertEqual(r.size, f"{612 * scale}x{792 * scale}")

    def test_jpeg_output(self) -> None:
        r = from_path(self.pdf, **self._options("jpeg", format="jpg", quality=80))(3)
        self.assertEqual(r.name, "jpeg.3.jpg")
        with Image.open(r.path) as img:
            self.assertEqual(img.format, "JPEG")

    def test_page_beyond_document(self) -> None:
        with self.assertRaises(RasterizationError) as ctx:
            from_path(self.pdf, **self._options("oob"))(10)
        self.assertEqual(ctx.exception.page, 10)

    def test_page_count(self) -> None:
        self.assertEqual(from_path(self.pdf, **self._options("count")).page_count(), 9)


if __name__ == "__main__":
    unittest.main()
