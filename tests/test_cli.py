from __future__ import annotations

import base64
import json
import shutil
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from rasterize_pdf.cli import main
from rasterize_pdf.engines import Pypdfium2Engine


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = Path(tempfile.mkdtemp(prefix="rasterize_pdf_cli_test_"))
        self.pdf = self.tmp / "doc.pdf"
        pages = [Image.new("RGB", (612, 792), "white") for _ in range(3)]
        pages[0].save(self.pdf, format="PDF", save_all=True, append_images=pages[1:], resolution=72.0)

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_writes_manifest_for_selected_pages(self) -> None:
        manifest = self.tmp / "manifest.json"
        code = main(
            [
                "--input", str(self.pdf),
                "--pages", "3,1",
                "--width", "300",
                "--height", "200",
                "--save-path", str(self.tmp / "out"),
                "--save-filename", "doc",
                "--manifest", str(manifest),
            ]
        )

        self.assertEqual(code, 0)
        d = json.loads(manifest.read_text(encoding="utf-8"))
        self.assertTrue(d["ok"])
        self.assertEqual(d["backend"], "pypdfium2")
        self.assertEqual(d["backend_version"], Pypdfium2Engine().backend_version())
        self.assertEqual([p["page"] for p in d["pages"]], [3, 1])
        self.assertEqual(d["pages"][0]["name"], "doc.3.png")
        self.assertEqual(d["pages"][0]["size"], "300x200")
        self.assertTrue((self.tmp / "out" / "doc.1.png").is_file())

    def test_base64_file_input(self) -> None:
        b64_file = self.tmp / "doc.b64"
        b64_file.write_text(base64.b64encode(self.pdf.read_bytes()).decode("ascii"), encoding="utf-8")
        manifest = self.tmp / "manifest.json"

        code = main(
            [
                "--base64-file", str(b64_file),
                "--pages", "all",
                "--response-type", "base64",
                "--save-path", str(self.tmp / "out"),
                "--manifest", str(manifest),
            ]
        )

        self.assertEqual(code, 0)
        d = json.loads(manifest.read_text(encoding="utf-8"))
        self.assertEqual([p["page"] for p in d["pages"]], [1, 2, 3])
        self.assertTrue(all(p["base64"] for p in d["pages"]))

    def test_failure_exit_code_and_error_payload(self) -> None:
        manifest = self.tmp / "manifest.json"

        code = main(["--input", str(self.tmp / "missing.pdf"), "--manifest", str(manifest)])

        self.assertEqual(code, 2)
        d = json.loads(manifest.read_text(encoding="utf-8"))
        self.assertFalse(d["ok"])
        self.assertEqual(d["error"]["code"], "INPUT_NOT_FOUND")

    def test_unreadable_base64_file(self) -> None:
        manifest = self.tmp / "manifest.json"

        code = main(["--base64-file", str(self.tmp / "missing.b64"), "--manifest", str(manifest)])

        self.assertEqual(code, 2)
        d = json.loads(manifest.read_text(encoding="utf-8"))
        self.assertFalse(d["ok"])
        self.assertEqual(d["error"]["code"], "INPUT_NOT_FOUND")

    def test_page_out_of_range(self) -> None:
        manifest = self.tmp / "manifest.json"
        code = main(["--input", str(self.pdf), "--pages", "4", "--save-path", str(self.tmp / "out"), "--manifest", str(manifest)])
        self.assertEqual(code, 2)
        d = json.loads(manifest.read_text(encoding="utf-8"))
        self.assertEqual(d["error"]["detail"]["page"], 4)


if __name__ == "__main__":
    unittest.main()
