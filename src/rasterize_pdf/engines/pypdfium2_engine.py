from __future__ import annotations

import logging
import threading
from pathlib import Path

from PIL import Image

from ..contracts import RasterGeometry
from .base import EngineRenderedPage, RasterEngine

logger = logging.getLogger(__name__)

# Pillow save format per file extension.
_PIL_FORMATS = {
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "tif": "TIFF",
    "tiff": "TIFF",
    "bmp": "BMP",
    "gif": "GIF",
    "webp": "WEBP",
}


class Pypdfium2Engine(RasterEngine):
    # pdfium is not thread-safe; bulk fan-out shares one engine class.
    _lock = threading.Lock()

    def backend_id(self) -> str:
        return "pypdfium2"

    def backend_version(self) -> str | None:
        try:
            import pypdfium2 as pdfium  # type: ignore

            return getattr(pdfium, "__version__", None)
        except Exception:
            return None

    def _require_pdfium(self):
        try:
            import pypdfium2 as pdfium  # type: ignore

            return pdfium
        except ImportError as e:
            raise RuntimeError("Missing dependency: pypdfium2 is required for in-process rendering.") from e

    def get_page_count(self, *, pdf_file: Path, timeout_s: float) -> int:
        # Note: pypdfium2 does not expose a per-call timeout.
        _ = timeout_s

        pdfium = self._require_pdfium()
        with self._lock:
            doc = pdfium.PdfDocument(str(pdf_file))
            try:
                return len(doc)
            finally:
                doc.close()

    def render_page(
        self,
        *,
        pdf_file: Path,
        page_num: int,
        geometry: RasterGeometry,
        image_format: str,
        quality: int | None,
        out_file: Path,
        timeout_s: float,
    ) -> EngineRenderedPage:
        _ = timeout_s

        pdfium = self._require_pdfium()
        scale = geometry.density / 72.0  # PDF points are 1/72 inch

        with self._lock:
            doc = pdfium.PdfDocument(str(pdf_file))
            try:
                page_count = len(doc)
                if page_num < 1 or page_num > page_count:
                    raise ValueError(f"Page out of range: {page_num} (1..{page_count})")
                page = doc[page_num - 1]
                pil_img = page.render(scale=scale).to_pil()
            finally:
                doc.close()

        if geometry.has_box:
            target = geometry.target_size(*pil_img.size)
            if target != pil_img.size:
                pil_img = pil_img.resize(target, Image.Resampling.LANCZOS)

        pil_format = _PIL_FORMATS[image_format]
        if pil_format in ("JPEG", "BMP") and pil_img.mode not in ("RGB", "L"):
            pil_img = pil_img.convert("RGB")

        save_kwargs = {}
        if quality is not None and pil_format in ("JPEG", "WEBP"):
            save_kwargs["quality"] = quality
        pil_img.save(out_file, format=pil_format, **save_kwargs)

        width_px, height_px = pil_img.size
        logger.debug("pypdfium2 rendered page %d of %s -> %s (%dx%d)", page_num, pdf_file.name, out_file, width_px, height_px)
        return EngineRenderedPage(
            page_num=page_num,
            image_file=out_file,
            width_px=int(width_px),
            height_px=int(height_px),
        )
