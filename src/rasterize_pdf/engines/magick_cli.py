from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..contracts import RasterGeometry
from .base import EngineRenderedPage, RasterEngine, ToolchainError

logger = logging.getLogger(__name__)


class MagickCliEngine(RasterEngine):
    """
    Rasterization through the GraphicsMagick (`gm`) or ImageMagick (`magick`) CLI.

    Both tools delegate PDF decoding to Ghostscript, which must be on PATH too.
    Pages are selected with the `file.pdf[N]` (0-indexed) frame syntax.
    """

    def __init__(self, *, command: tuple[str, ...] = ("gm",), backend: str = "graphicsmagick") -> None:
        self._command = command
        self._backend = backend

    @classmethod
    def graphicsmagick(cls) -> MagickCliEngine:
        return cls(command=("gm",), backend="graphicsmagick")

    @classmethod
    def imagemagick(cls) -> MagickCliEngine:
        return cls(command=("magick",), backend="imagemagick")

    def backend_id(self) -> str:
        return self._backend

    def backend_version(self) -> str | None:
        try:
            out = self._run(["-version"], timeout_s=10.0)
        except ToolchainError:
            return None
        first = out.strip().splitlines()
        return first[0] if first else None

    def _run(self, args: list[str], *, timeout_s: float) -> str:
        cmd = [*self._command, *args]
        logger.debug("running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                check=False,
                capture_output=True,
                text=True,
                timeout=timeout_s,
            )
        except FileNotFoundError as e:
            raise ToolchainError(f"{self._command[0]} binary not found on PATH") from e
        except subprocess.TimeoutExpired as e:
            raise ToolchainError(f"{self._backend} timed out after {timeout_s}s") from e

        if proc.returncode != 0:
            raise ToolchainError(
                f"{self._backend} returned a non-zero exit code ({proc.returncode})",
                returncode=proc.returncode,
                stderr=proc.stderr[-4000:],  # truncate noisy ghostscript output
            )
        return proc.stdout

    def _identify(self, target: str, fmt: str, *, timeout_s: float) -> str:
        return self._run(["identify", "-format", fmt, target], timeout_s=timeout_s)

    def get_page_count(self, *, pdf_file: Path, timeout_s: float) -> int:
        # One line per frame; each frame of a PDF is a page.
        out = self._identify(str(pdf_file), "%p\n", timeout_s=timeout_s)
        return len([line for line in out.splitlines() if line.strip()])

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
        args = ["-density", f"{geometry.density}x{geometry.density}"]
        if quality is not None:
            args.extend(["-quality", str(quality)])
        args.append(f"{pdf_file}[{page_num - 1}]")
        resize = geometry.resize_argument()
        if resize is not None:
            args.extend(["-resize", resize])
        args.append(f"{image_format}:{out_file}")

        prefix = ["convert"] if self._backend == "graphicsmagick" else []
        self._run([*prefix, *args], timeout_s=timeout_s)

        dims = self._identify(str(out_file), "%w %h", timeout_s=timeout_s).split()
        try:
            width_px, height_px = int(dims[0]), int(dims[1])
        except (IndexError, ValueError) as e:
            raise ToolchainError(f"could not read output dimensions from identify: {dims!r}") from e

        return EngineRenderedPage(
            page_num=page_num,
            image_file=out_file,
            width_px=width_px,
            height_px=height_px,
        )
