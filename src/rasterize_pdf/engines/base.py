from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ..contracts import RasterGeometry


class ToolchainError(RuntimeError):
    """
    A raster toolchain call failed (missing binary, timeout, non-zero exit).
    """

    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


@dataclass(frozen=True, slots=True)
class EngineRenderedPage:
    page_num: int  # 1-indexed
    image_file: Path
    width_px: int
    height_px: int


class RasterEngine(ABC):
    """
    Raster toolchain abstraction.

    Engines must:
    - Render exactly one page per `render_page` call into `out_file`
    - Report the pixel size of the image they wrote
    - Perform NO PDF validation beyond what the toolchain itself needs
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    def backend_version(self) -> str | None:
        return None

    @abstractmethod
    def get_page_count(self, *, pdf_file: Path, timeout_s: float) -> int:
        raise NotImplementedError

    @abstractmethod
    def render_page(
        self,
        *,
        pdf_file: Path,
        page_num: int,  # 1-indexed
        geometry: RasterGeometry,
        image_format: str,
        quality: int | None,
        out_file: Path,
        timeout_s: float,
    ) -> EngineRenderedPage:
        raise NotImplementedError
