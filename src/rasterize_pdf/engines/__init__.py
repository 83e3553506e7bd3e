"""
Raster toolchain engines.

Each engine implements `RasterEngine`: a page-count query and a single-page
render into a caller-chosen output file.
"""

from ..contracts import RasterEngineName
from .base import EngineRenderedPage, RasterEngine, ToolchainError
from .magick_cli import MagickCliEngine
from .pypdfium2_engine import Pypdfium2Engine


def get_engine(engine: RasterEngineName) -> RasterEngine:
    if engine == RasterEngineName.PYPDFIUM2:
        return Pypdfium2Engine()
    if engine == RasterEngineName.GRAPHICSMAGICK:
        return MagickCliEngine.graphicsmagick()
    if engine == RasterEngineName.IMAGEMAGICK:
        return MagickCliEngine.imagemagick()
    raise ValueError(f"Unsupported raster engine: {engine}")


__all__ = [
    "EngineRenderedPage",
    "MagickCliEngine",
    "Pypdfium2Engine",
    "RasterEngine",
    "ToolchainError",
    "get_engine",
]
