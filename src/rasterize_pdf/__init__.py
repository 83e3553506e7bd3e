"""
PDF page rasterization (PDF -> per-page images on disk or as base64).

Inputs may be a file path, an in-memory buffer or a base64 string. Pages are
rendered by a pluggable raster toolchain (pypdfium2 in-process, or the
GraphicsMagick / ImageMagick command line tools).
"""

from .contracts import (
    ALL_PAGES,
    SUPPORTED_FORMATS,
    ConversionOptions,
    RasterArtifact,
    RasterEngineName,
    RasterGeometry,
    ResponseType,
    SourceHandle,
    ToBase64Response,
    WriteImageResponse,
)
from .converter import Converter, from_base64, from_buffer, from_path
from .errors import ConversionIOError, InputError, RasterizationError, RasterizePdfError

__all__ = [
    "ALL_PAGES",
    "SUPPORTED_FORMATS",
    "ConversionIOError",
    "ConversionOptions",
    "Converter",
    "InputError",
    "RasterArtifact",
    "RasterEngineName",
    "RasterGeometry",
    "RasterizationError",
    "RasterizePdfError",
    "ResponseType",
    "SourceHandle",
    "ToBase64Response",
    "WriteImageResponse",
    "from_base64",
    "from_buffer",
    "from_path",
]
