"""
Error kinds raised by the conversion pipeline.

Every error carries a stable `code` plus an optional `detail` mapping so
callers (and the CLI) can report failures in machine-readable form.
"""

from __future__ import annotations

from typing import Any


class RasterizePdfError(Exception):
    """Base class for all conversion failures."""

    default_code = "RASTERIZE_PDF_ERROR"

    def __init__(self, message: str, *, code: str | None = None, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}


class InputError(RasterizePdfError):
    """Unreadable, empty or undecodable source, or an unusable page request."""

    default_code = "INPUT_INVALID"


class RasterizationError(RasterizePdfError):
    """The raster toolchain failed for one specific page."""

    default_code = "RASTER_FAILED"

    def __init__(
        self,
        message: str,
        *,
        page: int,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code=code, detail={"page": page, **(detail or {})})
        self.page = page


class ConversionIOError(RasterizePdfError):
    """Filesystem write/read/stat failure while normalizing or building responses."""

    default_code = "IO_FAILED"
