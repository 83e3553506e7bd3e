"""
Source normalization: turn a path, a byte buffer or a base64 string into an
on-disk PDF the raster engines can read.

Buffers and base64 payloads are written to a temporary file that the pipeline
owns. Owned files are NOT deleted implicitly; callers release them with
`discard` (or `Converter.close`).
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .contracts import SourceHandle
from .errors import ConversionIOError, InputError

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r"^data:[^,]*;base64,", re.IGNORECASE)


def _write_temp_pdf(data: bytes, *, temp_dir: Path | None) -> Path:
    try:
        with tempfile.NamedTemporaryFile(
            prefix="rasterize_pdf_", suffix=".pdf", dir=temp_dir, delete=False
        ) as tmp:
            tmp.write(data)
            return Path(tmp.name)
    except OSError as e:
        raise ConversionIOError(
            f"Failed to write temporary PDF: {e}",
            code="IO_WRITE_FAILED",
            detail={"temp_dir": str(temp_dir) if temp_dir else None},
        ) from e


@dataclass(frozen=True, slots=True)
class PathSource:
    path: Path

    def describe(self) -> str:
        return str(self.path)

    def materialize(self) -> SourceHandle:
        path = Path(self.path)
        if not path.is_file():
            raise InputError(
                f"Input PDF not found: {path}",
                code="INPUT_NOT_FOUND",
                detail={"path": str(path)},
            )
        return SourceHandle(path=path, owned=False)


@dataclass(frozen=True, slots=True)
class BufferSource:
    data: bytes
    temp_dir: Path | None = None

    def describe(self) -> str:
        return f"<buffer {len(self.data)} bytes>"

    def materialize(self) -> SourceHandle:
        if not self.data:
            raise InputError("PDF buffer is empty", code="INPUT_EMPTY")
        path = _write_temp_pdf(bytes(self.data), temp_dir=self.temp_dir)
        logger.info("wrote %d-byte buffer source to %s", len(self.data), path)
        return SourceHandle(path=path, owned=True)


@dataclass(frozen=True, slots=True)
class Base64Source:
    payload: str
    temp_dir: Path | None = None

    def describe(self) -> str:
        return f"<base64 {len(self.payload)} chars>"

    def decode(self) -> bytes:
        text = "".join(self.payload.split())
        text = _DATA_URL_PREFIX.sub("", text, count=1)
        try:
            data = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InputError(
                f"PDF payload is not valid base64: {e}",
                code="INPUT_UNDECODABLE",
            ) from e
        if not data:
            raise InputError("PDF base64 payload decodes to zero bytes", code="INPUT_EMPTY")
        return data

    def materialize(self) -> SourceHandle:
        data = self.decode()
        path = _write_temp_pdf(data, temp_dir=self.temp_dir)
        logger.info("wrote decoded base64 source (%d bytes) to %s", len(data), path)
        return SourceHandle(path=path, owned=True)


PdfSource = PathSource | BufferSource | Base64Source


def discard(handle: SourceHandle) -> None:
    """
    Delete an owned temporary source. Externally owned paths are left alone.
    """

    if not handle.owned:
        return
    try:
        handle.path.unlink(missing_ok=True)
    except OSError as e:
        raise ConversionIOError(
            f"Failed to remove temporary PDF {handle.path}: {e}",
            code="IO_DELETE_FAILED",
            detail={"path": str(handle.path)},
        ) from e
