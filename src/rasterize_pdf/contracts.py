from __future__ import annotations

import dataclasses
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any

SUPPORTED_FORMATS: frozenset[str] = frozenset({"png", "jpg", "jpeg", "tif", "tiff", "bmp", "gif", "webp"})

DEFAULT_DENSITY = 72
ALL_PAGES = -1


class RasterEngineName(str, Enum):
    """
    Raster toolchain identifiers.
    """

    PYPDFIUM2 = "pypdfium2"
    GRAPHICSMAGICK = "graphicsmagick"
    IMAGEMAGICK = "imagemagick"


class ResponseType(str, Enum):
    IMAGE = "image"
    BASE64 = "base64"


@dataclass(frozen=True, slots=True)
class SourceHandle:
    path: Path  # on-disk PDF the engines read from
    owned: bool  # True when the pipeline wrote it (temporary file)


@dataclass(frozen=True, slots=True)
class RasterGeometry:
    density: int  # DPI handed to the raster engine
    width: int | None = None
    height: int | None = None
    preserve_aspect_ratio: bool = False

    @property
    def has_box(self) -> bool:
        return self.width is not None or self.height is not None

    def target_size(self, width_px: int, height_px: int) -> tuple[int, int]:
        """
        Final pixel size for an image rendered at `density` with the given size.
        """

        if self.width is not None and self.height is not None:
            if not self.preserve_aspect_ratio:
                return self.width, self.height
            scale = min(self.width / width_px, self.height / height_px)
            return max(1, round(width_px * scale)), max(1, round(height_px * scale))
        if self.width is not None:
            return self.width, max(1, round(height_px * self.width / width_px))
        if self.height is not None:
            return max(1, round(width_px * self.height / height_px)), self.height
        return width_px, height_px

    def resize_argument(self) -> str | None:
        """
        The same policy as a GraphicsMagick/ImageMagick `-resize` geometry.
        """

        if self.width is not None and self.height is not None:
            suffix = "" if self.preserve_aspect_ratio else "!"
            return f"{self.width}x{self.height}{suffix}"
        if self.width is not None:
            return f"{self.width}"
        if self.height is not None:
            return f"x{self.height}"
        return None


@dataclass(frozen=True, slots=True)
class RasterArtifact:
    page: int  # 1-indexed
    image_file: Path
    width_px: int
    height_px: int

    @property
    def size(self) -> str:
        return f"{self.width_px}x{self.height_px}"


@dataclass(frozen=True, slots=True)
class WriteImageResponse:
    name: str
    size: str  # "WxH"
    file_size: int  # bytes
    path: str  # save_path joined with name
    page: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ToBase64Response:
    base64: str
    size: str  # "WxH"
    page: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


ConvertResponse = WriteImageResponse | ToBase64Response


@dataclass(frozen=True, slots=True)
class ConversionOptions:
    """
    Options bound to a converter for every page it renders.

    Output files are named `{save_filename}.{page}.{format}` under `save_path`.
    The save path is kept as given so response paths read the way the caller
    wrote them.
    """

    quality: int | None = None
    format: str = "png"
    width: int | None = None
    height: int | None = None
    density: int | None = DEFAULT_DENSITY  # None => DEFAULT_DENSITY
    save_path: str = "./"
    save_filename: str = "untitled"
    preserve_aspect_ratio: bool = False
    engine: RasterEngineName = RasterEngineName.PYPDFIUM2
    timeout_s: float = 300.0  # per toolchain invocation
    max_workers: int = 1  # bulk fan-out bound; 1 => sequential

    def __post_init__(self) -> None:
        if not isinstance(self.format, str) or self.format.lower() not in SUPPORTED_FORMATS:
            raise ValueError(f"format must be one of {sorted(SUPPORTED_FORMATS)}, got {self.format!r}")
        object.__setattr__(self, "format", self.format.lower())
        object.__setattr__(self, "engine", RasterEngineName(self.engine))
        if isinstance(self.save_path, Path):
            object.__setattr__(self, "save_path", str(self.save_path))

        if self.density is None:
            object.__setattr__(self, "density", DEFAULT_DENSITY)
        if self.quality is not None and not 0 <= self.quality <= 100:
            raise ValueError("quality must be within [0, 100]")
        if self.density <= 0:
            raise ValueError("density must be a positive integer")
        for name in ("width", "height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be a positive integer")
        if not self.save_filename or "/" in self.save_filename:
            raise ValueError("save_filename must be a non-empty file name without separators")
        if not isinstance(self.save_path, str) or not self.save_path:
            raise TypeError("save_path must be a non-empty str or pathlib.Path")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

    def with_changes(self, **changes: Any) -> ConversionOptions:
        return dataclasses.replace(self, **changes)

    def output_name(self, page: int) -> str:
        return f"{self.save_filename}.{page}.{self.format}"
