"""
Conversion entry points.

    >>> convert = from_path("a.pdf", save_path="./out", save_filename="x", width=768, height=512)
    >>> convert()                      # WriteImageResponse for page 1
    >>> convert(2, True)               # ToBase64Response for page 2
    >>> convert.bulk(-1, {"responseType": "image"})   # every page, ascending

A converter materializes its source once (buffer/base64 inputs are written to
a temporary file) and reuses it for every later call. Temporary files are
kept until `close()` is called explicitly.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from .contracts import ConversionOptions, ConvertResponse, RasterGeometry, ResponseType, SourceHandle
from .engines import RasterEngine, get_engine
from .geometry import resolve_geometry
from .pages import PageRequest, check_page, count_pages, resolve_pages
from .rasterizer import rasterize_page
from .responses import ResponseTypeLike, build_response, normalize_response_type
from .source import Base64Source, BufferSource, PathSource, PdfSource, discard

logger = logging.getLogger(__name__)


class Converter:
    def __init__(
        self,
        source: PdfSource,
        options: ConversionOptions,
        *,
        engine: RasterEngine | None = None,
    ) -> None:
        self._source = source
        self._options = options
        self._engine = engine if engine is not None else get_engine(options.engine)
        self._handle: SourceHandle | None = None

    def __repr__(self) -> str:
        return f"Converter(source={self._source.describe()!r}, engine={self._engine.backend_id()!r})"

    @property
    def options(self) -> ConversionOptions:
        return self._options

    @property
    def engine(self) -> RasterEngine:
        return self._engine

    @property
    def source(self) -> SourceHandle:
        """The on-disk source, materialized on first access."""

        if self._handle is None:
            self._handle = self._source.materialize()
        return self._handle

    def _geometry(self) -> RasterGeometry:
        o = self._options
        return resolve_geometry(o.density, o.width, o.height, preserve_aspect_ratio=o.preserve_aspect_ratio)

    def _convert_page(self, page: int, response_type: ResponseType, geometry: RasterGeometry) -> ConvertResponse:
        artifact = rasterize_page(
            engine=self._engine,
            source=self.source,
            page=page,
            geometry=geometry,
            options=self._options,
        )
        return build_response(artifact, response_type, save_path=self._options.save_path)

    def __call__(self, page: int = 1, response_type: ResponseTypeLike = None) -> ConvertResponse:
        """Convert a single 1-indexed page."""

        mode = normalize_response_type(response_type)
        return self._convert_page(check_page(page, page), mode, self._geometry())

    def bulk(self, pages: PageRequest, response_type: ResponseTypeLike = None) -> list[ConvertResponse]:
        """
        Convert a set of pages: `-1` for all pages, a list of page numbers, or
        a selection string like "1,3-5".

        Responses follow the resolved page order. The first page (in that
        order) that fails aborts the whole call with its error. A page listed
        more than once is rendered once and its response repeated.
        """

        mode = normalize_response_type(response_type)
        geometry = self._geometry()
        source = self.source
        resolved = resolve_pages(pages, engine=self._engine, source=source, timeout_s=self._options.timeout_s)

        # Distinct pages in first-seen order; each output file is written once.
        distinct = list(dict.fromkeys(resolved))
        workers = min(self._options.max_workers, len(distinct))
        if workers <= 1:
            rendered = [self._convert_page(p, mode, geometry) for p in distinct]
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="rasterize_pdf") as pool:
                # map() yields in submission order and re-raises the first failure in that order.
                rendered = list(pool.map(lambda p: self._convert_page(p, mode, geometry), distinct))

        by_page = dict(zip(distinct, rendered))
        responses = [by_page[p] for p in resolved]

        logger.info(
            "converted %d page(s) of %s as %s", len(responses), self._source.describe(), mode.value
        )
        return responses

    def page_count(self) -> int:
        return count_pages(engine=self._engine, source=self.source, timeout_s=self._options.timeout_s)

    def close(self) -> None:
        """Delete the temporary source file, if this converter wrote one."""

        if self._handle is not None:
            discard(self._handle)
            self._handle = None

    def __enter__(self) -> Converter:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def _options(options: ConversionOptions | None, overrides: dict[str, Any]) -> ConversionOptions:
    if options is None:
        return ConversionOptions(**overrides)
    return options.with_changes(**overrides) if overrides else options


def from_path(
    path: str | Path,
    options: ConversionOptions | None = None,
    *,
    engine: RasterEngine | None = None,
    **overrides: Any,
) -> Converter:
    return Converter(PathSource(Path(path)), _options(options, overrides), engine=engine)


def from_buffer(
    buffer: bytes | bytearray | memoryview,
    options: ConversionOptions | None = None,
    *,
    engine: RasterEngine | None = None,
    temp_dir: Path | None = None,
    **overrides: Any,
) -> Converter:
    return Converter(BufferSource(bytes(buffer), temp_dir=temp_dir), _options(options, overrides), engine=engine)


def from_base64(
    payload: str,
    options: ConversionOptions | None = None,
    *,
    engine: RasterEngine | None = None,
    temp_dir: Path | None = None,
    **overrides: Any,
) -> Converter:
    return Converter(Base64Source(payload, temp_dir=temp_dir), _options(options, overrides), engine=engine)
