from __future__ import annotations

import logging
from pathlib import Path

from .contracts import ConversionOptions, RasterArtifact, RasterGeometry, SourceHandle
from .engines import RasterEngine, ToolchainError
from .errors import ConversionIOError, RasterizationError

logger = logging.getLogger(__name__)


def output_file_for(*, options: ConversionOptions, page: int) -> Path:
    return Path(options.save_path) / options.output_name(page)


def _remove_partial(out_file: Path) -> None:
    try:
        out_file.unlink(missing_ok=True)
    except OSError:
        logger.warning("could not remove partial output %s", out_file)


def rasterize_page(
    *,
    engine: RasterEngine,
    source: SourceHandle,
    page: int,
    geometry: RasterGeometry,
    options: ConversionOptions,
) -> RasterArtifact:
    """
    Render one page (1-indexed) of `source` to `{save_path}/{save_filename}.{page}.{format}`.

    Any toolchain failure is raised as `RasterizationError` carrying `page`; a
    partially written output file is removed first.
    """

    out_file = output_file_for(options=options, page=page)
    try:
        out_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConversionIOError(
            f"Cannot create output directory {out_file.parent}: {e}",
            code="IO_WRITE_FAILED",
            detail={"save_path": options.save_path},
        ) from e

    try:
        rendered = engine.render_page(
            pdf_file=source.path,
            page_num=page,
            geometry=geometry,
            image_format=options.format,
            quality=options.quality,
            out_file=out_file,
            timeout_s=options.timeout_s,
        )
    except ToolchainError as e:
        _remove_partial(out_file)
        raise RasterizationError(
            f"{engine.backend_id()} failed on page {page}: {e}",
            page=page,
            detail={"backend": engine.backend_id(), "returncode": e.returncode, "stderr": e.stderr},
        ) from e
    except Exception as e:
        _remove_partial(out_file)
        raise RasterizationError(
            f"{engine.backend_id()} failed on page {page}: {e!r}",
            page=page,
            detail={"backend": engine.backend_id()},
        ) from e

    if not rendered.image_file.is_file():
        raise RasterizationError(
            f"{engine.backend_id()} reported success but wrote no file for page {page}",
            page=page,
            code="RASTER_OUTPUT_MISSING",
            detail={"image_file": str(rendered.image_file)},
        )
    if rendered.width_px <= 0 or rendered.height_px <= 0:
        _remove_partial(rendered.image_file)
        raise RasterizationError(
            f"{engine.backend_id()} reported an empty image for page {page}",
            page=page,
            detail={"width_px": rendered.width_px, "height_px": rendered.height_px},
        )

    logger.debug("rasterized page %d -> %s (%dx%d)", page, rendered.image_file, rendered.width_px, rendered.height_px)
    return RasterArtifact(
        page=page,
        image_file=rendered.image_file,
        width_px=int(rendered.width_px),
        height_px=int(rendered.height_px),
    )
