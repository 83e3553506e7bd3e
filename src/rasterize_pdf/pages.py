from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from .contracts import ALL_PAGES, SourceHandle
from .engines import RasterEngine
from .errors import InputError

logger = logging.getLogger(__name__)

PageRequest = int | Sequence[int] | str

# Upper bound for range expansion when the document page count is unknown.
MAX_SELECTION_PAGES = 100_000


def _bad_request(message: str, request: object) -> InputError:
    return InputError(message, code="INPUT_BAD_PAGE_REQUEST", detail={"pages": repr(request)})


def check_page(value: object, request: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _bad_request(f"page numbers must be integers, got {value!r}", request)
    if value < 1:
        raise _bad_request(f"page numbers are 1-indexed, got {value}", request)
    return value


def parse_page_selection(selection: str, *, page_count: int | None = None) -> list[int]:
    """
    Expand "1,3-5" into [1, 3, 4, 5], keeping the order the ranges are written in.

    Range ends may not exceed `page_count` (or `MAX_SELECTION_PAGES` when the
    page count is unknown). Single page numbers are not bounds-checked here.
    """

    range_limit = page_count if page_count is not None else MAX_SELECTION_PAGES

    pages: list[int] = []
    for part in selection.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                a_str, b_str = part.split("-", 1)
                a = int(a_str.strip())
                b = int(b_str.strip())
                if b < a:
                    raise _bad_request(f"invalid range: {part!r}", selection)
                if b > range_limit:
                    raise _bad_request(f"range {part!r} ends past page {range_limit}", selection)
                pages.extend(range(a, b + 1))
            else:
                pages.append(int(part))
        except ValueError as e:
            raise _bad_request(f"invalid page selection part: {part!r}", selection) from e

    for p in pages:
        check_page(p, selection)
    return pages


def count_pages(*, engine: RasterEngine, source: SourceHandle, timeout_s: float) -> int:
    try:
        page_count = engine.get_page_count(pdf_file=source.path, timeout_s=timeout_s)
    except Exception as e:
        raise InputError(
            f"Failed to read PDF page count: {e}",
            code="INPUT_PAGECOUNT_FAILED",
            detail={"backend": engine.backend_id()},
        ) from e
    if page_count <= 0:
        raise InputError(
            "PDF reports zero pages",
            code="INPUT_NO_PAGES",
            detail={"backend": engine.backend_id()},
        )
    return page_count


def resolve_pages(
    request: PageRequest,
    *,
    engine: RasterEngine,
    source: SourceHandle,
    timeout_s: float,
) -> list[int]:
    """
    Turn a page request into the ordered list of pages to render.

    - `-1`: every page, ascending, counted through the engine
    - an int: just that page (upper bound left to the rasterizer)
    - a sequence: the pages in caller order, not sorted or de-duplicated
    - a string: a selection like "1,3-5" in written order; "all" means `-1`
    """

    if isinstance(request, str):
        if request.strip().lower() in ("all", str(ALL_PAGES)):
            request = ALL_PAGES
        else:
            page_count = None
            if "-" in request:
                page_count = count_pages(engine=engine, source=source, timeout_s=timeout_s)
            pages = parse_page_selection(request, page_count=page_count)
            if not pages:
                raise _bad_request("page selection is empty", request)
            return pages

    if isinstance(request, bool):
        raise _bad_request("page request must not be a boolean", request)

    if isinstance(request, int):
        if request == ALL_PAGES:
            page_count = count_pages(engine=engine, source=source, timeout_s=timeout_s)
            logger.debug("%s has %d pages", Path(source.path).name, page_count)
            return list(range(1, page_count + 1))
        return [check_page(request, request)]

    if isinstance(request, Sequence):
        pages = [check_page(p, request) for p in request]
        if not pages:
            raise _bad_request("page list is empty", request)
        return pages

    raise _bad_request(f"unsupported page request type: {type(request).__name__}", request)
