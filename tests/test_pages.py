from __future__ import annotations

import unittest
from pathlib import Path

from rasterize_pdf.contracts import SourceHandle
from rasterize_pdf.errors import InputError
from rasterize_pdf.pages import parse_page_selection, resolve_pages


class _CountingEngine:
    def __init__(self, page_count: int) -> None:
        self.page_count = page_count
        self.calls = 0

    def backend_id(self) -> str:
        return "fake_backend"

    def get_page_count(self, *, pdf_file: Path, timeout_s: float) -> int:
        self.calls += 1
        return self.page_count


class _BrokenEngine(_CountingEngine):
    def get_page_count(self, *, pdf_file: Path, timeout_s: float) -> int:
        raise RuntimeError("cannot open document")


_SOURCE = SourceHandle(path=Path("/tmp/does-not-matter.pdf"), owned=False)


class TestResolvePages(unittest.TestCase):
    def _resolve(self, request, engine=None):
        return resolve_pages(request, engine=engine or _CountingEngine(9), source=_SOURCE, timeout_s=5.0)

    def test_single_index_passes_through_without_page_count(self) -> None:
        engine = _CountingEngine(2)
        self.assertEqual(self._resolve(7, engine), [7])
        self.assertEqual(engine.calls, 0)

    def test_explicit_list_keeps_caller_order(self) -> None:
        self.assertEqual(self._resolve([3, 1, 2]), [3, 1, 2])
        self.assertEqual(self._resolve((2, 2)), [2, 2])

    def test_all_pages_sentinel_counts_pages(self) -> None:
        engine = _CountingEngine(9)
        self.assertEqual(self._resolve(-1, engine), list(range(1, 10)))
        self.assertEqual(engine.calls, 1)
        self.assertEqual(self._resolve("all", engine), list(range(1, 10)))

    def test_zero_pages_is_input_error(self) -> None:
        with self.assertRaises(InputError) as ctx:
            self._resolve(-1, _CountingEngine(0))
        self.assertEqual(ctx.exception.code, "INPUT_NO_PAGES")

    def test_page_count_failure_is_input_error(self) -> None:
        with self.assertRaises(InputError) as ctx:
            self._resolve(-1, _BrokenEngine(0))
        self.assertEqual(ctx.exception.code, "INPUT_PAGECOUNT_FAILED")

    def test_selection_string(self) -> None:
        self.assertEqual(self._resolve("5,1-3"), [5, 1, 2, 3])

    def test_range_past_page_count_rejected(self) -> None:
        with self.assertRaises(InputError) as ctx:
            self._resolve("1-2000000000", _CountingEngine(9))
        self.assertEqual(ctx.exception.code, "INPUT_BAD_PAGE_REQUEST")
        self.assertEqual(self._resolve("8-9", _CountingEngine(9)), [8, 9])

    def test_bad_requests(self) -> None:
        for bad in (0, -2, True, [], [1, 0], [1, "2"], "", "3-1", "x", 1.5):
            with self.subTest(request=bad):
                with self.assertRaises(InputError) as ctx:
                    self._resolve(bad)
                self.assertEqual(ctx.exception.code, "INPUT_BAD_PAGE_REQUEST")


class TestParsePageSelection(unittest.TestCase):
    def test_ranges_and_whitespace(self) -> None:
        self.assertEqual(parse_page_selection(" 1, 3 - 5 ,8"), [1, 3, 4, 5, 8])

    def test_unbounded_range_rejected_without_page_count(self) -> None:
        with self.assertRaises(InputError):
            parse_page_selection("1-2000000000")
        with self.assertRaises(InputError):
            parse_page_selection("2-5", page_count=4)

    def test_zero_rejected(self) -> None:
        with self.assertRaises(InputError):
            parse_page_selection("0-2")


if __name__ == "__main__":
    unittest.main()
