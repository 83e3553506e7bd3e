from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .artifacts import build_manifest, serialize_manifest, write_manifest_json
from .contracts import SUPPORTED_FORMATS, ConversionOptions, RasterEngineName, ResponseType
from .converter import from_base64, from_path
from .errors import InputError, RasterizePdfError


def _read_base64_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(
            f"Cannot read base64 input file {path}: {e}",
            code="INPUT_NOT_FOUND",
            detail={"path": str(path)},
        ) from e


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rasterize-pdf",
        description="Render PDF pages to images on disk or as base64, with a JSON manifest.",
    )
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", type=Path, help="PDF file path.")
    src.add_argument("--base64-file", type=Path, help="Text file holding a base64-encoded PDF.")
    p.add_argument("--pages", default="1", help='Pages to render: "all", "3" or "1,3-5" (default: 1).')
    p.add_argument("--format", default="png", choices=sorted(SUPPORTED_FORMATS), help="Output image format.")
    p.add_argument("--width", type=int, default=None, help="Output width in pixels.")
    p.add_argument("--height", type=int, default=None, help="Output height in pixels.")
    p.add_argument("--density", type=int, default=72, help="Render density in DPI (default: 72).")
    p.add_argument("--quality", type=int, default=None, help="Encoder quality 0..100 (jpg/webp).")
    p.add_argument(
        "--preserve-aspect-ratio",
        action="store_true",
        help="Fit inside --width x --height instead of stretching to it.",
    )
    p.add_argument("--save-path", default="./", help="Directory for rendered images.")
    p.add_argument("--save-filename", default="untitled", help="Base name: <name>.<page>.<format>.")
    p.add_argument(
        "--engine",
        choices=[e.value for e in RasterEngineName],
        default=RasterEngineName.PYPDFIUM2.value,
        help="Raster toolchain.",
    )
    p.add_argument(
        "--response-type",
        choices=[r.value for r in ResponseType],
        default=ResponseType.IMAGE.value,
        help="image: file metadata; base64: encoded payload in the manifest.",
    )
    p.add_argument("--max-workers", type=int, default=1, help="Pages rendered concurrently.")
    p.add_argument("--timeout-s", type=float, default=300.0, help="Per-call toolchain timeout.")
    p.add_argument("--manifest", type=Path, default=None, help="Write the JSON manifest here (default: stdout).")
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING).")
    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        options = ConversionOptions(
            quality=args.quality,
            format=args.format,
            width=args.width,
            height=args.height,
            density=args.density,
            save_path=args.save_path,
            save_filename=args.save_filename,
            preserve_aspect_ratio=args.preserve_aspect_ratio,
            engine=RasterEngineName(args.engine),
            timeout_s=args.timeout_s,
            max_workers=args.max_workers,
        )
    except (TypeError, ValueError) as e:
        parser.error(str(e))

    source = str(args.input if args.input is not None else args.base64_file)
    try:
        if args.input is not None:
            convert = from_path(args.input, options)
        else:
            convert = from_base64(_read_base64_file(args.base64_file), options)
        with convert:
            responses = convert.bulk(args.pages, ResponseType(args.response_type))
    except RasterizePdfError as e:
        payload = {"ok": False, "source": source, "error": e.to_dict(), "pages": []}
        ok = False
    else:
        payload = build_manifest(
            responses=responses,
            source=source,
            options=options,
            backend=convert.engine.backend_id(),
            backend_version=convert.engine.backend_version(),
        )
        ok = True

    if args.manifest is not None:
        write_manifest_json(payload=payload, out_manifest=args.manifest)
    else:
        sys.stdout.write(serialize_manifest(payload))

    return 0 if ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
