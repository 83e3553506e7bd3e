from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .contracts import ConversionOptions, ConvertResponse


def build_manifest(
    *,
    responses: Sequence[ConvertResponse],
    source: str,
    options: ConversionOptions,
    backend: str,
    backend_version: str | None = None,
) -> dict[str, Any]:
    return {
        "ok": True,
        "source": source,
        "backend": backend,
        "backend_version": backend_version,
        "rendering": {
            "density": options.density,
            "width": options.width,
            "height": options.height,
            "format": options.format,
            "quality": options.quality,
            "preserve_aspect_ratio": options.preserve_aspect_ratio,
        },
        "pages": [r.to_dict() for r in responses],
    }


def serialize_manifest(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_manifest_json(*, payload: dict[str, Any], out_manifest: Path) -> None:
    out_manifest.parent.mkdir(parents=True, exist_ok=True)
    out_manifest.write_text(serialize_manifest(payload), encoding="utf-8")
