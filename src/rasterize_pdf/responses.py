from __future__ import annotations

import base64
import os
from collections.abc import Mapping

from .contracts import RasterArtifact, ResponseType, ToBase64Response, WriteImageResponse
from .errors import ConversionIOError

ResponseTypeLike = bool | str | ResponseType | Mapping[str, str] | None


def normalize_response_type(value: ResponseTypeLike) -> ResponseType:
    """
    Accepts the shorthands callers use for the output mode:
    `True` => base64, `False`/`None` => image, `{"responseType": "base64"}`
    (or `response_type`), a `ResponseType` or its string value.
    """

    if value is None or value is False:
        return ResponseType.IMAGE
    if value is True:
        return ResponseType.BASE64
    if isinstance(value, ResponseType):
        return value
    if isinstance(value, str):
        return ResponseType(value.lower())
    if isinstance(value, Mapping):
        raw = value.get("responseType", value.get("response_type"))
        if raw is None:
            return ResponseType.IMAGE
        return ResponseType(str(raw).lower())
    raise TypeError(f"unsupported response type: {value!r}")


def build_image_response(artifact: RasterArtifact, *, save_path: str) -> WriteImageResponse:
    try:
        file_size = artifact.image_file.stat().st_size
    except OSError as e:
        raise ConversionIOError(
            f"Cannot stat rasterized image {artifact.image_file}: {e}",
            code="IO_READ_FAILED",
            detail={"page": artifact.page, "image_file": str(artifact.image_file)},
        ) from e

    name = artifact.image_file.name
    return WriteImageResponse(
        name=name,
        size=artifact.size,
        file_size=file_size,
        path=os.path.join(save_path, name),
        page=artifact.page,
    )


def build_base64_response(artifact: RasterArtifact) -> ToBase64Response:
    try:
        data = artifact.image_file.read_bytes()
    except OSError as e:
        raise ConversionIOError(
            f"Cannot read rasterized image {artifact.image_file}: {e}",
            code="IO_READ_FAILED",
            detail={"page": artifact.page, "image_file": str(artifact.image_file)},
        ) from e

    return ToBase64Response(
        base64=base64.b64encode(data).decode("ascii"),
        size=artifact.size,
        page=artifact.page,
    )


def build_response(
    artifact: RasterArtifact,
    response_type: ResponseType,
    *,
    save_path: str,
) -> WriteImageResponse | ToBase64Response:
    # The artifact stays on disk in both modes.
    if response_type == ResponseType.BASE64:
        return build_base64_response(artifact)
    return build_image_response(artifact, save_path=save_path)
