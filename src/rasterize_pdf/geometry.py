from __future__ import annotations

from .contracts import DEFAULT_DENSITY, RasterGeometry


def resolve_geometry(
    density: int | None = None,
    width: int | None = None,
    height: int | None = None,
    *,
    preserve_aspect_ratio: bool = False,
) -> RasterGeometry:
    """
    Density and the pixel box are independent: density alone changes the
    rendering resolution without a resize, width/height constrain the final
    image regardless of density.
    """

    if density is None:
        density = DEFAULT_DENSITY
    if density <= 0:
        raise ValueError("density must be a positive integer")
    for name, value in (("width", width), ("height", height)):
        if value is not None and value <= 0:
            raise ValueError(f"{name} must be a positive integer")

    return RasterGeometry(
        density=int(density),
        width=int(width) if width is not None else None,
        height=int(height) if height is not None else None,
        preserve_aspect_ratio=preserve_aspect_ratio,
    )
