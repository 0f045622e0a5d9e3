"""Rasterize a module matrix with a quiet zone and an optional round icon."""

import math

from PIL import Image, ImageChops, ImageDraw

from qr_icon_studio import (
    DARK_COLOR,
    HALO_FACTOR,
    ICON_RATIO,
    LIGHT_COLOR,
    QUIET_ZONE_RATIO,
)
from qr_icon_studio.encoder import SymbolMatrix
from qr_icon_studio.image_utils import center_crop_square


def quiet_zone_offset(size: int) -> int:
    """Margin in whole pixels, rounded up so it never falls below the ratio."""
    return math.ceil(round(size * QUIET_ZONE_RATIO, 9))


def compose(
    matrix: SymbolMatrix,
    target_size: int,
    icon: Image.Image | None = None,
    fill_color: str = DARK_COLOR,
    back_color: str = LIGHT_COLOR,
) -> Image.Image:
    """Draw a QR symbol on a square canvas of ``target_size`` pixels.

    The symbol fills the inner 80% of the canvas; the outer 10% on each side
    is left blank as the quiet zone. When an icon is given it is clipped to a
    circle 20% of the canvas wide, centered, over a light disc 1.2 times that
    diameter so dark modules never touch it.

    Args:
        matrix: Module grid from an encoder. Its own size is used, never the
            version that was requested.
        target_size: Width and height of the output in pixels.
        icon: Decoded icon image of any size and mode, or None.
        fill_color: Color of dark modules.
        back_color: Color of the background, quiet zone and icon halo.

    Returns:
        RGB PIL Image of exactly ``target_size`` x ``target_size``.

    Raises:
        EncodingUnavailable: If the matrix is empty or not square.
        ValueError: If ``target_size`` is not a positive integer.
    """
    matrix.validate()
    if isinstance(target_size, bool) or not isinstance(target_size, int) or target_size <= 0:
        raise ValueError(f"Target size must be a positive integer, got {target_size!r}")

    canvas = Image.new("RGB", (target_size, target_size), back_color)
    draw = ImageDraw.Draw(canvas)

    offset = quiet_zone_offset(target_size)
    inner = target_size - 2 * offset
    count = matrix.size
    module = inner / count

    # Pixel edges are rounded per module so neighbours share borders exactly
    edges = [offset + round(i * module) for i in range(count + 1)]

    for row in range(count):
        top, bottom = edges[row], edges[row + 1] - 1
        if bottom < top:
            continue
        for col in range(count):
            if not matrix.is_dark(row, col):
                continue
            left, right = edges[col], edges[col + 1] - 1
            if right < left:
                continue
            draw.rectangle((left, top, right, bottom), fill=fill_color)

    if icon is not None:
        _overlay_icon(canvas, icon, back_color)

    return canvas


def _overlay_icon(canvas: Image.Image, icon: Image.Image, back_color: str) -> None:
    size = canvas.width
    center = size / 2
    icon_diameter = size * ICON_RATIO
    halo_radius = icon_diameter * HALO_FACTOR / 2

    draw = ImageDraw.Draw(canvas)
    draw.ellipse(
        (center - halo_radius, center - halo_radius, center + halo_radius, center + halo_radius),
        fill=back_color,
    )

    side = round(icon_diameter)
    if side < 1:
        return

    icon = center_crop_square(icon.convert("RGBA"))
    icon = icon.resize((side, side), Image.LANCZOS)

    circle = Image.new("L", (side, side), 0)
    ImageDraw.Draw(circle).ellipse((0, 0, side - 1, side - 1), fill=255)
    mask = ImageChops.multiply(icon.getchannel("A"), circle)

    corner = round(center - side / 2)
    canvas.paste(icon.convert("RGB"), (corner, corner), mask)
