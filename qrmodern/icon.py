"""Centre icon: placement, rounded exclusion zone and final overlay."""

from dataclasses import dataclass

import numpy as np
from PIL import Image

from qrmodern.logging import audit, get_logger, trace
from qrmodern.shapes import Path, Rect, rounded_rectangle_path

log = get_logger("icon")


@dataclass
class IconPlacement:
    """Centred icon rectangle (pixels) and the zone cleared around it."""

    x: float
    y: float
    width: float
    height: float
    exclusion: Path

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Integer (left, top, width, height) the icon is drawn into."""
        return (
            int(round(self.x)),
            int(round(self.y)),
            max(1, int(round(self.width))),
            max(1, int(round(self.height))),
        )


def exclusion_path(icon_rect: Rect, border_width: int) -> Path:
    """Icon rectangle grown by *border_width*, corner radius 2 x border_width."""
    return rounded_rectangle_path(icon_rect.expand(border_width), 2 * border_width)


@trace
def compute_icon_placement(
    canvas_size: tuple[int, int],
    icon: Image.Image,
    size_percent: float,
    border_width: int,
) -> IconPlacement | None:
    """Centre an icon spanning *size_percent* of the canvas width.

    The icon keeps its native aspect ratio. Returns None (icon skipped) when
    the percentage is outside (0, 100] or the icon has no width or height.
    """
    if not 0 < size_percent <= 100:
        audit("icon.skipped", logger=log, reason="size_percent", size_percent=size_percent)
        return None
    native_w, native_h = icon.size
    if native_w == 0 or native_h == 0:
        log.warning("Icon has a zero dimension (%dx%d); drawing without it", native_w, native_h)
        audit("icon.skipped", logger=log, reason="empty_icon", icon=f"{native_w}x{native_h}")
        return None

    canvas_w, canvas_h = canvas_size
    width = size_percent * canvas_w / 100
    height = width * native_h / native_w
    x = (canvas_w - width) / 2
    y = (canvas_h - height) / 2

    exclusion = exclusion_path(Rect(x, y, x + width, y + height), border_width)
    audit(
        "icon.placed", logger=log,
        canvas=f"{canvas_w}x{canvas_h}",
        icon=f"{width:.1f}x{height:.1f}",
        at=f"{x:.1f},{y:.1f}",
        border=border_width,
    )
    return IconPlacement(x=x, y=y, width=width, height=height, exclusion=exclusion)


def exclusion_mask(placement: IconPlacement, canvas_size: tuple[int, int]) -> np.ndarray:
    """Boolean mask (rows x cols) of the exclusion zone."""
    return placement.exclusion.rasterize(canvas_size)


def subtract_exclusion(dark_mask: np.ndarray, exclusion: np.ndarray) -> np.ndarray:
    """Dark coverage with the exclusion zone removed."""
    return dark_mask & ~exclusion


@trace
def draw_icon(canvas: Image.Image, icon: Image.Image, placement: IconPlacement) -> Image.Image:
    """Scale *icon* into its placement box and paste it over *canvas* in place."""
    left, top, width, height = placement.box
    scaled = icon.convert("RGBA").resize((width, height), Image.LANCZOS)
    canvas.paste(scaled, (left, top), scaled)
    return canvas
