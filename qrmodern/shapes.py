"""Vector outlines for QR modules and the icon exclusion zone.

Outlines are closed contours assembled from straight edges and quarter-circle
arcs, then filled with Pillow's ImageDraw. Angles follow screen convention:
0 deg points right and angles grow clockwise (y axis points down).
"""

import math
from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageDraw

from qrmodern.classify import ModuleShapeKind

# Total vertical gap (pixels) between stacked rounded modules
SPACING = 2


# ---------------------------------------------------------------------------
# Geometry primitives
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle as (left, top, right, bottom) vertices.

    Pixel rectangles use Pillow's inclusive convention: a module of ``p``
    pixels spans ``left .. left + p - 1``.
    """

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def expand(self, d: float) -> "Rect":
        return Rect(self.left - d, self.top - d, self.right + d, self.bottom + d)


class Path:
    """A set of closed polygonal contours built with line/arc primitives."""

    def __init__(self):
        self.contours: list[list[tuple[float, float]]] = []
        self._current: list[tuple[float, float]] | None = None

    def move_to(self, x: float, y: float) -> "Path":
        self.close()
        self._current = [(x, y)]
        return self

    def line_to(self, x: float, y: float) -> "Path":
        if self._current is None:
            return self.move_to(x, y)
        if self._current[-1] != (x, y):
            self._current.append((x, y))
        return self

    def arc_to(self, cx: float, cy: float, radius: float, start_deg: float, sweep_deg: float) -> "Path":
        """Append an arc; joined to the previous point by a straight edge."""
        steps = max(2, int(math.ceil(radius * abs(sweep_deg) / 90.0)) + 1)
        for i in range(steps + 1):
            a = math.radians(start_deg + sweep_deg * i / steps)
            self.line_to(cx + radius * math.cos(a), cy + radius * math.sin(a))
        return self

    def close(self) -> "Path":
        if self._current and len(self._current) >= 3:
            self.contours.append(self._current)
        self._current = None
        return self

    def fill(self, draw: ImageDraw.ImageDraw, fill) -> None:
        self.close()
        for contour in self.contours:
            draw.polygon(contour, fill=fill)

    def rasterize(self, size: tuple[int, int]) -> np.ndarray:
        """Boolean coverage mask (rows x cols) of this path on a *size* canvas."""
        mask = Image.new("L", size, 0)
        self.fill(ImageDraw.Draw(mask), 255)
        return np.array(mask) > 0

    def bounds(self) -> Rect | None:
        self.close()
        pts = [p for c in self.contours for p in c]
        if not pts:
            return None
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        return Rect(min(xs), min(ys), max(xs), max(ys))


# ---------------------------------------------------------------------------
# Module outlines
# ---------------------------------------------------------------------------

# (top-left, top-right, bottom-right, bottom-left)
_ROUNDED_CORNERS = {
    ModuleShapeKind.ROUNDED_ALL: (True, True, True, True),
    ModuleShapeKind.ROUNDED_LEADING: (True, False, False, True),
    ModuleShapeKind.ROUNDED_TRAILING: (False, True, True, False),
}


def module_radius(pixels_per_module: int) -> int:
    """Corner radius for rounded modules: floor(p / 2.5)."""
    return pixels_per_module * 2 // 5


def spacing_inset(pixels_per_module: int, radius: int) -> int:
    """Vertical inset for rounded modules, never eating into the arc diameter."""
    return max(0, min(SPACING, pixels_per_module - 2 * radius))


def module_rect(col: int, row: int, pixels_per_module: int) -> Rect:
    x = col * pixels_per_module
    y = row * pixels_per_module
    return Rect(x, y, x + pixels_per_module - 1, y + pixels_per_module - 1)


def rectangle_path(rect: Rect) -> Path:
    return (
        Path()
        .move_to(rect.left, rect.top)
        .line_to(rect.right, rect.top)
        .line_to(rect.right, rect.bottom)
        .line_to(rect.left, rect.bottom)
        .close()
    )


def _corner_path(rect: Rect, r: float, corners: tuple[bool, bool, bool, bool]) -> Path:
    tl, tr, br, bl = corners
    if r <= 0:
        return rectangle_path(rect)
    left, top, right, bottom = rect.left, rect.top, rect.right, rect.bottom

    path = Path()
    if tl:
        path.arc_to(left + r, top + r, r, 180, 90)
    else:
        path.move_to(left, top)
    if tr:
        path.arc_to(right - r, top + r, r, 270, 90)
    else:
        path.line_to(right, top)
    if br:
        path.arc_to(right - r, bottom - r, r, 0, 90)
    else:
        path.line_to(right, bottom)
    if bl:
        path.arc_to(left + r, bottom - r, r, 90, 90)
    else:
        path.line_to(left, bottom)
    return path.close()


def module_path(rect: Rect, kind: ModuleShapeKind, radius: int) -> Path:
    """Outline of one dark module of the given kind.

    A radius of 0 (finder squares, tiny modules) fills the whole cell.
    Otherwise every module is inset vertically by SPACING so stacked bars
    stay visually separate, and only the corners implied by *kind* are
    rounded. A SQUARE module inside a run keeps the same inset as the
    rounded ends around it.
    """
    if radius <= 0:
        return rectangle_path(rect)

    inset = spacing_inset(int(rect.height) + 1, radius)
    top_pad = inset // 2
    padded = Rect(rect.left, rect.top + top_pad, rect.right, rect.bottom - (inset - top_pad))
    if kind is ModuleShapeKind.SQUARE:
        return rectangle_path(padded)

    # clamp against pixel extents; rect edges are inclusive
    r = min(radius, (padded.width + 1) / 2, (padded.height + 1) / 2)
    return _corner_path(padded, r, _ROUNDED_CORNERS[kind])


def rounded_rectangle_path(rect: Rect, corner_radius: float) -> Path:
    """Rectangle with all four corners rounded: four arcs joined by straight edges."""
    r = min(corner_radius, rect.width / 2, rect.height / 2)
    if r <= 0:
        return rectangle_path(rect)
    return _corner_path(rect, r, (True, True, True, True))
