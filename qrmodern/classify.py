"""Per-module shape classification from horizontal adjacency and finder-region membership.

Every dark module becomes one of four shapes. Runs of dark modules along a
row are fused into a bar: only the run's ends get rounded corners, and a
lone module becomes a pill. The three finder corners always stay square.

All thresholds are expressed in the full matrix's module coordinates
(quiet zone included), independent of the pixel scale.
"""

from enum import Enum

from qrmodern.logging import audit, get_logger, trace
from qrmodern.regions import RegionMap

log = get_logger("classify")

# Side length of each finder corner region: 4 quiet-zone + 7 finder modules
FINDER_REGION = 11

# Columns at or before this index always start a bar
LEADING_THRESHOLD = 4

# Columns this close to the right edge always end a bar
TRAILING_SPAN = 5


class ModuleShapeKind(Enum):
    SQUARE = "square"
    ROUNDED_ALL = "rounded_all"
    ROUNDED_LEADING = "rounded_leading"
    ROUNDED_TRAILING = "rounded_trailing"


def is_finder_region(mx: int, my: int, matrix_size: int) -> bool:
    """True if full-matrix cell (mx, my) lies in a finder corner region."""
    far = matrix_size - FINDER_REGION
    if mx < FINDER_REGION and my < FINDER_REGION:
        return True
    if mx >= far and my < FINDER_REGION:
        return True
    if mx < FINDER_REGION and my >= far:
        return True
    return False


def is_leading_edge(region: RegionMap, col: int, row: int) -> bool:
    """Nothing dark to the left: the module starts a bar."""
    mx, _ = region.to_matrix(col, row)
    if mx <= LEADING_THRESHOLD or col == 0:
        return True
    return not region.is_dark(col - 1, row)


def is_trailing_edge(region: RegionMap, col: int, row: int) -> bool:
    """Nothing dark to the right: the module ends a bar."""
    mx, _ = region.to_matrix(col, row)
    if mx >= region.matrix_size - TRAILING_SPAN or col == region.size - 1:
        return True
    return not region.is_dark(col + 1, row)


def classify_adjacency(region: RegionMap, col: int, row: int) -> ModuleShapeKind:
    """Shape implied by the left/right neighbours alone."""
    leading = is_leading_edge(region, col, row)
    trailing = is_trailing_edge(region, col, row)
    if leading and trailing:
        return ModuleShapeKind.ROUNDED_ALL
    if leading:
        return ModuleShapeKind.ROUNDED_LEADING
    if trailing:
        return ModuleShapeKind.ROUNDED_TRAILING
    return ModuleShapeKind.SQUARE


def classify_module(region: RegionMap, col: int, row: int) -> ModuleShapeKind:
    """Shape for the dark module at region (col, row).

    Finder corners are forced square so decoders see crisp edges, even where
    the module is isolated.
    """
    mx, my = region.to_matrix(col, row)
    if is_finder_region(mx, my, region.matrix_size):
        return ModuleShapeKind.SQUARE
    return classify_adjacency(region, col, row)


@trace
def classify_region(region: RegionMap) -> dict[tuple[int, int], ModuleShapeKind]:
    """Classify every dark module; keys are region (col, row)."""
    kinds = {}
    for row in range(region.size):
        for col in range(region.size):
            if region.is_dark(col, row):
                kinds[(col, row)] = classify_module(region, col, row)

    counts = {k.value: 0 for k in ModuleShapeKind}
    for kind in kinds.values():
        counts[kind.value] += 1
    audit("classify.done", logger=log, **counts)
    return kinds
