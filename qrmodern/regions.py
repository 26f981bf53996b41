"""Module matrix validation and the occupancy grid used for adjacency queries."""

from dataclasses import dataclass

import numpy as np

from qrmodern.errors import InvalidInputError
from qrmodern.logging import audit, get_logger, trace

log = get_logger("regions")

# Quiet-zone width in modules on each side of a full matrix
QUIET_ZONE = 4


@dataclass(frozen=True, eq=False)
class RegionMap:
    """Read-only dark/light grid of the rendered cells.

    ``grid[row, col]`` is True for a dark module. ``origin`` is the matrix
    index of region cell 0 (0 with quiet zones drawn, 4 when trimmed) and
    ``matrix_size`` the full matrix dimension, so callers can map region
    coordinates back to the matrix's logical coordinates.
    """

    grid: np.ndarray
    origin: int
    matrix_size: int

    @property
    def size(self) -> int:
        return self.grid.shape[0]

    def is_dark(self, col: int, row: int) -> bool:
        return bool(self.grid[row, col])

    def to_matrix(self, col: int, row: int) -> tuple[int, int]:
        """Region (col, row) -> full-matrix (col, row)."""
        return col + self.origin, row + self.origin


def validate_matrix(matrix) -> np.ndarray:
    """Return *matrix* as a 2D numpy bool array, or raise InvalidInputError.

    Accepts nested sequences (e.g. ``qrcode.QRCode.get_matrix()``) or arrays.
    Empty, ragged, non-2D and non-square inputs are rejected.
    """
    try:
        arr = np.asarray(matrix, dtype=bool)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Module matrix is not a rectangular grid: {e}") from e
    if arr.ndim != 2 or arr.size == 0:
        raise InvalidInputError(f"Module matrix must be a non-empty 2D grid, got shape {arr.shape}")
    rows, cols = arr.shape
    if rows != cols:
        raise InvalidInputError(f"Module matrix must be square, got {rows}x{cols}")
    return arr


def rendered_bounds(matrix_size: int, draw_quiet_zones: bool) -> tuple[int, int]:
    """(origin, module_count) of the cells that end up on the canvas."""
    if draw_quiet_zones:
        return 0, matrix_size
    count = matrix_size - 2 * QUIET_ZONE
    if count <= 0:
        raise InvalidInputError(
            f"A {matrix_size}x{matrix_size} matrix has nothing left after trimming the quiet zone"
        )
    return QUIET_ZONE, count


@trace
def build_region_map(matrix, draw_quiet_zones: bool = True) -> RegionMap:
    """Scan the matrix once and capture the rendered cells as a RegionMap.

    Must complete before any module is classified: classification of a cell
    reads its neighbours on both sides.
    """
    arr = validate_matrix(matrix)
    origin, count = rendered_bounds(arr.shape[0], draw_quiet_zones)

    grid = arr[origin : origin + count, origin : origin + count].copy()
    grid.setflags(write=False)

    audit(
        "regions.built", logger=log,
        matrix=f"{arr.shape[0]}x{arr.shape[0]}",
        rendered=f"{count}x{count}",
        dark=int(grid.sum()),
    )
    return RegionMap(grid=grid, origin=origin, matrix_size=arr.shape[0])
