import numpy as np
import pytest

from qrmodern.errors import InvalidInputError
from qrmodern.regions import QUIET_ZONE, build_region_map, rendered_bounds, validate_matrix


@pytest.mark.parametrize("matrix", [
    [],
    [[]],
    [[True, False]],
    [[True], [True, False]],
    [[[True]]],
])
def test_validate_matrix_rejects_bad_shapes(matrix):
    with pytest.raises(InvalidInputError):
        validate_matrix(matrix)


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        validate_matrix([[True, False, True]])


def test_validate_matrix_accepts_numpy_and_lists(make_matrix):
    from_list = validate_matrix(make_matrix(5, [(1, 2)]))
    from_array = validate_matrix(np.eye(5, dtype=np.uint8))
    assert from_list.dtype == bool and from_list.shape == (5, 5)
    assert from_list[2, 1] and not from_list[1, 2]
    assert from_array.dtype == bool and from_array.trace() == 5


def test_rendered_bounds():
    assert rendered_bounds(29, True) == (0, 29)
    assert rendered_bounds(29, False) == (QUIET_ZONE, 21)
    assert rendered_bounds(9, False) == (4, 1)
    with pytest.raises(InvalidInputError):
        rendered_bounds(8, False)


class TestBuildRegionMap:
    def test_full_matrix_kept_with_quiet_zones(self, make_matrix):
        region = build_region_map(make_matrix(25, [(0, 0), (12, 3)]), draw_quiet_zones=True)
        assert region.size == 25
        assert region.origin == 0
        assert region.matrix_size == 25
        assert region.is_dark(0, 0)
        assert region.is_dark(12, 3)
        assert not region.is_dark(3, 12)

    def test_trimmed_map_drops_quiet_zone(self, make_matrix):
        region = build_region_map(make_matrix(25, [(0, 0), (4, 4), (12, 9)]), draw_quiet_zones=False)
        assert region.size == 17
        assert region.origin == 4
        assert region.matrix_size == 25
        assert region.is_dark(0, 0)       # matrix (4, 4)
        assert region.is_dark(8, 5)       # matrix (12, 9)
        assert int(region.grid.sum()) == 2
        assert region.to_matrix(8, 5) == (12, 9)

    def test_grid_is_read_only_copy(self, make_matrix):
        matrix = make_matrix(10, [(5, 5)])
        region = build_region_map(matrix)
        with pytest.raises(ValueError):
            region.grid[0, 0] = True
        matrix[5][5] = False
        assert region.is_dark(5, 5)

    def test_too_small_to_trim(self, make_matrix):
        with pytest.raises(InvalidInputError):
            build_region_map(make_matrix(8), draw_quiet_zones=False)
