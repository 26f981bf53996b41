import pytest
from PIL import Image


def build_matrix(size, dark=()):
    """Square matrix of light modules with the given (col, row) cells dark."""
    grid = [[False] * size for _ in range(size)]
    for col, row in dark:
        grid[row][col] = True
    return grid


@pytest.fixture
def make_matrix():
    return build_matrix


@pytest.fixture
def red_icon():
    return Image.new("RGBA", (40, 40), (255, 0, 0, 255))
