import numpy as np
import pytest
from PIL import Image

from qrmodern.config import IconConfig, RenderConfig
from qrmodern.errors import InvalidInputError
from qrmodern.icon import compute_icon_placement, exclusion_mask
from qrmodern.renderer import canvas_size, render_modern, render_modern_graphic, render_plain

DARK = (0, 0, 0, 255)
LIGHT = (255, 255, 255, 255)


def pixel(img, x, y):
    return img.getpixel((x, y))


class TestSize:
    @pytest.mark.parametrize("n,ppm", [(25, 4), (29, 10), (9, 3)])
    def test_modern_size_follows_quiet_zone_flag(self, make_matrix, n, ppm):
        matrix = make_matrix(n, [(n // 2, n // 2)])
        full = render_modern(matrix, RenderConfig(pixels_per_module=ppm))
        trimmed = render_modern(matrix, RenderConfig(pixels_per_module=ppm, draw_quiet_zones=False))
        assert full.size == (n * ppm, n * ppm)
        assert trimmed.size == ((n - 8) * ppm, (n - 8) * ppm)
        assert full.mode == "RGBA"

    def test_plain_size_matches_modern(self, make_matrix):
        matrix = make_matrix(25)
        assert render_plain(matrix, 6).size == (150, 150)
        assert render_plain(matrix, 6, draw_quiet_zones=False).size == (102, 102)
        assert canvas_size(25, 6, False) == 102


class TestModernShapes:
    def test_isolated_module_has_rounded_corners(self, make_matrix):
        img = render_modern(make_matrix(25, [(12, 12)]), RenderConfig(pixels_per_module=20))
        assert pixel(img, 250, 250) == DARK
        assert pixel(img, 241, 242) == LIGHT
        assert pixel(img, 258, 257) == LIGHT

    def test_run_renders_as_continuous_bar(self, make_matrix):
        cells = [(11, 12), (12, 12), (13, 12)]
        img = render_modern(make_matrix(25, cells), RenderConfig(pixels_per_module=20))
        # bar interior is dark through all three modules
        for x in (225, 235, 245, 250, 255, 265, 274):
            assert pixel(img, x, 250) == DARK
        # rounded outer ends
        assert pixel(img, 221, 242) == LIGHT
        assert pixel(img, 278, 257) == LIGHT
        # square joins where the middle module meets its neighbours
        assert pixel(img, 241, 242) == DARK
        assert pixel(img, 258, 257) == DARK

    def test_run_has_one_straight_top_and_bottom_edge(self, make_matrix):
        cells = [(11, 12), (12, 12), (13, 12)]
        img = render_modern(make_matrix(25, cells), RenderConfig(pixels_per_module=20))
        is_dark = np.all(np.array(img) == DARK, axis=-1)
        tops = {x: int(np.argmax(is_dark[:, x])) for x in (230, 250, 270)}
        bottoms = {x: int(np.nonzero(is_dark[:, x])[0].max()) for x in (230, 250, 270)}
        assert len(set(tops.values())) == 1
        assert len(set(bottoms.values())) == 1
        assert tops[250] > 240

    def test_isolated_module_corner_radius(self, make_matrix):
        # p=20 gives radius 8; top-left arc centred at (248, 249)
        img = render_modern(make_matrix(25, [(12, 12)]), RenderConfig(pixels_per_module=20))
        assert pixel(img, 242, 243) == LIGHT
        assert pixel(img, 243, 244) == DARK
        assert pixel(img, 257, 243) == LIGHT
        assert pixel(img, 256, 244) == DARK

    def test_finder_cells_stay_square(self, make_matrix):
        img = render_modern(make_matrix(25, [(7, 7)]), RenderConfig(pixels_per_module=20))
        assert pixel(img, 141, 141) == DARK
        assert pixel(img, 158, 158) == DARK
        assert pixel(img, 140, 140) == DARK
        assert pixel(img, 159, 159) == DARK

    def test_single_cell_matrix_is_a_finder_square(self):
        img = render_modern([[True]], RenderConfig(pixels_per_module=10))
        assert img.size == (10, 10)
        for xy in [(0, 0), (9, 0), (0, 9), (9, 9)]:
            assert pixel(img, *xy) == DARK

    def test_trimmed_render_offsets_modules(self, make_matrix):
        img = render_modern(
            make_matrix(25, [(12, 12), (0, 0)]),
            RenderConfig(pixels_per_module=10, draw_quiet_zones=False),
        )
        # matrix (12, 12) lands at module (8, 8) of the trimmed canvas
        assert pixel(img, 85, 85) == DARK
        arr = np.array(img)
        assert (arr[:, :, 0] == 0).sum() < 100

    def test_tiny_modules_render_as_squares(self, make_matrix):
        img = render_modern(make_matrix(25, [(12, 12)]), RenderConfig(pixels_per_module=2))
        assert pixel(img, 24, 24) == DARK

    def test_colours_applied(self, make_matrix):
        config = RenderConfig(pixels_per_module=10, dark_color=(200, 0, 0), light_color=(0, 0, 200))
        img = render_modern(make_matrix(25, [(12, 12)]), config)
        assert pixel(img, 125, 125) == (200, 0, 0, 255)
        assert pixel(img, 5, 5) == (0, 0, 200, 255)


def test_rendering_is_deterministic(make_matrix, red_icon):
    matrix = make_matrix(25, [(c, r) for r in range(25) for c in range(25) if (c * 7 + r * 3) % 5 < 2])
    config = RenderConfig(pixels_per_module=8, icon=IconConfig(image=red_icon, size_percent=25, border_width=4))
    first = render_modern(matrix, config)
    second = render_modern(matrix, config)
    assert first.tobytes() == second.tobytes()


class TestIcon:
    def test_no_dark_fill_inside_exclusion_zone(self, make_matrix, red_icon):
        matrix = [[True] * 25 for _ in range(25)]
        icon_cfg = IconConfig(image=red_icon, size_percent=20, border_width=5)
        img = render_modern(matrix, RenderConfig(pixels_per_module=10, icon=icon_cfg))

        placement = compute_icon_placement(img.size, red_icon, 20, 5)
        zone = exclusion_mask(placement, img.size)
        arr = np.array(img)
        is_dark = np.all(arr == DARK, axis=-1)
        assert zone.any()
        assert not (is_dark & zone).any()
        # bordered ring shows background, the middle shows the icon
        assert pixel(img, 97, 125) == LIGHT
        assert pixel(img, 125, 125) == (255, 0, 0, 255)
        # outside the zone the symbol is untouched
        assert pixel(img, 55, 125) == DARK

    @pytest.mark.parametrize("percent", [0, 101, -10])
    def test_inactive_icon_matches_plain_path(self, make_matrix, red_icon, percent):
        matrix = make_matrix(25, [(12, 12), (13, 12), (5, 20)])
        without = render_modern(matrix, RenderConfig(pixels_per_module=6))
        with_icon = render_modern(
            matrix, RenderConfig(pixels_per_module=6, icon=IconConfig(image=red_icon, size_percent=percent)),
        )
        assert with_icon.tobytes() == without.tobytes()

    def test_zero_width_icon_is_skipped(self, make_matrix):
        matrix = make_matrix(25, [(12, 12)])
        without = render_modern(matrix, RenderConfig(pixels_per_module=6))
        empty = Image.new("RGBA", (0, 5))
        with_icon = render_modern(matrix, RenderConfig(pixels_per_module=6, icon=IconConfig(image=empty)))
        assert with_icon.tobytes() == without.tobytes()

    def test_keyword_front_end(self, make_matrix, red_icon):
        matrix = make_matrix(25, [(12, 12)])
        img = render_modern_graphic(matrix, 10, icon=red_icon, icon_size_percent=10, icon_border_width=2)
        assert img.size == (250, 250)
        assert pixel(img, 125, 125) == (255, 0, 0, 255)


class TestPlain:
    def test_squares_only(self, make_matrix):
        img = render_plain(make_matrix(25, [(12, 12)]), 10)
        assert pixel(img, 120, 120) == DARK
        assert pixel(img, 129, 129) == DARK
        assert pixel(img, 130, 129) == LIGHT

    def test_trimmed(self, make_matrix):
        img = render_plain(make_matrix(25, [(4, 4), (0, 0)]), 5, dark_color="#ff0000", draw_quiet_zones=False)
        assert pixel(img, 0, 0) == (255, 0, 0, 255)
        assert pixel(img, 5, 5) == LIGHT


class TestInvalidInput:
    @pytest.mark.parametrize("ppm", [0, -3, 2.5, True])
    def test_bad_pixels_per_module(self, make_matrix, ppm):
        with pytest.raises(InvalidInputError):
            render_modern(make_matrix(25), RenderConfig(pixels_per_module=ppm))
        with pytest.raises(InvalidInputError):
            render_plain(make_matrix(25), ppm)

    @pytest.mark.parametrize("matrix", [[], [[True, False]], [[True], [False, True]]])
    def test_bad_matrix(self, matrix):
        with pytest.raises(InvalidInputError):
            render_modern(matrix, RenderConfig(pixels_per_module=4))

    def test_bad_colour(self, make_matrix):
        with pytest.raises(InvalidInputError):
            render_modern(make_matrix(25), RenderConfig(pixels_per_module=4, dark_color=(0, 0)))

    def test_negative_icon_border(self, make_matrix, red_icon):
        config = RenderConfig(pixels_per_module=4, icon=IconConfig(image=red_icon, border_width=-1))
        with pytest.raises(InvalidInputError):
            render_modern(make_matrix(25), config)
