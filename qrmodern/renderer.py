"""Canvas renderers: the modern rounded-bar renderer and the plain square-module one."""

import numpy as np
from PIL import Image, ImageDraw

from qrmodern.classify import ModuleShapeKind, classify_module, is_finder_region
from qrmodern.config import BLACK, WHITE, IconConfig, RenderConfig, check_pixels_per_module, normalize_color
from qrmodern.icon import compute_icon_placement, draw_icon, exclusion_mask, subtract_exclusion
from qrmodern.logging import audit, get_logger, trace
from qrmodern.regions import build_region_map, rendered_bounds, validate_matrix
from qrmodern.shapes import module_path, module_radius, module_rect

log = get_logger("renderer")


def canvas_size(matrix_size: int, pixels_per_module: int, draw_quiet_zones: bool) -> int:
    """Side length in pixels of the rendered image."""
    _, count = rendered_bounds(matrix_size, draw_quiet_zones)
    return count * pixels_per_module


@trace
def render_modern(matrix, config: RenderConfig) -> Image.Image:
    """Render a module matrix with rounded bars and an optional centre icon.

    Horizontal runs of dark modules are drawn as bars with rounded ends,
    finder corners stay square, and a configured icon is drawn last over a
    cleared, rounded zone.

    Args:
        matrix: Square grid of booleans (True = dark), quiet zone included.
        config: Scale, colours, quiet-zone flag and optional icon.

    Returns:
        RGBA PIL Image of ``(N - (0 or 8)) * pixels_per_module`` pixels square.
    """
    config.validate()
    arr = validate_matrix(matrix)
    p = config.pixels_per_module
    size = canvas_size(arr.shape[0], p, config.draw_quiet_zones)

    canvas = Image.new("RGBA", (size, size), config.light_color)
    draw = ImageDraw.Draw(canvas)

    # phase 1: occupancy grid for every rendered cell
    region = build_region_map(arr, config.draw_quiet_zones)

    placement = None
    if config.icon_active:
        placement = compute_icon_placement(
            (size, size), config.icon.image, config.icon.size_percent, config.icon.border_width,
        )

    # phase 2: shapes into a dark coverage layer, light cells straight onto the canvas
    radius = module_radius(p)
    dark_layer = Image.new("L", (size, size), 0)
    dark_draw = ImageDraw.Draw(dark_layer)
    counts = {k.value: 0 for k in ModuleShapeKind}

    for row in range(region.size):
        for col in range(region.size):
            rect = module_rect(col, row, p)
            if region.is_dark(col, row):
                kind = classify_module(region, col, row)
                counts[kind.value] += 1
                # finder cells fill their whole module, no spacing inset
                mx, my = region.to_matrix(col, row)
                r = 0 if is_finder_region(mx, my, region.matrix_size) else radius
                module_path(rect, kind, r).fill(dark_draw, 255)
            else:
                draw.rectangle([rect.left, rect.top, rect.right, rect.bottom], fill=config.light_color)

    dark = np.array(dark_layer) > 0
    if placement is not None:
        dark = subtract_exclusion(dark, exclusion_mask(placement, (size, size)))

    pixels = np.array(canvas)
    pixels[dark] = config.dark_color
    canvas = Image.fromarray(pixels)

    if placement is not None:
        draw_icon(canvas, config.icon.image, placement)

    audit(
        "render.modern_done", logger=log,
        modules=f"{region.size}x{region.size}",
        image_px=f"{size}x{size}",
        pixels_per_module=p,
        radius=radius,
        quiet_zones=config.draw_quiet_zones,
        icon=placement is not None,
        **counts,
    )
    return canvas


def render_modern_graphic(
    matrix,
    pixels_per_module: int,
    dark_color=BLACK,
    light_color=WHITE,
    icon: Image.Image | None = None,
    icon_size_percent: int = 15,
    icon_border_width: int = 6,
    draw_quiet_zones: bool = True,
) -> Image.Image:
    """Keyword-argument front end for :func:`render_modern`."""
    icon_cfg = None
    if icon is not None:
        icon_cfg = IconConfig(image=icon, size_percent=icon_size_percent, border_width=icon_border_width)
    config = RenderConfig(
        pixels_per_module=pixels_per_module,
        dark_color=dark_color,
        light_color=light_color,
        draw_quiet_zones=draw_quiet_zones,
        icon=icon_cfg,
    )
    return render_modern(matrix, config)


@trace
def render_plain(
    matrix,
    pixels_per_module: int,
    dark_color=BLACK,
    light_color=WHITE,
    draw_quiet_zones: bool = True,
) -> Image.Image:
    """Render every module as a plain square; same size rules as render_modern."""
    check_pixels_per_module(pixels_per_module)
    dark_color = normalize_color(dark_color)
    light_color = normalize_color(light_color)
    arr = validate_matrix(matrix)
    origin, count = rendered_bounds(arr.shape[0], draw_quiet_zones)

    cells = arr[origin : origin + count, origin : origin + count]
    scaled = np.repeat(np.repeat(cells, pixels_per_module, axis=0), pixels_per_module, axis=1)

    pixels = np.empty(scaled.shape + (4,), dtype=np.uint8)
    pixels[...] = light_color
    pixels[scaled] = dark_color

    audit(
        "render.plain_done", logger=log,
        modules=f"{count}x{count}",
        image_px=f"{scaled.shape[1]}x{scaled.shape[0]}",
        quiet_zones=draw_quiet_zones,
    )
    return Image.fromarray(pixels)
