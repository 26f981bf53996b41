"""Encoder front end: text -> module matrix via the qrcode library, plus one-call helpers."""

from enum import Enum

import qrcode
import qrcode.constants
from PIL import Image

from qrmodern.config import BLACK, WHITE
from qrmodern.errors import InvalidInputError
from qrmodern.logging import audit, get_logger, trace
from qrmodern.regions import QUIET_ZONE
from qrmodern.renderer import render_modern_graphic, render_plain

log = get_logger("generator")


class ECCLevel(Enum):
    L = qrcode.constants.ERROR_CORRECT_L  # 7%
    M = qrcode.constants.ERROR_CORRECT_M  # 15%
    Q = qrcode.constants.ERROR_CORRECT_Q  # 25%
    H = qrcode.constants.ERROR_CORRECT_H  # 30%


ECC_NAMES = {"L": ECCLevel.L, "M": ECCLevel.M, "Q": ECCLevel.Q, "H": ECCLevel.H}


def _ecc_level(ecc: str) -> ECCLevel:
    try:
        return ECC_NAMES[ecc.upper()]
    except KeyError:
        raise InvalidInputError(f"Unknown ECC level {ecc!r}; expected one of L/M/Q/H") from None


@trace
def get_module_matrix(
    data: str,
    version: int | None = None,
    ecc: str = "H",
    mask: int | None = None,
    border: int = QUIET_ZONE,
) -> list[list[bool]]:
    """Encode *data* and return the module matrix including the quiet zone.

    Args:
        data: The string to encode (URL, text, etc.)
        version: QR version 1-40 (None = smallest that fits)
        ecc: Error correction level: L/M/Q/H
        mask: Mask pattern 0-7 (None = auto-select best)
        border: Quiet zone width in modules (renderers assume 4)

    Returns:
        Square list of lists, True = dark module.
    """
    ecc_level = _ecc_level(ecc)
    qr = qrcode.QRCode(
        version=version,
        error_correction=ecc_level.value,
        box_size=1,
        border=border,
        mask_pattern=mask,
    )
    qr.add_data(data)
    qr.make(fit=(version is None))
    matrix = qr.get_matrix()

    audit(
        "qr.encoded", logger=log,
        data=data[:80], version=qr.version, ecc=ecc.upper(),
        mask=mask if mask is not None else "auto",
        matrix=f"{len(matrix)}x{len(matrix)}",
    )
    return matrix


@trace
def generate_modern_qr(
    data: str,
    pixels_per_module: int = 20,
    dark_color=BLACK,
    light_color=WHITE,
    ecc: str = "H",
    version: int | None = None,
    icon: Image.Image | None = None,
    icon_size_percent: int = 15,
    icon_border_width: int = 6,
    draw_quiet_zones: bool = True,
) -> Image.Image:
    """Encode *data* and render it with rounded bars and an optional icon."""
    matrix = get_module_matrix(data, version=version, ecc=ecc)
    return render_modern_graphic(
        matrix,
        pixels_per_module,
        dark_color=dark_color,
        light_color=light_color,
        icon=icon,
        icon_size_percent=icon_size_percent,
        icon_border_width=icon_border_width,
        draw_quiet_zones=draw_quiet_zones,
    )


@trace
def generate_plain_qr(
    data: str,
    pixels_per_module: int = 20,
    dark_color=BLACK,
    light_color=WHITE,
    ecc: str = "M",
    version: int | None = None,
    draw_quiet_zones: bool = True,
) -> Image.Image:
    """Encode *data* and render it with plain square modules."""
    matrix = get_module_matrix(data, version=version, ecc=ecc)
    return render_plain(
        matrix,
        pixels_per_module,
        dark_color=dark_color,
        light_color=light_color,
        draw_quiet_zones=draw_quiet_zones,
    )
