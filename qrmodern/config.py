"""Render configuration: colours, module scale, quiet zones and the optional centre icon."""

from dataclasses import dataclass, field

from PIL import Image

from qrmodern.errors import InvalidInputError

Color = tuple[int, int, int, int]

BLACK: Color = (0, 0, 0, 255)
WHITE: Color = (255, 255, 255, 255)


def parse_hex_color(s: str) -> Color:
    """Parse '#RGB', '#RRGGBB' or '#RRGGBBAA' (leading '#' optional) to RGBA."""
    h = s.strip().lstrip("#")
    if len(h) == 3:
        h = "".join(ch * 2 for ch in h)
    if len(h) not in (6, 8):
        raise InvalidInputError(f"Unrecognised colour {s!r}")
    try:
        channels = tuple(int(h[i : i + 2], 16) for i in range(0, len(h), 2))
    except ValueError:
        raise InvalidInputError(f"Unrecognised colour {s!r}") from None
    return normalize_color(channels)


def normalize_color(value) -> Color:
    """Coerce an RGB/RGBA tuple or hex string to an RGBA tuple."""
    if isinstance(value, str):
        return parse_hex_color(value)
    try:
        channels = tuple(value)
    except TypeError:
        raise InvalidInputError(f"Colour must be an RGB/RGBA tuple, got {value!r}") from None
    if len(channels) not in (3, 4) or not all(
        isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in channels
    ):
        raise InvalidInputError(f"Colour must be 3 or 4 ints in 0-255, got {value!r}")
    if len(channels) == 3:
        channels = channels + (255,)
    return channels


def check_pixels_per_module(value) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise InvalidInputError(f"pixels_per_module must be a positive int, got {value!r}")


@dataclass
class IconConfig:
    """Logo drawn over the centre of the symbol."""

    image: Image.Image
    size_percent: int = 15
    border_width: int = 6


@dataclass
class RenderConfig:
    """Everything the modern renderer needs besides the module matrix."""

    pixels_per_module: int
    dark_color: Color = BLACK
    light_color: Color = WHITE
    draw_quiet_zones: bool = True
    icon: IconConfig | None = field(default=None)

    @property
    def icon_active(self) -> bool:
        """True when an icon is configured with a usable size percentage."""
        return self.icon is not None and 0 < self.icon.size_percent <= 100

    def validate(self) -> "RenderConfig":
        """Check invariants and normalise colours in place; returns self."""
        check_pixels_per_module(self.pixels_per_module)
        self.dark_color = normalize_color(self.dark_color)
        self.light_color = normalize_color(self.light_color)
        if self.icon is not None and self.icon.border_width < 0:
            raise InvalidInputError(f"icon border_width must be >= 0, got {self.icon.border_width}")
        return self
