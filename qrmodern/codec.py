"""Image codec boundary: optional resize, then encode to bytes with Pillow."""

import io

from PIL import Image

from qrmodern.errors import InvalidInputError
from qrmodern.logging import audit, get_logger, trace

log = get_logger("codec")


@trace
def resize_image(image: Image.Image, size: int) -> Image.Image:
    """Resample *image* to a *size* x *size* square (Lanczos)."""
    if size <= 0:
        raise InvalidInputError(f"Resize target must be positive, got {size}")
    return image.resize((size, size), Image.LANCZOS)


@trace
def image_to_bytes(image: Image.Image, size: int | None = None, fmt: str = "BMP") -> bytes:
    """Encode a rendered QR image, optionally resized first.

    Args:
        image: Rendered image (any mode Pillow can save in *fmt*).
        size: If set, resize to size x size before encoding.
        fmt: Pillow format name, e.g. "BMP" (default) or "PNG".
    """
    fmt = fmt.upper()
    if fmt == "JPG":
        fmt = "JPEG"  # Pillow only registers the long name for saving
    if size is not None:
        image = resize_image(image, size)
    if fmt == "JPEG" and image.mode != "RGB":
        image = image.convert("RGB")

    buf = io.BytesIO()
    image.save(buf, format=fmt)
    data = buf.getvalue()
    audit("codec.encoded", logger=log, fmt=fmt, image_px=f"{image.size[0]}x{image.size[1]}", bytes=len(data))
    return data
