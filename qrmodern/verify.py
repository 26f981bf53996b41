"""Scan verification: confirm a rendered symbol still decodes with real-world decoders."""

import time
from dataclasses import dataclass

import cv2
import numpy as np
from PIL import Image

from qrmodern.logging import audit, get_logger, trace

log = get_logger("verify")


@dataclass
class ScanResult:
    """Result of a single scan attempt."""
    success: bool
    decoded_data: str | None = None
    decode_time_ms: float = 0.0
    decoder: str = ""
    error: str | None = None


def _flatten(image: Image.Image, background=(255, 255, 255)) -> Image.Image:
    """Composite any transparency onto *background*; decoders expect opaque RGB."""
    if image.mode in ("RGBA", "LA") or "transparency" in image.info:
        rgba = image.convert("RGBA")
        base = Image.new("RGBA", rgba.size, background + (255,))
        return Image.alpha_composite(base, rgba).convert("RGB")
    return image.convert("RGB")


def _decode_pyzbar(rgb: Image.Image) -> str | None:
    # needs the native zbar library at import time
    from pyzbar.pyzbar import decode as pyzbar_decode

    results = pyzbar_decode(rgb)
    if not results:
        return None
    return results[0].data.decode("utf-8", errors="replace")


def _decode_opencv(rgb: Image.Image) -> str | None:
    gray = cv2.cvtColor(np.array(rgb), cv2.COLOR_RGB2GRAY)
    data, _, _ = cv2.QRCodeDetector().detectAndDecode(gray)
    return data or None


def _scan(image: Image.Image, decoder: str, decode) -> ScanResult:
    start = time.perf_counter()
    try:
        data = decode(_flatten(image))
    except Exception as e:
        # decoder crash counts as a failed scan
        elapsed = (time.perf_counter() - start) * 1000
        audit("scan.error", logger=log, decoder=decoder, error=str(e), time_ms=round(elapsed, 1))
        return ScanResult(success=False, decode_time_ms=elapsed, decoder=decoder, error=str(e))

    elapsed = (time.perf_counter() - start) * 1000
    if data is None:
        audit("scan.verified", logger=log, decoder=decoder, success=False,
              time_ms=round(elapsed, 1), error="No QR code detected")
        return ScanResult(success=False, decode_time_ms=elapsed, decoder=decoder, error="No QR code detected")

    audit("scan.verified", logger=log, decoder=decoder, success=True,
          time_ms=round(elapsed, 1), data=data[:80])
    return ScanResult(success=True, decoded_data=data, decode_time_ms=elapsed, decoder=decoder)


@trace
def scan_pyzbar(image: Image.Image) -> ScanResult:
    """Scan a QR code using pyzbar (wraps ZBar)."""
    return _scan(image, "pyzbar/zbar", _decode_pyzbar)


@trace
def scan_opencv(image: Image.Image) -> ScanResult:
    """Scan a QR code using OpenCV's built-in QR detector."""
    return _scan(image, "opencv", _decode_opencv)


SCANNERS = {"pyzbar": scan_pyzbar, "opencv": scan_opencv}


@trace
def verify(
    image: Image.Image,
    expected_data: str | None = None,
    decoders: tuple[str, ...] = ("pyzbar", "opencv"),
) -> list[ScanResult]:
    """Run the selected decoders on a rendered image.

    Args:
        image: PIL Image containing a QR code.
        expected_data: If provided, a decode of different data counts as a failure.
        decoders: Names from SCANNERS, tried in order.

    Returns:
        List of ScanResults, one per decoder.
    """
    results = []
    for name in decoders:
        result = SCANNERS[name](image)
        if result.success and expected_data is not None and result.decoded_data != expected_data:
            result.success = False
            result.error = f"Data mismatch: got '{result.decoded_data}', expected '{expected_data}'"
        results.append(result)
    return results
