"""qrmodern command-line interface: render and verify styled QR codes."""

import argparse
import sys
from pathlib import Path

from PIL import Image

from qrmodern.config import parse_hex_color
from qrmodern.errors import InvalidInputError
from qrmodern.logging import audit, get_logger, setup_logging

log = get_logger("cli")


def _save(img: Image.Image, output: Path, size: int | None) -> None:
    """Write *img* to *output*, format chosen from the suffix (BMP/PNG/...)."""
    from qrmodern.codec import image_to_bytes

    output.parent.mkdir(parents=True, exist_ok=True)
    fmt = Image.registered_extensions().get(output.suffix.lower(), "PNG")
    output.write_bytes(image_to_bytes(img, size=size, fmt=fmt))


def _load_image(path: str) -> Image.Image:
    """Read an image into memory and release its file handle."""
    with Image.open(path) as img:
        return img.copy()


def cmd_render(args):
    """Render a QR code with rounded bars and an optional centre icon."""
    from qrmodern.generator import generate_modern_qr

    icon = _load_image(args.icon) if args.icon else None
    img = generate_modern_qr(
        data=args.data,
        pixels_per_module=args.pixels_per_module,
        dark_color=parse_hex_color(args.dark),
        light_color=parse_hex_color(args.light),
        ecc=args.ecc,
        version=args.version,
        icon=icon,
        icon_size_percent=args.icon_size,
        icon_border_width=args.icon_border,
        draw_quiet_zones=not args.no_quiet_zones,
    )
    output = Path(args.output)
    _save(img, output, args.size)
    print(f"Rendered: {output} ({args.size or img.size[0]}x{args.size or img.size[1]})")


def cmd_plain(args):
    """Render a QR code with plain square modules."""
    from qrmodern.generator import generate_plain_qr

    img = generate_plain_qr(
        data=args.data,
        pixels_per_module=args.pixels_per_module,
        dark_color=parse_hex_color(args.dark),
        light_color=parse_hex_color(args.light),
        ecc=args.ecc,
        version=args.version,
        draw_quiet_zones=not args.no_quiet_zones,
    )
    output = Path(args.output)
    _save(img, output, args.size)
    print(f"Rendered: {output} ({args.size or img.size[0]}x{args.size or img.size[1]})")


def cmd_verify(args):
    """Verify that a rendered QR image decodes."""
    from qrmodern.verify import verify

    results = verify(_load_image(args.image), expected_data=args.expected)

    all_pass = True
    for r in results:
        status = "PASS" if r.success else "FAIL"
        if not r.success:
            all_pass = False
        print(f"  [{r.decoder:12s}] {status} | {r.decode_time_ms:6.1f}ms | {r.decoded_data or r.error}")

    return 0 if all_pass else 1


def _add_render_args(p: argparse.ArgumentParser, default_output: str, default_ecc: str):
    p.add_argument("data", help="URL or text to encode")
    p.add_argument("-o", "--output", default=default_output, help="Output file path (format from suffix)")
    p.add_argument("-p", "--pixels-per-module", type=int, default=20, help="Pixel size of one module")
    p.add_argument("-v", "--version", type=int, default=None, help="QR version 1-40 (auto if omitted)")
    p.add_argument("-e", "--ecc", default=default_ecc, choices=["L", "M", "Q", "H"], help="Error correction level")
    p.add_argument("--dark", default="000000", help="Dark module colour (hex, e.g. '1a1a1a' or '#000000ff')")
    p.add_argument("--light", default="ffffff", help="Light/background colour (hex)")
    p.add_argument("--no-quiet-zones", action="store_true", help="Trim the 4-module quiet zone")
    p.add_argument("--size", type=int, default=None, help="Resize the result to SIZE x SIZE pixels")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qrmodern", description="qrmodern: styled QR code renderer")

    # Global logging flags
    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")
    parser.add_argument("--log-json", action="store_true", help="JSON log lines on the console")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- render ---
    p_render = subparsers.add_parser("render", help="Render with rounded bars and optional icon")
    _add_render_args(p_render, "output/qr_modern.png", "H")
    p_render.add_argument("--icon", default=None, help="Icon image drawn over the centre")
    p_render.add_argument("--icon-size", type=int, default=15, help="Icon width as %% of the image (1-100)")
    p_render.add_argument("--icon-border", type=int, default=6, help="Cleared border around the icon (pixels)")

    # --- plain ---
    p_plain = subparsers.add_parser("plain", help="Render with plain square modules")
    _add_render_args(p_plain, "output/qr_plain.png", "M")

    # --- verify ---
    p_ver = subparsers.add_parser("verify", help="Verify a rendered QR image decodes")
    p_ver.add_argument("image", help="Path to QR code image")
    p_ver.add_argument("--expected", default=None, help="Expected decoded data (fails if mismatch)")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging before any command runs
    level = "DEBUG" if args.verbose else "INFO"
    setup_logging(level=level, log_file=args.log_file, json_format=args.log_json)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    commands = {
        "render": cmd_render,
        "plain": cmd_plain,
        "verify": cmd_verify,
    }
    try:
        code = commands[args.command](args) or 0
    except InvalidInputError as e:
        log.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 2
    audit("cli.done", logger=log, command=args.command, exit_code=code)
    return code


if __name__ == "__main__":
    sys.exit(main())
