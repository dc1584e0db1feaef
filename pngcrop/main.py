"""Command line entrypoint: load a PNG, optionally crop it interactively, write it back."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from pngcrop.errors import CodecError
from pngcrop.image_engine import ImageBuffer, PixelFormat
from pngcrop.image_engine.codec import load_image, save_image
from pngcrop.logger import setup_logger
from pngcrop.settings_manager import SettingsManager

FORMAT_CHOICES = ("gray", "gray-alpha", "rgb", "rgba")


def _crop_amounts(value: str) -> tuple[int, int, int, int]:
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("expected LEFT,RIGHT,TOP,BOTTOM")
    try:
        left, right, top, bottom = (int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not integers: {value!r}") from None
    if min(left, right, top, bottom) < 0:
        raise argparse.ArgumentTypeError("crop amounts must be non-negative")
    return left, right, top, bottom


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pngcrop", description="PNG viewer and editor")
    parser.add_argument("input", help="PNG file to open")
    parser.add_argument("-o", "--output", help="Write the result to this file")
    parser.add_argument("-q", "--quiet", action="store_true", help="Don't display the input image")
    parser.add_argument("--convert", choices=FORMAT_CHOICES, help="Convert to this pixel format")
    parser.add_argument("--crop", type=_crop_amounts, metavar="L,R,T,B", help="Crop before displaying")
    parser.add_argument("--flip-vertical", action="store_true", help="Flip top to bottom")
    parser.add_argument("--flip-horizontal", action="store_true", help="Flip left to right")
    parser.add_argument("--settings", help="Settings file (default: ~/.pngcrop/settings.json)")
    parser.add_argument("--log-level", help="Set log level")
    parser.add_argument("--log-cats", help="Set log categories")
    return parser


def _apply_logging_options(args: argparse.Namespace) -> logging.Logger:
    if args.log_level:
        os.environ["PNGCROP_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["PNGCROP_LOG_CATS"] = args.log_cats
    return setup_logger().getChild("main")


def apply_edits(image: ImageBuffer, args: argparse.Namespace) -> ImageBuffer:
    """Apply the non-interactive edits: crop, flips, then format conversion."""
    if args.crop:
        image = image.crop(*args.crop)
    if args.flip_vertical:
        image = image.flip_vertical()
    if args.flip_horizontal:
        image = image.flip_horizontal()
    if args.convert:
        image = image.convert(PixelFormat.from_name(args.convert))
    return image


def show_crop_window(image: ImageBuffer, settings: SettingsManager) -> ImageBuffer:
    """Run the crop window until it is closed and return the cropped image."""
    from PySide6.QtWidgets import QApplication

    from pngcrop.ui_canvas import CropCanvas

    app = QApplication.instance() or QApplication(sys.argv[:1])
    canvas = CropCanvas(image, settings)
    canvas.show()
    app.exec()
    return canvas.result_image()


def run(argv: list[str] | None = None) -> int:
    """Application entrypoint (packaging-friendly). Returns the exit status."""
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    logger = _apply_logging_options(args)

    try:
        image = load_image(args.input)
    except CodecError as e:
        print(e, file=sys.stderr)
        return 1
    logger.info("opened %s: %dx%d %s", args.input, image.width, image.height, image.format.name)

    image = apply_edits(image, args)

    if not args.quiet:
        image = show_crop_window(image, SettingsManager(args.settings))

    if args.output:
        try:
            save_image(image, args.output)
        except CodecError as e:
            print(e, file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(run())
