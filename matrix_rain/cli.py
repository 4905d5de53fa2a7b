"""
Matrix Rain command line entry point.

Usage:
    matrix-rain
    matrix-rain -d h -c cyan -k katakana
    matrix-rain -m logo.png --invert-mask
    matrix-rain -m logo.png --print-mask
"""

import argparse
import logging
import shutil
import sys
from typing import List, Optional

from . import __version__
from .app import RainApp, print_mask
from .config import CharRange, Direction, RainColor, RainConfig, resolve_config
from .errors import ConfigurationError, MaskUnavailable
from .mask import ImageMaskSource
from .terminal import CursesTerminal

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="matrix-rain",
        description="The famous Matrix rain effect of falling green characters as a cli command",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    matrix-rain                         # Green ASCII rain
    matrix-rain -d h -k binary          # Horizontal binary rain
    matrix-rain -f notes.txt            # Rain the characters of a file
    matrix-rain -m logo.png -i          # Rain only inside the logo
    matrix-rain -m logo.png --print-mask

Press any key or Ctrl-C to quit.
        """
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-d", "--direction", choices=[d.value for d in Direction],
                        default=Direction.VERTICAL.value,
                        help="Change direction of rain. h=horizontal, v=vertical.")
    parser.add_argument("-c", "--color", choices=[c.value for c in RainColor],
                        default=RainColor.GREEN.value,
                        help="Rain color. NOTE: droplet start is always white.")
    parser.add_argument("-k", "--char-range", dest="char_range",
                        choices=[r.value for r in CharRange.selectable()],
                        default=CharRange.ASCII.value,
                        help="Use rain characters from char-range.")
    parser.add_argument("-f", "--file-path", dest="file_path",
                        help="Read characters from a file instead of random characters from char-range.")
    parser.add_argument("-m", "--mask-path", dest="mask_path",
                        help="Use the specified image to build a mask for the raindrops.")
    parser.add_argument("-i", "--invert-mask", dest="invert_mask", action="store_true",
                        help="Invert the mask specified with --mask-path.")
    parser.add_argument("--offset-row", dest="offset_row", type=int, default=0,
                        help="Move the upper left corner of the mask down n rows.")
    parser.add_argument("--offset-col", dest="offset_col", type=int, default=0,
                        help="Move the upper left corner of the mask right n columns.")
    parser.add_argument("--font-ratio", dest="font_ratio", type=int, default=2,
                        help="ratio between character height over width in the terminal.")
    parser.add_argument("--print-mask", dest="print_mask", action="store_true",
                        help="Print mask and exit.")
    parser.add_argument("--log-file", dest="log_file",
                        help="Write log messages to this file.")
    parser.add_argument("--debug", action="store_true",
                        help="Log debug messages (requires --log-file).")
    return parser


def config_from_args(args: argparse.Namespace) -> RainConfig:
    return RainConfig(
        direction=Direction(args.direction),
        color=RainColor(args.color),
        char_range=CharRange(args.char_range),
        file_path=args.file_path,
        mask_path=args.mask_path,
        invert_mask=args.invert_mask,
        offset_row=args.offset_row,
        offset_col=args.offset_col,
        font_ratio=args.font_ratio,
        print_mask=args.print_mask,
    )


def setup_logging(log_file: Optional[str], debug: bool = False):
    """Log to a file only; the terminal belongs to the rain."""
    if not log_file:
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for the matrix-rain command."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, args.debug)

    try:
        config = resolve_config(config_from_args(args))
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    logger.debug(f"Resolved configuration: {config}")
    mask_source = ImageMaskSource()

    if config.print_mask:
        size = shutil.get_terminal_size()
        width, height = size.columns, size.lines
        try:
            print_mask(config, mask_source, width, height)
        except MaskUnavailable as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_FAILURE
        return EXIT_OK

    if not sys.stdout.isatty():
        print("Error: Output is not a text terminal", file=sys.stderr)
        return EXIT_FAILURE

    try:
        terminal = CursesTerminal()
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    app = RainApp(config, terminal, mask_source=mask_source)
    app.run()

    # Reported once the normal screen is back
    for error in app.mask_errors:
        print(f"Mask disabled: {error}", file=sys.stderr)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
