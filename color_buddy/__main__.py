"""colorbuddy — Extract a palette of colours from any image.

Usage: colorbuddy [options] <image> [<image> ...]

Uses one of two algorithms to calculate the palette: k-means or median cut.
You can generate:
  - a copy of the original image with the palette along the bottom;
  - a standalone image containing only the palette;
  - JSON with each colour's hex notation and r, g, b components.

Quantisation methods are auto-discovered from color_buddy/quantizers/.

Configuration defaults:
  COLORBUDDY_* variables in the environment or a .env file (walking up from
  the current directory, stopping at the nearest .git) change the defaults.
  Command-line flags always win.
"""

import argparse
import logging
import sys

from color_buddy import __version__, registry
from color_buddy.core.config import PaletteConfig, load_config
from color_buddy.core.dimensions import parse_palette_height
from color_buddy.core.errors import MAX_COLORS, MIN_COLORS, ColorBuddyError
from color_buddy.core.types import OutputType
from color_buddy.pipeline import Options, run_batch

logger = logging.getLogger('color_buddy')


def _color_count(text: str) -> int:
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f'{text!r} is not an integer') from None
    if not MIN_COLORS <= n <= MAX_COLORS:
        raise argparse.ArgumentTypeError(f'{n} is not in {MIN_COLORS}..={MAX_COLORS}')
    return n


def _palette_height(text: str) -> str:
    try:
        parse_palette_height(text)
    except ColorBuddyError as e:
        raise argparse.ArgumentTypeError(str(e)) from None
    return text


def _positive_int(text: str) -> int:
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f'{text!r} is not an integer') from None
    if n < 1:
        raise argparse.ArgumentTypeError(f'{n} must be at least 1')
    return n


def _build_parser(config: PaletteConfig) -> argparse.ArgumentParser:
    methods = registry.all_quantizers()

    epilog = (
        'Examples:\n'
        '  Generate JSON containing the 8 most prevalent colours in the image:\n'
        '     colorbuddy --output-type json original-image.jpg\n'
        '\n'
        '  Output the original images with a 5 colour palette along the bottom:\n'
        '     colorbuddy --number-of-colors 5 original-image.jpg another-image.jpg\n'
        '\n'
        "  Size the palette as a percentage of the original image's height:\n"
        '     colorbuddy --palette-height 20% original-image.jpg\n'
        '\n'
        '  Create a standalone 500x50 palette image:\n'
        '     colorbuddy -t standalone --palette-height 50px --palette-width 500 original-image.jpg\n'
    )
    parser = argparse.ArgumentParser(
        prog='colorbuddy',
        description='Extract a palette of colours from any image.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    parser.add_argument(
        '-m',
        '--quantisation-method',
        choices=sorted(methods),
        default=None,
        help=f'Quantisation method (default: {config.quantisation_method})',
    )
    parser.add_argument(
        '-n',
        '--number-of-colors',
        type=_color_count,
        default=None,
        metavar='N',
        help=f'Number of colours in the palette, {MIN_COLORS}-{MAX_COLORS} (default: {config.number_of_colors})',
    )
    parser.add_argument('-o', '--output', default=None, help='Output file or directory')
    parser.add_argument(
        '-t',
        '--output-type',
        choices=[t.value for t in OutputType],
        default=None,
        help=f'What to generate (default: {config.output_type})',
    )
    parser.add_argument(
        '-p',
        '--palette-height',
        type=_palette_height,
        default=None,
        help=f'Palette height in pixels or as a percentage of the image height, e.g. 100, 100px, 50%% '
        f'(default: {config.palette_height.replace("%", "%%")})',
    )
    parser.add_argument(
        '-w',
        '--palette-width',
        type=_positive_int,
        default=None,
        help='Width in pixels of a standalone palette (default: image width)',
    )
    parser.add_argument('-s', '--summary', action='store_true', help='Print a text summary of each palette')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors')
    parser.add_argument('--list-methods', action='store_true', help='List quantisation methods and exit')
    parser.add_argument('images', nargs='*', help='Any number of images to process')
    return parser


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('colorbuddy: %(message)s'))
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


def _print_methods() -> None:
    print('Available quantisation methods:\n')
    for name, q in sorted(registry.all_quantizers().items()):
        print(f'  {name:<12} {q.help}')


def _env_file_arg(argv: list[str] | None) -> str | None:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument('--env-file', default=None)
    known, _ = pre.parse_known_args(argv)
    return known.env_file


def main(argv: list[str] | None = None) -> None:
    # Config must exist before the parser so defaults show up in --help
    _configure_logging(verbose=False, quiet=False)
    config, env_path = load_config(env_file=_env_file_arg(argv))

    parser = _build_parser(config)
    args = parser.parse_args(argv)
    _configure_logging(args.verbose, args.quiet)
    if env_path:
        logger.debug('loaded %s', env_path)

    if args.list_methods:
        _print_methods()
        return

    if not args.images:
        parser.print_help()
        sys.exit(1)

    try:
        options = Options.from_config(
            config,
            number_of_colors=args.number_of_colors,
            method=args.quantisation_method,
            output_type=args.output_type,
            palette_height=args.palette_height,
            palette_width=args.palette_width,
            output=args.output,
        )
    except (KeyError, ValueError) as e:
        message = e.args[0] if isinstance(e, KeyError) and e.args else e
        print(f'Error: {message}', file=sys.stderr)
        sys.exit(2)

    failures = run_batch(args.images, options, summary=args.summary)
    if failures:
        sys.exit(1)


if __name__ == '__main__':
    main()
