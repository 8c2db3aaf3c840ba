"""Command-line entry point: render one Terrarium window into a hillshade PNG."""

import argparse
import logging
import sys
from pathlib import Path

from domain.models import ShadeSettings
from domain.profiles import load_profile
from shared.constants import BlendMode, RenderMode
from shared.errors import ProfileError
from tiles.processor import TileProcessor
from tiles.sink import output_tile_to_image
from tiles.source import ImageTileSource

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_TILE = 1
EXIT_BAD_CONFIG = 2


def setup_logging(log_file: Path | None = None, *, verbose: bool = False) -> None:
    """Configure root logging to stdout and, optionally, a log file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding='utf-8'))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='terrashade',
        description='Hillshade overlay from a Terrarium-encoded elevation raster',
    )
    parser.add_argument('input', type=Path, help='Terrarium raster (PNG/WebP)')
    parser.add_argument('output', type=Path, help='RGBA PNG to write')
    parser.add_argument(
        '--mode',
        choices=[m.value for m in RenderMode],
        default=None,
        help='renderer (default: from profile, else hillshade)',
    )
    parser.add_argument(
        '--blend',
        choices=[m.value for m in BlendMode],
        default=None,
        help='8-bit channel addition for the two lights',
    )
    parser.add_argument(
        '--blue-fraction',
        action='store_true',
        default=None,
        help='decode the blue channel as B/256 instead of B//256',
    )
    parser.add_argument('--x', type=int, default=0, help='window left edge (px)')
    parser.add_argument('--y', type=int, default=0, help='window top edge (px)')
    parser.add_argument('--profile', help='settings profile name or TOML path')
    parser.add_argument('--log-file', type=Path, help='also log to this file')
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


def resolve_settings(args: argparse.Namespace) -> ShadeSettings:
    """Profile values first, command-line flags override them."""
    settings = load_profile(args.profile) if args.profile else ShadeSettings()
    overrides: dict[str, object] = {}
    if args.mode is not None:
        overrides['render_mode'] = RenderMode(args.mode)
    if args.blend is not None:
        overrides['blend_mode'] = BlendMode(args.blend)
    if args.blue_fraction:
        overrides['blue_fraction'] = True
    return settings.model_copy(update=overrides)


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_file, verbose=args.verbose)

    try:
        settings = resolve_settings(args)
    except (FileNotFoundError, ProfileError) as e:
        logger.error('Settings error: %s', e)
        return EXIT_BAD_CONFIG

    source = ImageTileSource(args.input)
    try:
        tile = TileProcessor(source, settings).process(args.x, args.y)
    finally:
        source.close()

    if tile is None:
        logger.error('No tile produced from %s', args.input)
        return EXIT_NO_TILE

    args.output.parent.mkdir(parents=True, exist_ok=True)
    img = output_tile_to_image(tile)
    try:
        img.save(args.output, format='PNG')
    finally:
        img.close()
    logger.info('Saved %s (%s)', args.output, settings.render_mode.value)
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
