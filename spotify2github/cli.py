"""
Command-line interface for spotify2github.

Runs one full export: authenticate, fetch every selected collection, write
JSON documents and reconcile the Liked Songs mirror playlist.
"""

import argparse
import asyncio
import dataclasses
import sys
from pathlib import Path
from typing import Optional

from .config import CATEGORIES, load_config, load_settings, validate_settings
from .errors import (
    AuthenticationError,
    ConfigurationError,
    MutationError,
    TransportError,
)
from .export_engine import ExportEngine
from .logging_utils import ExportLogger, UserErrors

DEFAULT_CONFIG = "config.yml"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all CLI options."""
    parser = argparse.ArgumentParser(
        description="Export your Spotify library to JSON files for version control",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Credentials are read from config.yml (`spotify:` section) or from the
SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET and SPOTIFY_REFRESH_TOKEN
environment variables.

Examples:
  spotify2github                             # Export everything to ./data
  spotify2github --output-dir library        # Export to ./library
  spotify2github --categories tracks albums  # Only saved tracks and albums
  spotify2github --no-mirror                 # Do not touch the mirror playlist
""",
    )

    parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG,
        help=f"Path to config file (default: {DEFAULT_CONFIG})",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        default=None,
        help="Directory for JSON output (default: ./data)",
    )
    parser.add_argument(
        "--categories",
        nargs="+",
        choices=CATEGORIES,
        default=None,
        metavar="CATEGORY",
        help=f"Only export these categories ({', '.join(CATEGORIES)})",
    )
    parser.add_argument(
        "--no-mirror",
        action="store_true",
        help="Skip Liked Songs mirror playlist reconciliation",
    )
    parser.add_argument(
        "--public-playlists-only",
        action="store_true",
        help="Only export public playlists",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose debug output"
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Quiet mode - only show errors",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    return parser


def apply_overrides(settings, args):
    """Apply command-line flags on top of file/environment settings."""
    changes = {}
    if args.output_dir:
        changes["output_dir"] = Path(args.output_dir)
    if args.categories:
        changes["categories"] = tuple(args.categories)
    if args.no_mirror:
        changes["mirror"] = False
    if args.public_playlists_only:
        changes["public_playlists_only"] = True
    return dataclasses.replace(settings, **changes) if changes else settings


def print_summary(results: dict, logger: ExportLogger, stats: Optional[dict] = None):
    """Print a formatted summary of export results."""
    logger.info("━" * 50)
    logger.success("Export Complete!")
    logger.info("━" * 50)

    for category, data in results.items():
        if category == "top":
            for time_range, counts in data.items():
                logger.info(
                    f"  Top ({time_range}): {counts['artists']} artists, "
                    f"{counts['tracks']} tracks"
                )
            continue
        logger.info(f"  {category.title()}: {data['exported']} exported")
        mirror = data.get("mirror")
        if mirror:
            logger.info(
                f"  Mirror: {mirror['added']} added, {mirror['removed']} removed, "
                f"{mirror['tracks']} tracks"
            )

    if stats:
        logger.info(f"  Documents written: {stats['documents']}")
    logger.info("━" * 50)
    logger.info(logger.format_summary())


def main():
    parser = create_parser()
    args = parser.parse_args()

    logger = ExportLogger(
        verbose=args.verbose,
        quiet=args.quiet,
        use_color=not args.no_color,
    )

    if args.config != DEFAULT_CONFIG and not Path(args.config).exists():
        logger.error(UserErrors.config_not_found(args.config))
        sys.exit(1)

    try:
        settings = validate_settings(
            apply_overrides(load_settings(load_config(args.config)), args)
        )
    except ConfigurationError as e:
        logger.error(UserErrors.missing_configuration(str(e)))
        sys.exit(1)

    logger.progress("Creating Spotify client…")
    try:
        engine = ExportEngine.from_settings(settings, logger=logger)
    except AuthenticationError as e:
        logger.error(UserErrors.spotify_auth_failed(str(e)))
        sys.exit(1)

    try:
        results = asyncio.run(engine.run())
    except KeyboardInterrupt:
        logger.warning("Export cancelled by user")
        sys.exit(1)
    except MutationError as e:
        logger.error(UserErrors.mirror_partially_updated(str(e)))
        sys.exit(1)
    except TransportError as e:
        if e.rate_limited:
            logger.error(UserErrors.rate_limited())
        elif e.status is None:
            logger.error(UserErrors.network_error(str(e)))
        else:
            logger.error(UserErrors.export_error(e.operation or "export", str(e)))
        sys.exit(1)
    except OSError as e:
        logger.error(UserErrors.export_error("writing output", str(e)))
        sys.exit(1)

    print_summary(results, logger, engine.library.get_stats())
    logger.success(f"Library exported to: {engine.library.export_dir}")


if __name__ == "__main__":
    main()
