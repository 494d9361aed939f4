# src/nerdfetch/cli.py

import argparse
import sys
from typing import Any, Dict, List, Optional, Sequence

from nerdfetch import config as nerdfetch_config
from nerdfetch import log_utils
from nerdfetch.constants import (
    FONT_FORMATS,
    MSG_NETWORK_UNAVAILABLE,
    MSG_NO_FONTS_SELECTED,
)
from nerdfetch.exceptions import ConfigFileError, NetworkError
from nerdfetch.font_cache import rebuild_font_cache, should_rebuild_font_cache
from nerdfetch.menu import run_menu
from nerdfetch.pipeline import run_pipeline
from nerdfetch.utils import check_network_available, create_session, get_version

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nerdfetch",
        description="nerdfetch - Select, download and install Nerd Fonts",
    )
    parser.add_argument(
        "--dir",
        "-d",
        dest="dir",
        metavar="PATH",
        help="Target fonts directory, relative to your home directory (default: .fonts)",
    )
    parser.add_argument(
        "--otf",
        action="store_true",
        help="Prefer OpenType (.otf) fonts when extracting",
    )
    parser.add_argument(
        "--ttf",
        action="store_true",
        help="Prefer TrueType (.ttf) fonts when extracting",
    )
    parser.add_argument(
        "--extract",
        action="store_true",
        help="Extract downloaded archives into the fonts directory and remove them",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {get_version()}",
    )
    return parser


def _load_config() -> Dict[str, Any]:
    """
    Load the configuration file, falling back to defaults if it is broken.
    """
    try:
        return nerdfetch_config.load_config()
    except ConfigFileError as error:
        log_utils.logger.error(f"Failed to load configuration: {error}")
        return dict(nerdfetch_config.DEFAULT_CONFIG)


def _apply_logging_config(config: Dict[str, Any]) -> None:
    if config.get("LOG_LEVEL"):
        log_utils.set_log_level(str(config["LOG_LEVEL"]))
    if config.get("LOG_TO_FILE"):
        log_utils.add_file_logging(
            nerdfetch_config.get_log_dir(), str(config.get("LOG_LEVEL") or "INFO")
        )


def resolve_formats(args: argparse.Namespace, config: Dict[str, Any]) -> List[str]:
    """Command-line format flags win over the configured FORMATS list."""
    formats = [fmt for fmt in FONT_FORMATS if getattr(args, fmt, False)]
    return formats or list(config.get("FORMATS") or [])


def run(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    """
    Run one interactive session: check the network, prompt, download, refresh fonts.

    Returns:
        int: Process exit status.
    """
    session = create_session()
    try:
        try:
            check_network_available(session)
        except NetworkError as e:
            log_utils.logger.error(MSG_NETWORK_UNAVAILABLE)
            log_utils.logger.debug(f"Network check failed: {e}")
            return EXIT_FAILURE

        selected_fonts = run_menu(session=session)
        if not selected_fonts:
            log_utils.logger.info(MSG_NO_FONTS_SELECTED)
            return EXIT_OK

        target_dir = nerdfetch_config.resolve_fonts_dir(
            args.dir or config.get("FONTS_DIR")
        )
        target_dir.mkdir(parents=True, exist_ok=True)

        extract = bool(args.extract or config.get("EXTRACT"))
        run_pipeline(
            selected_fonts,
            target_dir,
            extract=extract,
            session=session,
            formats=resolve_formats(args, config),
        )
    finally:
        session.close()

    if should_rebuild_font_cache():
        rebuild_font_cache()
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Entry point for the nerdfetch command-line interface.

    Exits with status 0 after a normal run (including when nothing was selected or
    some fonts failed), 1 when the network is unreachable or an unexpected error
    occurs, and 130 when interrupted.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config()
        _apply_logging_config(config)
        exit_code = run(args, config)
    except KeyboardInterrupt:
        log_utils.logger.info("Interrupted.")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as error:
        log_utils.logger.exception(f"Error: {error}")
        sys.exit(EXIT_FAILURE)

    if exit_code != EXIT_OK:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
