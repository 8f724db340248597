"""
Command line entry point for the Circulation Desk.

Usage:
    circulation-desk console [--no-preload]
    circulation-desk serve [--no-preload]
"""

import argparse
import logging
import sys

from .config import LibrarySettings, get_config
from .console import LibraryConsole
from .library import Library
from .seed import preload_sample_data

logger = logging.getLogger(__name__)


def configure_logging(config: LibrarySettings) -> None:
    """Send logs to stderr so stdout stays free for the console and stdio transport."""
    logging.basicConfig(
        level=config.effective_log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="circulation-desk",
        description="In-memory library lending: console menu or MCP server",
    )
    subparsers = parser.add_subparsers(dest="command")

    for name, help_text in (
        ("console", "Run the interactive menu (default)"),
        ("serve", "Run the MCP server on stdio"),
    ):
        subparser = subparsers.add_parser(name, help=help_text)
        subparser.add_argument(
            "--no-preload",
            action="store_true",
            help="Start with an empty catalog instead of the sample data",
        )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    command = args.command or "console"
    no_preload = getattr(args, "no_preload", False)

    config = get_config()
    configure_logging(config)

    library = Library(config)
    if config.preload_sample_data and not no_preload:
        preload_sample_data(library)

    if command == "serve":
        # Imported here so the console works without loading the MCP stack
        from .server import serve

        serve(library, config)
    else:
        LibraryConsole(library).run()

    return 0


if __name__ == "__main__":
    sys.exit(main())
