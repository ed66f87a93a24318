"""
Command line entry point: parse an Atom feed file and print it as JSON.

    python -m atomfeed feed.xml
    curl -s https://example.com/feed.atom | python -m atomfeed -
"""
import argparse
import json
import sys
from typing import List, Optional

import structlog

from .config import LogFormat, LogLevel, Settings, get_settings
from .feed_parser import FeedParsingError, parse_atom_feed
from .logging_config import LoggingConfig

logger = structlog.get_logger(__name__)


def build_arg_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=settings.app_name,
        description="Parse an Atom feed into sanitized JSON."
    )
    parser.add_argument("path", help="Feed file to parse, or '-' for stdin")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=[level.value for level in LogLevel],
        default=None,
        help="Override the configured log level"
    )
    parser.add_argument(
        "--log-format",
        choices=[log_format.value for log_format in LogFormat],
        default=None,
        help="Override the configured log format"
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {settings.app_version}"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    args = build_arg_parser(settings).parse_args(argv)

    LoggingConfig.setup_logging(
        level=args.log_level or settings.logging.log_level.value,
        format_type=args.log_format or settings.logging.log_format
    )

    if args.path == "-":
        xml_content = sys.stdin.buffer.read()
    else:
        with open(args.path, "rb") as fh:
            xml_content = fh.read()

    try:
        feed = parse_atom_feed(xml_content)
    except FeedParsingError as e:
        logger.error("Feed parsing failed", path=args.path, error=str(e))
        return 1

    json.dump(feed.to_dict(), sys.stdout, indent=args.indent, default=str)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
