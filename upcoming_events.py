"""Command line entry point for listing upcoming calendar events."""
import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import List, Mapping, Optional

import requests

from display.table_renderer import TableRenderer, TableStyle
from feed.feed_loader import FeedLoader
from processor.ics_parser import IcsEventParser
from processor.upcoming_filter import select_upcoming

DEFAULT_LIMIT = 5
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_LOG_LEVEL = 'WARNING'

EXIT_OK = 0
EXIT_RETRIEVAL_ERROR = 1
EXIT_USAGE = 2


class JsonFormatter(logging.Formatter):
    """One JSON object per log line on stderr."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
        }
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(log_level: str = DEFAULT_LOG_LEVEL) -> None:
    """Route all logging through a single JSON handler on stderr."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))


@dataclass
class AppConfig:
    """Resolved runtime configuration."""
    url: Optional[str] = None
    file: Optional[str] = None
    limit: int = DEFAULT_LIMIT
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL
    color: bool = True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='upcoming-events',
        description='Show the next upcoming events from an iCalendar feed',
    )
    parser.add_argument('--url', help='URL to download the events')
    parser.add_argument('--file', help='File to read the events from')
    parser.add_argument('--limit', type=int, help='Number of events to display')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')
    parser.add_argument('--log-level', help='Logging level (DEBUG, INFO, WARNING, ERROR)')
    return parser


def load_config(args: argparse.Namespace, environ: Mapping[str, str] = os.environ) -> AppConfig:
    """
    Merge command line arguments over environment variables.

    Args:
        args: Parsed command line arguments
        environ: Environment mapping (default: os.environ)

    Returns:
        AppConfig with every value resolved
    """
    limit = args.limit
    if limit is None:
        limit = int(environ.get('EVENT_LIMIT', DEFAULT_LIMIT))

    return AppConfig(
        url=args.url or environ.get('ICS_URL') or None,
        file=args.file or environ.get('ICS_FILE') or None,
        limit=limit,
        timeout_seconds=int(environ.get('TIMEOUT_SECONDS', DEFAULT_TIMEOUT_SECONDS)),
        log_level=args.log_level or environ.get('LOG_LEVEL', DEFAULT_LOG_LEVEL),
        color=not (args.no_color or environ.get('NO_COLOR')),
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Fetch a feed, parse it and print the upcoming events.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(config.log_level)
    logger = logging.getLogger(__name__)

    if bool(config.url) == bool(config.file):
        print("Please provide either a URL or a file", file=sys.stderr)
        return EXIT_USAGE

    loader = FeedLoader(timeout=config.timeout_seconds)
    try:
        data = loader.load(url=config.url, path=config.file)
    except requests.RequestException as e:
        logger.error(
            f"Failed to download feed: {e}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        print(f"Failed to download the events: {e}", file=sys.stderr)
        return EXIT_RETRIEVAL_ERROR
    except OSError as e:
        logger.error(f"Failed to read feed file: {e}", exc_info=True)
        print(f"Failed to read the file: {e}", file=sys.stderr)
        return EXIT_RETRIEVAL_ERROR

    events = IcsEventParser().parse(data)
    logger.info(f"Parsed {len(events)} events")

    selection = select_upcoming(events, datetime.now(), config.limit)

    style = TableStyle() if config.color else TableStyle.plain()
    TableRenderer(style=style).render(selection)
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
