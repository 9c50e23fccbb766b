"""Selection of events that have not ended yet."""
import logging
from datetime import datetime
from typing import List

from processor.models import Event, UpcomingSelection

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y%m%dT%H%M%S'


def parse_timestamp(value: str) -> datetime:
    """
    Parse a feed timestamp such as 20300101T090000.

    Args:
        value: Raw timestamp string

    Returns:
        Naive datetime, or datetime.min when the value cannot be parsed
    """
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        return datetime.min


def select_upcoming(events: List[Event], now: datetime, limit: int) -> UpcomingSelection:
    """
    Pick the first events in feed order that end after now.

    Args:
        events: Parsed events in feed order
        now: Reference time
        limit: Maximum number of events to select

    Returns:
        UpcomingSelection with at most limit events
    """
    selected = []
    for event in events:
        if len(selected) >= limit:
            break
        end_time = parse_timestamp(event.end_time)
        if end_time <= now:
            logger.debug(f"Skipping ended event '{event.title}' ({event.end_time!r})")
            continue
        selected.append(event)

    logger.info(f"Selected {len(selected)} upcoming events out of {len(events)}")
    return UpcomingSelection(events=selected, shown=len(selected), limit=limit)
