"""Shared fixtures for feed parsing tests."""
import logging
from datetime import datetime

import pytest

from processor.models import Event


STANDUP_FEED = """BEGIN:VCALENDAR
BEGIN:VEVENT
UID:1
SUMMARY:Standup
DTSTART;TZID=X:20300101T090000
DTEND;TZID=X:20300101T093000
LOCATION:Room A
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def standup_feed():
    """Minimal single-event feed."""
    return STANDUP_FEED


@pytest.fixture
def now():
    """Fixed reference time."""
    return datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def sample_events():
    """Events with end times in the future, past and future."""
    return [
        Event(uid='a', title='Future One', start_time='20990101T100000', end_time='20990101T110000'),
        Event(uid='b', title='Past', start_time='20010101T100000', end_time='20010101T110000'),
        Event(uid='c', title='Future Two', start_time='20990102T100000', end_time='20990102T110000'),
    ]


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler changes made by setup_logging."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
