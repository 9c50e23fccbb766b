"""Line scanner that extracts events from an iCalendar-style feed."""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Tuple

from processor.models import Event

logger = logging.getLogger(__name__)

UID_PREFIX = 'UID:'
DESCRIPTION_PREFIX = 'DESCRIPTION:'
SUMMARY_PREFIX = 'SUMMARY:'
DTSTART_PREFIX = 'DTSTART;TZID='
DTEND_PREFIX = 'DTEND;TZID='
LOCATION_PREFIX = 'LOCATION:'
END_EVENT = 'END:VEVENT'

EMPTY_DESCRIPTION = '---'
TRUNCATION_MARKER = '...'

ESCAPES = (
    ('\\n', '\n'),
    ('\\t', '\t'),
    ('\\,', ','),
)


class ParseMode(Enum):
    NORMAL = 'normal'
    IN_DESCRIPTION = 'in_description'


class LineKind(Enum):
    SET_UID = 'set_uid'
    BEGIN_DESCRIPTION = 'begin_description'
    CONTINUE_DESCRIPTION = 'continue_description'
    SET_TITLE = 'set_title'
    SET_START = 'set_start'
    SET_END = 'set_end'
    SET_LOCATION = 'set_location'
    END_BLOCK = 'end_block'
    OTHER = 'other'


def decode_escapes(raw_line: str) -> str:
    """
    Expand the backslash escapes used inside feed values.

    Args:
        raw_line: Line as read from the feed

    Returns:
        Line with newline, tab and comma escapes replaced
    """
    for escaped, literal in ESCAPES:
        raw_line = raw_line.replace(escaped, literal)
    return raw_line


def _timestamp_after_tzid(rest: str) -> str:
    # "Europe/Berlin:20300101T090000" -> "20300101T090000"
    parts = rest.split(':')
    return parts[1] if len(parts) > 1 else ''


def classify_line(line: str, mode: ParseMode) -> Tuple[LineKind, str]:
    """
    Decide what a trimmed, decoded line does to the event being built.

    Args:
        line: Trimmed and escape-decoded feed line
        mode: Current parser mode

    Returns:
        Tuple of (line kind, payload)
    """
    if line.startswith(UID_PREFIX):
        return LineKind.SET_UID, line[len(UID_PREFIX):]
    if mode is ParseMode.IN_DESCRIPTION:
        return LineKind.CONTINUE_DESCRIPTION, line
    if line.startswith(DESCRIPTION_PREFIX):
        return LineKind.BEGIN_DESCRIPTION, line[len(DESCRIPTION_PREFIX):]
    if line.startswith(SUMMARY_PREFIX):
        return LineKind.SET_TITLE, line[len(SUMMARY_PREFIX):]
    if line.startswith(DTSTART_PREFIX):
        return LineKind.SET_START, _timestamp_after_tzid(line[len(DTSTART_PREFIX):])
    if line.startswith(DTEND_PREFIX):
        return LineKind.SET_END, _timestamp_after_tzid(line[len(DTEND_PREFIX):])
    if line.startswith(LOCATION_PREFIX):
        return LineKind.SET_LOCATION, line[len(LOCATION_PREFIX):]
    if line == END_EVENT:
        return LineKind.END_BLOCK, ''
    return LineKind.OTHER, ''


@dataclass
class ParserState:
    """Accumulator threaded through the scan."""
    mode: ParseMode = ParseMode.NORMAL
    continuation: int = 0
    working: Event = field(default_factory=Event)
    events: List[Event] = field(default_factory=list)


class IcsEventParser:
    """Single-pass parser turning feed text into Event records."""

    def __init__(self):
        self._transitions: Dict[LineKind, Callable[[ParserState, str], None]] = {
            LineKind.SET_UID: self._set_uid,
            LineKind.BEGIN_DESCRIPTION: self._begin_description,
            LineKind.CONTINUE_DESCRIPTION: self._continue_description,
            LineKind.SET_TITLE: self._field_setter('title'),
            LineKind.SET_START: self._field_setter('start_time'),
            LineKind.SET_END: self._field_setter('end_time'),
            LineKind.SET_LOCATION: self._field_setter('location'),
            LineKind.END_BLOCK: self._end_block,
            LineKind.OTHER: self._other,
        }

    def parse(self, data: str) -> List[Event]:
        """
        Parse every complete VEVENT block in the feed.

        Unknown lines are ignored and an unterminated final block is
        dropped; this method never raises on malformed content.

        Args:
            data: Full feed text

        Returns:
            List of Event objects in feed order
        """
        state = ParserState()
        for raw_line in data.split('\n'):
            line = decode_escapes(raw_line.strip())
            kind, payload = classify_line(line, state.mode)
            self._transitions[kind](state, payload)

        if state.working != Event():
            logger.debug("Discarding unterminated event block at end of feed")
        logger.debug(f"Parsed {len(state.events)} events from feed")
        return state.events

    @staticmethod
    def _field_setter(name: str) -> Callable[[ParserState, str], None]:
        def setter(state: ParserState, payload: str) -> None:
            setattr(state.working, name, payload)
        return setter

    @staticmethod
    def _set_uid(state: ParserState, payload: str) -> None:
        state.working.uid = payload
        state.mode = ParseMode.NORMAL

    @staticmethod
    def _begin_description(state: ParserState, payload: str) -> None:
        if payload.startswith('\n'):
            state.working.description = EMPTY_DESCRIPTION
        else:
            state.working.description = payload
        state.mode = ParseMode.IN_DESCRIPTION
        state.continuation = 0

    @staticmethod
    def _continue_description(state: ParserState, line: str) -> None:
        if state.continuation == 0:
            state.working.description += '\n' + line
            state.continuation = 1
            return

        # Second continuation line: stop here and mark the cut.
        description = state.working.description
        if description.endswith('\n'):
            description = description[:-1]
        state.working.description = description + TRUNCATION_MARKER
        state.continuation = 0
        state.mode = ParseMode.NORMAL

    @staticmethod
    def _end_block(state: ParserState, payload: str) -> None:
        state.events.append(state.working)
        state.working = Event()
        state.mode = ParseMode.NORMAL

    @staticmethod
    def _other(state: ParserState, payload: str) -> None:
        state.mode = ParseMode.NORMAL
