"""Data models for calendar feed events."""
from dataclasses import dataclass, field
from typing import List


@dataclass
class Event:
    """One VEVENT block extracted from a calendar feed."""
    uid: str = ''
    title: str = ''
    description: str = ''
    start_time: str = ''
    end_time: str = ''
    location: str = ''


@dataclass
class UpcomingSelection:
    """Events chosen for display."""
    events: List[Event] = field(default_factory=list)
    shown: int = 0
    limit: int = 0

    @property
    def is_empty(self) -> bool:
        return self.shown == 0

    @property
    def is_partial(self) -> bool:
        return self.shown < self.limit
