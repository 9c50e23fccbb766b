"""Terminal table output for upcoming events."""
from dataclasses import dataclass, field
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

from processor.models import UpcomingSelection

COLUMNS = (
    # header, width, justify
    ('TITLE', 20, 'left'),
    ('DESCRIPTION', 40, 'left'),
    ('START TIME', 15, 'center'),
    ('END TIME', 15, 'center'),
    ('LOCATION', 20, 'left'),
)


@dataclass
class TableStyle:
    """Styling injected into the renderer."""
    header: Style = field(default_factory=lambda: Style(bold=True))
    odd_row: Style = field(default_factory=lambda: Style(color='color(245)', bgcolor='color(236)'))
    even_row: Style = field(default_factory=lambda: Style(color='color(241)'))
    border: box.Box = field(default_factory=lambda: box.SQUARE)
    color: bool = True

    @classmethod
    def plain(cls) -> 'TableStyle':
        return cls(header=Style(bold=True), odd_row=Style(), even_row=Style(), color=False)


def format_timestamp(value: str) -> str:
    """Render 20300101T090000 as '01.01 09:00'."""
    if len(value) < 13:
        return value
    return f"{value[6:8]}.{value[4:6]} {value[9:11]}:{value[11:13]}"


class TableRenderer:
    """Renders an UpcomingSelection as a striped table."""

    def __init__(self, style: Optional[TableStyle] = None, console: Optional[Console] = None):
        self.style = style or TableStyle()
        self.console = console or Console(no_color=not self.style.color, highlight=False)

    def build_table(self, selection: UpcomingSelection) -> Table:
        table = Table(
            box=self.style.border,
            header_style=self.style.header,
            row_styles=[self.style.odd_row, self.style.even_row],
            show_lines=True,
            padding=(1, 1),
        )
        for header, width, justify in COLUMNS:
            table.add_column(header, width=width, justify=justify, overflow='fold')

        for event in selection.events:
            table.add_row(
                Text(event.title),
                Text(event.description),
                format_timestamp(event.start_time),
                format_timestamp(event.end_time),
                Text(event.location),
            )
        return table

    def summary_lines(self, selection: UpcomingSelection) -> List[str]:
        if selection.is_empty:
            return ["No upcoming events"]
        if selection.is_partial:
            return [f"Only {selection.shown} events available"]
        return []

    def render(self, selection: UpcomingSelection) -> None:
        self.console.print(self.build_table(selection))
        for line in self.summary_lines(selection):
            self.console.print(line)
