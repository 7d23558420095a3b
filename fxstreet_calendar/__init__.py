"""FXStreet economic calendar poller.

Focus: turning the calendar widget's date/event table rows into flat records
and publishing them to Redis as one JSON snapshot.

Public surface stays small: the parser, the sources and one poll cycle.
"""

from .fetch import FileSource, WidgetSource
from .parse_calendar import CalendarEvent, parse_calendar
from .service import run_cycle

__all__ = [
	"CalendarEvent",
	"FileSource",
	"WidgetSource",
	"parse_calendar",
	"run_cycle",
]
