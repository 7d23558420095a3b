from __future__ import annotations

import enum
import re
from dataclasses import dataclass, fields
from typing import Dict, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, Tag
from loguru import logger

from .errors import MalformedRowError


HEADER_ROW_CLASS = "fxst-dateRow"
EVENT_ROW_CLASS = "fxit-eventrow"
# lxml adds no implied tbody, so bare table rows are read too.
ROW_SELECTOR = "tbody tr, table > tr"

DIGITS_RE = re.compile(r"[0-9]+")

# field name -> cell class under an event row
CELL_CLASSES: Dict[str, str] = {
	"time": "fxst-td-time",
	"country": "fxst-flag",
	"currency": "fxst-td-currency",
	"title": "fxst-td-event",
	"volatility": "fxst-td-vol",
	"actual": "fxst-td-act",
	"consensus": "fxst-td-cons",
	"previous": "fxst-td-prev",
	"revised": "fxst-td-revised",
}
# The widget is not asked for a revised column, so it is usually absent.
OPTIONAL_CELLS = {"revised"}
COUNTRY_ATTR = "title"


@dataclass
class CalendarEvent:
	month: str
	day: str
	time: str
	country: str
	currency: str
	title: str
	volatility: str
	actual: str
	consensus: str
	previous: str
	revised: str


EVENT_FIELDS = [f.name for f in fields(CalendarEvent)]


@dataclass
class ExtractionResult:
	events: List[CalendarEvent]
	rejected_rows: int = 0


class RowKind(enum.Enum):
	HEADER = "header"
	EVENT = "event"
	IGNORED = "ignored"


def _clean(text: Optional[str]) -> str:
	return (text or "").strip()


def classify_row(tr: Tag) -> RowKind:
	classes = tr.get("class") or []
	if HEADER_ROW_CLASS in classes:
		return RowKind.HEADER
	if EVENT_ROW_CLASS in classes:
		return RowKind.EVENT
	return RowKind.IGNORED


def _find_cell(tr: Tag, class_name: str) -> Optional[Tag]:
	return tr.find(class_=class_name)


def parse_date_header(tr: Tag) -> Tuple[str, str]:
	"""Return (month, day) from a date header row.

	The first two digit runs of the row text are taken positionally, so a
	header like ``10月21日 星期一`` yields ``("10", "21")``.
	"""
	segments = DIGITS_RE.findall(tr.get_text(" "))
	if len(segments) < 2:
		raise MalformedRowError(f"date header has {len(segments)} digit group(s): {_clean(tr.get_text(' '))!r}")
	return segments[0], segments[1]


def _country_of(cell: Tag) -> str:
	label = cell.get(COUNTRY_ATTR)
	if label:
		return _clean(label)
	return _clean(cell.get_text())


def parse_event_row(tr: Tag, month: str, day: str) -> CalendarEvent:
	values: Dict[str, str] = {"month": month, "day": day}
	missing: List[str] = []
	for name, class_name in CELL_CLASSES.items():
		cell = _find_cell(tr, class_name)
		if cell is None:
			if name not in OPTIONAL_CELLS:
				missing.append(name)
			values[name] = ""
			continue
		values[name] = _country_of(cell) if name == "country" else _clean(cell.get_text())
	if missing:
		raise MalformedRowError(f"event row missing {', '.join(missing)}")
	return CalendarEvent(**values)


def extract_calendar(doc: Union[BeautifulSoup, Tag, str]) -> ExtractionResult:
	if isinstance(doc, str):
		doc = BeautifulSoup(doc, "lxml")
	events: List[CalendarEvent] = []
	rejected = 0
	context: Optional[Tuple[str, str]] = None
	for index, tr in enumerate(doc.select(ROW_SELECTOR)):
		kind = classify_row(tr)
		if kind is RowKind.HEADER:
			try:
				context = parse_date_header(tr)
			except MalformedRowError as exc:
				# Later events must not inherit the previous day.
				context = None
				rejected += 1
				logger.warning("row {}: skipping header: {}", index, exc)
		elif kind is RowKind.EVENT:
			if context is None:
				rejected += 1
				logger.warning("row {}: skipping event without a date header", index)
				continue
			try:
				events.append(parse_event_row(tr, *context))
			except MalformedRowError as exc:
				rejected += 1
				logger.warning("row {}: skipping event: {}", index, exc)
	return ExtractionResult(events=events, rejected_rows=rejected)


def parse_calendar(doc: Union[BeautifulSoup, Tag, str]) -> List[CalendarEvent]:
	return extract_calendar(doc).events
