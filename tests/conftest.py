"""Shared fixtures for the calendar tests."""

from pathlib import Path
from typing import List

import pytest
from bs4 import BeautifulSoup
from loguru import logger

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def widget_path() -> Path:
	return FIXTURES / "calendar_widget.html"


@pytest.fixture
def widget_html(widget_path) -> str:
	return widget_path.read_text(encoding="utf-8")


@pytest.fixture
def log_records():
	"""Collect loguru records emitted during the test as (level, message)."""
	records: List[tuple] = []
	sink_id = logger.add(lambda msg: records.append((msg.record["level"].name, msg.record["message"])), level="DEBUG")
	yield records
	logger.remove(sink_id)


def _header_row(text: str) -> str:
	return f'<tr class="fxst-dateRow"><td colspan="8">{text}</td></tr>'


def _event_row(*, time="08:30", country="United States", currency="USD", title="Non-Farm Payrolls", vol="***",
		actual="", consensus="", previous="", revised=None, skip=()) -> str:
	cells = {
		"time": f'<td class="fxst-td-time">{time}</td>',
		"country": f'<td><span class="fxst-flag" title="{country}"></span></td>',
		"currency": f'<td class="fxst-td-currency">{currency}</td>',
		"title": f'<td class="fxst-td-event">{title}</td>',
		"volatility": f'<td class="fxst-td-vol">{vol}</td>',
		"actual": f'<td class="fxst-td-act">{actual}</td>',
		"consensus": f'<td class="fxst-td-cons">{consensus}</td>',
		"previous": f'<td class="fxst-td-prev">{previous}</td>',
	}
	if revised is not None:
		cells["revised"] = f'<td class="fxst-td-revised">{revised}</td>'
	body = "".join(html for name, html in cells.items() if name not in skip)
	return f'<tr class="fxit-eventrow">{body}</tr>'


def _table(*rows: str) -> BeautifulSoup:
	return BeautifulSoup(f"<table><tbody>{''.join(rows)}</tbody></table>", "lxml")


@pytest.fixture
def header_row():
	return _header_row


@pytest.fixture
def event_row():
	return _event_row


@pytest.fixture
def table():
	return _table


@pytest.fixture
def row(table):
	"""Build a single parsed <tr> from its markup."""
	return lambda html: table(html).select_one("tr")
