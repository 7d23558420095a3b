from __future__ import annotations

import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

import requests
from bs4 import BeautifulSoup
from loguru import logger

from .config import Settings
from .errors import FetchError


WIDGET_URL = "https://calendar.fxstreet.com/EventDateWidget/GetMini"
DEFAULT_ROWS = 50
DEFAULT_TIMEOUT = 5.0
DEFAULT_FIXTURE_PATH = "data.html"

DEFAULT_HEADERS = {
	"User-Agent": (
		"Mozilla/5.0 (Macintosh; Intel Mac OS X 10_12_6) "
		"AppleWebKit/537.36 (KHTML, like Gecko) "
		"Chrome/70.0.3538.110 Safari/537.36"
	),
}

WIDGET_PARAMS = {
	"culture": "zh-CN",
	"rows": str(DEFAULT_ROWS),
	"pastevents": "5",
	"hoursbefore": "20",
	"timezone": "China Standard Time",
	"columns": "date,time,country,event,consensus,previous,volatility,actual,countrycurrency",
	"countrycode": "AU,CA,JP,EMU,NZ,CH,UK,US",
	"isfree": "true",
}


def widget_params(rows: int = DEFAULT_ROWS) -> Dict[str, str]:
	return {**WIDGET_PARAMS, "rows": str(rows)}


def fetch_html(url: str, *, params: Optional[dict] = None, timeout: float = DEFAULT_TIMEOUT, max_retries: int = 0, backoff: float = 1.5, headers: Optional[dict] = None) -> str:
	"""Fetch an HTML page, optionally retrying transient failures.

	Parameters
	----------
	url: str
		URL to retrieve.
	params: Optional[dict]
		Query string parameters.
	timeout: float
		Request timeout in seconds.
	max_retries: int
		Retry attempts after the first failure. The poller relies on its own
		interval instead, so this defaults to zero.
	backoff: float
		Exponential backoff multiplier between retries.
	headers: Optional[dict]
		Additional headers to merge with defaults.

	Returns
	-------
	str
		Response text.

	Raises
	------
	requests.RequestException
		On transport errors and non-2xx statuses once retries are spent.
	"""
	merged_headers = {**DEFAULT_HEADERS, **(headers or {})}

	def _get() -> str:
		resp = requests.get(url, params=params, headers=merged_headers, timeout=timeout)
		resp.raise_for_status()
		return resp.text

	for attempt in range(max_retries):
		try:
			return _get()
		except requests.RequestException:
			time.sleep(backoff ** attempt)
	# Final attempt lets the error propagate.
	return _get()


def parse_document(html: Union[str, bytes]) -> BeautifulSoup:
	if isinstance(html, bytes):
		html = html.decode("utf-8", errors="replace")
	if not html.strip():
		raise FetchError("empty document")
	try:
		return BeautifulSoup(html, "lxml")
	except Exception as exc:  # noqa: BLE001 - parser internals vary
		raise FetchError(f"unparseable document: {exc}") from exc


class DocumentSource(ABC):
	"""One place to obtain the widget markup from.

	Subclasses implement ``load``, raising ``FetchError`` on failure;
	``fetch_document`` logs it and returns None so a failed fetch only costs
	the current cycle.
	"""

	@abstractmethod
	def load(self) -> BeautifulSoup:
		"""Return the parsed widget document or raise ``FetchError``."""

	def fetch_document(self) -> Optional[BeautifulSoup]:
		try:
			return self.load()
		except FetchError as exc:
			logger.error("fetch failed: {}", exc)
			return None


class WidgetSource(DocumentSource):
	"""Live calendar widget over HTTP."""

	def __init__(self, *, url: str = WIDGET_URL, rows: int = DEFAULT_ROWS, timeout: float = DEFAULT_TIMEOUT, headers: Optional[dict] = None) -> None:
		self.url = url
		self.params = widget_params(rows)
		self.timeout = timeout
		self.headers = headers

	def __repr__(self) -> str:
		return f"WidgetSource(url={self.url!r}, rows={self.params['rows']})"

	def load(self) -> BeautifulSoup:
		try:
			html = fetch_html(self.url, params=self.params, timeout=self.timeout, headers=self.headers)
		except requests.HTTPError as exc:
			status = exc.response.status_code if exc.response is not None else "?"
			raise FetchError(f"widget returned HTTP {status}") from exc
		except requests.RequestException as exc:
			raise FetchError(f"widget request failed: {exc}") from exc
		return parse_document(html)


class FileSource(DocumentSource):
	"""Saved copy of the widget markup, for offline replay."""

	def __init__(self, path: Union[str, Path] = DEFAULT_FIXTURE_PATH) -> None:
		self.path = Path(path)

	def __repr__(self) -> str:
		return f"FileSource(path={str(self.path)!r})"

	def load(self) -> BeautifulSoup:
		try:
			raw = self.path.read_bytes()
		except OSError as exc:
			raise FetchError(f"cannot read {self.path}: {exc}") from exc
		return parse_document(raw)


def build_source(settings: Settings) -> DocumentSource:
	if settings.source == "file":
		return FileSource(settings.fixture_path)
	return WidgetSource(rows=settings.rows)
