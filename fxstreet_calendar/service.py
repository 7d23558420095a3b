from __future__ import annotations

import time
from typing import Callable, Optional

import redis
from loguru import logger

from .config import Settings
from .fetch import DocumentSource
from .parse_calendar import extract_calendar
from .publish import CALENDAR_KEY, publish_events


def run_cycle(source: DocumentSource, client: redis.Redis, key: str = CALENDAR_KEY) -> bool:
	"""Fetch, extract and publish one snapshot.

	Logs a single line per call and returns True when the cache was written.
	Nothing here raises for fetch, parse or cache problems; the next cycle
	simply tries again.
	"""
	doc = source.fetch_document()
	if doc is None:
		# The source already logged the reason.
		return False

	result = extract_calendar(doc)
	if not result.events and result.rejected_rows:
		logger.error("no usable rows ({} rejected); keeping previous snapshot", result.rejected_rows)
		return False

	try:
		publish_events(client, result.events, key=key)
	except (TypeError, ValueError) as exc:
		logger.error("serialization failed: {}", exc)
		return False
	except redis.RedisError as exc:
		logger.error("cache write failed: {}", exc)
		return False

	logger.info("OK ({} events, {} rows skipped)", len(result.events), result.rejected_rows)
	return True


def run_forever(settings: Settings, source: DocumentSource, client: redis.Redis, *, sleep: Callable[[float], None] = time.sleep, max_cycles: Optional[int] = None) -> int:
	"""Poll until interrupted; ``max_cycles`` bounds the loop for tests."""
	logger.info("polling {} every {}s into {}", source, settings.interval_seconds, settings.cache_key)
	cycles = 0
	while max_cycles is None or cycles < max_cycles:
		try:
			run_cycle(source, client, key=settings.cache_key)
		except Exception:
			logger.exception("cycle failed unexpectedly")
		cycles += 1
		if max_cycles is not None and cycles >= max_cycles:
			break
		sleep(settings.interval_seconds)
	return cycles
