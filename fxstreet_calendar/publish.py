from __future__ import annotations

import json
from dataclasses import asdict
from typing import Iterable, Tuple

import redis
from loguru import logger

from .config import Settings
from .errors import CacheUnavailableError
from .parse_calendar import CalendarEvent


CALENDAR_KEY = "forex:calendar"
DEFAULT_PORT = 6379
SOCKET_TIMEOUT = 5


def serialize_events(events: Iterable[CalendarEvent]) -> str:
	# ensure_ascii off: the widget is requested in zh-CN.
	return json.dumps([asdict(e) for e in events], ensure_ascii=False, separators=(",", ":"))


def publish_events(client: redis.Redis, events: Iterable[CalendarEvent], key: str = CALENDAR_KEY) -> int:
	"""Overwrite ``key`` with the JSON snapshot of ``events``, without expiry.

	Returns the payload size in bytes. Redis errors propagate.
	"""
	payload = serialize_events(events)
	client.set(key, payload)
	return len(payload.encode("utf-8"))


def split_address(address: str) -> Tuple[str, int]:
	host, sep, port = address.rpartition(":")
	if not sep:
		return address, DEFAULT_PORT
	try:
		return host or "localhost", int(port)
	except ValueError as exc:
		raise CacheUnavailableError(f"invalid cache address {address!r}") from exc


def connect_cache(settings: Settings) -> redis.Redis:
	host, port = split_address(settings.cache_address)
	client = redis.Redis(
		host=host,
		port=port,
		db=settings.cache_db,
		socket_timeout=SOCKET_TIMEOUT,
		socket_connect_timeout=SOCKET_TIMEOUT,
	)
	try:
		client.ping()
	except redis.RedisError as exc:
		raise CacheUnavailableError(f"cannot reach cache at {settings.cache_address} db {settings.cache_db}: {exc}") from exc
	logger.info("connected to cache at {}:{} db {}", host, port, settings.cache_db)
	return client
