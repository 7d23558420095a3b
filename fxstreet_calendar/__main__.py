from __future__ import annotations

import sys

from loguru import logger

from .config import load_settings
from .errors import CacheUnavailableError, ConfigError
from .fetch import build_source
from .publish import connect_cache
from .service import run_forever


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} [{level}] {name}: {message}"


def configure_logging(level: str = "INFO") -> None:
	logger.remove()
	logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)


def main() -> int:
	configure_logging()
	try:
		settings = load_settings()
		configure_logging(settings.log_level)
		client = connect_cache(settings)
	except (ConfigError, CacheUnavailableError) as exc:
		logger.error("startup failed: {}", exc)
		return 1

	source = build_source(settings)
	try:
		run_forever(settings, source, client)
	except KeyboardInterrupt:
		logger.info("interrupted, exiting")
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
