from __future__ import annotations


class FetchError(Exception):
	"""The widget document could not be obtained or parsed."""


class MalformedRowError(Exception):
	"""A table row does not have the shape its role requires."""


class ConfigError(Exception):
	"""The configuration file exists but cannot be used."""


class CacheUnavailableError(Exception):
	"""The cache could not be reached at startup."""
