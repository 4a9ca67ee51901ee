"""Persistence for the cached update record."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import platformdirs

from lando.updates.checker import UpdateRecord

logger = logging.getLogger(__name__)

APP_NAME = "lando"
CACHE_FILENAME = "updates.json"


def default_cache_path() -> Path:
	"""Location of the update record in the user cache directory."""
	return Path(platformdirs.user_cache_dir(APP_NAME, APP_NAME)) / CACHE_FILENAME


def load_record(path: Path | None = None) -> UpdateRecord | None:
	"""
	Load the cached update record.

	A missing or unreadable cache is treated as no record, which makes the
	next check fetch again.

	Args:
	    path: Cache file (defaults to ``default_cache_path()``)

	Returns:
	    The cached record, or None

	"""
	path = path or default_cache_path()
	if not path.exists():
		return None

	try:
		with path.open(encoding="utf-8") as f:
			return UpdateRecord.from_dict(json.load(f))
	except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
		logger.debug("Ignoring unreadable update cache %s: %s", path, e)
		return None


def save_record(record: UpdateRecord, path: Path | None = None) -> Path:
	"""
	Write the update record to the cache.

	Args:
	    record: Record to persist
	    path: Cache file (defaults to ``default_cache_path()``)

	Returns:
	    The path written to

	"""
	path = path or default_cache_path()
	path.parent.mkdir(parents=True, exist_ok=True)
	with path.open("w", encoding="utf-8") as f:
		json.dump(record.to_dict(), f)
	logger.debug("Saved update record to %s", path)
	return path
