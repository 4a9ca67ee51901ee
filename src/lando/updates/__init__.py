"""Update checks for Lando."""

from lando.updates.checker import (
	FRESHNESS_WINDOW_MS,
	UpdateRecord,
	fetch,
	refresh,
	update_available,
)

__all__ = ["FRESHNESS_WINDOW_MS", "UpdateRecord", "fetch", "refresh", "update_available"]
