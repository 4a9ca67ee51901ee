"""
Update checks for Lando.

An update record remembers the latest known release and when that knowledge
goes stale. Callers load the previous record, ask ``fetch`` whether it needs
refreshing, ``await refresh(...)`` if so and persist the result.

"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

import semver

from lando.updates.feed import GitHubReleaseFeed

if TYPE_CHECKING:
	from collections.abc import Iterable, Mapping

	from lando.updates.feed import ReleaseFeed

logger = logging.getLogger(__name__)

# Records stay fresh for 24 hours
FRESHNESS_WINDOW_MS = 86_400_000

RELEASE_PAGE = 1
RELEASE_PAGE_SIZE = 10
DEFAULT_TIMEOUT = 10.0


def now_ms() -> int:
	"""Current time as integer epoch milliseconds."""
	return int(time.time() * 1000)


def strip_version(version: str) -> str:
	"""Drop any leading ``v`` from a version tag."""
	return version.lstrip("v")


@dataclass
class UpdateRecord:
	"""Latest known release and the time this knowledge expires."""

	version: str
	url: str = ""
	expires: int = 0

	@classmethod
	def build(cls, version: str, url: str = "", now: int | None = None) -> UpdateRecord:
		"""Create a record expiring one freshness window after ``now``."""
		now = now_ms() if now is None else now
		return cls(version=strip_version(version), url=url, expires=now + FRESHNESS_WINDOW_MS)

	@classmethod
	def from_dict(cls, data: Mapping[str, Any]) -> UpdateRecord:
		"""
		Create a record from its persisted form.

		Raises:
		    KeyError: If ``version`` or ``expires`` is missing
		    ValueError: If ``expires`` is not a number

		"""
		return cls(version=str(data["version"]), url=str(data.get("url") or ""), expires=int(data["expires"]))

	def to_dict(self) -> dict[str, Any]:
		"""Return the persisted form of the record."""
		return asdict(self)


def update_available(current_version: str, candidate_version: str) -> bool:
	"""
	Check whether ``candidate_version`` is newer than ``current_version``.

	Versions follow semantic versioning, so pre-release labels rank below the
	release and build metadata is ignored.

	Args:
	    current_version: Version of the running tool
	    candidate_version: Latest known release version

	Returns:
	    True if the candidate is strictly newer, False otherwise or if either
	    version cannot be parsed

	"""
	try:
		current = semver.Version.parse(strip_version(current_version))
		return current.compare(strip_version(candidate_version)) < 0
	except (TypeError, ValueError):
		logger.debug("Could not compare versions %r and %r", current_version, candidate_version)
		return False


def fetch(record: UpdateRecord | Mapping[str, Any] | None = None, now: int | None = None) -> bool:
	"""
	Decide whether the cached update record needs refreshing.

	Args:
	    record: Previously cached record, if any
	    now: Current epoch milliseconds (read once when omitted)

	Returns:
	    True when there is no record or it has expired

	"""
	if not record:
		return True

	now = now_ms() if now is None else now
	expires = record.expires if isinstance(record, UpdateRecord) else record.get("expires")
	try:
		return now >= int(expires)
	except (TypeError, ValueError):
		logger.debug("Update record has an unreadable expiry: %r", expires)
		return True


def select_release(releases: Iterable[Any]) -> dict[str, Any] | None:
	"""Return the first release that is neither a draft nor a pre-release."""
	for release in releases:
		if isinstance(release, dict) and release.get("draft") is False and release.get("prerelease") is False:
			return release
	return None


async def refresh(
	version: str,
	feed: ReleaseFeed | None = None,
	timeout: float = DEFAULT_TIMEOUT,
) -> UpdateRecord:
	"""
	Fetch the latest release and build a fresh update record.

	Never raises on feed problems: connection errors, HTTP errors, malformed
	payloads and timeouts all produce a record for ``version`` itself with an
	empty url.

	Args:
	    version: Version of the running tool
	    feed: Release feed to query (defaults to GitHub)
	    timeout: Overall time allowed for the feed call, in seconds

	Returns:
	    The refreshed update record

	"""
	feed = feed or GitHubReleaseFeed()

	try:
		releases = await asyncio.wait_for(
			asyncio.to_thread(feed.list_releases, RELEASE_PAGE, RELEASE_PAGE_SIZE),
			timeout=timeout,
		)
		release = select_release(releases)
		if release is None:
			logger.debug("No stable release found in feed, keeping %s", version)
			return UpdateRecord.build(version)

		tag = release.get("tag_name") or version
		return UpdateRecord.build(str(tag), url=str(release.get("html_url") or ""))
	except Exception as e:  # noqa: BLE001
		logger.debug("Update check failed, assuming no update: %s", e)
		return UpdateRecord.build(version)
