"""Release feeds queried by the update checker."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from lando import __version__

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_OWNER = "lando"
GITHUB_REPO = "lando"


class ReleaseFeed(Protocol):
	"""Anything that can list a project's releases, newest first."""

	def list_releases(self, page: int, per_page: int) -> list[dict[str, Any]]:
		"""Return one page of release records."""
		...


class GitHubReleaseFeed:
	"""Lists releases through the GitHub REST API."""

	def __init__(
		self,
		owner: str = GITHUB_OWNER,
		repo: str = GITHUB_REPO,
		timeout: float = 5,
		session: requests.Session | None = None,
	) -> None:
		self.owner = owner
		self.repo = repo
		self.timeout = timeout
		self.session = session or requests.Session()

	@property
	def url(self) -> str:
		"""Release listing endpoint for the configured repository."""
		return f"{GITHUB_API_URL}/repos/{self.owner}/{self.repo}/releases"

	def list_releases(self, page: int, per_page: int) -> list[dict[str, Any]]:
		"""
		Fetch one page of releases.

		Args:
		    page: Page index, starting at 1
		    per_page: Number of releases per page

		Returns:
		    Release records as returned by GitHub

		Raises:
		    requests.RequestException: On connection problems or HTTP errors
		    ValueError: If the response is not a JSON list

		"""
		logger.debug("Fetching releases from %s (page=%d, per_page=%d)", self.url, page, per_page)
		response = self.session.get(
			self.url,
			params={"page": page, "per_page": per_page},
			headers={
				"Accept": "application/vnd.github+json",
				"User-Agent": f"Lando-Update-Check/{__version__}",
			},
			timeout=self.timeout,
		)
		response.raise_for_status()

		data = response.json()
		if not isinstance(data, list):
			msg = f"Expected a list of releases, got {type(data).__name__}"
			raise ValueError(msg)
		return data
