"""
Helpers for working with the process environment.

Every function here takes the environment mapping explicitly. When it is
omitted, ``os.environ`` is used, so the startup sequence can pass in its own
mapping and tests never touch the real environment.

"""

from __future__ import annotations

import logging
import os
import re
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from collections.abc import Mapping, MutableMapping

logger = logging.getLogger(__name__)

WINDOWS_PLATFORM = "win32"

# Upper-case runs, capitalized words, lower-case words and digit runs
_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def _resolve_env(env: MutableMapping[str, str] | None) -> MutableMapping[str, str]:
	return os.environ if env is None else env


def camel_case(text: str) -> str:
	"""
	Convert a string to camelCase.

	``LOG_LEVEL`` becomes ``logLevel``, ``plugin-dirs`` becomes ``pluginDirs``
	and ``HTTPServer`` becomes ``httpServer``.

	Args:
	    text: The string to convert

	Returns:
	    The camelCased string, empty if ``text`` holds no words

	"""
	words = _WORD_PATTERN.findall(text)
	if not words:
		return ""
	return words[0].lower() + "".join(word.capitalize() for word in words[1:])


def path_variable_name(platform: str | None = None) -> str:
	"""Name of the executable search path variable for the given platform."""
	platform = platform or sys.platform
	return "Path" if platform == WINDOWS_PLATFORM else "PATH"


def path_separator(platform: str | None = None) -> str:
	"""Separator between entries of the search path for the given platform."""
	platform = platform or sys.platform
	return ";" if platform == WINDOWS_PLATFORM else ":"


def update_path(
	directory: str,
	env: MutableMapping[str, str] | None = None,
	platform: str | None = None,
) -> str:
	"""
	Prepend a directory to the executable search path.

	The variable name and the entry separator both follow ``platform``.

	Nothing changes if the path already begins with ``directory``, so repeated
	calls leave a single entry at the front.

	Args:
	    directory: Directory to put first on the path
	    env: Environment mapping to update (defaults to ``os.environ``)
	    platform: Platform identifier used to pick the variable name and separator

	Returns:
	    The resulting search path value

	"""
	env = _resolve_env(env)
	name = path_variable_name(platform)
	current = env.get(name, "")

	if not current.startswith(directory):
		env[name] = path_separator(platform).join([directory, current]) if current else directory
		logger.debug("Prepended %s to %s", directory, name)

	return env[name]


def strip_env(prefix: str, env: MutableMapping[str, str] | None = None) -> MutableMapping[str, str]:
	"""
	Remove every variable whose name contains ``prefix``.

	The match is a substring match, not an anchored prefix match.

	Args:
	    prefix: Marker to look for in variable names
	    env: Environment mapping to update (defaults to ``os.environ``)

	Returns:
	    The updated environment mapping

	"""
	env = _resolve_env(env)
	for key in [key for key in env if prefix in key]:
		del env[key]
	return env


def environment_snapshot(env: Mapping[str, str] | None = None) -> dict[str, str]:
	"""Return a plain dict copy of the environment."""
	return dict(os.environ if env is None else env)
