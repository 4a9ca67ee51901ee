"""
Configuration loader for Lando.

Configuration is resolved once at startup from three sources, each merged on
top of the previous one:

1. the built-in defaults
2. YAML configuration files, in order
3. environment variables containing the ``LANDO_`` marker

Lists present in two sources are unioned rather than replaced, the way Docker
Compose combines its files.

"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar, cast

import yaml

from lando.config.defaults import build_defaults
from lando.utils.env_utils import camel_case

if TYPE_CHECKING:
	from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENV_PREFIX = "LANDO_"


class ConfigError(Exception):
	"""Exception raised for configuration errors."""

	def __init__(self, message: str, path: Path | str | None = None) -> None:
		super().__init__(message)
		self.path = str(path) if path is not None else None


def _same(a: Any, b: Any) -> bool:
	# 1 and True are different list entries
	return type(a) is type(b) and a == b


def _union(first: list[Any], second: list[Any]) -> list[Any]:
	"""Concatenate two lists dropping repeats, first occurrence keeps its place."""
	result: list[Any] = []
	for item in [*first, *second]:
		if not any(_same(item, seen) for seen in result):
			result.append(copy.deepcopy(item))
	return result


def merge(base: Mapping[str, Any] | None, overlay: Mapping[str, Any] | None) -> dict[str, Any]:
	"""
	Deep merge ``overlay`` onto ``base``.

	Two lists under the same key are unioned, two mappings are merged
	recursively and in every other case the overlay value wins. Neither input
	is modified.

	Args:
	    base: Configuration to merge onto
	    overlay: Configuration taking precedence

	Returns:
	    A new merged configuration

	"""
	result: dict[str, Any] = copy.deepcopy(dict(base or {}))

	for key, value in (overlay or {}).items():
		if key in result:
			current = result[key]
			if isinstance(current, list) and isinstance(value, list):
				result[key] = _union(current, value)
				continue
			if isinstance(current, dict) and isinstance(value, dict):
				result[key] = merge(current, value)
				continue
		result[key] = copy.deepcopy(value)

	return result


def _read_yaml(path: Path) -> dict[str, Any]:
	try:
		with path.open(encoding="utf-8") as f:
			data = yaml.safe_load(f)
	except (OSError, yaml.YAMLError) as e:
		error_msg = f"Error loading configuration from {path}: {e}"
		logger.debug(error_msg)
		raise ConfigError(error_msg, path) from e

	if data is None:
		return {}
	if not isinstance(data, dict):
		error_msg = f"Configuration in {path} must be a mapping, got {type(data).__name__}"
		raise ConfigError(error_msg, path)
	return data


def load_files(paths: Iterable[str | Path]) -> dict[str, Any]:
	"""
	Load YAML configuration files and merge them in order.

	Later files take precedence. Files that do not exist are skipped.

	Args:
	    paths: Configuration file paths, lowest precedence first

	Returns:
	    The merged file configuration, empty when no file exists

	Raises:
	    ConfigError: If a file exists but cannot be read or parsed

	"""
	config: dict[str, Any] = {}

	for entry in paths:
		path = Path(entry)
		if not path.exists():
			logger.debug("Configuration file not found, skipping: %s", path)
			continue
		config = merge(config, _read_yaml(path))
		logger.info("Loaded configuration from %s", path)

	return config


def load_envs(prefix: str = ENV_PREFIX, env: Mapping[str, str] | None = None) -> dict[str, str]:
	"""
	Map environment variables containing ``prefix`` to configuration keys.

	The first occurrence of ``prefix`` is removed from the variable name and the
	rest is camelCased, so ``LANDO_LOG_LEVEL`` becomes ``logLevel``. Values stay
	raw strings. Any name containing ``prefix`` matches, not only names
	starting with it.

	Args:
	    prefix: Marker to look for in variable names
	    env: Environment mapping (defaults to ``os.environ``)

	Returns:
	    The environment configuration

	"""
	env = os.environ if env is None else env
	env_config: dict[str, str] = {}

	for key, value in env.items():
		if prefix in key:
			env_config[camel_case(key.replace(prefix, "", 1))] = value
			logger.debug("Applied environment override %s", key)

	return env_config


def config_file_paths(defaults: Mapping[str, Any], files: Iterable[str | Path] | None = None) -> list[str]:
	"""
	List the configuration files to load, lowest precedence first.

	These are the default sources, then the file in the system configuration
	root, then the file in the user configuration root, then ``files``.

	Args:
	    defaults: Default configuration from ``build_defaults``
	    files: Extra files supplied by the caller

	Returns:
	    Configuration file paths

	"""
	filename = defaults["configFilename"]
	paths = [str(source) for source in defaults.get("configSources", [])]

	if defaults.get("sysConfRoot"):
		paths.append(str(Path(defaults["sysConfRoot"]) / filename))
	paths.append(str(Path(defaults["userConfRoot"]) / filename))
	paths.extend(str(path) for path in files or [])

	return paths


def resolve_config(
	files: Iterable[str | Path] | None = None,
	prefix: str = ENV_PREFIX,
	env: Mapping[str, str] | None = None,
	platform: str | None = None,
) -> dict[str, Any]:
	"""
	Resolve the runtime configuration from defaults, files and environment.

	Args:
	    files: Extra configuration files, merged after the standard ones
	    prefix: Environment variable marker
	    env: Environment mapping (defaults to ``os.environ``)
	    platform: Platform identifier (defaults to ``sys.platform``)

	Returns:
	    The resolved configuration

	Raises:
	    ConfigError: If a configuration file exists but cannot be loaded

	"""
	defaults = build_defaults(env, platform)
	config = merge(defaults, load_files(config_file_paths(defaults, files)))
	return merge(config, load_envs(prefix, env))


class ConfigLoader:
	"""
	Holds the resolved configuration for the running process.

	The configuration is resolved once, on construction.

	"""

	_instance = None  # For singleton pattern

	@classmethod
	def get_instance(
		cls,
		files: Iterable[str | Path] | None = None,
		reload: bool = False,
		env: Mapping[str, str] | None = None,
	) -> ConfigLoader:
		"""
		Get the singleton instance of ConfigLoader.

		Args:
		        files: Extra configuration files (optional)
		        reload: Whether to reload config even if already loaded
		        env: Environment mapping (optional)

		Returns:
		        ConfigLoader: Singleton instance

		"""
		if cls._instance is None or reload:
			cls._instance = cls(files, env=env)
		return cls._instance

	def __init__(
		self,
		files: Iterable[str | Path] | None = None,
		prefix: str = ENV_PREFIX,
		env: Mapping[str, str] | None = None,
		platform: str | None = None,
	) -> None:
		self.files = [str(path) for path in files or []]
		self.prefix = prefix
		self.config = resolve_config(self.files, prefix, env, platform)

	def get(self, key: str, default: T = None) -> T:
		"""
		Get a configuration value, using dots for nested keys.

		Examples:
		        config.get("logLevel")
		        config.get("os.platform")

		Args:
		        key: Configuration key, can include dots for nested access
		        default: Default value if key not found

		Returns:
		        T: Configuration value or default

		"""
		current: Any = self.config
		for part in key.split("."):
			if isinstance(current, dict) and part in current:
				current = current[part]
			else:
				return default
		return cast("T", current)
