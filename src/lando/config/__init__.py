"""Configuration resolution for Lando."""

from lando.config.config_loader import (
	ConfigError,
	ConfigLoader,
	load_envs,
	load_files,
	merge,
	resolve_config,
)
from lando.config.defaults import build_defaults, get_sys_conf_root

__all__ = [
	"ConfigError",
	"ConfigLoader",
	"build_defaults",
	"get_sys_conf_root",
	"load_envs",
	"load_files",
	"merge",
	"resolve_config",
]
