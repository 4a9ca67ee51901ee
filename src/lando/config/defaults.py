"""Default configuration settings for Lando."""

from __future__ import annotations

import os
import platform as platform_info
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from lando import __version__
from lando.utils.env_utils import WINDOWS_PLATFORM, environment_snapshot

if TYPE_CHECKING:
	from collections.abc import Mapping

CONFIG_FILENAME = "config.yml"
USER_CONF_DIRNAME = ".lando"

# Installation root, the directory holding the lando package
SRC_ROOT = Path(__file__).resolve().parent.parent

WINDOWS_INSTALL_PATH = "C:\\Program Files\\Lando"
DARWIN_INSTALL_PATH = "/Applications/Lando.app/Contents/MacOS"
LINUX_INSTALL_PATH = "/usr/share/lando"


def get_sys_conf_root(env: Mapping[str, str] | None = None, platform: str | None = None) -> str | None:
	"""
	Get the system configuration root for the host OS family.

	Args:
	    env: Environment mapping (defaults to ``os.environ``)
	    platform: Platform identifier (defaults to ``sys.platform``)

	Returns:
	    The OS-conventional install directory, or None on unsupported platforms

	"""
	env = os.environ if env is None else env
	platform = platform or sys.platform

	if platform == WINDOWS_PLATFORM:
		return env.get("LANDO_INSTALL_PATH") or WINDOWS_INSTALL_PATH
	if platform == "darwin":
		return DARWIN_INSTALL_PATH
	if platform.startswith("linux"):
		return LINUX_INSTALL_PATH
	return None


def windows_git_bin_dirs(env: Mapping[str, str] | None = None) -> list[str]:
	"""
	Find the Git for Windows ``usr/bin`` directories present on this machine.

	These hold ``ssh.exe`` and friends and need to come first on the path so
	tools such as putty do not shadow them.

	Args:
	    env: Environment mapping (defaults to ``os.environ``)

	Returns:
	    Existing directories, in lookup order

	"""
	env = os.environ if env is None else env
	candidates = []
	if env.get("LOCALAPPDATA"):
		candidates.append(Path(env["LOCALAPPDATA"]) / "Programs" / "Git" / "usr" / "bin")
	for var in ("ProgramFiles", "ProgramW6432"):
		if env.get(var):
			candidates.append(Path(env[var]) / "Git" / "usr" / "bin")

	found: list[str] = []
	for candidate in candidates:
		if candidate.is_dir() and str(candidate) not in found:
			found.append(str(candidate))
	return found


def build_defaults(env: Mapping[str, str] | None = None, platform: str | None = None) -> dict[str, Any]:
	"""
	Build the default configuration.

	Keys are camelCase so that ``LANDO_*`` environment overrides, which are
	camelCased on load, land on the same keys.

	Args:
	    env: Environment mapping (defaults to ``os.environ``)
	    platform: Platform identifier (defaults to ``sys.platform``)

	Returns:
	    A fresh default configuration dict

	"""
	home = str(Path.home())
	src_root = str(SRC_ROOT)

	return {
		"configFilename": CONFIG_FILENAME,
		"configSources": [str(SRC_ROOT / CONFIG_FILENAME)],
		"env": environment_snapshot(env),
		"home": home,
		"logLevel": "debug",
		"logLevelConsole": "warn",
		"version": __version__,
		"python": platform_info.python_version(),
		"os": {
			"type": platform_info.system(),
			"platform": platform or sys.platform,
			"release": platform_info.release(),
			"arch": platform_info.machine(),
		},
		"pluginDirs": [src_root],
		"srcRoot": src_root,
		"sysConfRoot": get_sys_conf_root(env, platform),
		"userConfRoot": str(Path(home) / USER_CONF_DIRNAME),
	}
