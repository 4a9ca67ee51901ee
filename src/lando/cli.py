"""Command-line interface for Lando."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from dotenv import load_dotenv

from lando import __version__
from lando.config.config_loader import ConfigError, ConfigLoader
from lando.config.defaults import windows_git_bin_dirs
from lando.updates.cache import default_cache_path, load_record, save_record
from lando.updates.checker import fetch, refresh, update_available
from lando.utils.cli_utils import console, exit_with_error, loading_spinner, show_warning
from lando.utils.env_utils import WINDOWS_PLATFORM, update_path
from lando.utils.log_setup import setup_logging

logger = logging.getLogger(__name__)

_MISSING = object()

app = typer.Typer(
	help=f"Lando - local development environments\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)


def load_env_files() -> None:
	"""Load ``.env.local``, or failing that ``.env``, from the working directory."""
	for env_file in (Path(".env.local"), Path(".env")):
		if env_file.exists():
			load_dotenv(dotenv_path=env_file)
			logger.debug("Loaded environment variables from %s", env_file)
			return


def prepare_path() -> None:
	"""Put the Git for Windows tools first on the path."""
	if sys.platform != WINDOWS_PLATFORM:
		return
	for directory in windows_git_bin_dirs():
		update_path(directory)


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"Lando version: {__version__}")
		raise typer.Exit


@app.callback(invoke_without_command=True)
def global_options(
	ctx: typer.Context,
	is_verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
	] = None,
) -> None:
	"""Global CLI options and startup."""
	ctx.meta["is_verbose"] = is_verbose
	setup_logging(is_verbose=is_verbose)
	load_env_files()
	prepare_path()


def _load_config(ctx: typer.Context, files: list[Path] | None) -> ConfigLoader:
	try:
		loader = ConfigLoader(files)
	except ConfigError as e:
		exit_with_error(f"Could not load configuration from {e.path}", exception=e)

	setup_logging(is_verbose=ctx.meta.get("is_verbose", False), console_level=loader.get("logLevelConsole"))
	return loader


@app.command("config")
def config_command(
	ctx: typer.Context,
	key: Annotated[str | None, typer.Argument(help="Dot separated key to show, e.g. os.platform.")] = None,
	files: Annotated[
		list[Path] | None,
		typer.Option("--file", "-f", help="Extra configuration file, may be repeated."),
	] = None,
	show_env: Annotated[bool, typer.Option("--show-env", help="Include the environment snapshot.")] = False,
) -> None:
	"""Show the resolved configuration."""
	loader = _load_config(ctx, files)

	if key:
		value = loader.get(key, _MISSING)
		if value is _MISSING:
			exit_with_error(f"Configuration key not found: {key}")
		output: Any = value
	else:
		output = {k: v for k, v in loader.config.items() if show_env or k != "env"}

	if isinstance(output, dict | list):
		console.print(yaml.safe_dump(output, default_flow_style=False, sort_keys=True), end="", markup=False)
	else:
		console.print(str(output), markup=False)


@app.command("update")
def update_command(
	force: Annotated[bool, typer.Option("--force", help="Ignore the cached result.")] = False,
) -> None:
	"""Check whether a newer release of Lando is available."""
	cache_path = default_cache_path()
	record = load_record(cache_path)

	if force or fetch(record):
		with loading_spinner("Checking for updates..."):
			record = asyncio.run(refresh(__version__))
		try:
			save_record(record, cache_path)
		except OSError as e:
			logger.debug("Could not save update record to %s: %s", cache_path, e)

	if record is not None and update_available(__version__, record.version):
		message = f"A new version of Lando is available: {record.version} (you have {__version__})"
		if record.url:
			message += f"\n{record.url}"
		show_warning(message)
	else:
		console.print(f"[green]Lando {__version__} is up to date.[/green]")


def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
