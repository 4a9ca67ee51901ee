"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from lando.config.config_loader import (
    ConfigError,
    ConfigLoader,
    config_file_paths,
    load_envs,
    load_files,
    resolve_config,
)
from lando.config.defaults import build_defaults


@pytest.fixture
def write_config(tmp_path: Path):
    """Write a dict as YAML and return the file path."""

    def _write(name: str, data: object) -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write


@pytest.mark.unit
@pytest.mark.fs
class TestLoadFiles:
    """Test cases for load_files."""

    def test_no_paths(self) -> None:
        """Loading nothing gives an empty configuration."""
        assert load_files([]) == {}

    def test_missing_paths_are_skipped(self, tmp_path: Path) -> None:
        """Paths that do not exist are not an error."""
        assert load_files([tmp_path / "nope.yml", tmp_path / "nested" / "config.yml"]) == {}

    def test_single_file(self, write_config) -> None:
        """A single file is loaded as is."""
        path = write_config("config.yml", {"logLevel": "info", "proxy": {"domain": "lndo.site"}})
        assert load_files([str(path)]) == {"logLevel": "info", "proxy": {"domain": "lndo.site"}}

    def test_later_file_overrides_scalar(self, write_config) -> None:
        """Scalar keys from a later file win."""
        first = write_config("first.yml", {"logLevel": "debug", "domain": "lndo.site"})
        second = write_config("second.yml", {"logLevel": "warn"})

        config = load_files([first, second])

        assert config == {"logLevel": "warn", "domain": "lndo.site"}

    def test_later_file_unions_lists(self, write_config) -> None:
        """List keys set by both files are unioned."""
        first = write_config("first.yml", {"pluginDirs": ["/a", "/b"]})
        second = write_config("second.yml", {"pluginDirs": ["/b", "/c"]})

        assert load_files([first, second]) == {"pluginDirs": ["/a", "/b", "/c"]}

    def test_missing_file_between_existing_ones(self, write_config, tmp_path: Path) -> None:
        """A missing file in the middle does not stop later files from loading."""
        first = write_config("first.yml", {"a": 1})
        last = write_config("last.yml", {"b": 2})

        assert load_files([first, tmp_path / "missing.yml", last]) == {"a": 1, "b": 2}

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file contributes nothing."""
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")
        assert load_files([path]) == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """A file that cannot be parsed fails the whole load and names the file."""
        good = tmp_path / "good.yml"
        good.write_text("a: 1\n", encoding="utf-8")
        bad = tmp_path / "bad.yml"
        bad.write_text("invalid: yaml: content: :", encoding="utf-8")

        with pytest.raises(ConfigError, match="bad.yml") as exc_info:
            load_files([good, bad])

        assert exc_info.value.path == str(bad)
        assert isinstance(exc_info.value.__cause__, yaml.YAMLError)

    @pytest.mark.parametrize("content", ["- a\n- b\n", "just a string\n", "42\n"])
    def test_top_level_must_be_mapping(self, tmp_path: Path, content: str) -> None:
        """Top-level scalars and sequences are rejected."""
        path = tmp_path / "config.yml"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigError, match="must be a mapping"):
            load_files([path])


@pytest.mark.unit
class TestLoadEnvs:
    """Test cases for load_envs."""

    def test_prefixed_variables(self) -> None:
        """Prefixed names are stripped and camelCased."""
        env = {"LANDO_LOG_LEVEL": "info", "LANDO_PROXY_DOMAIN": "lndo.site", "HOME": "/home/me"}

        assert load_envs("LANDO_", env) == {"logLevel": "info", "proxyDomain": "lndo.site"}

    def test_values_are_not_coerced(self) -> None:
        """Values stay strings."""
        env = {"LANDO_PORT": "8080", "LANDO_ENABLED": "true"}

        config = load_envs("LANDO_", env)

        assert config == {"port": "8080", "enabled": "true"}

    def test_substring_match(self, env: dict[str, str]) -> None:
        """Names containing the prefix anywhere are picked up."""
        config = load_envs("LANDO_", env)

        assert config["myThing"] == "substring"
        assert config["logLevel"] == "info"
        assert "editor" not in config

    def test_only_first_occurrence_removed(self) -> None:
        """The prefix is removed once."""
        assert load_envs("LANDO_", {"LANDO_LANDO_X": "1"}) == {"landoX": "1"}

    def test_no_matches(self) -> None:
        """No matching variables gives an empty configuration."""
        assert load_envs("LANDO_", {"PATH": "/bin"}) == {}


@pytest.mark.unit
@pytest.mark.fs
class TestResolveConfig:
    """Test cases for the full resolution sequence."""

    def test_defaults_only(self, fake_home: Path) -> None:
        """Without files or variables the defaults come through."""
        config = resolve_config(env={}, platform="plan9")

        assert config["configFilename"] == "config.yml"
        assert config["logLevelConsole"] == "warn"
        assert config["sysConfRoot"] is None
        assert config["userConfRoot"] == str(fake_home / ".lando")

    def test_precedence(self, fake_home: Path, write_config) -> None:
        """Environment beats files, files beat defaults."""
        user_conf = fake_home / ".lando"
        user_conf.mkdir()
        (user_conf / "config.yml").write_text(
            yaml.safe_dump({"logLevel": "info", "logLevelConsole": "error", "pluginDirs": ["/plugins"]}),
            encoding="utf-8",
        )
        extra = write_config("extra.yml", {"logLevelConsole": "info"})

        config = resolve_config([extra], env={"LANDO_LOG_LEVEL": "warn"}, platform="plan9")

        assert config["logLevel"] == "warn"
        assert config["logLevelConsole"] == "info"
        assert config["pluginDirs"][-1] == "/plugins"
        assert len(config["pluginDirs"]) == 2

    def test_bad_file_propagates(self, fake_home: Path, tmp_path: Path) -> None:
        """A broken file aborts resolution."""
        bad = tmp_path / "bad.yml"
        bad.write_text("a: [1, 2", encoding="utf-8")

        with pytest.raises(ConfigError):
            resolve_config([bad], env={}, platform="plan9")

    def test_config_file_paths_order(self, fake_home: Path) -> None:
        """Standard sources come before caller files."""
        defaults = build_defaults({}, "linux")

        paths = config_file_paths(defaults, ["/tmp/extra.yml"])

        assert paths == [
            defaults["configSources"][0],
            str(Path("/usr/share/lando") / "config.yml"),
            str(fake_home / ".lando" / "config.yml"),
            "/tmp/extra.yml",
        ]


@pytest.mark.unit
class TestConfigLoader:
    """Test cases for ConfigLoader."""

    def test_get_nested(self, fake_home: Path) -> None:
        """Dot notation reaches nested values."""
        loader = ConfigLoader(env={}, platform="darwin")

        assert loader.get("os.platform") == "darwin"
        assert loader.get("sysConfRoot") == "/Applications/Lando.app/Contents/MacOS"

    def test_get_default(self, fake_home: Path) -> None:
        """Unknown keys return the default."""
        loader = ConfigLoader(env={}, platform="darwin")

        assert loader.get("does.not.exist") is None
        assert loader.get("does.not.exist", "fallback") == "fallback"
        assert loader.get("logLevel.deeper", 1) == 1

    def test_get_instance_is_cached(self, fake_home: Path) -> None:
        """The singleton is only rebuilt on reload."""
        first = ConfigLoader.get_instance(env={})
        second = ConfigLoader.get_instance(env={"LANDO_LOG_LEVEL": "info"})
        third = ConfigLoader.get_instance(env={"LANDO_LOG_LEVEL": "info"}, reload=True)

        assert first is second
        assert third is not first
        assert third.get("logLevel") == "info"
