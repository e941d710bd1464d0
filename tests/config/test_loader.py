"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from buildtrace.config.loader import _deep_merge, _load_yaml, load_config
from buildtrace.config.models import BuildTraceConfig
from buildtrace.core.errors import ConfigError


@pytest.fixture(autouse=True)
def no_global_config(tmp_path: Path) -> Iterator[None]:
    """Point the global config at a path that does not exist."""
    with patch("buildtrace.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"):
        yield


def _write_repo_config(root: Path, text: str) -> None:
    config_dir = root / ".buildtrace"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.yaml").write_text(text)


class TestLoadYaml:
    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("logging:\n  level: DEBUG\n")

        assert _load_yaml(yaml_file) == {"logging": {"level": "DEBUG"}}

    def test_returns_empty_for_yaml_null(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "null.yaml"
        yaml_file.write_text("null\n")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("logging:\n  level:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_nested_merge(self) -> None:
        base = {"export": {"output_dir": "a", "indent": 2}}
        override = {"export": {"output_dir": "b"}}

        assert _deep_merge(base, override) == {"export": {"output_dir": "b", "indent": 2}}


class TestLoadConfig:
    def test_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert isinstance(config, BuildTraceConfig)
        assert config.logging.level == "INFO"
        assert config.export.output_dir == "."
        assert config.export.indent is None

    def test_repo_yaml(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "export:\n  output_dir: viz\n  indent: 2\n")

        config = load_config(tmp_path)

        assert config.export.output_dir == "viz"
        assert config.export.indent == 2

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_repo_config(tmp_path, "logging:\n  level: WARNING\n")
        monkeypatch.setenv("BUILDTRACE__LOGGING__LEVEL", "DEBUG")

        assert load_config(tmp_path).logging.level == "DEBUG"

    def test_global_yaml_under_repo_yaml(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text("export:\n  output_dir: global\n  indent: 4\n")
        _write_repo_config(tmp_path, "export:\n  output_dir: repo\n")

        with patch("buildtrace.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)

        assert config.export.output_dir == "repo"
        assert config.export.indent == 4

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "export:\n  indent: -1\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)

        assert "export" in exc_info.value.details["field"]
