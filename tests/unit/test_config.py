"""Tests for REPL configuration loading."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from dogwood.core.config import ReplConfig, load_config
from dogwood.core.errors import ConfigError


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "dogwood.toml"
    path.write_text(
        """
[repl]
prompt = "calc> "
show_rpn = false
color = "never"
log_level = "info"
"""
    )
    return path


class TestDefaults:
    def test_defaults(self) -> None:
        config = ReplConfig()
        assert config.prompt == ">>> "
        assert config.show_rpn is True
        assert config.color == "auto"
        assert config.log_level == "WARNING"

    def test_no_file_no_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert load_config(environ={}) == ReplConfig()

    def test_force_terminal(self) -> None:
        assert ReplConfig(color="auto").force_terminal is None
        assert ReplConfig(color="always").force_terminal is True
        assert ReplConfig(color="never").force_terminal is False


class TestFile:
    def test_explicit_file(self, config_file: Path) -> None:
        config = load_config(config_file, environ={})
        assert config == ReplConfig(prompt="calc> ", show_rpn=False, color="never", log_level="INFO")

    def test_discovered_in_cwd(self, config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(config_file.parent)
        assert load_config(environ={}).prompt == "calc> "

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.toml", environ={})

    def test_unreadable_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="cannot read config file") as exc_info:
            load_config(tmp_path, environ={})
        assert exc_info.value.path == tmp_path

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[repl\nprompt = ")
        with pytest.raises(ConfigError, match="invalid TOML"):
            load_config(path, environ={})

    def test_wrong_types(self, tmp_path: Path) -> None:
        path = tmp_path / "types.toml"
        path.write_text('[repl]\nshow_rpn = "yes"\n')
        with pytest.raises(ConfigError, match="show_rpn"):
            load_config(path, environ={})

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "extra.toml"
        path.write_text('[repl]\nhistory = 10\nprompt = "> "\n')
        assert load_config(path, environ={}).prompt == "> "


class TestEnvironment:
    def test_env_overrides_file(self, config_file: Path) -> None:
        config = load_config(
            config_file, environ={"DOGWOOD_PROMPT": "$ ", "DOGWOOD_SHOW_RPN": "yes"}
        )
        assert config.prompt == "$ "
        assert config.show_rpn is True
        assert config.color == "never"

    def test_bad_boolean(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigError, match="DOGWOOD_SHOW_RPN"):
            load_config(environ={"DOGWOOD_SHOW_RPN": "maybe"})

    def test_bad_color(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigError, match="color"):
            load_config(environ={"DOGWOOD_COLOR": "purple"})


class TestValidation:
    def test_log_level_normalised(self) -> None:
        assert ReplConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self) -> None:
        with pytest.raises(ConfigError):
            ReplConfig(log_level="chatty")

    def test_replace_revalidates(self) -> None:
        with pytest.raises(ConfigError):
            dataclasses.replace(ReplConfig(), color="sometimes")
