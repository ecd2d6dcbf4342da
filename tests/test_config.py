"""Tests for settings and config file handling."""

import argparse
import json

import pytest

from cli_config import load_config_file, resolve_settings, settings_from_config
from common.errors import InvalidFormatError
from locators.settings import LocatorSettings


def _args(**overrides):
    values = {"VSWHERE_PATH": None, "INSTALLATION_PATH": None, "SDK_PATH": None}
    values.update(overrides)
    return argparse.Namespace(**values)


class TestLocatorSettings:
    """Environment based settings."""

    def test_from_environment(self):
        settings = LocatorSettings.from_environment({
            "VS_WHERE_PATH": "D:\\vswhere.exe",
            "VS_INSTALLATION_PATH": "C:\\VS\\2022\\Community",
            "WIN_SDK_PATH": "C:\\Windows Kits\\10",
        })
        assert settings == LocatorSettings(
            vswhere_path="D:\\vswhere.exe",
            installation_path="C:\\VS\\2022\\Community",
            win_sdk_path="C:\\Windows Kits\\10",
        )

    def test_blank_values_are_ignored(self):
        settings = LocatorSettings.from_environment({"VS_INSTALLATION_PATH": "   ", "WIN_SDK_PATH": ""})
        assert settings == LocatorSettings()

    def test_reads_process_environment_by_default(self, monkeypatch):
        monkeypatch.setenv("VS_INSTALLATION_PATH", "C:\\VS")
        monkeypatch.delenv("VS_WHERE_PATH", raising=False)
        assert LocatorSettings.from_environment().installation_path == "C:\\VS"

    def test_merged_over(self):
        primary = LocatorSettings(vswhere_path="a")
        fallback = LocatorSettings(vswhere_path="b", win_sdk_path="c")
        assert primary.merged_over(fallback) == LocatorSettings(vswhere_path="a", win_sdk_path="c")


class TestLoadConfigFile:
    """YAML and JSON config files."""

    def test_no_path(self):
        assert load_config_file(None) == {}

    def test_missing_file(self, tmp_path, caplog):
        assert load_config_file(str(tmp_path / "missing.yml")) == {}
        assert "Config file not found" in caplog.text

    def test_yaml_section(self, tmp_path):
        path = tmp_path / "vslocate.yml"
        path.write_text(
            "locate:\n"
            "  product_line: 2022\n"
            "  vswhere_path: 'D:\\Tools\\vswhere.exe'\n"
            "other: ignored\n",
            encoding="utf-8",
        )
        config = load_config_file(str(path))
        assert config == {"product_line": 2022, "vswhere_path": "D:\\Tools\\vswhere.exe"}

    def test_json_without_section(self, tmp_path):
        path = tmp_path / "vslocate.json"
        path.write_text(json.dumps({"win_sdk_path": "C:\\Kits\\10"}), encoding="utf-8")
        assert load_config_file(str(path)) == {"win_sdk_path": "C:\\Kits\\10"}

    def test_unknown_keys_warn(self, tmp_path, caplog):
        path = tmp_path / "vslocate.yml"
        path.write_text("locate:\n  colour: blue\n", encoding="utf-8")
        assert load_config_file(str(path)) == {}
        assert "colour" in caplog.text

    def test_empty_file(self, tmp_path):
        path = tmp_path / "vslocate.yml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(str(path)) == {}

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "vslocate.yml"
        path.write_text("locate: [unclosed\n", encoding="utf-8")
        with pytest.raises(InvalidFormatError):
            load_config_file(str(path))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "vslocate.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(InvalidFormatError):
            load_config_file(str(path))


class TestResolveSettings:
    """CLI > environment > config file."""

    def test_config_only(self):
        settings = resolve_settings(_args(), {"vswhere_path": "cfg"}, environ={})
        assert settings.vswhere_path == "cfg"

    def test_environment_beats_config(self):
        settings = resolve_settings(_args(), {"vswhere_path": "cfg"}, environ={"VS_WHERE_PATH": "env"})
        assert settings.vswhere_path == "env"

    def test_cli_beats_environment(self):
        settings = resolve_settings(
            _args(VSWHERE_PATH="cli"),
            {"vswhere_path": "cfg"},
            environ={"VS_WHERE_PATH": "env"},
        )
        assert settings.vswhere_path == "cli"

    def test_independent_keys(self):
        settings = resolve_settings(
            _args(SDK_PATH="sdk-cli"),
            {"installation_path": "inst-cfg"},
            environ={"VS_WHERE_PATH": "env"},
        )
        assert settings == LocatorSettings(
            vswhere_path="env", installation_path="inst-cfg", win_sdk_path="sdk-cli"
        )

    def test_settings_from_config_coerces_to_str(self):
        assert settings_from_config({"win_sdk_path": 10}).win_sdk_path == "10"
