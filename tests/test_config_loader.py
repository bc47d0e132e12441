# tests/test_config_loader.py
"""Tests for TOML settings discovery and YAML values loading."""

import pytest
from pathlib import Path

from tmplt.config import loader
from tmplt.config.loader import (
    config_to_render_options, load_and_merge_configs, load_values, parse_set_assignments
)
from tmplt.config.settings import RenderConfig
from tmplt.exceptions import ConfigError


@pytest.fixture(autouse=True)
def no_user_config(tmp_path, monkeypatch):
    # keep the developer's ~/.config/tmplt out of the tests.
    monkeypatch.setattr(loader, "USER_CONFIG_FILE", tmp_path / "no-user-config.toml")


class TestTomlSettings:

    def test_project_file_is_loaded(self, tmp_path):
        (tmp_path / ".tmplt.toml").write_text('encoding = "latin-1"\ncontain_paths = false\n')
        assert load_and_merge_configs(tmp_path) == {"encoding": "latin-1", "contain_paths": False}

    def test_pyproject_tool_table(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n\n[tool.tmplt]\ndir = "chart"\n')
        assert load_and_merge_configs(tmp_path) == {"dir": "chart"}

    def test_first_project_file_wins(self, tmp_path):
        (tmp_path / ".tmplt.toml").write_text('encoding = "a"\n')
        (tmp_path / "tmplt.toml").write_text('encoding = "b"\n')
        assert load_and_merge_configs(tmp_path)["encoding"] == "a"

    def test_user_config_is_overridden_by_project(self, tmp_path, monkeypatch):
        user_file = tmp_path / "user.toml"
        user_file.write_text('encoding = "user"\nlog_level = "info"\n')
        monkeypatch.setattr(loader, "USER_CONFIG_FILE", user_file)
        project = tmp_path / "proj"
        project.mkdir()
        (project / "tmplt.toml").write_text('encoding = "project"\n')
        assert load_and_merge_configs(project) == {"encoding": "project", "log_level": "info"}

    def test_broken_toml_is_ignored(self, tmp_path):
        (tmp_path / ".tmplt.toml").write_text("this is = = not toml")
        assert load_and_merge_configs(tmp_path) == {}

    def test_config_to_render_options(self):
        options = config_to_render_options({
            "dir": "chart", "values": "values.yaml", "set": {"a": 1}, "log_level": "info", "bogus": 1,
        })
        assert options == {"base_dir": "chart", "values_files": ["values.yaml"], "set_values": {"a": 1}}

    def test_set_must_be_a_table(self):
        with pytest.raises(ConfigError):
            config_to_render_options({"set": "a=1"})


class TestValues:

    def test_values_files_deep_merge(self, tmp_path):
        base = tmp_path / "base.yaml"
        base.write_text("image:\n  repo: web\n  tag: '1.0'\nreplicas: 1\n")
        override = tmp_path / "prod.yaml"
        override.write_text("image:\n  tag: '2.0'\n")
        assert load_values([base, override]) == {
            "image": {"repo": "web", "tag": "2.0"}, "replicas": 1,
        }

    def test_set_overrides_after_files(self, tmp_path):
        base = tmp_path / "base.yaml"
        base.write_text("image:\n  tag: '1.0'\n")
        values = load_values([base], {"image.tag": "3.0", "replicas": "3", "debug": "true"})
        assert values == {"image": {"tag": 3.0}, "replicas": 3, "debug": True}

    def test_set_creates_nested_tables(self):
        assert load_values([], {"a.b.c": "x"}) == {"a": {"b": {"c": "x"}}}

    def test_empty_values_file(self, tmp_path):
        empty = tmp_path / "empty.yaml"
        empty.write_text("")
        assert load_values([empty]) == {}

    def test_values_file_must_be_mapping(self, tmp_path):
        bad = tmp_path / "list.yaml"
        bad.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_values([bad])

    def test_malformed_values_file(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("a: [")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_values([bad])

    def test_missing_values_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Failed to read"):
            load_values([tmp_path / "missing.yaml"])


def test_parse_set_assignments():
    assert parse_set_assignments(["a.b=1", "c = x=y"]) == {"a.b": "1", "c": " x=y"}
    with pytest.raises(ConfigError):
        parse_set_assignments(["novalue"])
    with pytest.raises(ConfigError):
        parse_set_assignments(["=1"])


def test_render_config_defaults_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = RenderConfig(values_files=["v.yaml"])
    assert config.base_dir == tmp_path.resolve()
    assert config.values_files == [Path("v.yaml")]
    assert config.contain_paths is True
