import os
import tempfile

import pytest
import yaml

from pipelog.config import PipelogConfig, _deep_merge, load_config
from pipelog.extractor import ConfigError


def _write_yaml(data):
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        if isinstance(data, str):
            f.write(data)
        else:
            yaml.dump(data, f)
        return f.name


class TestConfig:
    def test_default_config(self, config):
        """Defaults match the command-line defaults."""
        assert config.duration_path == "duration"
        assert config.uri_path == "uri"
        assert config.method_path == "method"
        assert config.time_path == "time"
        assert config.namespace == "$"
        assert config.fail_fast is False
        assert config.merge_uuid is False
        assert config.top_endpoints == 20
        assert config.show_stddev is True
        assert config.output == "table"

    def test_load_without_file(self, monkeypatch):
        monkeypatch.delenv("PIPELOG_CONFIG", raising=False)
        assert load_config() == PipelogConfig()

    def test_load_from_yaml(self):
        """Sectioned YAML overrides merge over defaults."""
        path = _write_yaml({
            "fields": {"namespace": "$.request", "duration_path": "latency_ms"},
            "parsing": {"merge_uuid": True},
            "report": {"top_endpoints": 5},
        })
        try:
            cfg = load_config(path)
            assert cfg.namespace == "$.request"
            assert cfg.duration_path == "latency_ms"
            assert cfg.uri_path == "uri"  # default preserved
            assert cfg.merge_uuid is True
            assert cfg.fail_fast is False  # default preserved
            assert cfg.top_endpoints == 5
        finally:
            os.unlink(path)

    def test_flat_yaml_keys(self):
        path = _write_yaml({"fail_fast": True, "output": "json"})
        try:
            cfg = load_config(path)
            assert cfg.fail_fast is True
            assert cfg.output == "json"
        finally:
            os.unlink(path)

    def test_env_var_names_config_file(self, monkeypatch):
        path = _write_yaml({"report": {"show_stddev": False}})
        monkeypatch.setenv("PIPELOG_CONFIG", path)
        try:
            assert load_config().show_stddev is False
        finally:
            os.unlink(path)

    def test_missing_file_uses_defaults(self):
        cfg = load_config("/nonexistent/path/pipelog.yaml")
        assert cfg == PipelogConfig()

    def test_invalid_yaml(self):
        path = _write_yaml("fields: [unclosed\n")
        try:
            with pytest.raises(ConfigError):
                load_config(path)
        finally:
            os.unlink(path)

    def test_non_mapping_yaml(self):
        path = _write_yaml("- just\n- a list\n")
        try:
            with pytest.raises(ConfigError):
                load_config(path)
        finally:
            os.unlink(path)

    def test_deep_merge(self):
        base = {"report": {"top_endpoints": 20, "output": "table"}}
        result = _deep_merge(base, {"report": {"top_endpoints": 3}})
        assert result == {"report": {"top_endpoints": 3, "output": "table"}}
        assert base["report"]["top_endpoints"] == 20


class TestValidation:
    def test_negative_top(self):
        with pytest.raises(ConfigError):
            PipelogConfig(top_endpoints=-1).validated()

    def test_empty_path(self):
        with pytest.raises(ConfigError):
            PipelogConfig(uri_path="").validated()

    def test_unknown_output(self):
        with pytest.raises(ConfigError):
            PipelogConfig(output="xml").validated()

    def test_unknown_log_level(self):
        with pytest.raises(ConfigError):
            PipelogConfig(log_level="LOUD").validated()

    def test_bad_path_syntax(self):
        with pytest.raises(ConfigError):
            PipelogConfig(namespace="", duration_path="$.[").field_paths()


class TestOverrides:
    def test_none_values_ignored(self, config):
        assert config.with_overrides(fail_fast=None, output=None) == config

    def test_flags_override(self, config):
        cfg = config.with_overrides(fail_fast=True, namespace="", top_endpoints=3)
        assert cfg.fail_fast is True
        assert cfg.namespace == ""
        assert cfg.top_endpoints == 3

    def test_override_is_validated(self, config):
        with pytest.raises(ConfigError):
            config.with_overrides(top_endpoints=-5)

    def test_config_is_frozen(self, config):
        with pytest.raises(AttributeError):
            config.fail_fast = True


class TestQualifiedPaths:
    def test_default_namespace(self, config):
        assert config.qualified("duration") == "$.duration"

    def test_empty_namespace(self):
        assert PipelogConfig(namespace="").qualified("$.x") == "$.x"

    def test_field_paths(self):
        paths = PipelogConfig(namespace="$.req").field_paths()
        assert {k: p.expression for k, p in paths.items()} == {
            "duration": "$.req.duration",
            "uri": "$.req.uri",
            "method": "$.req.method",
            "timestamp": "$.req.time",
        }
