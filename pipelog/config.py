"""Run configuration — frozen dataclass loaded from defaults, YAML and flags."""

import copy
import logging
import os
from dataclasses import dataclass, fields, replace

import yaml

from pipelog.extractor import ConfigError, FieldPath

OUTPUT_FORMATS = ("table", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class PipelogConfig:
    duration_path: str = "duration"
    uri_path: str = "uri"
    method_path: str = "method"
    time_path: str = "time"
    namespace: str = "$"
    fail_fast: bool = False
    merge_uuid: bool = False
    top_endpoints: int = 20
    show_stddev: bool = True
    output: str = "table"
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, d: dict) -> "PipelogConfig":
        """Build a config from a flat or sectioned dict, ignoring unknown keys."""
        flat = _flatten(d)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(flat) - known)
        if unknown:
            logging.getLogger(__name__).warning(
                "Ignoring unknown config keys: %s", ", ".join(unknown)
            )
        return cls(**{k: v for k, v in flat.items() if k in known}).validated()

    def validated(self) -> "PipelogConfig":
        """Return self, raising ConfigError if any field is out of range."""
        for name in ("duration_path", "uri_path", "method_path", "time_path"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ConfigError(f"{name} must be a non-empty string")
        if not isinstance(self.namespace, str):
            raise ConfigError("namespace must be a string")
        if not isinstance(self.top_endpoints, int) or isinstance(self.top_endpoints, bool):
            raise ConfigError("top_endpoints must be an integer")
        if self.top_endpoints < 0:
            raise ConfigError("top_endpoints must be >= 0")
        if self.output not in OUTPUT_FORMATS:
            raise ConfigError(f"output must be one of {', '.join(OUTPUT_FORMATS)}")
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return self

    def with_overrides(self, **overrides) -> "PipelogConfig":
        """Apply non-None overrides (typically CLI flags) on top of this config."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes).validated()

    def qualified(self, path: str) -> str:
        """Prefix *path* with the namespace, when one is set."""
        if self.namespace:
            return f"{self.namespace}.{path}"
        return path

    def field_paths(self) -> dict[str, FieldPath]:
        """Compile the four field paths. Raises ConfigError on bad syntax."""
        return {
            "duration": FieldPath("duration", self.qualified(self.duration_path)),
            "uri": FieldPath("uri", self.qualified(self.uri_path)),
            "method": FieldPath("method", self.qualified(self.method_path)),
            "timestamp": FieldPath("timestamp", self.qualified(self.time_path)),
        }


DEFAULTS = {
    "fields": {
        "duration_path": PipelogConfig.duration_path,
        "uri_path": PipelogConfig.uri_path,
        "method_path": PipelogConfig.method_path,
        "time_path": PipelogConfig.time_path,
        "namespace": PipelogConfig.namespace,
    },
    "parsing": {
        "fail_fast": PipelogConfig.fail_fast,
        "merge_uuid": PipelogConfig.merge_uuid,
    },
    "report": {
        "top_endpoints": PipelogConfig.top_endpoints,
        "show_stddev": PipelogConfig.show_stddev,
        "output": PipelogConfig.output,
    },
    "logging": {
        "log_level": PipelogConfig.log_level,
    },
}


def _flatten(d: dict) -> dict:
    """Collapse one level of sections: {"report": {"output": x}} -> {"output": x}."""
    flat = {}
    for key, value in d.items():
        if isinstance(value, dict):
            flat.update(value)
        else:
            flat[key] = value
    return flat


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override dict into base dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_config(config_path: str | None = None) -> PipelogConfig:
    """Build PipelogConfig from defaults merged with an optional YAML file.

    The path falls back to the ``PIPELOG_CONFIG`` environment variable. A
    missing file means defaults; malformed YAML raises ConfigError.
    """
    config_path = config_path or os.environ.get("PIPELOG_CONFIG")
    merged = copy.deepcopy(DEFAULTS)

    if config_path:
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f)
        except FileNotFoundError:
            logging.getLogger(__name__).warning(
                "Config file %s not found, using defaults", config_path
            )
            user_config = None
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if user_config is not None and not isinstance(user_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping")
        if user_config:
            merged = _deep_merge(merged, user_config)

    return PipelogConfig.from_dict(merged)
