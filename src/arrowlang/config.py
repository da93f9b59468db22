"""
Interpreter configuration.

Settings live in an InterpreterConfig dataclass. Hosts may load them from a
YAML file:

    max_call_depth: 500
    echo_result: true
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Union

import yaml


DEFAULT_MAX_CALL_DEPTH = 200


class ConfigError(ValueError):
    """Invalid configuration file or value."""
    pass


@dataclass(frozen=True)
class InterpreterConfig:
    """Tunable interpreter settings."""
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH
    echo_result: bool = False   # CLI prints the program's final value

    def __post_init__(self):
        if isinstance(self.max_call_depth, bool) or not isinstance(self.max_call_depth, int):
            raise ConfigError(f"max_call_depth must be an integer, got {self.max_call_depth!r}")
        if self.max_call_depth < 1:
            raise ConfigError(f"max_call_depth must be positive, got {self.max_call_depth}")
        if not isinstance(self.echo_result, bool):
            raise ConfigError(f"echo_result must be true or false, got {self.echo_result!r}")

    def with_overrides(self, **overrides: Any) -> "InterpreterConfig":
        """Copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def config_from_dict(data: Dict[str, Any]) -> InterpreterConfig:
    """Build a config from a mapping, rejecting unknown keys."""
    known = {f.name for f in fields(InterpreterConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown configuration key(s): {', '.join(unknown)}")
    return InterpreterConfig(**data)


def load_config(path: Union[str, Path]) -> InterpreterConfig:
    """Load an InterpreterConfig from a YAML file."""
    with Path(path).open("r", encoding="utf-8") as fp:
        try:
            data = yaml.safe_load(fp) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, not {type(data).__name__}")
    return config_from_dict(data)
