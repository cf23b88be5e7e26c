"""Configuration management for SCSS Style MCP Server."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Literal
from pydantic import BaseModel, Field, ValidationError, field_validator


DEFAULT_NAMESPACES: Dict[str, str] = {
    "o-": "object",
    "c-": "component",
    "u-": "utility",
    "t-": "theme",
    "s-": "scope",
    "is-": "state",
    "has-": "state",
    "_": "hack",
    "js-": "javascript",
    "qa-": "qa",
}


class ValidatorConfig(BaseModel):
    """Configuration for the stylesheet linter."""

    strict_mode: bool = False
    cache_enabled: bool = True
    max_file_size: int = 1048576  # 1MB


class RulesConfig(BaseModel):
    """Configuration for the style-guide rules."""

    namespaces: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_NAMESPACES))
    js_hook_prefix: str = "js-"
    utility_prefix: str = "u-"
    max_nesting_depth: int = Field(default=3, ge=1)
    allowed_type_selectors: List[str] = Field(default_factory=list)
    hex_case: Literal["lower", "upper"] = "lower"
    hex_length: Optional[Literal["short", "long"]] = None
    max_specificity_score: int = 10
    severity: Dict[str, Literal["error", "warning", "off"]] = Field(default_factory=dict)
    disabled: List[str] = Field(default_factory=list)

    @field_validator("allowed_type_selectors")
    @classmethod
    def _lowercase_types(cls, value: List[str]) -> List[str]:
        return [name.lower() for name in value]


class PerformanceConfig(BaseModel):
    """Configuration for performance settings."""

    cache_size: int = 100
    cache_ttl: int = 3600


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "json"
    file: Optional[str] = None


class StyleMCPConfig(BaseModel):
    """Main configuration class for SCSS Style MCP Server."""

    validators: ValidatorConfig = Field(default_factory=ValidatorConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


CONFIG_FILENAMES = ("scss-style.yaml", "scss-style.yml", "config/scss-style.yaml")

_TRUTHY = ("1", "true", "yes", "on")


def get_default_config_path() -> Path:
    """First existing config file under the working directory, else config/scss-style.yaml."""
    cwd = Path.cwd()
    candidates = [cwd / name for name in CONFIG_FILENAMES]
    return next((path for path in candidates if path.exists()), candidates[-1])


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to load config from {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Failed to load config from {path}: top level must be a mapping")
    return data


def load_config(config_path: Optional[str] = None) -> StyleMCPConfig:
    """
    Build the configuration from defaults, a YAML file and the environment.

    Environment variables win over the file; the file wins over defaults.

    Raises:
        ValueError: If the file cannot be read or the merged values are invalid
    """
    path = Path(config_path) if config_path is not None else get_default_config_path()
    config_dict = _read_yaml(path) if path.exists() else {}

    _deep_update(config_dict, _get_env_overrides())

    try:
        return StyleMCPConfig(**config_dict)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _get_env_overrides() -> Dict[str, Any]:
    """Read configuration overrides from environment variables."""
    overrides: Dict[str, Any] = {}

    for env_name, key in (("LOG_LEVEL", "level"), ("LOG_FILE", "file")):
        if os.getenv(env_name):
            overrides.setdefault("logging", {})[key] = os.getenv(env_name)

    strict = os.getenv("SCSS_STYLE_STRICT")
    if strict:
        overrides.setdefault("validators", {})["strict_mode"] = strict.lower() in _TRUTHY

    max_nesting = _env_int("SCSS_STYLE_MAX_NESTING")
    if max_nesting is not None:
        overrides.setdefault("rules", {})["max_nesting_depth"] = max_nesting

    cache_size = _env_int("CACHE_SIZE")
    if cache_size is not None:
        overrides.setdefault("performance", {})["cache_size"] = cache_size

    return overrides


def _deep_update(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> None:
    """Merge ``update_dict`` into ``base_dict`` in place, recursing into nested mappings."""
    for key, value in update_dict.items():
        current = base_dict.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_update(current, value)
        else:
            base_dict[key] = value


def save_config(config: StyleMCPConfig, config_path: Optional[str] = None) -> None:
    """Write the configuration as YAML, creating parent directories."""
    path = Path(config_path) if config_path is not None else get_default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
