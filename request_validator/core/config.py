"""
Request Validator Configuration
===============================

Layered configuration for the validation engine with support for:
- Built-in defaults
- Environment variables (REQUEST_VALIDATOR_*)
- Runtime overrides
- Hierarchical access with dot notation

Configuration Priority (highest to lowest):
1. Runtime overrides (``config.set``)
2. Environment variables
3. Sources added with ``add_source``
4. Defaults

Environment variables use a double underscore between levels:

    REQUEST_VALIDATOR_VALIDATION__STATUS_CODE=400   ->  validation.status_code
    REQUEST_VALIDATOR_LOGGING__LEVEL=DEBUG          ->  logging.level

Example:
    config = get_config()
    header = config.get("validation.error_header")
    status = config.get_int("validation.status_code", 422)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, TypeVar, Union

from request_validator.utils.helpers import deep_merge

T = TypeVar("T")

ENV_PREFIX = "REQUEST_VALIDATOR_"

DEFAULTS: Dict[str, Any] = {
    "validation": {
        "error_header": "Request Validation Error.",
        "status_code": 422,
        "nested_message": "The provided value is invalid",
    },
    "logging": {
        "level": "WARNING",
        "format": "text",
    },
}


@dataclass
class ConfigSource:
    """Represents a configuration source with priority."""
    name: str
    data: Dict[str, Any]
    priority: int = 0


class Config:
    """
    Configuration container.

    Example:
        config = Config()
        config.set("validation.status_code", 400)

        config.get("validation.status_code")          # 400
        config.get("validation.missing", "default")   # "default"
    """

    def __init__(
        self,
        defaults: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Initialize configuration.

        Args:
            defaults: Base values (the package defaults when omitted)
            environ: Environment to read overrides from (``os.environ`` when omitted)
        """
        self._sources: List[ConfigSource] = []
        self._cache: Dict[str, Any] = {}
        self._merged: Dict[str, Any] = {}
        self._dirty = True

        self.add_source("defaults", dict(defaults if defaults is not None else DEFAULTS), priority=0)
        self._load_env_overrides(os.environ if environ is None else environ)

    def _load_env_overrides(self, environ: Mapping[str, str]) -> None:
        """Load overrides from REQUEST_VALIDATOR_* environment variables."""
        overrides: Dict[str, Any] = {}

        for key, value in environ.items():
            if key.startswith(ENV_PREFIX):
                # REQUEST_VALIDATOR_LOGGING__LEVEL -> logging.level
                config_key = key[len(ENV_PREFIX):].lower().replace("__", ".")
                overrides[config_key] = self._parse_env_value(value)

        if overrides:
            self.add_source("env_vars", self._unflatten(overrides), priority=100)

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        # JSON (for complex values)
        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _unflatten(self, flat: Dict[str, Any]) -> Dict[str, Any]:
        """Convert flat dot-notation keys to nested dict."""
        result: Dict[str, Any] = {}

        for key, value in flat.items():
            parts = key.split(".")
            current = result

            for part in parts[:-1]:
                current = current.setdefault(part, {})

            current[parts[-1]] = value

        return result

    def add_source(
        self,
        name: str,
        data: Dict[str, Any],
        priority: int = 10,
    ) -> None:
        """Add a configuration source."""
        self._sources.append(ConfigSource(name=name, data=data, priority=priority))
        self._dirty = True
        self._cache.clear()

    def _merge(self) -> None:
        """Merge all sources into a single configuration."""
        if not self._dirty:
            return

        # Lower priority first, so higher overrides
        self._merged = {}
        for source in sorted(self._sources, key=lambda s: s.priority):
            deep_merge(self._merged, source.data)

        self._dirty = False
        self._cache.clear()

    def get(
        self,
        key: str,
        default: T = None,
    ) -> Union[Any, T]:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "validation.status_code")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        self._merge()

        if key in self._cache:
            return self._cache[key]

        current: Any = self._merged
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        self._cache[key] = current
        return current

    def get_int(self, key: str, default: int = 0) -> int:
        """Get configuration value as integer."""
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get configuration value as boolean."""
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "yes", "1")
        return bool(value)

    def set(self, key: str, value: Any) -> None:
        """
        Set a runtime configuration value.

        Runtime values have the highest priority.
        """
        runtime_source = next((s for s in self._sources if s.name == "runtime"), None)
        if runtime_source is None:
            runtime_source = ConfigSource(name="runtime", data={}, priority=1000)
            self._sources.append(runtime_source)

        parts = key.split(".")
        current = runtime_source.data
        for part in parts[:-1]:
            current = current.setdefault(part, {})
        current[parts[-1]] = value

        self._dirty = True
        self._cache.clear()

    def has(self, key: str) -> bool:
        """Check if configuration key exists."""
        return self.get(key) is not None

    def section(self, prefix: str) -> Dict[str, Any]:
        """Get all values under a prefix."""
        value = self.get(prefix)
        if isinstance(value, dict):
            return dict(value)
        return {}

    def __getitem__(self, key: str) -> Any:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: str) -> bool:
        return self.has(key)


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the global instance so the next access re-reads the environment."""
    global _config
    _config = None
