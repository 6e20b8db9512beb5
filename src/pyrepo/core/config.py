# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Layered configuration with YAML/TOML files, env vars, and property binding."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_MAX_PLACEHOLDER_DEPTH = 10

_CONFIG_PROPERTIES_ATTR = "__pyrepo_config_prefix__"

ENV_PREFIX = "PYREPO_"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a class as bindable to a configuration prefix.

    Works with dataclasses and Pydantic ``BaseModel`` subclasses; the
    latter are validated with ``model_validate`` when bound.

    Usage::

        @config_properties(prefix="pyrepo.repository")
        class RepositoryProperties(BaseModel):
            per_page: int = Field(default=15, ge=1)
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Nested configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (``pyrepo.cache.ttl`` -> ``PYREPO_CACHE_TTL``)
    2. Configuration dict / file values
    3. Framework defaults (``pyrepo-defaults.yaml``) when loaded from a file
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    @classmethod
    def defaults(cls) -> Config:
        """Configuration holding only the packaged framework defaults."""
        return cls(cls._load_framework_defaults())

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Load a YAML or TOML file, merged over the framework defaults."""
        path = Path(path)
        data = cls._load_framework_defaults() if load_defaults else {}
        if path.is_file():
            data = cls._deep_merge(data, cls._load_config_data(path))
        return cls(data)

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f) or {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_framework_defaults() -> dict[str, Any]:
        defaults_file = importlib.resources.files("pyrepo.resources").joinpath("pyrepo-defaults.yaml")
        with importlib.resources.as_file(defaults_file) as p, open(p) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge *override* into *base*; override values win."""
        merged = dict(base)
        for key, value in override.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        String values may hold ``${ENV_VAR}``, ``${other.key}`` or
        ``${key:default}`` placeholders, resolved on read.
        """
        env_base = key.removeprefix("pyrepo.")
        env_val = os.environ.get(ENV_PREFIX + env_base.upper().replace(".", "_").replace("-", "_"))
        if env_val is not None:
            return env_val

        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._resolve_placeholders(value)
        return value

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        if _depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Circular placeholder reference while resolving '{value}'")

        def _replace(match: re.Match[str]) -> str:
            ref_key, _, default_val = match.group(1).partition(":")

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            referenced = self._lookup(ref_key)
            if referenced is not None:
                resolved = str(referenced)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved

            if ":" in match.group(1):
                return default_val
            raise ValueError(f"Cannot resolve placeholder '${{{match.group(1)}}}'")

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get the nested dict stored under *prefix* (empty if absent)."""
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Bind a ``@config_properties`` dataclass or Pydantic model."""
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = self.get_section(prefix)

        if issubclass(config_cls, BaseModel):
            try:
                return config_cls.model_validate(section)
            except ValidationError as exc:
                raise ValueError(
                    f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}"
                ) from exc

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            if field.name not in section:
                continue
            value = section[field.name]
            expected_type = hints.get(field.name)
            if isinstance(value, str):
                if expected_type is int:
                    value = int(value)
                elif expected_type is bool:
                    value = value.lower() in ("true", "1", "yes")
            kwargs[field.name] = value
        return config_cls(**kwargs)
