"""
Endb Configuration — per-instance options, optionally loaded from files.

Precedence for EndbConfig.load() (highest to lowest):
1. Explicit overrides (passed in code)
2. Environment variables (ENDB_*)
3. Project config (./endb.toml)
4. Defaults (hardcoded)

Environment variable mapping:
    ENDB_URI → uri
    ENDB_ADAPTER → adapter
    ENDB_NAMESPACE → namespace
    ENDB_TABLE → table
    ENDB_COLLECTION → collection
    ENDB_KEY_SIZE → key_size
    ENDB_BUSY_TIMEOUT → busy_timeout
    ENDB_STRICT → strict

Constructing EndbConfig directly (as Endb does) never reads files or
the environment.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from endb.core.errors import ConfigError
from endb.util import deserialize as default_deserialize
from endb.util import serialize as default_serialize


class EndbConfig(BaseModel):
    """
    Options for a single Endb instance.

    Frozen after construction. Unknown keyword arguments are kept
    as backend-specific options and exposed through `backend_options`.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    namespace: str = "endb"
    serialize: Callable[[Any], Any] = Field(default=default_serialize, exclude=True)
    deserialize: Callable[[Any], Any] = Field(default=default_deserialize, exclude=True)
    adapter: str | None = None
    uri: str | None = None
    collection: str = "endb"
    table: str = "endb"
    key_size: int = Field(default=255, gt=0)
    busy_timeout: int | None = None
    strict: bool = False

    @property
    def backend_options(self) -> dict[str, Any]:
        """Extra options passed through untouched to the adapter."""
        return dict(self.model_extra or {})

    @staticmethod
    def load(
        overrides: dict[str, Any] | None = None,
        project_path: Path | None = None,
    ) -> EndbConfig:
        """
        Load configuration from all sources and merge.

        Precedence: overrides > env vars > project toml > defaults
        """
        merged: dict[str, Any] = {}

        # Layer 1: Project config (./endb.toml)
        project_config_path = project_path or Path.cwd() / "endb.toml"
        if project_config_path.exists():
            project_data = _load_toml(project_config_path)
            merged.update(project_data.get("endb", project_data))

        # Layer 2: Environment variables
        merged.update(_load_from_env())

        # Layer 3: Explicit overrides
        if overrides:
            merged.update({k: v for k, v in overrides.items() if v is not None})

        # Substitute ${ENV_VAR} in string values
        _substitute_env_vars(merged)

        try:
            return EndbConfig(**merged)
        except Exception as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Internal Helpers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


_ENV_MAPPING = {
    "ENDB_URI": "uri",
    "ENDB_ADAPTER": "adapter",
    "ENDB_NAMESPACE": "namespace",
    "ENDB_TABLE": "table",
    "ENDB_COLLECTION": "collection",
    "ENDB_KEY_SIZE": "key_size",
    "ENDB_BUSY_TIMEOUT": "busy_timeout",
    "ENDB_STRICT": "strict",
}

# Fields that must stay strings even when they look numeric
_STRING_FIELDS = {"uri", "adapter", "namespace", "table", "collection"}


def _load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e


def _load_from_env() -> dict[str, Any]:
    """Load configuration from ENDB_* environment variables."""
    result: dict[str, Any] = {}

    for env_var, key in _ENV_MAPPING.items():
        value = os.environ.get(env_var)
        if value is not None:
            result[key] = value if key in _STRING_FIELDS else _convert_value(value)

    return result


def _convert_value(value: str) -> Any:
    """Convert string value to appropriate type."""
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
    return value


def _substitute_env_vars(data: dict) -> None:
    """Substitute ${ENV_VAR} patterns in string values (mutates data)."""
    pattern = re.compile(r"\$\{([^}]+)\}")

    for key, value in data.items():
        if isinstance(value, dict):
            _substitute_env_vars(value)
        elif isinstance(value, str):
            for var_name in pattern.findall(value):
                env_value = os.environ.get(var_name, "")
                value = value.replace(f"${{{var_name}}}", env_value)
            data[key] = value
