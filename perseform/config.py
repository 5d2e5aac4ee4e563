"""Configuration for perseform.

Settings are resolved in this order:

1. Explicit overrides passed by the caller (e.g. CLI options)
2. Environment variables (``PERSEFORM_STORE_BACKEND``, ``PERSEFORM_STORE_PATH``)
3. ``config.yaml`` in the perseform home directory
4. Built-in defaults

The home directory is ``$PERSEFORM_HOME`` if set, else
``~/.config/perseform``.
"""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ValidationError

from perseform.core.errors import PerseformError

ENV_HOME = "PERSEFORM_HOME"
ENV_STORE_BACKEND = "PERSEFORM_STORE_BACKEND"
ENV_STORE_PATH = "PERSEFORM_STORE_PATH"


class ConfigError(PerseformError):
    """Raised when the config file cannot be parsed."""

    pass


class Settings(BaseModel):
    """Resolved perseform settings."""

    store_backend: Literal["memory", "json"] = "json"
    store_path: Path | None = None

    def resolved_store_path(self) -> Path:
        """Directory for the JSON store, defaulting under the home directory."""
        if self.store_path is not None:
            return self.store_path.expanduser()
        return get_perseform_home() / "store"


def get_perseform_home() -> Path:
    """Return the perseform home directory."""
    env_home = os.environ.get(ENV_HOME)
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / ".config" / "perseform"


def get_config_path() -> Path:
    """Return the path of the config file."""
    return get_perseform_home() / "config.yaml"


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load the YAML config file.

    Args:
        path: Config file path. Defaults to ``get_config_path()``.

    Returns:
        The parsed mapping, or an empty dict if the file doesn't exist.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    path = path or get_config_path()
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_settings(config_path: Path | None = None, **overrides: Any) -> Settings:
    """Resolve settings from overrides, environment, config file and defaults.

    Args:
        config_path: Config file path. Defaults to ``get_config_path()``.
        **overrides: Settings fields to force. None values are ignored.

    Returns:
        The resolved Settings.

    Raises:
        ConfigError: If the config file or resulting settings are invalid.
    """
    values: dict[str, Any] = load_config_file(config_path)

    env_backend = os.environ.get(ENV_STORE_BACKEND)
    if env_backend:
        values["store_backend"] = env_backend
    env_path = os.environ.get(ENV_STORE_PATH)
    if env_path:
        values["store_path"] = env_path

    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid perseform settings: {e}") from e


def write_config_file(settings: Settings, path: Path | None = None) -> Path:
    """Write settings to the YAML config file, creating its directory."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump(mode="json", exclude_none=True)
    with open(path, "w") as f:
        yaml.dump(data, f, sort_keys=False)
    return path
