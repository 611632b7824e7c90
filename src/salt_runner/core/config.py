"""User configuration stored under the salt cache directory.

The config is a small YAML record::

    editor: vi
    pinned_paths:
      my-app: /home/me/src/my-app
    watcher:
      debounce_secs: 1.0

It is read once per run, created with defaults when missing, and rewritten in
full on every pin/unpin. Callers pass the loaded object around explicitly.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from salt_runner.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CACHE_DIR_ENV = "SALT_HOME"
DEFAULT_CACHE_DIR_NAME = ".salt"
CONFIG_FILE = "config.yaml"
DEFAULT_EDITOR = "vi"
DEFAULT_DEBOUNCE_SECS = 1.0


class WatcherConfig(BaseModel):
    """Settings for ``salt watch``."""

    model_config = ConfigDict(extra="forbid")

    debounce_secs: float = Field(
        default=DEFAULT_DEBOUNCE_SECS,
        gt=0,
        description="Interval over which file changes are coalesced",
    )


class SaltConfig(BaseModel):
    """Per-user salt configuration.

    Attributes:
        editor: Program used by ``salt edit``. None disables the verb.
        pinned_paths: Project name to absolute directory, in pin order.
        watcher: File-watch settings.

    """

    model_config = ConfigDict(extra="forbid")

    editor: str | None = DEFAULT_EDITOR
    pinned_paths: dict[str, str] = Field(default_factory=dict)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)

    @field_validator("pinned_paths", mode="before")
    @classmethod
    def coerce_none_to_empty_dict(cls, v: object) -> object:
        """YAML parses an empty mapping key as None."""
        if v is None:
            return {}
        return v

    def pinned_name_for(self, path: Path) -> str | None:
        """Return the pin name registered for ``path``, if any."""
        target = str(path)
        for name, pinned in self.pinned_paths.items():
            if pinned == target:
                return name
        return None


def get_cache_dir() -> Path:
    """Return the cache directory (``$SALT_HOME`` or ``~/.salt``)."""
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_CACHE_DIR_NAME


def load_config(cache_dir: Path | None = None) -> SaltConfig:
    """Load the config, creating a default one on first run.

    Args:
        cache_dir: Directory holding config.yaml. Defaults to get_cache_dir().

    Returns:
        The validated config.

    Raises:
        ConfigError: If the file exists but is not valid YAML or fails
            validation.

    """
    cache_dir = cache_dir or get_cache_dir()
    config_path = cache_dir / CONFIG_FILE

    if not config_path.exists():
        config = SaltConfig()
        logger.info("No config at %s, writing defaults", config_path)
        write_config(config, cache_dir)
        return config

    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    try:
        config = SaltConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config in {config_path}: {e}") from e

    logger.debug("Loaded config from %s: %d pinned", config_path, len(config.pinned_paths))
    return config


def write_config(config: SaltConfig, cache_dir: Path | None = None) -> Path:
    """Rewrite the whole config file.

    Args:
        config: Config to persist.
        cache_dir: Directory holding config.yaml. Created if missing.

    Returns:
        Path of the written file.

    Raises:
        ConfigError: If the file cannot be written.

    """
    cache_dir = cache_dir or get_cache_dir()
    config_path = cache_dir / CONFIG_FILE
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
        with config_path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"cannot write {config_path}: {e}") from e
    logger.debug("Wrote config to %s", config_path)
    return config_path
