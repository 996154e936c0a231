"""
Configuration management for feedcache.

Handles loading, validation, and access to cache configuration.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from feedcache.exceptions import ConfigError

# Global configuration instance
_config: Optional["FeedCacheAppConfig"] = None

DEFAULT_CACHE_DIRECTORY = Path.home() / ".cache" / "feedcache"


class MemoryCacheConfig(BaseModel):
    """In-process tier limits. Zero means unbounded."""
    max_entries: int = Field(default=0, ge=0)
    max_memory_bytes: int = Field(default=0, ge=0)
    expiry_seconds: Optional[float] = Field(default=None, gt=0)  # None = never expires
    enable_stats: bool = True


class DiskCacheConfig(BaseModel):
    """Persistent tier settings."""
    name: str = "feed"
    directory: Optional[str] = None  # defaults to ~/.cache/feedcache
    max_size_bytes: int = Field(default=0, ge=0)
    expiry_seconds: Optional[float] = Field(default=None, gt=0)
    enable_stats: bool = True

    @property
    def resolved_directory(self) -> Path:
        if self.directory:
            return Path(self.directory).expanduser()
        return DEFAULT_CACHE_DIRECTORY

    @property
    def database_path(self) -> Path:
        return self.resolved_directory / f"{self.name}.sqlite3"


class FeedConfig(BaseModel):
    """Feed cache configuration."""
    limit: int = Field(default=30, gt=0)
    memory: MemoryCacheConfig = Field(default_factory=MemoryCacheConfig)
    disk: DiskCacheConfig = Field(default_factory=DiskCacheConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = "logs/feedcache.log"
    max_size: str = "10MB"
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    to_console: bool = True
    to_file: bool = False


class FeedCacheAppConfig(BaseModel):
    """Main feedcache configuration."""
    feed: FeedConfig = Field(default_factory=FeedConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> FeedCacheAppConfig:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. Defaults to config.yaml in the
            working directory or project root.

    Returns:
        Loaded and validated configuration.

    Raises:
        ConfigError: If the file exists but cannot be parsed or validated.
    """
    global _config

    if config_path is None:
        possible_paths = [
            Path("config.yaml"),
            Path(__file__).parent.parent / "config.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data: dict[str, Any] = {}

    if config_path and Path(config_path).exists():
        try:
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config file {config_path}", config_path, e) from e
        if not isinstance(config_data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping", config_path)

    # Apply environment variable overrides
    env_overrides = _get_env_overrides()
    _deep_merge(config_data, env_overrides)

    try:
        _config = FeedCacheAppConfig(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}", config_path, e) from e
    return _config


def get_config() -> FeedCacheAppConfig:
    """
    Get the current configuration.

    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> FeedCacheAppConfig:
    """Reload configuration from disk."""
    global _config
    _config = None
    return load_config()


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_map = {
        "FEEDCACHE_CACHE_DIR": ("feed", "disk", "directory"),
        "FEEDCACHE_FEED_LIMIT": ("feed", "limit"),
        "FEEDCACHE_LOG_LEVEL": ("logging", "level"),
        "FEEDCACHE_LOG_FILE": ("logging", "file"),
    }

    # Paths are taken verbatim
    raw_vars = {"FEEDCACHE_CACHE_DIR", "FEEDCACHE_LOG_FILE", "FEEDCACHE_LOG_LEVEL"}

    for env_var, path in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            parsed = value if env_var in raw_vars else _parse_env_value(value)
            _set_nested(overrides, path, parsed)

    return overrides


def _parse_env_value(value: str) -> Any:
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

    return value


def _set_nested(d: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested dictionary value from a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
