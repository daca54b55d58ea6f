"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults. A few values can be overridden from
the environment so deployments don't need a config file at all.

Usage:
    from coursetrack.config.app_config import load_app_config

    config = load_app_config()
    db_path = config.storage.db_path
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

# Environment overrides
ENV_DB_PATH = "COURSETRACK_DB_PATH"
ENV_IDENTITY_URL = "SUPABASE_URL"


@dataclass
class IdentityConfig:
    """Configuration for the hosted identity provider."""

    base_url: str | None = None
    api_key_env: str | None = "SUPABASE_ANON_KEY"
    timeout_seconds: float = 10.0

    def get_api_key(self) -> str | None:
        """Get API key from environment variable."""
        if self.api_key_env:
            return os.environ.get(self.api_key_env)
        return None


@dataclass
class StorageConfig:
    """Configuration for the progress store."""

    db_path: str = "db/coursetrack.db"


@dataclass
class CourseConfig:
    """Tunable course rules."""

    quiz_master_threshold: int = 70


@dataclass
class AppConfig:
    """Application-wide configuration."""

    identity: IdentityConfig = field(default_factory=IdentityConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    course: CourseConfig = field(default_factory=CourseConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "identity": {
            "base_url": None,
            "api_key_env": "SUPABASE_ANON_KEY",
            "timeout_seconds": 10.0,
        },
        "storage": {
            "db_path": "db/coursetrack.db",
        },
        "course": {
            "quiz_master_threshold": 70,
        },
    }


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay environment variables on top of file/default values."""
    if db_path := os.environ.get(ENV_DB_PATH):
        data.setdefault("storage", {})["db_path"] = db_path
    if base_url := os.environ.get(ENV_IDENTITY_URL):
        data.setdefault("identity", {})["base_url"] = base_url
    return data


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    identity_data = data.get("identity") or {}
    identity = IdentityConfig(
        base_url=identity_data.get("base_url"),
        api_key_env=identity_data.get("api_key_env", "SUPABASE_ANON_KEY"),
        timeout_seconds=float(identity_data.get("timeout_seconds", 10.0)),
    )

    storage_data = data.get("storage") or {}
    storage = StorageConfig(
        db_path=str(storage_data.get("db_path", "db/coursetrack.db")),
    )

    course_data = data.get("course") or {}
    course = CourseConfig(
        quiz_master_threshold=int(course_data.get("quiz_master_threshold", 70)),
    )

    return AppConfig(identity=identity, storage=storage, course=course)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(_apply_env_overrides(data))
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
