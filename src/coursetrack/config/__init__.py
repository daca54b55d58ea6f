"""Configuration package for coursetrack."""

from coursetrack.config.app_config import (
    AppConfig,
    CourseConfig,
    IdentityConfig,
    StorageConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "CourseConfig",
    "IdentityConfig",
    "StorageConfig",
    "clear_config_cache",
    "load_app_config",
]
