"""Configuration Infrastructure"""

from .settings import (
    AuthConfig,
    GenerationConfig,
    LoggingConfig,
    ProviderConfig,
    ServerConfig,
    Settings,
    StagingConfig,
    StorageConfig,
    load_settings,
)

__all__ = [
    "AuthConfig",
    "GenerationConfig",
    "LoggingConfig",
    "ProviderConfig",
    "ServerConfig",
    "Settings",
    "StagingConfig",
    "StorageConfig",
    "load_settings",
]
