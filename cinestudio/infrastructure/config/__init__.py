"""Configuration Infrastructure"""

from .settings import (
    Settings,
    GenerationConfig,
    NormalizationConfig,
    NormalizationProfile,
    BatchConfig,
    StorageConfig,
    LoggingConfig,
    load_settings,
)

__all__ = [
    "Settings",
    "GenerationConfig",
    "NormalizationConfig",
    "NormalizationProfile",
    "BatchConfig",
    "StorageConfig",
    "LoggingConfig",
    "load_settings",
]
