"""Configuration Management - Infrastructure Layer"""

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field
import yaml

from ...domain.repository.image_normalizer import NormalizationProfile


@dataclass
class GenerationConfig:
    """Remote generation service configuration"""
    model: str = "gemini-3-pro-image-preview"
    api_key: str = ""
    base_url: str = ""
    timeout_seconds: float = 120.0


@dataclass
class NormalizationConfig:
    """Normalization profiles

    Dual-image requests carry two payloads, so their profile is smaller.
    """
    single: NormalizationProfile = field(default_factory=NormalizationProfile)
    dual: NormalizationProfile = field(
        default_factory=lambda: NormalizationProfile(max_edge=1280, quality=90)
    )


@dataclass
class BatchConfig:
    """Batch run configuration"""
    max_items: int = 20


@dataclass
class StorageConfig:
    """History store configuration"""
    database_url: str = "sqlite+aiosqlite:///data/history.db"
    page_size: int = 10


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "text"


@dataclass
class Settings:
    """Application settings"""
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    normalization: NormalizationConfig = field(default_factory=NormalizationConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings

        Args:
            config_path: Path to a YAML file (optional)

        Returns:
            Settings object
        """
        # 1. Resolve the config file path
        if config_path is None:
            # Default: <project root>/config/config.yaml
            project_root = Path(__file__).parent.parent.parent.parent
            config_path = project_root / "config" / "config.yaml"

        # 2. Load YAML
        config_data = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}

        # 3. Generation service (environment overrides the file)
        generation_data = config_data.get("generation", {})
        defaults = GenerationConfig()
        generation = GenerationConfig(
            model=os.getenv("GEMINI_MODEL", generation_data.get("model", defaults.model)),
            api_key=os.getenv(
                "GEMINI_API_KEY",
                os.getenv("API_KEY", generation_data.get("api_key", "")),
            ),
            base_url=generation_data.get("base_url", ""),
            timeout_seconds=float(
                generation_data.get("timeout_seconds", defaults.timeout_seconds)
            ),
        )

        # 4. Normalization profiles
        normalization_data = config_data.get("normalization", {})
        normalization = NormalizationConfig(
            single=_load_profile(normalization_data.get("single"), NormalizationConfig().single),
            dual=_load_profile(normalization_data.get("dual"), NormalizationConfig().dual),
        )

        # 5. Batch
        batch_data = config_data.get("batch", {})
        batch = BatchConfig(max_items=batch_data.get("max_items", 20))

        # 6. Storage
        storage_data = config_data.get("storage", {})
        storage = StorageConfig(
            database_url=os.getenv(
                "CINESTUDIO_DATABASE_URL",
                storage_data.get("database_url", StorageConfig().database_url),
            ),
            page_size=storage_data.get("page_size", 10),
        )

        # 7. Logging
        logging_data = config_data.get("logging", {})
        logging_config = LoggingConfig(
            level=os.getenv("LOG_LEVEL", logging_data.get("level", "INFO")),
            format=logging_data.get("format", "text"),
        )

        return cls(
            generation=generation,
            normalization=normalization,
            batch=batch,
            storage=storage,
            logging=logging_config,
        )


def _load_profile(data: Optional[dict], default: NormalizationProfile) -> NormalizationProfile:
    if not data:
        return default
    return NormalizationProfile(
        max_edge=int(data.get("max_edge", default.max_edge)),
        quality=int(data.get("quality", default.quality)),
    )


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Convenience wrapper around Settings.load

    Args:
        config_path: Path to a YAML file (optional)

    Returns:
        Settings object
    """
    return Settings.load(config_path)
