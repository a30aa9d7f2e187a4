"""CineStudio composition root

Wires settings, logging, the image provider, the normalizer and the
history store into a ready-to-use Studio.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .application.usecase.generate_image import GenerateImageUseCase
from .application.usecase.manage_history import HistoryFeed
from .application.usecase.run_batch import RunBatchUseCase
from .domain.entity.batch import BatchItem, create_batch
from .domain.entity.image import GeneratedImage, ImageBlob, SourceImage
from .domain.repository.history_store import HistoryStore
from .domain.repository.image_provider import ImageProvider
from .infrastructure.config.settings import Settings, load_settings
from .infrastructure.image import (
    GeminiImageProvider,
    ImageAdjustments,
    MockImageProvider,
    PillowImageNormalizer,
    apply_adjustments,
    load_source_images,
)
from .infrastructure.image.intake import PathLike
from .infrastructure.storage.memory_history_store import InMemoryHistoryStore
from .infrastructure.storage.sqlalchemy_history_store import SqlAlchemyHistoryStore

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """Configure logging

    Args:
        level: Log level name
        log_format: json or text
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format == "json":
        logging.basicConfig(
            level=log_level,
            format='{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}',
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def create_image_provider(settings: Settings) -> ImageProvider:
    """Create the image provider

    Falls back to the offline mock provider when no API key is configured.
    """
    generation = settings.generation
    if not generation.api_key:
        logger.warning("No Gemini API key configured, using the mock image provider")
        return MockImageProvider()

    provider = GeminiImageProvider.from_api_key(
        api_key=generation.api_key,
        model=generation.model,
        base_url=generation.base_url or None,
        timeout=generation.timeout_seconds,
    )
    if not provider.supports_model(generation.model):
        logger.warning(f"Model '{generation.model}' is not in the known image model list")
    logger.info(f"Initialized Gemini image provider: model={generation.model}")
    return provider


async def create_history_store(settings: Settings) -> HistoryStore:
    """Create and initialize the history store

    An empty database URL selects the in-memory store.
    """
    database_url = settings.storage.database_url
    if not database_url:
        logger.info("History store: in-memory")
        return InMemoryHistoryStore()

    store = SqlAlchemyHistoryStore.from_url(database_url)
    await store.initialize()
    logger.info(f"History store: {database_url}")
    return store


@dataclass
class Studio:
    """Entry points exposed to a UI"""

    settings: Settings
    history_store: HistoryStore
    history: HistoryFeed
    generate: GenerateImageUseCase
    batch: RunBatchUseCase

    def new_batch(self, sources: Sequence[SourceImage]) -> List[BatchItem]:
        """Create pending items, capped at the configured batch size"""
        return create_batch(sources, limit=self.settings.batch.max_items)

    def load_images(self, paths: Iterable[PathLike], allow_multiple: bool = True) -> List[SourceImage]:
        """Read a file selection, keeping image files up to the batch size"""
        return load_source_images(paths, allow_multiple, limit=self.settings.batch.max_items)

    def adjust(self, image: ImageBlob, adjustments: ImageAdjustments) -> GeneratedImage:
        """Apply manual adjustments to a result before download"""
        return apply_adjustments(image, adjustments)

    async def close(self) -> None:
        if isinstance(self.history_store, SqlAlchemyHistoryStore):
            await self.history_store.close()


async def create_studio(
    settings: Optional[Settings] = None,
    config_path: Optional[Path] = None,
    provider: Optional[ImageProvider] = None,
    history_store: Optional[HistoryStore] = None,
) -> Studio:
    """Build a Studio from settings

    Args:
        settings: Preloaded settings (optional)
        config_path: YAML file used when settings are not given
        provider: Image provider override, e.g. for tests
        history_store: History store override

    Returns:
        Wired Studio with the first history page loaded
    """
    # 1. Settings and logging
    if settings is None:
        settings = load_settings(config_path)
    setup_logging(settings.logging.level, settings.logging.format)

    # 2. Collaborators
    if provider is None:
        provider = create_image_provider(settings)
    if history_store is None:
        history_store = await create_history_store(settings)
    normalizer = PillowImageNormalizer()

    # 3. Use cases
    history = HistoryFeed(history_store, page_size=settings.storage.page_size)
    generate = GenerateImageUseCase(
        provider=provider,
        normalizer=normalizer,
        history=history,
        single_profile=settings.normalization.single,
        dual_profile=settings.normalization.dual,
    )
    batch = RunBatchUseCase(
        provider=provider,
        normalizer=normalizer,
        history=history,
        profile=settings.normalization.single,
    )

    await history.load_more()
    logger.info("Studio ready")
    return Studio(
        settings=settings,
        history_store=history_store,
        history=history,
        generate=generate,
        batch=batch,
    )
