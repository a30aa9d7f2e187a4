"""History Entities - Domain Layer"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from .generation import GenerationMode
from .image import AspectRatio, GeneratedImage
from .style import StyleParameters


@dataclass(frozen=True)
class HistoryEntry:
    """Durable record of one successful generation"""

    image: GeneratedImage
    prompt: str
    aspect_ratio: AspectRatio
    mode: GenerationMode = GenerationMode.SINGLE
    style: Optional[StyleParameters] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        """Validate entity invariants"""
        if not self.prompt:
            raise ValueError("Prompt cannot be empty")

        if not self.aspect_ratio.is_concrete:
            raise ValueError("History entries store a resolved aspect ratio")
