"""Batch Entities - Domain Layer"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .generation import ErrorKind
from .image import AspectRatio, GeneratedImage, SourceImage
from .style import StyleParameters


class InvalidTransitionError(ValueError):
    """Batch item moved against its lifecycle"""
    pass


class BatchStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (BatchStatus.DONE, BatchStatus.ERROR)


@dataclass
class BatchItem:
    """One source image within a batch run

    Lifecycle is pending -> processing -> done | error and never goes back.
    """

    id: str
    source: SourceImage
    status: BatchStatus = BatchStatus.PENDING
    result: Optional[GeneratedImage] = None
    error_kind: Optional[ErrorKind] = None
    error_detail: str = ""

    def mark_processing(self) -> None:
        self._advance(BatchStatus.PENDING, BatchStatus.PROCESSING)

    def mark_done(self, result: GeneratedImage) -> None:
        self._advance(BatchStatus.PROCESSING, BatchStatus.DONE)
        self.result = result

    def mark_failed(self, kind: ErrorKind, detail: str = "") -> None:
        self._advance(BatchStatus.PROCESSING, BatchStatus.ERROR)
        self.error_kind = kind
        self.error_detail = detail

    def _advance(self, expected: BatchStatus, target: BatchStatus) -> None:
        if self.status is not expected:
            raise InvalidTransitionError(
                f"Batch item {self.id} cannot move from {self.status.value} to {target.value}"
            )
        self.status = target


@dataclass(frozen=True)
class BatchPrompt:
    """Prompt and framing applied to one batch item"""

    prompt: str
    aspect_ratio: AspectRatio = AspectRatio.AUTO
    style: Optional[StyleParameters] = None

    def __post_init__(self) -> None:
        if not self.prompt:
            raise ValueError("Prompt cannot be empty")


@dataclass(frozen=True)
class BatchProgress:
    """Snapshot emitted after every item transition"""

    current: int
    total: int
    item_id: Optional[str] = None
    status: Optional[BatchStatus] = None
    is_complete: bool = False


@dataclass
class BatchResult:
    """Summary of a finished batch run"""

    items: List[BatchItem] = field(default_factory=list)

    @property
    def succeeded(self) -> List[BatchItem]:
        return [item for item in self.items if item.status is BatchStatus.DONE]

    @property
    def failed(self) -> List[BatchItem]:
        return [item for item in self.items if item.status is BatchStatus.ERROR]

    @property
    def preview(self) -> Optional[GeneratedImage]:
        """Result of the first completed item, used as the batch preview"""
        for item in self.items:
            if item.status is BatchStatus.DONE:
                return item.result
        return None


def create_batch(sources: Sequence[SourceImage], limit: Optional[int] = None) -> List[BatchItem]:
    """Create pending batch items for a multi-file selection

    Args:
        sources: Selected images, in display order
        limit: Maximum number of items to keep

    Returns:
        Fresh pending items
    """
    if limit is not None:
        sources = list(sources)[:limit]
    stamp = int(time.time() * 1000)
    return [
        BatchItem(id=f"batch-{stamp}-{index}-{uuid.uuid4().hex[:8]}", source=source)
        for index, source in enumerate(sources)
    ]


def retry_failed(items: Sequence[BatchItem]) -> List[BatchItem]:
    """Build a new batch from the items that ended in error"""
    return create_batch([item.source for item in items if item.status is BatchStatus.ERROR])
