"""Generation Entities - Domain Layer"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
from uuid import uuid4

from .image import AspectRatio, GeneratedImage, NormalizedImage


class ErrorKind(str, Enum):
    """Closed taxonomy of generation failures"""

    FORMAT_ERROR = "format_error"
    SAFETY_BLOCKED = "safety_blocked"
    REFUSAL = "refusal"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"

    @property
    def retryable(self) -> bool:
        """Whether re-issuing the identical request can succeed"""
        return self not in (ErrorKind.SAFETY_BLOCKED, ErrorKind.FORMAT_ERROR)


class GenerationMode(str, Enum):
    SINGLE = "single"
    BATCH = "batch"
    FACE_SWAP = "faceswap"


class GenerationError(Exception):
    """Structured failure raised by the transport layer"""

    def __init__(self, kind: ErrorKind, detail: str = ""):
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail


@dataclass(frozen=True)
class GenerationRequest:
    """One "transform image with prompt" call

    Built fresh for every call, including retries. ``aspect_ratio`` is None
    when the service should keep the framing of the first image.
    """

    images: Tuple[NormalizedImage, ...]
    prompt: str
    aspect_ratio: Optional[AspectRatio] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        """Validate entity invariants"""
        if not self.prompt:
            raise ValueError("Prompt cannot be empty")

        if not (1 <= len(self.images) <= 2):
            raise ValueError("A request carries one or two images")

        if self.aspect_ratio is AspectRatio.AUTO:
            raise ValueError("AUTO must be resolved before building a request")

    @property
    def is_dual(self) -> bool:
        return len(self.images) == 2


@dataclass(frozen=True)
class GenerationOutcome:
    """Tagged result of a generation: exactly one of image or error_kind"""

    image: Optional[GeneratedImage] = None
    error_kind: Optional[ErrorKind] = None
    detail: str = ""

    def __post_init__(self) -> None:
        if (self.image is None) == (self.error_kind is None):
            raise ValueError("Outcome must hold either an image or an error kind")

    @classmethod
    def success(cls, image: GeneratedImage) -> "GenerationOutcome":
        return cls(image=image)

    @classmethod
    def failure(cls, kind: ErrorKind, detail: str = "") -> "GenerationOutcome":
        return cls(error_kind=kind, detail=detail)

    @property
    def is_success(self) -> bool:
        return self.image is not None

    @property
    def retryable(self) -> bool:
        return self.error_kind is not None and self.error_kind.retryable
