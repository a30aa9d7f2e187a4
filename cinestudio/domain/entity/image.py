"""Image Entities - Domain Layer"""

import base64
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[^;,]*);base64,(?P<data>.*)$", re.DOTALL)
DEFAULT_MIME_TYPE = "image/jpeg"


class AspectRatio(str, Enum):
    """Supported output aspect ratios

    AUTO is a sentinel: it is resolved to a concrete member from the source
    image dimensions and is never sent to the remote service.
    """

    SQUARE = "1:1"
    PORTRAIT = "3:4"
    LANDSCAPE = "4:3"
    TALL = "9:16"
    WIDE = "16:9"
    AUTO = "AUTO"

    @property
    def is_concrete(self) -> bool:
        return self is not AspectRatio.AUTO

    @property
    def value_ratio(self) -> float:
        """Numeric width/height ratio of a concrete member"""
        if self is AspectRatio.AUTO:
            raise ValueError("AUTO has no numeric ratio")
        width, height = self.value.split(":")
        return int(width) / int(height)

    @classmethod
    def concrete(cls):
        """Concrete members in their fixed enumeration order"""
        return [ratio for ratio in cls if ratio.is_concrete]


@dataclass(frozen=True)
class ImageBlob:
    """Binary image payload with its MIME type"""

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("Image data cannot be empty")
        if not self.mime_type:
            raise ValueError("MIME type cannot be empty")

    @property
    def size(self) -> int:
        return len(self.data)

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    @classmethod
    def from_data_url(cls, data_url: str):
        """Build an image from a ``data:<mime>;base64,<payload>`` string.

        A bare base64 payload without the ``data:`` prefix is accepted and
        assumed to be JPEG.
        """
        match = DATA_URL_PATTERN.match(data_url)
        if match:
            mime_type = match.group("mime") or DEFAULT_MIME_TYPE
            payload = match.group("data")
        else:
            mime_type = DEFAULT_MIME_TYPE
            payload = data_url
        try:
            data = base64.b64decode(payload, validate=True)
        except ValueError as e:
            raise ValueError(f"Invalid base64 image payload: {e}") from e
        return cls(data=data, mime_type=mime_type)


@dataclass(frozen=True)
class SourceImage(ImageBlob):
    """User-supplied image (file picker, drag-drop, camera or crop tool)"""

    name: Optional[str] = None


@dataclass(frozen=True)
class NormalizedImage(ImageBlob):
    """A source image resized to a bounded edge and re-encoded

    ``width``/``height`` describe the encoded pixels, while
    ``original_width``/``original_height`` keep the decoded size of the
    source so that the aspect ratio can still be resolved.
    """

    width: int = 0
    height: int = 0
    original_width: int = 0
    original_height: int = 0

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Dimensions must be positive")
        if self.original_width <= 0 or self.original_height <= 0:
            raise ValueError("Original dimensions must be positive")

    @property
    def longest_edge(self) -> int:
        return max(self.width, self.height)


@dataclass(frozen=True)
class GeneratedImage(ImageBlob):
    """Image returned by the generation service"""

    mime_type: str = "image/png"
