import io
from datetime import datetime, timedelta

import pytest
from PIL import Image

from cinestudio.domain.entity.generation import GenerationMode
from cinestudio.domain.entity.history import HistoryEntry
from cinestudio.domain.entity.image import AspectRatio, GeneratedImage, SourceImage


def encode_image(width, height, fmt="PNG", mode="RGB", color=(200, 120, 40)):
    if mode == "RGBA":
        color = color + (128,)
    picture = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    picture.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def image_factory():
    """Build SourceImages of a given size"""

    def make(width=800, height=600, fmt="PNG", mode="RGB"):
        mime_type = "image/png" if fmt == "PNG" else f"image/{fmt.lower()}"
        return SourceImage(data=encode_image(width, height, fmt, mode), mime_type=mime_type)

    return make


@pytest.fixture
def entry_factory():
    """Build HistoryEntries with increasing timestamps"""
    base = datetime(2024, 5, 1, 12, 0, 0)

    def make(index=0, mode=GenerationMode.SINGLE):
        return HistoryEntry(
            id=f"entry-{index}",
            image=GeneratedImage(data=encode_image(4, 4), mime_type="image/png"),
            prompt=f"prompt {index}",
            aspect_ratio=AspectRatio.SQUARE,
            mode=mode,
            created_at=base + timedelta(minutes=index),
        )

    return make
