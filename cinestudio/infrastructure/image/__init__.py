"""Image Infrastructure"""

from .adjustments import ImageAdjustments, apply_adjustments
from .gemini_image_provider import GeminiImageProvider
from .intake import load_source_image, load_source_images, select_image_files
from .mock_image_provider import MockImageProvider
from .normalizer import PillowImageNormalizer

__all__ = [
    "GeminiImageProvider",
    "ImageAdjustments",
    "MockImageProvider",
    "PillowImageNormalizer",
    "apply_adjustments",
    "load_source_image",
    "load_source_images",
    "select_image_files",
]
