"""Image Normalizer Repository Interface - Domain Layer"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..entity.image import NormalizedImage, SourceImage


class ImageFormatError(ValueError):
    """The source image could not be decoded"""
    pass


@dataclass(frozen=True)
class NormalizationProfile:
    """Resize/re-encode bounds for one request shape"""
    max_edge: int = 1536
    quality: int = 90


class ImageNormalizer(ABC):
    """Bounds image size and encoding before network transmission"""

    @abstractmethod
    def normalize(self, source: SourceImage, max_edge: int, quality: int) -> NormalizedImage:
        """Downscale and re-encode an image

        Args:
            source: Image to normalize (left untouched)
            max_edge: Maximum length of the longer edge in pixels
            quality: Encoder quality (1-95)

        Returns:
            Normalized image carrying the original decoded dimensions

        Raises:
            ImageFormatError: The source is corrupt or unsupported
        """
        pass
