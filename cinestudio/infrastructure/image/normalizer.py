"""Pillow Image Normalizer - Infrastructure Layer"""

import io
import logging
from typing import Tuple

from PIL import Image, ImageOps

from ...domain.entity.image import NormalizedImage, SourceImage
from ...domain.repository.image_normalizer import ImageFormatError, ImageNormalizer

logger = logging.getLogger(__name__)

TARGET_FORMAT = "JPEG"
TARGET_MIME_TYPE = "image/jpeg"


def fit_within(width: int, height: int, max_edge: int) -> Tuple[int, int]:
    """Scale (width, height) so the longer edge is at most max_edge

    Dimensions already within the bound are returned unchanged.
    """
    if width <= max_edge and height <= max_edge:
        return width, height
    if width > height:
        return max_edge, max(1, round(height * max_edge / width))
    return max(1, round(width * max_edge / height)), max_edge


class PillowImageNormalizer(ImageNormalizer):
    """Decodes with Pillow and re-encodes every image as JPEG"""

    def normalize(self, source: SourceImage, max_edge: int, quality: int) -> NormalizedImage:
        if max_edge <= 0:
            raise ValueError("max_edge must be positive")
        if not (1 <= quality <= 95):
            raise ValueError("quality must be between 1 and 95")

        # 1. Decode
        try:
            with Image.open(io.BytesIO(source.data)) as opened:
                opened.load()
                image = ImageOps.exif_transpose(opened)
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageFormatError(f"Unsupported or corrupt image: {e}") from e

        original_width, original_height = image.size

        # 2. Bound the longer edge
        width, height = fit_within(original_width, original_height, max_edge)
        if (width, height) != image.size:
            image = image.resize((width, height), Image.Resampling.LANCZOS)

        # 3. Re-encode; JPEG carries no alpha, so flatten onto black
        image = _to_rgb(image)
        buffer = io.BytesIO()
        image.save(buffer, format=TARGET_FORMAT, quality=quality, optimize=True)
        data = buffer.getvalue()

        logger.debug(
            f"Normalized {source.mime_type} {original_width}x{original_height} "
            f"-> {width}x{height} ({len(data)} bytes)"
        )
        return NormalizedImage(
            data=data,
            mime_type=TARGET_MIME_TYPE,
            width=width,
            height=height,
            original_width=original_width,
            original_height=original_height,
        )


def _to_rgb(image: Image.Image) -> Image.Image:
    if image.mode == "RGB":
        return image
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (0, 0, 0))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")
