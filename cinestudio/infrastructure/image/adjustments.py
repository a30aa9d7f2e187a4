"""Manual Image Adjustments - Infrastructure Layer

Brightness, contrast, saturation, sepia and blur applied to a generated
image before download. Output is always PNG.
"""

import io
from dataclasses import dataclass

from PIL import Image, ImageEnhance, ImageFilter, ImageOps

from ...domain.entity.image import GeneratedImage, ImageBlob
from ...domain.repository.image_normalizer import ImageFormatError

SEPIA_DARK = (56, 32, 16)
SEPIA_LIGHT = (255, 240, 192)


@dataclass(frozen=True)
class ImageAdjustments:
    brightness: int = 100  # 0-200
    contrast: int = 100    # 0-200
    saturation: int = 100  # 0-200
    sepia: int = 0         # 0-100
    blur: float = 0        # 0-10 px

    def __post_init__(self) -> None:
        for name in ("brightness", "contrast", "saturation"):
            if not (0 <= getattr(self, name) <= 200):
                raise ValueError(f"{name} must be between 0 and 200")
        if not (0 <= self.sepia <= 100):
            raise ValueError("sepia must be between 0 and 100")
        if not (0 <= self.blur <= 10):
            raise ValueError("blur must be between 0 and 10")

    @property
    def is_identity(self) -> bool:
        return self == ImageAdjustments()


def apply_adjustments(image: ImageBlob, adjustments: ImageAdjustments) -> GeneratedImage:
    """Apply the adjustments and re-encode as PNG

    Raises:
        ImageFormatError: The image cannot be decoded
    """
    try:
        with Image.open(io.BytesIO(image.data)) as opened:
            picture = opened.convert("RGB")
    except (OSError, ValueError) as e:
        raise ImageFormatError(f"Unsupported or corrupt image: {e}") from e

    if adjustments.brightness != 100:
        picture = ImageEnhance.Brightness(picture).enhance(adjustments.brightness / 100)
    if adjustments.contrast != 100:
        picture = ImageEnhance.Contrast(picture).enhance(adjustments.contrast / 100)
    if adjustments.saturation != 100:
        picture = ImageEnhance.Color(picture).enhance(adjustments.saturation / 100)
    if adjustments.sepia:
        toned = ImageOps.colorize(ImageOps.grayscale(picture), SEPIA_DARK, SEPIA_LIGHT)
        picture = Image.blend(picture, toned, adjustments.sepia / 100)
    if adjustments.blur:
        picture = picture.filter(ImageFilter.GaussianBlur(adjustments.blur))

    buffer = io.BytesIO()
    picture.save(buffer, format="PNG")
    return GeneratedImage(data=buffer.getvalue(), mime_type="image/png")
