"""Image Intake - Infrastructure Layer"""

import logging
import mimetypes
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ...domain.entity.image import SourceImage
from ...domain.repository.image_normalizer import ImageFormatError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def guess_mime_type(path: PathLike) -> Optional[str]:
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type


def select_image_files(
    paths: Iterable[PathLike],
    allow_multiple: bool = True,
    limit: int = 20,
) -> List[Path]:
    """Keep image files only and cap the selection

    Args:
        paths: Candidate files in selection order
        allow_multiple: False keeps at most one file
        limit: Maximum number of files when multiple are allowed

    Returns:
        Selected image paths
    """
    selected = []
    for path in paths:
        mime_type = guess_mime_type(path)
        if not mime_type or not mime_type.startswith("image/"):
            logger.info(f"Skipping non-image file: {path}")
            continue
        selected.append(Path(path))
    return selected[: limit if allow_multiple else 1]


def load_source_image(path: PathLike) -> SourceImage:
    """Read a file into a SourceImage

    Raises:
        ImageFormatError: The file is empty
    """
    path = Path(path)
    data = path.read_bytes()
    if not data:
        raise ImageFormatError(f"Image file is empty: {path.name}")
    return SourceImage(
        data=data,
        mime_type=guess_mime_type(path) or "application/octet-stream",
        name=path.name,
    )


def load_source_images(
    paths: Iterable[PathLike],
    allow_multiple: bool = True,
    limit: int = 20,
) -> List[SourceImage]:
    """Load the selected image files, skipping unreadable ones"""
    images = []
    for path in select_image_files(paths, allow_multiple, limit):
        try:
            images.append(load_source_image(path))
        except ImageFormatError as e:
            logger.warning(f"Skipping image file: {e}")
    return images
