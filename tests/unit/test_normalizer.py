import io

import pytest
from PIL import Image

from cinestudio.domain.entity.image import SourceImage
from cinestudio.domain.repository.image_normalizer import ImageFormatError
from cinestudio.infrastructure.image.normalizer import PillowImageNormalizer, fit_within


@pytest.fixture
def normalizer():
    return PillowImageNormalizer()


def decode(image):
    with Image.open(io.BytesIO(image.data)) as opened:
        opened.load()
        return opened.format, opened.size


def test_large_landscape_is_scaled_to_max_edge(normalizer, image_factory):
    source = image_factory(4000, 3000)

    result = normalizer.normalize(source, max_edge=1536, quality=90)

    assert (result.width, result.height) == (1536, 1152)
    assert (result.original_width, result.original_height) == (4000, 3000)
    assert decode(result) == ("JPEG", (1536, 1152))


def test_large_portrait_is_scaled_on_height(normalizer, image_factory):
    result = normalizer.normalize(image_factory(1000, 3000), max_edge=1536, quality=90)

    assert (result.width, result.height) == (512, 1536)


def test_small_image_keeps_dimensions(normalizer, image_factory):
    result = normalizer.normalize(image_factory(640, 480), max_edge=1536, quality=90)

    assert (result.width, result.height) == (640, 480)
    assert result.mime_type == "image/jpeg"


def test_output_is_always_jpeg(normalizer, image_factory):
    source = image_factory(300, 200, fmt="PNG", mode="RGBA")

    result = normalizer.normalize(source, max_edge=1280, quality=80)

    assert result.mime_type == "image/jpeg"
    assert decode(result)[0] == "JPEG"


def test_source_is_untouched(normalizer, image_factory):
    source = image_factory(2000, 2000)
    before = source.data

    normalizer.normalize(source, max_edge=500, quality=70)

    assert source.data == before


@pytest.mark.parametrize("max_edge", [1, 64, 999, 1536, 5000])
def test_longer_edge_never_exceeds_bound(normalizer, image_factory, max_edge):
    result = normalizer.normalize(image_factory(1800, 700), max_edge=max_edge, quality=85)

    assert result.longest_edge <= max_edge
    assert result.width >= 1 and result.height >= 1


def test_corrupt_data_raises_format_error(normalizer):
    source = SourceImage(data=b"definitely not an image", mime_type="image/png")

    with pytest.raises(ImageFormatError):
        normalizer.normalize(source, max_edge=1536, quality=90)


def test_truncated_image_raises_format_error(normalizer, image_factory):
    full = image_factory(400, 400, fmt="JPEG")
    truncated = SourceImage(data=full.data[: len(full.data) // 3], mime_type="image/jpeg")

    with pytest.raises(ImageFormatError):
        normalizer.normalize(truncated, max_edge=1536, quality=90)


def test_invalid_quality_is_rejected(normalizer, image_factory):
    with pytest.raises(ValueError):
        normalizer.normalize(image_factory(10, 10), max_edge=100, quality=0)


def test_fit_within_keeps_aspect():
    assert fit_within(3000, 2000, 1500) == (1500, 1000)
    assert fit_within(2000, 3000, 1500) == (1000, 1500)
    assert fit_within(100, 50, 1500) == (100, 50)
    assert fit_within(5000, 1, 100) == (100, 1)
