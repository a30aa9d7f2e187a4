import pytest

from cinestudio.domain.entity.image import AspectRatio
from cinestudio.domain.service.aspect_ratio import resolve_aspect_ratio, select_aspect_ratio


@pytest.mark.parametrize(
    "width,height,expected",
    [
        (1000, 1000, AspectRatio.SQUARE),
        (1600, 900, AspectRatio.WIDE),
        (1200, 1600, AspectRatio.PORTRAIT),
        (1600, 1200, AspectRatio.LANDSCAPE),
        (1080, 1920, AspectRatio.TALL),
        (3000, 1000, AspectRatio.WIDE),
        (1, 10, AspectRatio.TALL),
    ],
)
def test_resolve_picks_closest_ratio(width, height, expected):
    assert resolve_aspect_ratio(width, height) is expected


def test_resolve_is_deterministic():
    results = {resolve_aspect_ratio(1234, 987) for _ in range(20)}
    assert len(results) == 1


def test_resolve_never_returns_auto():
    for width in range(100, 3000, 137):
        assert resolve_aspect_ratio(width, 1000).is_concrete


def test_tie_goes_to_earlier_member():
    # 0.875 sits exactly between 3:4 and 1:1
    assert resolve_aspect_ratio(875, 1000) is AspectRatio.SQUARE


def test_zero_height_is_rejected():
    with pytest.raises(ValueError):
        resolve_aspect_ratio(100, 0)


def test_select_keeps_concrete_request():
    assert select_aspect_ratio(AspectRatio.WIDE, 1000, 1000) is AspectRatio.WIDE


def test_select_resolves_auto():
    assert select_aspect_ratio(AspectRatio.AUTO, 1200, 1600) is AspectRatio.PORTRAIT
