"""Aspect Ratio Resolver Domain Service - Domain Layer"""

from ..entity.image import AspectRatio


def resolve_aspect_ratio(width: int, height: int) -> AspectRatio:
    """Map a width/height pair to the closest supported ratio

    Candidates are scanned in enumeration order and only a strictly smaller
    difference replaces the current best, so ties go to the earlier member.

    Args:
        width: Pixel width
        height: Pixel height, must be non-zero

    Returns:
        A concrete aspect ratio, never AUTO
    """
    if height == 0:
        raise ValueError("Height must be non-zero")

    target = width / height
    best = None
    best_diff = float("inf")
    for candidate in AspectRatio.concrete():
        diff = abs(candidate.value_ratio - target)
        if diff < best_diff:
            best = candidate
            best_diff = diff
    return best


def select_aspect_ratio(requested: AspectRatio, width: int, height: int) -> AspectRatio:
    """Return the requested ratio, resolving AUTO from the image size"""
    if requested.is_concrete:
        return requested
    return resolve_aspect_ratio(width, height)
