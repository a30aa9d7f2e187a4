from .aspect_ratio import resolve_aspect_ratio, select_aspect_ratio
from .prompt_builder import (
    accept_keyword,
    compose_face_swap_prompt,
    compose_portrait_prompt,
    suggest_keywords,
)

__all__ = [
    "accept_keyword",
    "compose_face_swap_prompt",
    "compose_portrait_prompt",
    "resolve_aspect_ratio",
    "select_aspect_ratio",
    "suggest_keywords",
]
