"""Prompt Builder Domain Service - Domain Layer"""

from dataclasses import dataclass
from typing import Dict, List

from ..entity.style import (
    ColorGradingStyle,
    LightingIntensity,
    QualityMode,
    StyleParameters,
)

DEFAULT_PROMPT = (
    "Cinematic masterpiece, Hollywood movie still, 35mm anamorphic lens, "
    "shallow depth of field, professional color grading, dramatic chiaroscuro "
    "lighting, high dynamic range, hyper-realistic skin textures, film grain, "
    "atmospheric smoke, extremely detailed, 8k resolution, award-winning "
    "cinematography."
)

DEFAULT_SWAP_PROMPT = (
    "Replace the face of the person in the first image with the face from the "
    "second image. Keep the body, pose, clothing, lighting and background of "
    "the first image unchanged and blend skin tone seamlessly."
)

QUALITY_MODIFIERS: Dict[QualityMode, str] = {
    QualityMode.STANDARD: "",
    QualityMode.HIGH: ", ultra-sharp focus, masterpiece quality, photorealistic",
}

LIGHTING_STYLES: Dict[LightingIntensity, str] = {
    LightingIntensity.SOFT: "soft wrap-around studio lighting, ethereal glow",
    LightingIntensity.CINEMATIC: "classic three-point Hollywood lighting, rim light, volumetric lighting",
    LightingIntensity.DRAMATIC: "high-contrast noir lighting, deep shadows, moody atmosphere",
    LightingIntensity.INTENSE: "vibrant backlight, sharp highlights, high-energy studio lights",
}

COLOR_GRADING_STYLES: Dict[ColorGradingStyle, str] = {
    ColorGradingStyle.NONE: "",
    ColorGradingStyle.WARM_VINTAGE: "warm vintage movie grading, sepia highlights",
    ColorGradingStyle.COOL_NOIR: "cool blue cinematic grading, high contrast, moody noir",
    ColorGradingStyle.TEAL_ORANGE: "teal and orange blockbuster color grade, cinematic look",
    ColorGradingStyle.CLASSIC_BW: "high-end black and white cinematography, rich film grain",
}

CINEMATIC_KEYWORDS = ["cinema", "35mm", "anamorphic", "studio lighting", "color grade"]


@dataclass(frozen=True)
class StylePreset:
    """Named base prompt selectable instead of free text"""

    id: str
    label: str
    prompt: str


STYLE_PRESETS: List[StylePreset] = [
    StylePreset(
        id="cinema_standard",
        label="Noir",
        prompt="Cinema style, blockbuster movie aesthetic, high-end cinematography, dramatic lighting",
    ),
]


def find_preset(style_id: str):
    for preset in STYLE_PRESETS:
        if preset.id == style_id:
            return preset
    return None


def compose_portrait_prompt(style: StyleParameters) -> str:
    """Build the final instruction for a portrait transformation

    Args:
        style: Styling parameters chosen by the user

    Returns:
        Prompt text sent to the generation service
    """
    # 1. Base: free text wins over a preset, preset over the default
    base = style.custom_prompt or DEFAULT_PROMPT
    if style.style_id and not style.custom_prompt:
        preset = find_preset(style.style_id)
        if preset:
            base = preset.prompt

    # 2. Modifiers in a fixed order
    prompt = base
    if style.skin_texture:
        prompt += ", ultra-realistic skin texture, 8k movie resolution"
    if style.face_detail > 60:
        prompt += ", high-fidelity cinematic facial details"
    if style.creativity_level < 30:
        prompt += ", professional cinema retouch"
    elif style.creativity_level > 70:
        prompt += ", intense cinematic transformation"
    prompt += f", {LIGHTING_STYLES[style.lighting]}"
    if style.color_grading is not ColorGradingStyle.NONE:
        prompt += f", {COLOR_GRADING_STYLES[style.color_grading]}"
    prompt += QUALITY_MODIFIERS[style.quality]
    return prompt


def compose_face_swap_prompt(custom_prompt: str = "", quality: QualityMode = QualityMode.HIGH) -> str:
    """Build the instruction for a dual-image face swap"""
    return (custom_prompt or DEFAULT_SWAP_PROMPT) + QUALITY_MODIFIERS[quality]


def suggest_keywords(text: str) -> List[str]:
    """Cinematic keywords completing the last typed word"""
    last_word = text.split(" ")[-1].lower()
    if len(last_word) <= 1:
        return []
    return [k for k in CINEMATIC_KEYWORDS if k.lower().startswith(last_word)]


def accept_keyword(text: str, keyword: str) -> str:
    """Replace the last typed word with the accepted keyword"""
    words = text.split(" ")
    words.pop()
    prefix = " ".join(words)
    return prefix + (" " if words else "") + keyword + ", "
