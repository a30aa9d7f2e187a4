from cinestudio.domain.entity.style import (
    ColorGradingStyle,
    LightingIntensity,
    QualityMode,
    StyleParameters,
)
from cinestudio.domain.service.prompt_builder import (
    DEFAULT_PROMPT,
    DEFAULT_SWAP_PROMPT,
    LIGHTING_STYLES,
    QUALITY_MODIFIERS,
    STYLE_PRESETS,
    accept_keyword,
    compose_face_swap_prompt,
    compose_portrait_prompt,
    suggest_keywords,
)


def test_default_style_prompt():
    prompt = compose_portrait_prompt(StyleParameters())

    assert prompt.startswith(DEFAULT_PROMPT)
    assert "ultra-realistic skin texture" in prompt
    assert "high-fidelity cinematic facial details" in prompt
    assert "professional cinema retouch" not in prompt
    assert LIGHTING_STYLES[LightingIntensity.CINEMATIC] in prompt
    assert "teal and orange" in prompt
    assert prompt.endswith(QUALITY_MODIFIERS[QualityMode.HIGH])


def test_custom_prompt_overrides_preset():
    style = StyleParameters(custom_prompt="rainy neon street", style_id=STYLE_PRESETS[0].id)

    assert compose_portrait_prompt(style).startswith("rainy neon street")


def test_preset_used_without_custom_prompt():
    style = StyleParameters(style_id=STYLE_PRESETS[0].id)

    assert compose_portrait_prompt(style).startswith(STYLE_PRESETS[0].prompt)


def test_unknown_preset_falls_back_to_default():
    assert compose_portrait_prompt(StyleParameters(style_id="missing")).startswith(DEFAULT_PROMPT)


def test_modifier_thresholds():
    gentle = compose_portrait_prompt(
        StyleParameters(skin_texture=False, face_detail=60, creativity_level=10)
    )
    wild = compose_portrait_prompt(StyleParameters(creativity_level=71))

    assert "skin texture, 8k" not in gentle
    assert "facial details" not in gentle
    assert "professional cinema retouch" in gentle
    assert "intense cinematic transformation" in wild


def test_no_grading_and_standard_quality():
    prompt = compose_portrait_prompt(
        StyleParameters(color_grading=ColorGradingStyle.NONE, quality=QualityMode.STANDARD)
    )

    assert prompt.endswith(LIGHTING_STYLES[LightingIntensity.CINEMATIC])


def test_face_swap_prompt():
    assert compose_face_swap_prompt("", QualityMode.STANDARD) == DEFAULT_SWAP_PROMPT
    assert compose_face_swap_prompt("swap them", QualityMode.HIGH) == (
        "swap them" + QUALITY_MODIFIERS[QualityMode.HIGH]
    )


def test_keyword_suggestions():
    assert suggest_keywords("a moody ana") == ["anamorphic"]
    assert suggest_keywords("shot on 35") == ["35mm"]
    assert suggest_keywords("a") == []
    assert suggest_keywords("xyz") == []


def test_accept_keyword_replaces_last_word():
    assert accept_keyword("a moody ana", "anamorphic") == "a moody anamorphic, "
    assert accept_keyword("cin", "cinema") == "cinema, "
