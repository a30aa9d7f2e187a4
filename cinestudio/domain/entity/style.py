"""Style Entities - Domain Layer"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class QualityMode(str, Enum):
    STANDARD = "standard"
    HIGH = "high"


class LightingIntensity(str, Enum):
    SOFT = "soft"
    CINEMATIC = "cinematic"
    DRAMATIC = "dramatic"
    INTENSE = "intense"


class ColorGradingStyle(str, Enum):
    NONE = "none"
    WARM_VINTAGE = "warm_vintage"
    COOL_NOIR = "cool_noir"
    TEAL_ORANGE = "teal_orange"
    CLASSIC_BW = "classic_bw"


@dataclass(frozen=True)
class StyleParameters:
    """Styling knobs shared by every request of one generation

    Stored alongside each history entry so a past look can be restored.
    """

    custom_prompt: str = ""
    style_id: Optional[str] = None
    skin_texture: bool = True
    face_detail: int = 75
    creativity_level: int = 30
    lighting: LightingIntensity = LightingIntensity.CINEMATIC
    color_grading: ColorGradingStyle = ColorGradingStyle.TEAL_ORANGE
    quality: QualityMode = QualityMode.HIGH

    def __post_init__(self) -> None:
        if not (0 <= self.face_detail <= 100):
            raise ValueError("Face detail must be between 0 and 100")
        if not (0 <= self.creativity_level <= 100):
            raise ValueError("Creativity level must be between 0 and 100")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "custom_prompt": self.custom_prompt,
            "style_id": self.style_id,
            "skin_texture": self.skin_texture,
            "face_detail": self.face_detail,
            "creativity_level": self.creativity_level,
            "lighting": self.lighting.value,
            "color_grading": self.color_grading.value,
            "quality": self.quality.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StyleParameters":
        defaults = cls()
        return cls(
            custom_prompt=data.get("custom_prompt", defaults.custom_prompt),
            style_id=data.get("style_id", defaults.style_id),
            skin_texture=data.get("skin_texture", defaults.skin_texture),
            face_detail=data.get("face_detail", defaults.face_detail),
            creativity_level=data.get("creativity_level", defaults.creativity_level),
            lighting=LightingIntensity(data.get("lighting", defaults.lighting.value)),
            color_grading=ColorGradingStyle(
                data.get("color_grading", defaults.color_grading.value)
            ),
            quality=QualityMode(data.get("quality", defaults.quality.value)),
        )
