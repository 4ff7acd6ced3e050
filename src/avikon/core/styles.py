"""Style presets and sample prompts offered to users.

The style catalogue is fixed: each preset carries a short human-readable
``description`` which is what actually gets sent to the model as the
``style`` field, and a ``name`` which is what the gallery records.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Literal

StyleCategory = Literal["professional", "artistic", "gaming", "creative"]


@dataclass(frozen=True)
class StylePreset:
    """A selectable profile-picture style."""

    id: str
    name: str
    description: str
    example: str
    category: StyleCategory

    def to_dict(self) -> dict:
        return asdict(self)


STYLE_PRESETS: tuple[StylePreset, ...] = (
    StylePreset(
        id="professional",
        name="Professional",
        description="Clean, business-appropriate headshots with neutral backgrounds",
        example="Professional headshot, business attire, clean background, confident expression",
        category="professional",
    ),
    StylePreset(
        id="artistic",
        name="Artistic Portrait",
        description="Creative, stylized portraits with artistic flair",
        example="Artistic portrait, oil painting style, dramatic lighting, expressive",
        category="artistic",
    ),
    StylePreset(
        id="gaming",
        name="Gaming Avatar",
        description="Fantasy and sci-fi inspired gaming character portraits",
        example="Fantasy warrior, detailed armor, mystical background, heroic pose",
        category="gaming",
    ),
    StylePreset(
        id="minimalist",
        name="Minimalist",
        description="Simple, clean designs with focus on essential elements",
        example="Minimalist portrait, simple background, clean lines, modern aesthetic",
        category="creative",
    ),
    StylePreset(
        id="cyberpunk",
        name="Cyberpunk",
        description="Futuristic, neon-lit cyberpunk aesthetic",
        example="Cyberpunk character, neon lights, futuristic cityscape, high-tech implants",
        category="creative",
    ),
    StylePreset(
        id="vintage",
        name="Vintage",
        description="Classic, retro-inspired portraits with timeless appeal",
        example="Vintage portrait, classic clothing, sepia tones, timeless elegance",
        category="artistic",
    ),
)

SAMPLE_PROMPTS: tuple[str, ...] = (
    "Professional headshot of a confident person in business attire",
    "Artistic portrait with dramatic lighting and painterly style",
    "Fantasy warrior with intricate armor and mystical background",
    "Minimalist portrait with clean lines and modern aesthetic",
    "Cyberpunk character with neon accents and futuristic elements",
    "Vintage-style portrait with classic elegance and sepia tones",
)

DEFAULT_STYLE = STYLE_PRESETS[0]


def get_style(style_id: str) -> StylePreset:
    """Look up a preset by id.

    Raises:
        KeyError: If no preset has that id.
    """
    for preset in STYLE_PRESETS:
        if preset.id == style_id:
            return preset
    raise KeyError(f"Unknown style: {style_id}")
