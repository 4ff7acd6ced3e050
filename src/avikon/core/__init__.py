"""Core generation logic for AvikonAI: configuration, prompt composition, Gemini adapter."""

from .config import AvikonConfig, config
from .errors import GenerationError, InvalidReferenceImageError, MalformedVendorResponseError
from .gemini import GeminiImageGenerator, GeneratedImageData, parse_image_response
from .models import ASPECT_RATIOS, MAX_PROMPT_LENGTH, GenerationRequest
from .prompt_composer import compose_prompt
from .styles import SAMPLE_PROMPTS, STYLE_PRESETS, StylePreset, get_style

__all__ = [
    "ASPECT_RATIOS",
    "AvikonConfig",
    "GeminiImageGenerator",
    "GeneratedImageData",
    "GenerationError",
    "GenerationRequest",
    "InvalidReferenceImageError",
    "MAX_PROMPT_LENGTH",
    "MalformedVendorResponseError",
    "SAMPLE_PROMPTS",
    "STYLE_PRESETS",
    "StylePreset",
    "compose_prompt",
    "config",
    "get_style",
    "parse_image_response",
]
