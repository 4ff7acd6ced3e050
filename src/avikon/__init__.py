"""AvikonAI - AI profile picture generation with Gemini."""

__version__ = "0.3.0"

from avikon.core.config import AvikonConfig, config

__all__ = [
    "AvikonConfig",
    "config",
]
