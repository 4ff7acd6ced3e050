"""Configuration management for AvikonAI.

This module provides centralized configuration management using Pydantic Settings.
Application settings are loaded from environment variables with the AVIKON_ prefix.
The two vendor credentials keep the names used by the rest of the ecosystem,
``GEMINI_API_KEY`` and ``PIXO_API_KEY``, so an existing ``.env`` file works
unchanged.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (AVIKON_* prefix, plus GEMINI_API_KEY / PIXO_API_KEY)
2. .env file in the project root
3. Default values defined in AvikonConfig

Example .env file:
    GEMINI_API_KEY=AIza...
    PIXO_API_KEY=pixo-...
    AVIKON_SERVER_PORT=3000
    AVIKON_GALLERY_PATH=~/.avikon/images.json

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
Route handlers receive it through :func:`avikon.api.main.get_config` so tests
can substitute their own instance.

Usage Example
-------------
    from avikon.core.config import config

    if not config.gemini_configured:
        print("Set GEMINI_API_KEY first")
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Value shipped in the example .env file.  It is treated exactly like a missing key.
PLACEHOLDER_GEMINI_API_KEY = "your_gemini_api_key_here"


class AvikonConfig(BaseSettings):
    """Main configuration for AvikonAI.

    Attributes
    ----------
    Vendor Credentials:
        gemini_api_key : str | None
            Gemini API key.  Absent or placeholder disables generation.
        pixo_api_key : str | None
            Pixo editor key.  Absent disables the edit feature.

    Generation Settings:
        gemini_model : str
            Gemini model identifier used for image generation.

    Server Settings:
        server_host : str
            Bind address for the uvicorn server.
        server_port : int
            Port for the uvicorn server (1024-65535).

    Client Settings:
        api_base_url : str
            Base URL the client library talks to.
        gallery_path : Path
            JSON file holding the local gallery.
        pixo_script_url : str
            Location of the Pixo bridge script.
        log_level : str
            Logging level used by the CLI.

    Examples
    --------
        >>> cfg = AvikonConfig(gemini_api_key="AIza-test", _env_file=None)
        >>> cfg.gemini_configured
        True
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AVIKON_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Vendor credentials
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "AVIKON_GEMINI_API_KEY"),
        description="Gemini API key (GEMINI_API_KEY)",
    )
    pixo_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PIXO_API_KEY", "AVIKON_PIXO_API_KEY"),
        description="Pixo editor bridge API key (PIXO_API_KEY)",
    )

    # Generation settings
    gemini_model: str = Field(
        default="gemini-2.5-flash-image-preview",
        description="Gemini model used for image generation",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3000,
        description="Server port",
        ge=1024,
        le=65535,
    )

    # Client settings
    api_base_url: str = Field(
        default="http://127.0.0.1:3000",
        description="Base URL of the generation server used by the client",
    )
    gallery_path: Path = Field(
        default=Path.home() / ".avikon" / "images.json",
        description="JSON file backing the local gallery",
    )
    pixo_script_url: str = Field(
        default="https://pixoeditor.com/editor/scripts/bridge.m.js",
        description="Pixo editor bridge script",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the CLI",
    )

    @property
    def gemini_configured(self) -> bool:
        """Whether a usable Gemini key is present (set and not the placeholder)."""
        return bool(self.gemini_api_key) and self.gemini_api_key != PLACEHOLDER_GEMINI_API_KEY

    @property
    def editor_configured(self) -> bool:
        """Whether the Pixo editor bridge has a key."""
        return bool(self.pixo_api_key)


# Global configuration instance
# Loaded from environment variables and the .env file at import time.
config = AvikonConfig()
