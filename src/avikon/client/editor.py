"""Pixo editor bridge integration.

The editing itself happens inside Pixo's hosted bridge script.  All this
module depends on is whether that script could be loaded (``is_loaded`` /
``error``) and the configuration handed to the bridge when an image is
opened for editing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import httpx

from avikon.client.errors import EditorNotConfiguredError, EditorNotLoadedError

logger = logging.getLogger(__name__)

EditorTheme = Literal["Default", "Light", "Dark", "WordPress"]

LOAD_ERROR_MESSAGE = "Failed to load Pixo Editor script"


@dataclass(frozen=True)
class EditorStatus:
    is_loaded: bool
    error: str | None = None


class EditorBridge:
    """Loads the Pixo bridge script and builds editing sessions.

    Args:
        api_key: Pixo API key, or ``None`` when editing is not configured.
        script_url: URL of the bridge script.
        http: Optional httpx client used to fetch the script.
    """

    def __init__(self, api_key: str | None, script_url: str, *, http: httpx.AsyncClient | None = None):
        self.api_key = api_key
        self.script_url = script_url
        self.http = http
        self.is_loaded = False
        self.error: str | None = None
        self.script: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def status(self) -> EditorStatus:
        return EditorStatus(is_loaded=self.is_loaded, error=self.error)

    async def load(self) -> EditorStatus:
        """Fetch the bridge script once.

        Completes with the resulting status; a failed load is recorded in
        ``error`` rather than raised.  Calling again after a success is a
        no-op.
        """
        if self.is_loaded:
            return self.status

        try:
            if self.http is None:
                async with httpx.AsyncClient() as temp_client:
                    response = await temp_client.get(self.script_url)
            else:
                response = await self.http.get(self.script_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"{LOAD_ERROR_MESSAGE} from {self.script_url}: {e}")
            self.error = LOAD_ERROR_MESSAGE
            return self.status

        self.script = response.text
        self.is_loaded = True
        self.error = None
        logger.info(f"Loaded Pixo bridge script ({len(self.script)} bytes)")
        return self.status

    def open_session(self, image_source: str, theme: EditorTheme = "Default") -> dict:
        """Build the bridge configuration for editing one image.

        Args:
            image_source: Image to edit, preferably a data URL.
            theme: Editor theme.

        Returns:
            Bridge configuration, ready to be passed to ``Pixo.Bridge``.

        Raises:
            EditorNotConfiguredError: If no API key is set.
            EditorNotLoadedError: If the script has not been loaded.
        """
        if not self.configured:
            raise EditorNotConfiguredError(
                "Image editing is not configured. Set PIXO_API_KEY to enable it."
            )
        if not self.is_loaded:
            raise EditorNotLoadedError(self.error or "Pixo Editor is still loading")

        return {
            "apikey": self.api_key,
            "type": "modal",
            "width": "90%",
            "height": "90%",
            "theme": theme,
            "language": "en-US",
            "overlay": {"color": "rgba(0, 0, 0, 0.8)"},
            "image": image_source,
        }
