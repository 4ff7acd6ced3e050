"""Async HTTP client for the AvikonAI generation server.

Each operation is a single round trip.  Nothing is retried here; a failed
attempt is reported to the caller immediately and retrying is left to the
user.

No timeout is imposed on requests: image generation can take a while and
the server does not stream, so the call simply waits for the response.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from avikon.client.models import GenerationResult, ServiceStatus
from avikon.core.models import GenerationRequest

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate-image"
CONFIG_PATH = "/api/config"

NETWORK_ERROR = "NETWORK_ERROR"


class AvikonClient:
    """Client for ``/api/generate-image`` and ``/api/config``.

    Args:
        base_url: Server root, e.g. ``http://127.0.0.1:3000``.
        transport: Optional httpx transport (used by tests).

    Example::

        async with AvikonClient("http://127.0.0.1:3000") as client:
            status = await client.check_status()
            result = await client.request_generation(GenerationRequest(prompt="..."))
    """

    def __init__(self, base_url: str, *, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url
        self._http = httpx.AsyncClient(base_url=base_url, timeout=None, transport=transport)

    async def request_generation(self, request: GenerationRequest) -> GenerationResult:
        """POST a generation request and map the response to a result.

        Non-2xx responses are parsed for ``{error, code}``; if the body is
        not JSON the result carries ``HTTP <status>: <reason>``.  Transport
        failures produce a result with code ``NETWORK_ERROR``.
        """
        try:
            response = await self._http.post(GENERATE_PATH, json=request.to_payload())
        except httpx.HTTPError as e:
            logger.error(f"Generation request failed: {e}")
            return GenerationResult.failure(str(e) or type(e).__name__, NETWORK_ERROR)

        if not response.is_success:
            body = _json_or_none(response)
            fallback = f"HTTP {response.status_code}: {response.reason_phrase}"
            if not isinstance(body, dict):
                return GenerationResult.failure(fallback)
            return GenerationResult.failure(body.get("error") or fallback, body.get("code"))

        body = _json_or_none(response)
        if not isinstance(body, dict):
            return GenerationResult.failure("Invalid response from generation server")
        return GenerationResult.from_response(body)

    async def check_status(self) -> ServiceStatus:
        """Probe whether the server has a usable Gemini key."""
        try:
            response = await self._http.get(GENERATE_PATH)
        except httpx.HTTPError as e:
            logger.warning(f"Status check failed: {e}")
            return ServiceStatus(configured=False, error=str(e) or type(e).__name__)

        if not response.is_success:
            return ServiceStatus(configured=False, error="Failed to check API status")

        body = _json_or_none(response)
        if not isinstance(body, dict):
            return ServiceStatus(configured=False, error="Failed to check API status")
        return ServiceStatus(configured=bool(body.get("geminiConfigured")))

    async def get_config(self) -> dict[str, Any]:
        """Fetch style presets, aspect ratios and editor availability.

        Raises:
            httpx.HTTPError: On transport failure or a non-2xx response.
        """
        response = await self._http.get(CONFIG_PATH)
        response.raise_for_status()
        return response.json()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> AvikonClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
