from __future__ import annotations

import logging
from typing import Any

import httpx

from domain.models import ProviderResponse
from domain.ports.providers import LayerProvider
from domain.services.provider_payload import parse_provider_payload

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0
MISSING_ENDPOINT_MESSAGE = (
    "Layer provider URL is not configured. Please provide it via the gasUrl "
    "query parameter or the M3D_PROVIDER__URL environment variable."
)
TIMEOUT_MESSAGE = (
    "Request timed out. The layer provider is taking too long to respond. "
    "Please check that the script is deployed correctly and the spreadsheet is accessible."
)


class HttpLayerProvider(LayerProvider):
    """Fetch matrix layers from a spreadsheet-backed web script.

    Every failure mode is folded into an error ``ProviderResponse``; callers
    never see an exception from ``fetch``.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._timeout = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Any) -> HttpLayerProvider:
        return cls(endpoint=settings.url, timeout_seconds=settings.timeout_seconds)

    def fetch(self, spreadsheet_id: str, endpoint: str | None = None) -> ProviderResponse:
        target = (endpoint or self._endpoint or "").strip()
        if not target:
            return ProviderResponse.error(MISSING_ENDPOINT_MESSAGE)
        if not spreadsheet_id:
            return ProviderResponse.error("Spreadsheet id is required")

        try:
            with httpx.Client(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = client.get(target, params={"spreadsheetId": spreadsheet_id})
            if response.is_error:
                msg = f"HTTP error! status: {response.status_code}"
                logger.warning("Layer provider %s answered %s", target, response.status_code)
                return ProviderResponse.error(msg)
            raw = response.json()
        except httpx.TimeoutException:
            logger.warning("Layer provider %s timed out after %ss", target, self._timeout)
            return ProviderResponse.error(TIMEOUT_MESSAGE)
        except httpx.HTTPError as exc:
            logger.warning("Layer provider %s failed: %s", target, exc)
            return ProviderResponse.error(str(exc) or exc.__class__.__name__)
        except ValueError as exc:
            logger.warning("Layer provider %s returned invalid JSON: %s", target, exc)
            return ProviderResponse.error(f"Invalid JSON from layer provider: {exc}")

        result = parse_provider_payload(raw)
        if not result.ok:
            logger.warning("Layer provider %s reported: %s", target, result.message)
        return result
