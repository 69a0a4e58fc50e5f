from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from domain.models import LayerGraph, ProviderResponse

NO_LAYERS_MESSAGE = (
    "No valid matrix layers found in the spreadsheet. "
    "Please check your sheet names and schema."
)
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


def parse_provider_payload(raw: Any) -> ProviderResponse:
    """Normalize whatever a provider returned into a ``ProviderResponse``.

    Accepts the ``{"status", "data", "message"}`` envelope or a bare
    ``{"layers": [...]}`` document. A success without layers is reported as an
    error so that no scene is ever built from zero layers.
    """
    if not isinstance(raw, dict):
        return ProviderResponse.error("Malformed provider payload: expected a JSON object")

    if raw.get("status") == "error":
        message = raw.get("message")
        return ProviderResponse.error(str(message) if message else UNKNOWN_ERROR_MESSAGE)

    data = raw.get("data") if "status" in raw else raw
    if not isinstance(data, dict) or not data.get("layers"):
        return ProviderResponse.error(NO_LAYERS_MESSAGE)

    try:
        graph = LayerGraph.model_validate(data)
    except ValidationError as exc:
        return ProviderResponse.error(f"Malformed layer data: {_first_error(exc)}")
    return ProviderResponse.success(graph)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', '')}" if location else str(first.get("msg", ""))
