from __future__ import annotations

import logging
from pathlib import Path

import orjson

from adapters.filesystem.json_utils import load_json, write_json_atomic
from adapters.filesystem.layer_utils import iter_layer_paths
from domain.models import LayerGraph, ProviderResponse
from domain.ports.providers import LayerRepository
from domain.services.provider_payload import parse_provider_payload

logger = logging.getLogger(__name__)


class FileSystemLayerRepository(LayerRepository):
    def load(self, path: Path) -> ProviderResponse:
        try:
            raw = load_json(path)
        except FileNotFoundError:
            return ProviderResponse.error(f"Layer file not found: {path}")
        except (orjson.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Could not parse layer file %s: %s", path, exc)
            return ProviderResponse.error(f"Invalid JSON in {path}: {exc}")
        return parse_provider_payload(raw)

    def load_all_with_paths(self, directory: Path) -> list[tuple[Path, ProviderResponse]]:
        return [(path, self.load(path)) for path in sorted(iter_layer_paths(directory))]

    def save(self, graph: LayerGraph, path: Path) -> None:
        payload = {
            "status": "success",
            "data": {"layers": [layer.to_payload() for layer in graph.layers]},
        }
        write_json_atomic(path, payload)
