from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import ProviderResponse


class LayerProvider(Protocol):
    def fetch(self, spreadsheet_id: str, endpoint: str | None = None) -> ProviderResponse: ...


class LayerRepository(Protocol):
    def load(self, path: Path) -> ProviderResponse: ...

    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, ProviderResponse]]: ...
