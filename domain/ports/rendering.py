from __future__ import annotations

from typing import Protocol

from domain.models import Scene


class RenderSurface(Protocol):
    def acquire(self) -> None: ...

    def draw(self, scene: Scene) -> None: ...

    def release(self) -> None: ...
