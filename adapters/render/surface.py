from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import Any

from filelock import FileLock

from adapters.filesystem.json_utils import write_json_atomic
from domain.models import Scene
from domain.ports.rendering import RenderSurface

logger = logging.getLogger(__name__)


@dataclass
class MemoryRenderSurface(RenderSurface):
    frames: list[dict[str, Any]] = field(default_factory=list)
    acquired: bool = False
    acquire_count: int = 0
    release_count: int = 0

    def acquire(self) -> None:
        self.acquired = True
        self.acquire_count += 1

    def draw(self, scene: Scene) -> None:
        if not self.acquired:
            msg = "Render surface must be acquired before drawing"
            raise RuntimeError(msg)
        self.frames.append(scene.to_dict())

    def release(self) -> None:
        self.acquired = False
        self.release_count += 1

    @property
    def current(self) -> dict[str, Any] | None:
        return self.frames[-1] if self.acquired and self.frames else None


class FileRenderSurface(RenderSurface):
    """Write the plotly figure JSON of the bound scene to ``path``."""

    def __init__(self, path: Path, keep_on_release: bool = False) -> None:
        self.path = path
        self.keep_on_release = keep_on_release
        self._lock = FileLock(str(path.with_suffix(f"{path.suffix}.lock")))

    def acquire(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock.acquire()

    def draw(self, scene: Scene) -> None:
        write_json_atomic(self.path, scene.to_dict())
        logger.info("Wrote scene with %d traces to %s", len(scene.traces), self.path)

    def release(self) -> None:
        try:
            if not self.keep_on_release:
                self.path.unlink(missing_ok=True)
        finally:
            self._lock.release()


class SceneViewer:
    """Bind scenes to a render surface with scoped acquire and release.

    The surface is acquired on the first ``show`` and released before each new
    scene is bound, on ``close`` and when leaving the ``with`` block.
    """

    def __init__(self, surface: RenderSurface) -> None:
        self.surface = surface
        self.scene: Scene | None = None
        self._bound = False

    def show(self, scene: Scene) -> None:
        if self._bound:
            self._release()
        self.surface.acquire()
        self._bound = True
        self.surface.draw(scene)
        self.scene = scene

    def close(self) -> None:
        if self._bound:
            self._release()
        self.scene = None

    def _release(self) -> None:
        self._bound = False
        self.surface.release()

    def __enter__(self) -> SceneViewer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
