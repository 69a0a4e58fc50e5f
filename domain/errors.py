from __future__ import annotations

from typing import Any


class SceneBuildError(ValueError):
    code = "scene_build_error"

    def __init__(self, message: str, *, layer: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.layer = layer

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": "error",
            "code": self.code,
            "message": self.message,
        }
        if self.layer is not None:
            payload["layer"] = self.layer
        return payload


class InvalidLayerShape(SceneBuildError):
    code = "invalid_layer_shape"


class UnknownShapeTag(SceneBuildError):
    code = "unknown_shape_tag"


class EmptyGraph(SceneBuildError):
    code = "empty_graph"

    def __init__(self, message: str = "Cannot build a scene from zero layers") -> None:
        super().__init__(message)


InvalidShape = UnknownShapeTag
