from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from pydantic import TypeAdapter

DEFAULT_Z_SPACING = 4.0

_BOOL_ADAPTER = TypeAdapter(bool)
_FLOAT_ADAPTER = TypeAdapter(float)

_WIRE_NAMES = {
    "showLabels": "show_labels",
    "showLayerNames": "show_layer_names",
    "showInterLayerEdges": "show_inter_layer_edges",
    "zSpacing": "z_spacing",
}


@dataclass(frozen=True)
class SceneConfiguration:
    show_labels: bool = False
    show_layer_names: bool = False
    show_inter_layer_edges: bool = True
    z_spacing: float = DEFAULT_Z_SPACING

    def __post_init__(self) -> None:
        if not self.z_spacing > 0:
            msg = f"z_spacing must be positive, got {self.z_spacing}"
            raise ValueError(msg)

    @classmethod
    def from_mapping(cls, payload: dict[str, Any]) -> SceneConfiguration:
        return cls().updated(**payload)

    def updated(self, **changes: Any) -> SceneConfiguration:
        normalized = {_WIRE_NAMES.get(key, key): value for key, value in changes.items()}
        unknown = set(normalized) - set(_WIRE_NAMES.values())
        if unknown:
            msg = f"Unknown configuration fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        if "z_spacing" in normalized:
            normalized["z_spacing"] = _FLOAT_ADAPTER.validate_python(normalized["z_spacing"])
        for key in ("show_labels", "show_layer_names", "show_inter_layer_edges"):
            if key in normalized:
                normalized[key] = _BOOL_ADAPTER.validate_python(normalized[key])
        return replace(self, **normalized)

    def to_dict(self) -> dict[str, Any]:
        return {
            "showLabels": self.show_labels,
            "showLayerNames": self.show_layer_names,
            "showInterLayerEdges": self.show_inter_layer_edges,
            "zSpacing": self.z_spacing,
        }


@dataclass(frozen=True)
class ConfigurationState:
    """Edited-but-uncommitted settings next to the ones driving the scene.

    Scenes are only ever built from ``active``; ``commit`` swaps the staged
    snapshot in as a whole.
    """

    active: SceneConfiguration = field(default_factory=SceneConfiguration)
    staged: SceneConfiguration = field(default_factory=SceneConfiguration)

    @classmethod
    def starting_from(cls, configuration: SceneConfiguration) -> ConfigurationState:
        return cls(active=configuration, staged=configuration)

    @property
    def is_dirty(self) -> bool:
        return self.active != self.staged

    def stage(self, **changes: Any) -> ConfigurationState:
        return replace(self, staged=self.staged.updated(**changes))

    def commit(self) -> ConfigurationState:
        return replace(self, active=self.staged)

    def discard(self) -> ConfigurationState:
        return replace(self, staged=self.active)

    def to_dict(self) -> dict[str, Any]:
        return {
            "active": self.active.to_dict(),
            "staged": self.staged.to_dict(),
            "dirty": self.is_dirty,
        }
