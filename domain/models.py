from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_INTRA_EDGE_COLOR = "#ccc"
DEFAULT_INTER_EDGE_COLOR = "rgba(71, 85, 105, 0.6)"
LABEL_TEXT_COLOR = "#444"
LAYER_NAME_COLOR = "#333"


class LayerShape(str, Enum):
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    TRIANGLE = "triangle"


class EdgeKind(str, Enum):
    INTRA = "intra"
    INTER = "inter"


class MatrixLayer(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = ""
    rows: int
    cols: int
    values: List[List[Optional[float]]] = Field(default_factory=list)
    shape: str = LayerShape.RECTANGLE.value
    color: Optional[str] = None
    edge_color: Optional[str] = Field(default=None, alias="edgeColor")
    labels: Optional[List[List[Optional[str]]]] = None
    urls: Optional[List[List[Optional[str]]]] = None

    @field_validator("labels", mode="before")
    @classmethod
    def stringify_labels(cls, value: object) -> object:
        if not isinstance(value, list):
            return value
        return [
            [_label_text(cell) for cell in row] if isinstance(row, list) else row
            for row in value
        ]

    @field_validator("shape", mode="before")
    @classmethod
    def normalize_shape(cls, value: object) -> str:
        if isinstance(value, LayerShape):
            return value.value
        return str(value or "").strip().lower()

    def value_at(self, row: int, col: int) -> float:
        cell = _cell(self.values, row, col)
        return float(cell) if cell is not None else 0.0

    def label_at(self, row: int, col: int) -> str | None:
        if self.labels is None:
            return None
        return _cell(self.labels, row, col)

    def url_at(self, row: int, col: int) -> str | None:
        if self.urls is None:
            return None
        return _cell(self.urls, row, col)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class LayerGraph(BaseModel):
    layers: List[MatrixLayer] = Field(default_factory=list)


class ProviderResponse(BaseModel):
    status: Literal["success", "error"]
    data: Optional[LayerGraph] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, graph: LayerGraph) -> ProviderResponse:
        return cls(status="success", data=graph)

    @classmethod
    def error(cls, message: str) -> ProviderResponse:
        return cls(status="error", message=message)

    @property
    def ok(self) -> bool:
        return self.status == "success" and self.data is not None and bool(self.data.layers)


def _label_text(cell: object) -> object:
    if isinstance(cell, bool) or not isinstance(cell, (int, float)):
        return cell
    return format_value(float(cell))


def _cell(grid: List[List[Any]], row: int, col: int) -> Any:
    if row < 0 or col < 0 or row >= len(grid):
        return None
    line = grid[row]
    if line is None or col >= len(line):
        return None
    return line[col]


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Node:
    x: float
    y: float
    z: float
    value: float
    row: int
    col: int
    label: str | None = None
    url: str | None = None

    @property
    def position(self) -> Point3D:
        return Point3D(self.x, self.y, self.z)

    def display_text(self) -> str:
        return self.label or format_value(self.value)


@dataclass(frozen=True)
class Edge:
    start: Point3D
    end: Point3D
    kind: EdgeKind


@dataclass(frozen=True)
class EdgeStyle:
    color: str
    width: float = 2.0
    opacity: float | None = None


@dataclass(frozen=True)
class PointTrace:
    name: str
    nodes: tuple[Node, ...]
    mode: str
    color: str
    text: tuple[str, ...]
    size: float = 6.0
    opacity: float = 0.9
    text_position: str = "top center"
    text_size: float = 10.0
    text_color: str = LABEL_TEXT_COLOR
    text_weight: str | None = None
    hoverinfo: str = "text+name"
    showlegend: bool = True
    customdata: tuple[str | None, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        textfont: dict[str, Any] = {"size": self.text_size, "color": self.text_color}
        if self.text_weight:
            textfont["weight"] = self.text_weight
        trace: dict[str, Any] = {
            "type": "scatter3d",
            "mode": self.mode,
            "name": self.name,
            "x": [node.x for node in self.nodes],
            "y": [node.y for node in self.nodes],
            "z": [node.z for node in self.nodes],
            "text": list(self.text),
            "textposition": self.text_position,
            "textfont": textfont,
            "hoverinfo": self.hoverinfo,
            "showlegend": self.showlegend,
        }
        if self.mode != "text":
            trace["marker"] = {
                "size": self.size,
                "color": self.color,
                "opacity": self.opacity,
                "line": {"color": "white", "width": 0.5},
            }
        if self.customdata is not None:
            trace["customdata"] = list(self.customdata)
        return trace


@dataclass(frozen=True)
class LineTrace:
    name: str
    kind: EdgeKind
    edges: tuple[Edge, ...]
    style: EdgeStyle

    def to_dict(self) -> dict[str, Any]:
        xs: list[float | None] = []
        ys: list[float | None] = []
        zs: list[float | None] = []
        for edge in self.edges:
            xs.extend((edge.start.x, edge.end.x, None))
            ys.extend((edge.start.y, edge.end.y, None))
            zs.extend((edge.start.z, edge.end.z, None))
        line: dict[str, Any] = {"color": self.style.color, "width": self.style.width}
        if self.style.opacity is not None:
            line["opacity"] = self.style.opacity
        return {
            "type": "scatter3d",
            "mode": "lines",
            "name": self.name,
            "x": xs,
            "y": ys,
            "z": zs,
            "line": line,
            "showlegend": False,
            "hoverinfo": "none",
        }


Trace = PointTrace | LineTrace


@dataclass(frozen=True)
class Scene:
    traces: tuple[Trace, ...]
    layout: dict[str, Any] = field(default_factory=dict)

    def node_traces(self) -> list[PointTrace]:
        return [trace for trace in self.traces if isinstance(trace, PointTrace)]

    def line_traces(self, kind: EdgeKind | None = None) -> list[LineTrace]:
        return [
            trace
            for trace in self.traces
            if isinstance(trace, LineTrace) and (kind is None or trace.kind == kind)
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [trace.to_dict() for trace in self.traces],
            "layout": dict(self.layout),
        }


def format_value(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)
