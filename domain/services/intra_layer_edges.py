from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from domain.models import (
    DEFAULT_INTRA_EDGE_COLOR,
    Edge,
    EdgeKind,
    EdgeStyle,
    LayerShape,
    MatrixLayer,
    Node,
)
from domain.services.shape_layout import resolve_shape

INTRA_EDGE_WIDTH = 2.0
INTRA_EDGE_OPACITY = 0.4


@dataclass
class NodeIndex:
    by_cell: dict[tuple[int, int], Node] = field(default_factory=dict)

    @classmethod
    def from_nodes(cls, nodes: Iterable[Node]) -> NodeIndex:
        return cls({(node.row, node.col): node for node in nodes})

    def get(self, row: int, col: int) -> Node | None:
        return self.by_cell.get((row, col))


def intra_edge_style(layer: MatrixLayer) -> EdgeStyle:
    return EdgeStyle(
        color=layer.edge_color or DEFAULT_INTRA_EDGE_COLOR,
        width=INTRA_EDGE_WIDTH,
        opacity=INTRA_EDGE_OPACITY,
    )


def build_intra_layer_edges(layer: MatrixLayer, nodes: list[Node]) -> list[Edge]:
    shape = resolve_shape(layer.shape, layer.name)
    index = NodeIndex.from_nodes(nodes)
    wraps = shape == LayerShape.CIRCLE
    edges: list[Edge] = []

    def connect(current: Node, neighbor: Node | None) -> None:
        if neighbor is None:
            return
        edges.append(Edge(current.position, neighbor.position, EdgeKind.INTRA))

    for current in nodes:
        row, col = current.row, current.col
        if wraps and col + 1 == layer.cols:
            # Rings of one or two cells are already closed without the wrap edge.
            if layer.cols > 2:
                connect(current, index.get(row, 0))
        elif col + 1 < layer.cols:
            connect(current, index.get(row, col + 1))

        connect(current, index.get(row + 1, col))

        if shape == LayerShape.TRIANGLE and col > 0:
            connect(current, index.get(row + 1, col - 1))
    return edges
