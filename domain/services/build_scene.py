from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from domain.errors import EmptyGraph
from domain.models import (
    LAYER_NAME_COLOR,
    EdgeKind,
    LayerGraph,
    LineTrace,
    MatrixLayer,
    Node,
    PointTrace,
    Scene,
    Trace,
)
from domain.services.configuration import SceneConfiguration
from domain.services.inter_layer_edges import (
    EdgeLimiter,
    TruncatingEdgeLimiter,
    build_inter_layer_edges,
    inter_edge_style,
)
from domain.services.intra_layer_edges import build_intra_layer_edges, intra_edge_style
from domain.services.layer_nodes import build_layer_nodes
from domain.services.scene_links import navigable_links
from domain.services.shape_layout import LayoutSpacing, validate_layer

logger = logging.getLogger(__name__)

LAYER_NAME_ANCHOR_X = -5.0
LAYER_NAME_ANCHOR_Y = 0.0


def default_layer_color(layer_index: int) -> str:
    return f"hsl({layer_index * 60}, 70%, 50%)"


def build_scene_layout() -> dict[str, Any]:
    return {
        "margin": {"l": 0, "r": 0, "b": 0, "t": 0},
        "scene": {
            "xaxis": {"title": "X", "showgrid": True, "zeroline": False},
            "yaxis": {"title": "Y", "showgrid": True, "zeroline": False},
            "zaxis": {"title": "Layer", "showgrid": True, "zeroline": False},
            "camera": {"eye": {"x": 1.5, "y": 1.5, "z": 1.5}},
        },
        "showlegend": True,
        "legend": {"x": 0, "y": 1},
        "paper_bgcolor": "rgba(0,0,0,0)",
        "plot_bgcolor": "rgba(0,0,0,0)",
    }


@dataclass(frozen=True)
class LayerGeometry:
    layer: MatrixLayer
    index: int
    nodes: list[Node]


class SceneAssembler:
    """Turn an ordered stack of matrix layers into plotly-ready traces.

    Each ``build`` call starts from scratch; nothing is cached between builds,
    so the same graph and configuration always yield the same scene.
    """

    def __init__(
        self,
        spacing: LayoutSpacing | None = None,
        edge_limiter: EdgeLimiter | None = None,
    ) -> None:
        self.spacing = spacing or LayoutSpacing()
        self.edge_limiter = edge_limiter or TruncatingEdgeLimiter()

    def build(
        self,
        graph: LayerGraph | Sequence[MatrixLayer],
        configuration: SceneConfiguration | None = None,
    ) -> Scene:
        configuration = configuration or SceneConfiguration()
        layers = list(graph.layers if isinstance(graph, LayerGraph) else graph)
        if not layers:
            raise EmptyGraph()
        # Fail before producing any geometry if one of the layers is unusable.
        for layer in layers:
            validate_layer(layer)

        traces: list[Trace] = []
        geometries: list[LayerGeometry] = []
        for index, layer in enumerate(layers):
            nodes = build_layer_nodes(layer, index, configuration.z_spacing, self.spacing)
            geometries.append(LayerGeometry(layer=layer, index=index, nodes=nodes))
            traces.append(self._intra_layer_trace(layer, nodes))
            traces.append(self._node_trace(layer, index, nodes, configuration))
            if configuration.show_layer_names:
                traces.append(self._layer_name_trace(layer, index, configuration))

        if configuration.show_inter_layer_edges:
            for source, target in zip(geometries, geometries[1:]):
                traces.append(self._inter_layer_trace(source, target))

        logger.debug("Built scene with %d layers and %d traces", len(layers), len(traces))
        return Scene(traces=tuple(traces), layout=build_scene_layout())

    def _intra_layer_trace(self, layer: MatrixLayer, nodes: list[Node]) -> LineTrace:
        edges = build_intra_layer_edges(layer, nodes)
        return LineTrace(
            name=f"{layer.name} outline",
            kind=EdgeKind.INTRA,
            edges=tuple(edges),
            style=intra_edge_style(layer),
        )

    def _node_trace(
        self,
        layer: MatrixLayer,
        index: int,
        nodes: list[Node],
        configuration: SceneConfiguration,
    ) -> PointTrace:
        return PointTrace(
            name=layer.name,
            nodes=tuple(nodes),
            mode="markers+text" if configuration.show_labels else "markers",
            color=layer.color or default_layer_color(index),
            text=tuple(node.display_text() for node in nodes),
            customdata=navigable_links(node.url for node in nodes),
        )

    def _layer_name_trace(
        self,
        layer: MatrixLayer,
        index: int,
        configuration: SceneConfiguration,
    ) -> PointTrace:
        anchor = Node(
            x=LAYER_NAME_ANCHOR_X,
            y=LAYER_NAME_ANCHOR_Y,
            z=index * configuration.z_spacing,
            value=0.0,
            row=-1,
            col=-1,
            label=layer.name,
        )
        return PointTrace(
            name=f"{layer.name} name",
            nodes=(anchor,),
            mode="text",
            color=layer.color or LAYER_NAME_COLOR,
            text=(layer.name,),
            text_position="middle left",
            text_size=14.0,
            text_color=layer.color or LAYER_NAME_COLOR,
            text_weight="bold",
            hoverinfo="none",
            showlegend=False,
        )

    def _inter_layer_trace(self, source: LayerGeometry, target: LayerGeometry) -> LineTrace:
        edges = build_inter_layer_edges(source.nodes, target.nodes, self.edge_limiter)
        return LineTrace(
            name=f"Edges {source.index}→{target.index}",
            kind=EdgeKind.INTER,
            edges=tuple(edges),
            style=inter_edge_style(source.layer),
        )
