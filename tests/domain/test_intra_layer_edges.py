from __future__ import annotations

from domain.models import DEFAULT_INTRA_EDGE_COLOR, EdgeKind, MatrixLayer, Point3D
from domain.services.intra_layer_edges import (
    NodeIndex,
    build_intra_layer_edges,
    intra_edge_style,
)
from domain.services.layer_nodes import build_layer_nodes
from tests.helpers.layer_fixtures import make_layer


def _edges(layer: MatrixLayer) -> list[tuple[tuple[int, int], tuple[int, int]]]:
    nodes = build_layer_nodes(layer, 0, z_spacing=1.0)
    by_position = {node.position: (node.row, node.col) for node in nodes}
    return [
        (by_position[edge.start], by_position[edge.end])
        for edge in build_intra_layer_edges(layer, nodes)
    ]


def test_rectangle_three_by_three_outline() -> None:
    edges = _edges(make_layer(3, 3))
    horizontal = [edge for edge in edges if edge[0][0] == edge[1][0]]
    vertical = [edge for edge in edges if edge[0][1] == edge[1][1]]

    assert len(edges) == 12
    assert len(horizontal) == 6
    assert len(vertical) == 6
    assert edges[:2] == [((0, 0), (0, 1)), ((0, 0), (1, 0))]


def test_rectangle_has_no_wraparound() -> None:
    edges = _edges(make_layer(1, 4))

    assert edges == [((0, 0), (0, 1)), ((0, 1), (0, 2)), ((0, 2), (0, 3))]


def test_circle_rings_wrap_around() -> None:
    edges = _edges(make_layer(2, 4, shape="circle"))

    assert len(edges) == 2 * 4 + 1 * 4
    assert ((0, 3), (0, 0)) in edges
    assert ((1, 3), (1, 0)) in edges
    assert ((0, 2), (1, 2)) in edges


def test_small_rings_do_not_duplicate_or_self_connect() -> None:
    assert _edges(make_layer(1, 1, shape="circle")) == []
    assert _edges(make_layer(1, 2, shape="circle")) == [((0, 0), (0, 1))]


def test_triangle_adds_lower_left_diagonals() -> None:
    edges = _edges(make_layer(3, 3, shape="triangle"))
    diagonals = [edge for edge in edges if edge[1] == (edge[0][0] + 1, edge[0][1] - 1)]

    assert len(edges) == 3 * 2 + 2 * 3 + 2 * 2
    assert sorted(diagonals) == [
        ((0, 1), (1, 0)),
        ((0, 2), (1, 1)),
        ((1, 1), (2, 0)),
        ((1, 2), (2, 1)),
    ]


def test_edges_are_emitted_from_the_lower_indexed_cell() -> None:
    for shape in ("rectangle", "triangle"):
        for start, end in _edges(make_layer(3, 4, shape=shape)):
            assert start < end


def test_edges_are_tagged_intra_and_keep_layer_depth() -> None:
    layer = make_layer(2, 2)
    nodes = build_layer_nodes(layer, 3, z_spacing=2.0)
    edges = build_intra_layer_edges(layer, nodes)

    assert {edge.kind for edge in edges} == {EdgeKind.INTRA}
    assert {edge.start.z for edge in edges} | {edge.end.z for edge in edges} == {6.0}


def test_node_index_looks_up_by_cell() -> None:
    nodes = build_layer_nodes(make_layer(2, 3), 0, z_spacing=1.0)
    index = NodeIndex.from_nodes(nodes)

    assert index.get(1, 2) is nodes[5]
    assert index.get(2, 0) is None
    assert index.get(0, -1) is None
    assert nodes[0].position == Point3D(nodes[0].x, nodes[0].y, 0.0)


def test_intra_edge_style_prefers_layer_edge_color() -> None:
    assert intra_edge_style(make_layer(1, 1)).color == DEFAULT_INTRA_EDGE_COLOR
    styled = intra_edge_style(make_layer(1, 1, edgeColor="#123456"))

    assert styled.color == "#123456"
    assert styled.opacity == 0.4
