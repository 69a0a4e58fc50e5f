from __future__ import annotations

from domain.models import MatrixLayer, Node
from domain.services.shape_layout import SHAPE_LAYOUTS, LayoutSpacing, validate_layer


def build_layer_nodes(
    layer: MatrixLayer,
    layer_index: int,
    z_spacing: float,
    spacing: LayoutSpacing | None = None,
) -> list[Node]:
    """Place every cell of ``layer`` in 3D, in row-major order.

    The z coordinate is ``layer_index * z_spacing`` for every node. Cells that
    are missing from ``values`` get value 0; missing labels and urls are None.
    """
    shape = validate_layer(layer)
    strategy = SHAPE_LAYOUTS[shape]
    spacing = spacing or LayoutSpacing()
    z = layer_index * z_spacing

    nodes: list[Node] = []
    for row in range(layer.rows):
        for col in range(layer.cols):
            x, y = strategy(row, col, layer.rows, layer.cols, spacing)
            nodes.append(
                Node(
                    x=x,
                    y=y,
                    z=z,
                    value=layer.value_at(row, col),
                    row=row,
                    col=col,
                    label=layer.label_at(row, col),
                    url=layer.url_at(row, col),
                )
            )
    return nodes
