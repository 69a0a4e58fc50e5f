from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from domain.errors import InvalidLayerShape, UnknownShapeTag
from domain.models import LayerShape, MatrixLayer

SQRT3 = math.sqrt(3)


@dataclass(frozen=True)
class LayoutSpacing:
    unit: float = 1.5
    ring: float = 1.2


ShapeLayout = Callable[[int, int, int, int, LayoutSpacing], tuple[float, float]]


def rectangle_offset(
    row: int, col: int, rows: int, cols: int, spacing: LayoutSpacing
) -> tuple[float, float]:
    x = (col - (cols - 1) / 2) * spacing.unit
    y = (row - (rows - 1) / 2) * spacing.unit
    return x, y


def circle_offset(
    row: int, col: int, rows: int, cols: int, spacing: LayoutSpacing
) -> tuple[float, float]:
    # Row 0 sits on the first ring, never at the center.
    angle = 2 * math.pi * col / cols
    radius = (row + 1) * spacing.ring
    return radius * math.cos(angle), radius * math.sin(angle)


def triangle_offset(
    row: int, col: int, rows: int, cols: int, spacing: LayoutSpacing
) -> tuple[float, float]:
    x = (col - row / 2) * spacing.unit
    y = row * (SQRT3 / 2) * spacing.unit
    y -= rows * SQRT3 / 4
    return x, y


SHAPE_LAYOUTS: Mapping[LayerShape, ShapeLayout] = {
    LayerShape.RECTANGLE: rectangle_offset,
    LayerShape.CIRCLE: circle_offset,
    LayerShape.TRIANGLE: triangle_offset,
}


def resolve_shape(tag: str | LayerShape, layer_name: str | None = None) -> LayerShape:
    try:
        return LayerShape(tag)
    except ValueError as exc:
        known = ", ".join(shape.value for shape in LayerShape)
        msg = f"Unknown layer shape {tag!r}; expected one of: {known}"
        raise UnknownShapeTag(msg, layer=layer_name) from exc


def validate_layer(layer: MatrixLayer) -> LayerShape:
    if layer.rows <= 0 or layer.cols <= 0:
        msg = f"Layer {layer.name!r} has invalid dimensions {layer.rows}x{layer.cols}"
        raise InvalidLayerShape(msg, layer=layer.name)
    return resolve_shape(layer.shape, layer.name)


def layout_offset(
    shape: str | LayerShape,
    row: int,
    col: int,
    rows: int,
    cols: int,
    spacing: LayoutSpacing | None = None,
) -> tuple[float, float]:
    if rows <= 0 or cols <= 0:
        msg = f"Invalid layer dimensions {rows}x{cols}"
        raise InvalidLayerShape(msg)
    strategy = SHAPE_LAYOUTS[resolve_shape(shape)]
    return strategy(row, col, rows, cols, spacing or LayoutSpacing())
