from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Protocol

from domain.models import (
    DEFAULT_INTER_EDGE_COLOR,
    Edge,
    EdgeKind,
    EdgeStyle,
    MatrixLayer,
    Node,
)

DEFAULT_EDGE_CAP = 500
INTER_EDGE_WIDTH = 2.0


class EdgeLimiter(Protocol):
    def select(self, total: int) -> Iterator[int]:
        """Yield the pair ordinals to keep, in increasing order."""
        ...


@dataclass(frozen=True)
class TruncatingEdgeLimiter:
    """Keep the earliest row-major pairs and drop everything past the cap.

    The check happens before each emission, so ``cap + 1`` pairs survive when
    the full product is larger than the cap.
    """

    cap: int = DEFAULT_EDGE_CAP

    def limit(self, total: int) -> int:
        return min(total, self.cap + 1)

    def select(self, total: int) -> Iterator[int]:
        yield from range(self.limit(total))


@dataclass(frozen=True)
class StridedEdgeLimiter:
    """Keep as many pairs as truncation would, spread evenly over all pairs."""

    cap: int = DEFAULT_EDGE_CAP

    def select(self, total: int) -> Iterator[int]:
        keep = min(total, self.cap + 1)
        if keep <= 0:
            return
        if keep == total:
            yield from range(total)
            return
        for step in range(keep):
            yield step * total // keep


EDGE_LIMITERS: dict[str, type[TruncatingEdgeLimiter] | type[StridedEdgeLimiter]] = {
    "truncate": TruncatingEdgeLimiter,
    "stride": StridedEdgeLimiter,
}


def build_edge_limiter(policy: str, cap: int = DEFAULT_EDGE_CAP) -> EdgeLimiter:
    try:
        limiter_cls = EDGE_LIMITERS[policy]
    except KeyError as exc:
        known = ", ".join(EDGE_LIMITERS)
        msg = f"Unknown edge cap policy {policy!r}; expected one of: {known}"
        raise ValueError(msg) from exc
    return limiter_cls(cap=cap)


def inter_edge_style(source_layer: MatrixLayer) -> EdgeStyle:
    return EdgeStyle(
        color=source_layer.edge_color or DEFAULT_INTER_EDGE_COLOR,
        width=INTER_EDGE_WIDTH,
    )


def build_inter_layer_edges(
    sources: Sequence[Node],
    targets: Sequence[Node],
    limiter: EdgeLimiter | None = None,
) -> list[Edge]:
    limiter = limiter or TruncatingEdgeLimiter()
    target_count = len(targets)
    total = len(sources) * target_count
    if total == 0:
        return []
    edges: list[Edge] = []
    for ordinal in limiter.select(total):
        source = sources[ordinal // target_count]
        target = targets[ordinal % target_count]
        edges.append(Edge(source.position, target.position, EdgeKind.INTER))
    return edges
