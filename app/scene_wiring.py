from __future__ import annotations

from adapters.http.layer_provider import HttpLayerProvider
from app.config import AppSettings
from domain.ports.providers import LayerProvider
from domain.services.build_scene import SceneAssembler
from domain.services.inter_layer_edges import build_edge_limiter


def build_layer_provider(settings: AppSettings) -> LayerProvider:
    return HttpLayerProvider.from_settings(settings.provider)


def build_scene_assembler(settings: AppSettings) -> SceneAssembler:
    viewer = settings.viewer
    if viewer.edge_cap < 0:
        msg = "viewer.edge_cap must not be negative"
        raise ValueError(msg)
    return SceneAssembler(
        spacing=viewer.layout_spacing(),
        edge_limiter=build_edge_limiter(viewer.edge_cap_policy, viewer.edge_cap),
    )
