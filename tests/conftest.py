from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import AppSettings, ProviderSettings, ViewerSettings
from domain.models import LayerGraph, ProviderResponse
from tests.helpers.layer_fixtures import make_graph, make_layer


def _clear_m3d_env() -> None:
    for key in list(os.environ):
        if key.startswith("M3D_"):
            os.environ.pop(key, None)


_clear_m3d_env()


@pytest.fixture(autouse=True)
def clear_m3d_env() -> Generator[None, None, None]:
    _clear_m3d_env()
    yield
    _clear_m3d_env()


class StubLayerProvider:
    def __init__(self, response: ProviderResponse) -> None:
        self.response = response
        self.calls: list[tuple[str, str | None]] = []

    def fetch(self, spreadsheet_id: str, endpoint: str | None = None) -> ProviderResponse:
        self.calls.append((spreadsheet_id, endpoint))
        return self.response


@pytest.fixture
def two_layer_graph() -> LayerGraph:
    return make_graph(
        make_layer(3, 3, name="Input", color="#6366f1"),
        make_layer(3, 3, name="Hidden", edgeColor="#f97316"),
    )


@pytest.fixture
def viewer_settings() -> ViewerSettings:
    return ViewerSettings(title="Test Viewer")


@pytest.fixture
def app_settings(viewer_settings: ViewerSettings) -> AppSettings:
    return AppSettings(
        provider=ProviderSettings(url="https://provider.test/exec", spreadsheet_id="sheet-1"),
        viewer=viewer_settings,
    )


@pytest.fixture
def app_settings_factory(app_settings: AppSettings) -> Callable[..., AppSettings]:
    def _factory(**viewer_overrides: object) -> AppSettings:
        viewer = app_settings.viewer.model_copy(update=viewer_overrides)
        return app_settings.model_copy(update={"viewer": viewer})

    return _factory


@pytest.fixture
def stub_provider_factory() -> Callable[[ProviderResponse], StubLayerProvider]:
    return StubLayerProvider
