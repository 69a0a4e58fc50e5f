from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, ORJSONResponse
from fastapi.templating import Jinja2Templates

from app.config import AppSettings, load_settings
from app.scene_wiring import build_layer_provider, build_scene_assembler
from domain.errors import SceneBuildError
from domain.models import LayerGraph
from domain.ports.providers import LayerProvider
from domain.services.build_scene import SceneAssembler
from domain.services.configuration import ConfigurationState
from domain.services.provider_payload import parse_provider_payload

TEMPLATES_DIR = Path(__file__).parent / "web" / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewerContext:
    settings: AppSettings
    provider: LayerProvider
    assembler: SceneAssembler


class ConfigurationStore:
    """Holds the staged/active pair; each change swaps in a new snapshot."""

    def __init__(self, state: ConfigurationState) -> None:
        self._state = state
        self._lock = threading.Lock()

    @property
    def state(self) -> ConfigurationState:
        return self._state

    def stage(self, changes: dict[str, Any]) -> ConfigurationState:
        with self._lock:
            self._state = self._state.stage(**changes)
            return self._state

    def commit(self) -> ConfigurationState:
        with self._lock:
            self._state = self._state.commit()
            return self._state

    def discard(self) -> ConfigurationState:
        with self._lock:
            self._state = self._state.discard()
            return self._state


def create_app(
    settings: AppSettings,
    provider: LayerProvider | None = None,
) -> FastAPI:
    app = FastAPI(title=settings.viewer.title)
    app.state.context = ViewerContext(
        settings=settings,
        provider=provider or build_layer_provider(settings),
        assembler=build_scene_assembler(settings),
    )
    app.state.configuration = ConfigurationStore(
        ConfigurationState.starting_from(settings.viewer.scene_configuration())
    )

    @app.get("/health")
    def health() -> ORJSONResponse:
        return ORJSONResponse({"status": "ok"})

    @app.get("/", response_class=HTMLResponse)
    def viewer_page(
        request: Request,
        sheet_id: str | None = Query(default=None, alias="sheetId"),
        gas_url: str | None = Query(default=None, alias="gasUrl"),
        context: ViewerContext = Depends(get_context),
    ) -> HTMLResponse:
        spreadsheet_id = sheet_id or context.settings.provider.spreadsheet_id
        return templates.TemplateResponse(
            request,
            "viewer.html",
            {
                "title": context.settings.viewer.title,
                "spreadsheet_id": spreadsheet_id,
                "gas_url": gas_url or "",
                "configuration": get_configuration(request).state.to_dict(),
            },
        )

    @app.get("/api/config")
    def api_config(request: Request) -> ORJSONResponse:
        return ORJSONResponse(get_configuration(request).state.to_dict())

    @app.post("/api/config/stage")
    def api_stage_config(
        request: Request,
        changes: dict[str, Any] = Body(...),
    ) -> ORJSONResponse:
        try:
            state = get_configuration(request).stage(changes)
        except (TypeError, ValueError) as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return ORJSONResponse(state.to_dict())

    @app.post("/api/config/commit")
    def api_commit_config(request: Request) -> ORJSONResponse:
        state = get_configuration(request).commit()
        logger.info("Committed scene configuration %s", state.active.to_dict())
        return ORJSONResponse(state.to_dict())

    @app.post("/api/config/discard")
    def api_discard_config(request: Request) -> ORJSONResponse:
        return ORJSONResponse(get_configuration(request).discard().to_dict())

    @app.get("/api/scene")
    def api_scene(
        request: Request,
        sheet_id: str | None = Query(default=None, alias="sheetId"),
        gas_url: str | None = Query(default=None, alias="gasUrl"),
        context: ViewerContext = Depends(get_context),
    ) -> ORJSONResponse:
        spreadsheet_id = sheet_id or context.settings.provider.spreadsheet_id
        if not spreadsheet_id:
            raise HTTPException(status_code=400, detail="sheetId is required")
        response = context.provider.fetch(spreadsheet_id, gas_url)
        if not response.ok or response.data is None:
            return ORJSONResponse(
                {"status": "error", "message": response.message or "Failed to fetch layers."},
                status_code=502,
            )
        return build_scene_response(context, get_configuration(request), response.data)

    @app.post("/api/scene")
    def api_scene_from_payload(
        request: Request,
        payload: dict[str, Any] = Body(...),
        context: ViewerContext = Depends(get_context),
    ) -> ORJSONResponse:
        response = parse_provider_payload(payload)
        if not response.ok or response.data is None:
            return ORJSONResponse(
                {"status": "error", "message": response.message or "Invalid layer payload."},
                status_code=422,
            )
        return build_scene_response(context, get_configuration(request), response.data)

    return app


def build_scene_response(
    context: ViewerContext,
    store: ConfigurationStore,
    graph: LayerGraph,
) -> ORJSONResponse:
    configuration = store.state.active
    try:
        scene = context.assembler.build(graph, configuration)
    except SceneBuildError as exc:
        logger.warning("Scene build failed: %s", exc.message)
        return ORJSONResponse(exc.to_payload(), status_code=422)
    return ORJSONResponse(
        {
            "status": "success",
            "configuration": configuration.to_dict(),
            "layers": [
                {"name": layer.name, "shape": layer.shape, "rows": layer.rows, "cols": layer.cols}
                for layer in graph.layers
            ],
            "figure": scene.to_dict(),
        }
    )


def get_context(request: Request) -> ViewerContext:
    return cast(ViewerContext, request.app.state.context)


def get_configuration(request: Request) -> ConfigurationStore:
    return cast(ConfigurationStore, request.app.state.configuration)


def build_app() -> FastAPI:
    return create_app(load_settings())
