from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adapters.filesystem.layer_repository import FileSystemLayerRepository
from adapters.render.surface import FileRenderSurface, SceneViewer
from app.config import AppSettings, load_settings
from app.scene_wiring import build_layer_provider, build_scene_assembler
from domain.errors import SceneBuildError
from domain.models import LayerGraph, ProviderResponse
from domain.services.configuration import SceneConfiguration

app = typer.Typer(no_args_is_help=True)
console = Console()


def _configure(config: Path | None) -> AppSettings:
    settings = load_settings(config)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    return settings


def _configuration(
    settings: AppSettings,
    labels: bool | None,
    layer_names: bool | None,
    inter_edges: bool | None,
    z_spacing: float | None,
) -> SceneConfiguration:
    changes: dict[str, object] = {}
    if labels is not None:
        changes["show_labels"] = labels
    if layer_names is not None:
        changes["show_layer_names"] = layer_names
    if inter_edges is not None:
        changes["show_inter_layer_edges"] = inter_edges
    if z_spacing is not None:
        changes["z_spacing"] = z_spacing
    return settings.viewer.scene_configuration().updated(**changes)


def _with_edge_cap(
    settings: AppSettings,
    edge_cap: int | None,
    edge_cap_policy: str | None,
) -> AppSettings:
    updates: dict[str, object] = {}
    if edge_cap is not None:
        updates["edge_cap"] = edge_cap
    if edge_cap_policy is not None:
        updates["edge_cap_policy"] = edge_cap_policy.strip().lower()
    if not updates:
        return settings
    return settings.model_copy(update={"viewer": settings.viewer.model_copy(update=updates)})


def _require_layers(response: ProviderResponse, source: str) -> LayerGraph:
    if not response.ok or response.data is None:
        console.print(f"[red]Could not load layers from {source}:[/] {response.message}")
        raise typer.Exit(code=1)
    return response.data


def _write_scene(
    settings: AppSettings,
    graph: LayerGraph,
    configuration: SceneConfiguration,
    output: Path,
) -> None:
    try:
        assembler = build_scene_assembler(settings)
    except ValueError as exc:
        console.print(f"[red]Invalid edge cap settings:[/] {exc}")
        raise typer.Exit(code=1) from exc
    try:
        scene = assembler.build(graph, configuration)
    except SceneBuildError as exc:
        console.print(f"[red]Scene build failed ({exc.code}):[/] {exc.message}")
        raise typer.Exit(code=1) from exc
    with SceneViewer(FileRenderSurface(output, keep_on_release=True)) as viewer:
        viewer.show(scene)
    console.print(f"[green]Wrote[/] {output} ({len(scene.traces)} traces)")


@app.command("build")
def build(
    input_path: Path = typer.Argument(..., help="Layer JSON file to render."),
    output: Path = typer.Option(Path("data/scenes/scene.json"), help="Scene JSON to write."),
    labels: bool | None = typer.Option(None, "--labels/--no-labels", help="Show node labels."),
    layer_names: bool | None = typer.Option(
        None, "--layer-names/--no-layer-names", help="Show layer name anchors."
    ),
    inter_edges: bool | None = typer.Option(
        None, "--inter-edges/--no-inter-edges", help="Draw edges between layers."
    ),
    z_spacing: float | None = typer.Option(None, min=0.001, help="Distance between layers."),
    edge_cap: int | None = typer.Option(None, min=0, help="Maximum inter-layer edges per pair."),
    edge_cap_policy: str | None = typer.Option(
        None, help="How to pick edges over the cap: truncate or stride."
    ),
    config: Path | None = typer.Option(None, help="YAML settings file."),
) -> None:
    settings = _configure(config)
    settings = _with_edge_cap(settings, edge_cap, edge_cap_policy)
    response = FileSystemLayerRepository().load(input_path)
    graph = _require_layers(response, str(input_path))
    configuration = _configuration(settings, labels, layer_names, inter_edges, z_spacing)
    _write_scene(settings, graph, configuration, output)


@app.command("fetch")
def fetch(
    spreadsheet_id: str = typer.Argument(..., help="Spreadsheet id to request layers for."),
    output: Path = typer.Option(Path("data/scenes/scene.json"), help="Scene JSON to write."),
    endpoint: str | None = typer.Option(None, "--gas-url", help="Override the provider URL."),
    save_layers: Path | None = typer.Option(None, help="Also store the fetched layers here."),
    labels: bool | None = typer.Option(None, "--labels/--no-labels", help="Show node labels."),
    layer_names: bool | None = typer.Option(
        None, "--layer-names/--no-layer-names", help="Show layer name anchors."
    ),
    inter_edges: bool | None = typer.Option(
        None, "--inter-edges/--no-inter-edges", help="Draw edges between layers."
    ),
    z_spacing: float | None = typer.Option(None, min=0.001, help="Distance between layers."),
    edge_cap: int | None = typer.Option(None, min=0, help="Maximum inter-layer edges per pair."),
    edge_cap_policy: str | None = typer.Option(
        None, help="How to pick edges over the cap: truncate or stride."
    ),
    config: Path | None = typer.Option(None, help="YAML settings file."),
) -> None:
    settings = _configure(config)
    settings = _with_edge_cap(settings, edge_cap, edge_cap_policy)
    provider = build_layer_provider(settings)
    response = provider.fetch(spreadsheet_id, endpoint)
    graph = _require_layers(response, f"spreadsheet {spreadsheet_id}")
    if save_layers is not None:
        FileSystemLayerRepository().save(graph, save_layers)
        console.print(f"[green]Saved layers to[/] {save_layers}")
    configuration = _configuration(settings, labels, layer_names, inter_edges, z_spacing)
    _write_scene(settings, graph, configuration, output)


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="Layer JSON file to validate.")) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    graph = _require_layers(FileSystemLayerRepository().load(input_path), str(input_path))
    try:
        build_scene_assembler(load_settings()).build(graph)
    except SceneBuildError as exc:
        console.print(f"[red]Validation failed ({exc.code}):[/] {exc.message}")
        raise typer.Exit(code=1) from exc

    table = Table("Layer", "Shape", "Size")
    for layer in graph.layers:
        table.add_row(layer.name, layer.shape, f"{layer.rows}×{layer.cols}")
    console.print(table)
    console.print(f"[green]Valid layer file:[/] {input_path}")


if __name__ == "__main__":
    app()
