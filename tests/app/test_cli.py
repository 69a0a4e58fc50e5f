from __future__ import annotations

from pathlib import Path

import orjson
import pytest
from typer.testing import CliRunner

from app import cli
from domain.models import ProviderResponse
from tests.helpers.layer_fixtures import layer_fixture_path, make_graph, make_layer

runner = CliRunner()


def test_build_writes_scene(tmp_path: Path) -> None:
    output = tmp_path / "scene.json"
    result = runner.invoke(
        cli.app,
        [
            "build",
            str(layer_fixture_path("small_network.json")),
            "--output",
            str(output),
            "--layer-names",
            "--no-inter-edges",
        ],
    )

    assert result.exit_code == 0, result.output
    figure = orjson.loads(output.read_bytes())
    names = [trace["name"] for trace in figure["data"]]
    assert "Input Layer name" in names
    assert not any(name.startswith("Edges") for name in names)


def test_build_reports_missing_layers(tmp_path: Path) -> None:
    empty = tmp_path / "empty.json"
    empty.write_text('{"status": "success", "data": {"layers": []}}', encoding="utf-8")

    result = runner.invoke(cli.app, ["build", str(empty), "--output", str(tmp_path / "s.json")])

    assert result.exit_code == 1
    assert not (tmp_path / "s.json").exists()


def test_validate_rejects_unknown_shapes(tmp_path: Path) -> None:
    layers = tmp_path / "layers.json"
    layers.write_text(
        '{"layers": [{"name": "odd", "rows": 2, "cols": 2, "shape": "star"}]}',
        encoding="utf-8",
    )

    result = runner.invoke(cli.app, ["validate", str(layers)])

    assert result.exit_code == 1
    assert "unknown_shape_tag" in result.output


def test_validate_accepts_example() -> None:
    result = runner.invoke(cli.app, ["validate", str(layer_fixture_path("small_network.json"))])

    assert result.exit_code == 0, result.output
    assert "Valid layer file" in result.output


def test_fetch_uses_provider_and_saves_layers(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[tuple[str, str | None]] = []

    class FakeProvider:
        def fetch(self, spreadsheet_id: str, endpoint: str | None = None) -> ProviderResponse:
            calls.append((spreadsheet_id, endpoint))
            return ProviderResponse.success(make_graph(make_layer(2, 2, name="remote")))

    monkeypatch.setattr(cli, "build_layer_provider", lambda settings: FakeProvider())
    output = tmp_path / "scene.json"
    saved = tmp_path / "layers.json"

    result = runner.invoke(
        cli.app,
        ["fetch", "sheet-9", "--output", str(output), "--save-layers", str(saved)],
    )

    assert result.exit_code == 0, result.output
    assert calls == [("sheet-9", None)]
    assert output.exists()
    assert orjson.loads(saved.read_bytes())["data"]["layers"][0]["name"] == "remote"


def _inter_edge_starts(output: Path) -> list[tuple[float, float, float]]:
    figure = orjson.loads(output.read_bytes())
    trace = next(trace for trace in figure["data"] if trace["name"] == "Edges 0→1")
    return list(zip(trace["x"][::3], trace["y"][::3], trace["z"][::3]))


def test_build_applies_edge_cap_options(tmp_path: Path) -> None:
    truncated = tmp_path / "truncated.json"
    strided = tmp_path / "strided.json"
    source = str(layer_fixture_path("small_network.json"))

    first = runner.invoke(
        cli.app, ["build", source, "--output", str(truncated), "--edge-cap", "5"]
    )
    second = runner.invoke(
        cli.app,
        [
            "build",
            source,
            "--output",
            str(strided),
            "--edge-cap",
            "5",
            "--edge-cap-policy",
            "stride",
        ],
    )

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    truncated_starts = _inter_edge_starts(truncated)
    strided_starts = _inter_edge_starts(strided)
    assert len(truncated_starts) == 6
    assert len(strided_starts) == 6
    assert len(set(truncated_starts)) == 1
    assert len(set(strided_starts)) > 1


def test_build_rejects_unknown_edge_cap_policy(tmp_path: Path) -> None:
    output = tmp_path / "scene.json"
    result = runner.invoke(
        cli.app,
        [
            "build",
            str(layer_fixture_path("small_network.json")),
            "--output",
            str(output),
            "--edge-cap-policy",
            "random",
        ],
    )

    assert result.exit_code == 1
    assert not output.exists()
