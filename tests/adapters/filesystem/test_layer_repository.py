from __future__ import annotations

from pathlib import Path

from adapters.filesystem.layer_repository import FileSystemLayerRepository
from tests.helpers.layer_fixtures import layer_fixture_path, make_graph, make_layer


def test_load_example_layer_file() -> None:
    response = FileSystemLayerRepository().load(layer_fixture_path("small_network.json"))

    assert response.ok
    assert response.data is not None
    assert [layer.shape for layer in response.data.layers] == ["rectangle", "circle", "triangle"]


def test_line_comments_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "commented.json"
    path.write_text(
        "{\n"
        "  // hand-written layer file\n"
        '  "layers": [{"name": "http://x", "rows": 1, "cols": 2, "values": [[1, 2]]}]\n'
        "}\n",
        encoding="utf-8",
    )

    response = FileSystemLayerRepository().load(path)

    assert response.ok
    assert response.data is not None
    assert response.data.layers[0].name == "http://x"


def test_missing_and_broken_files_are_errors(tmp_path: Path) -> None:
    repo = FileSystemLayerRepository()
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    missing = repo.load(tmp_path / "missing.json")
    invalid = repo.load(broken)

    assert missing.status == "error"
    assert missing.message is not None and "not found" in missing.message
    assert invalid.status == "error"
    assert invalid.message is not None and invalid.message.startswith("Invalid JSON")


def test_save_writes_a_success_envelope(tmp_path: Path) -> None:
    repo = FileSystemLayerRepository()
    graph = make_graph(make_layer(1, 2, name="saved", edgeColor="#010203"))
    target = tmp_path / "out" / "layers.json"

    repo.save(graph, target)
    loaded = repo.load(target)

    assert loaded.ok
    assert loaded.data == graph
    assert '"edgeColor"' in target.read_text(encoding="utf-8")


def test_load_all_with_paths_is_sorted(tmp_path: Path) -> None:
    repo = FileSystemLayerRepository()
    for name in ("b.json", "a.json"):
        repo.save(make_graph(make_layer(1, 1, name=name)), tmp_path / name)

    pairs = repo.load_all_with_paths(tmp_path)

    assert [path.name for path, _ in pairs] == ["a.json", "b.json"]
    assert all(response.ok for _, response in pairs)
