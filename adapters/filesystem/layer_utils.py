from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


def iter_layer_paths(directory: Path) -> Iterable[Path]:
    yield from directory.glob("*.json")


def strip_json_comments(content: str) -> str:
    result_lines: list[str] = []
    for line in content.splitlines():
        in_string = False
        escaped = False
        cleaned = []
        for char, following in zip(line, line[1:] + " "):
            if char == '"' and not escaped:
                in_string = not in_string
            if not in_string and char == "/" and following == "/":
                break
            cleaned.append(char)
            escaped = char == "\\" and not escaped
        result_lines.append("".join(cleaned))
    return "\n".join(result_lines)
