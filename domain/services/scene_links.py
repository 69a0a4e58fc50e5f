from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import urlparse


def is_navigable_link(value: object) -> bool:
    if not isinstance(value, str):
        return False
    raw = value.strip()
    if not raw:
        return False
    parsed = urlparse(raw)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def navigable_links(urls: Iterable[str | None]) -> tuple[str | None, ...]:
    return tuple(url.strip() if url and is_navigable_link(url) else None for url in urls)
