from __future__ import annotations

import pytest

from domain.services.scene_links import is_navigable_link, navigable_links


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("https://example.com/page", True),
        ("http://example.com", True),
        ("  https://example.com/trim  ", True),
        ("javascript:alert(1)", False),
        ("/relative/path", False),
        ("https://", False),
        ("", False),
        (None, False),
        (42, False),
    ],
)
def test_is_navigable_link(value: object, expected: bool) -> None:
    assert is_navigable_link(value) is expected


def test_navigable_links_strips_and_masks() -> None:
    assert navigable_links([" https://a.example/x ", "mailto:x@y", None]) == (
        "https://a.example/x",
        None,
        None,
    )
