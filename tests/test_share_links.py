from __future__ import annotations

import pytest

from stashport.sharing.links import share_caption, share_filename, share_url


def test_share_url_uses_trip_path() -> None:
    assert share_url("rome-abc123", "https://example.com/") == "https://example.com/t/rome-abc123"


def test_share_caption() -> None:
    caption = share_caption("Rome", "rome-abc123", "https://example.com")
    assert caption == "Check out my trip: Rome on Stashport!\n\nhttps://example.com/t/rome-abc123"


def test_share_filename() -> None:
    assert share_filename("rome-abc123", "story") == "rome-abc123-story.png"
    with pytest.raises(ValueError):
        share_filename("rome-abc123", "banner")
