from __future__ import annotations

from pathlib import Path

import pytest

from stashport import config
from stashport.itineraries.ingest import create_itinerary
from stashport.models import reset_engine
from stashport.profiles import get_profile, update_profile


@pytest.fixture()
def data_dir(tmp_path: Path):
    config.set_data_dir(tmp_path)
    reset_engine()
    yield tmp_path
    reset_engine()


def test_update_profile_sets_and_clears_display_name(data_dir) -> None:
    create_itinerary({"title": "Seoul"}, "mina", email="mina@example.com")
    profile = update_profile("mina", "  Mina K  ")
    assert profile == {
        "id": "mina",
        "email": "mina@example.com",
        "display_name": "Mina K",
        "avatar_color": config.DEFAULT_AVATAR_COLOR,
    }
    assert get_profile("mina")["display_name"] == "Mina K"
    assert update_profile("mina", "")["display_name"] is None


def test_update_profile_rejects_bad_input(data_dir) -> None:
    create_itinerary({"title": "Busan"}, "mina", email="mina@example.com")
    with pytest.raises(ValueError, match="Display name"):
        update_profile("mina", "x" * 51)
    with pytest.raises(ValueError, match="Profile not found"):
        update_profile("nobody", "Ghost")
    assert get_profile("nobody") is None
