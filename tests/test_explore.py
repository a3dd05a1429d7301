from __future__ import annotations

from pathlib import Path

import pytest

from stashport import config
from stashport.itineraries.ingest import create_itinerary
from stashport.itineraries.query import explore_itineraries
from stashport.models import reset_engine
from stashport.profiles import update_profile


@pytest.fixture()
def populated(tmp_path: Path):
    config.set_data_dir(tmp_path)
    reset_engine()
    create_itinerary(
        {"title": "Kyoto Temples", "destination": "Kyoto, Japan", "tags": ["Solo"]},
        "alice",
        email="alice@example.com",
    )
    create_itinerary(
        {
            "title": "Tokyo Eats",
            "destination": "Tokyo, Japan",
            "type": "guide",
            "tags": ["Food Tour"],
        },
        "alice",
    )
    create_itinerary(
        {
            "title": "Lisbon Long Weekend",
            "destination": "Lisbon",
            "tags": ["Romantic", "Budget"],
            "days": [{"date": "2025-06-01"}, {"date": "2025-06-02"}],
        },
        "bob",
        email="bob@example.com",
    )
    create_itinerary({"title": "Secret Spot", "destination": "Japan", "is_public": False}, "bob")
    yield
    reset_engine()


def titles(result: dict) -> list[str]:
    return [item["title"] for item in result["itineraries"]]


def test_explore_lists_public_newest_first(populated) -> None:
    result = explore_itineraries()
    assert titles(result) == ["Lisbon Long Weekend", "Tokyo Eats", "Kyoto Temples"]
    assert result["pagination"] == {
        "page": 1,
        "limit": 12,
        "total_count": 3,
        "total_pages": 1,
        "has_more": False,
    }
    lisbon = result["itineraries"][0]
    assert lisbon["day_count"] == 2
    assert lisbon["tags"] == ["Romantic", "Budget"]
    assert lisbon["creator"]["display_name"] == "Anonymous"


def test_explore_filters(populated) -> None:
    assert titles(explore_itineraries(destination="japan")) == ["Tokyo Eats", "Kyoto Temples"]
    assert titles(explore_itineraries(type_filter="guide")) == ["Tokyo Eats"]
    assert titles(explore_itineraries(tags=["budget", " solo "])) == ["Lisbon Long Weekend", "Kyoto Temples"]
    assert titles(explore_itineraries(exclude_user_id="alice")) == ["Lisbon Long Weekend"]


def test_explore_pagination(populated) -> None:
    first = explore_itineraries(page=1, limit=2)
    second = explore_itineraries(page=2, limit=2)
    assert titles(first) == ["Lisbon Long Weekend", "Tokyo Eats"]
    assert first["pagination"]["has_more"] is True
    assert titles(second) == ["Kyoto Temples"]
    assert second["pagination"]["total_pages"] == 2
    assert second["pagination"]["has_more"] is False


def test_explore_clamps_arguments(populated) -> None:
    result = explore_itineraries(page=0, limit=500)
    assert result["pagination"]["page"] == 1
    assert result["pagination"]["limit"] == 50


def test_explore_rejects_unknown_type(populated) -> None:
    with pytest.raises(ValueError, match="daly"):
        explore_itineraries(type_filter="daly")
    assert titles(explore_itineraries(type_filter="daily")) == ["Lisbon Long Weekend", "Kyoto Temples"]


def test_explore_shows_creator_display_name(populated) -> None:
    update_profile("alice", "Alice W.")
    creators = {item["title"]: item["creator"]["display_name"] for item in explore_itineraries()["itineraries"]}
    assert creators["Tokyo Eats"] == "Alice W."
    assert creators["Lisbon Long Weekend"] == "Anonymous"
