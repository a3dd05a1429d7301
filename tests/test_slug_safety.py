from __future__ import annotations

import re

from stashport.sharing.slug import generate_slug, normalize_title, random_suffix

SUFFIX = re.compile(r"-[a-z0-9]{6}$")


def test_slug_sanitization() -> None:
    slug = generate_slug("Paris in 3 Days!!!")
    assert re.fullmatch(r"paris-in-3-days-[a-z0-9]{6}", slug)


def test_empty_title_keeps_suffix_only() -> None:
    assert re.fullmatch(r"-[a-z0-9]{6}", generate_slug(""))


def test_suffix_always_present() -> None:
    for title in ["Rome", "  Tokyo   Nights ", "Zürich & Bern", "a" * 120, "!!!", "under_score"]:
        assert SUFFIX.search(generate_slug(title))


def test_prefix_characters_are_safe() -> None:
    slug = generate_slug("Budget / Planner: 2025!  Road -- Trip")
    prefix = SUFFIX.sub("", slug)
    assert prefix == "budget-planner-2025-road-trip"
    assert re.fullmatch(r"[a-z0-9_-]*", prefix)
    assert "--" not in prefix


def test_non_ascii_letters_are_stripped() -> None:
    assert normalize_title("Zürich Café") == "zrich-caf"


def test_prefix_truncated_to_fifty_characters() -> None:
    title = "The Grand Tour of Northern Italy Lakes and Mountains in Autumn"
    prefix = normalize_title(title)
    assert len(prefix) == 50
    assert prefix == "the-grand-tour-of-northern-italy-lakes-and-mountai"


def test_truncation_can_leave_trailing_hyphen() -> None:
    title = "a" * 49 + " b"
    assert normalize_title(title) == "a" * 49 + "-"


def test_normalization_is_idempotent() -> None:
    for title in ["Paris in 3 Days!!!", "  Lisbon -- Porto  ", "x" * 80]:
        once = normalize_title(title)
        assert normalize_title(once) == once


def test_random_suffix_length() -> None:
    assert len(random_suffix(10)) == 10
    assert re.fullmatch(r"[a-z0-9]{6}", random_suffix())
