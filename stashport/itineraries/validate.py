from __future__ import annotations

from datetime import date
from typing import List

from ..config import BUDGET_LEVELS, ITINERARY_TYPES, TRIP_TAGS

TITLE_MAX = 200
DESCRIPTION_MAX = 2000
DESTINATION_MAX = 100
LOCATION_MAX = 200
NOTES_MAX = 1000


def _too_long(value: object, limit: int) -> bool:
    return isinstance(value, str) and len(value) > limit


def _optional_text(payload: dict, key: str, label: str, limit: int) -> List[str]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, str):
        return [f"{label} must be text"]
    if _too_long(value, limit):
        return [f"{label} must be less than {limit} characters"]
    return []


def _required_title(payload: dict, label: str) -> List[str]:
    title = payload.get("title")
    if not isinstance(title, str) or not title.strip():
        return [f"{label} is required"]
    if _too_long(title, TITLE_MAX):
        return [f"{label} must be less than {TITLE_MAX} characters"]
    return []


def validate_itinerary(payload: dict) -> List[str]:
    errors: List[str] = []
    errors.extend(_required_title(payload, "Title"))
    errors.extend(_optional_text(payload, "description", "Description", DESCRIPTION_MAX))
    errors.extend(_optional_text(payload, "destination", "Destination", DESTINATION_MAX))
    is_public = payload.get("is_public", True)
    if not isinstance(is_public, bool):
        errors.append("is_public must be a boolean")
    budget_level = payload.get("budget_level")
    if budget_level is not None and (
        isinstance(budget_level, bool)
        or not isinstance(budget_level, int)
        or budget_level not in BUDGET_LEVELS
    ):
        errors.append(f"Budget level must be one of {', '.join(str(level) for level in BUDGET_LEVELS)}")
    itinerary_type = payload.get("type")
    if itinerary_type is not None and (
        not isinstance(itinerary_type, str) or itinerary_type not in ITINERARY_TYPES
    ):
        errors.append(f"Unsupported itinerary type: {itinerary_type}")
    tags = payload.get("tags") or []
    if not isinstance(tags, list):
        errors.append("Tags must be a list")
    else:
        unknown = [str(tag) for tag in tags if tag not in TRIP_TAGS]
        if unknown:
            errors.append(f"Unknown tags: {', '.join(unknown)}")
    days = payload.get("days") or []
    if not isinstance(days, list):
        errors.append("Days must be a list")
        return errors
    for index, day in enumerate(days):
        if not isinstance(day, dict):
            errors.append(f"Day {index + 1} must be an object")
            continue
        errors.extend(f"Invalid day data: {error}" for error in validate_day(day, index + 1))
        activities = day.get("activities") or []
        if not isinstance(activities, list):
            errors.append(f"Activities for day {index + 1} must be a list")
            continue
        for activity in activities:
            if not isinstance(activity, dict):
                errors.append("Invalid activity data: activity must be an object")
                continue
            errors.extend(f"Invalid activity data: {error}" for error in validate_activity(activity))
    return errors


def validate_day(day: dict, default_number: int = 1) -> List[str]:
    errors: List[str] = []
    day_number = day.get("day_number", default_number)
    if isinstance(day_number, bool) or not isinstance(day_number, int) or day_number < 1:
        errors.append("Day number must be at least 1")
    raw_date = day.get("date")
    if not raw_date:
        errors.append("Date is required")
    else:
        try:
            date.fromisoformat(str(raw_date))
        except ValueError:
            errors.append("Invalid date format")
    errors.extend(_optional_text(day, "title", "Day title", TITLE_MAX))
    return errors


def validate_activity(activity: dict) -> List[str]:
    errors: List[str] = []
    errors.extend(_required_title(activity, "Activity title"))
    errors.extend(_optional_text(activity, "location", "Location", LOCATION_MAX))
    errors.extend(_optional_text(activity, "notes", "Notes", NOTES_MAX))
    return errors
