from __future__ import annotations

from typing import Iterable, List

from sqlalchemy import delete
from sqlmodel import Session, col, select

from .models import Activity, Day, Itinerary, TripTag


def record_tags(session: Session, itinerary: Itinerary, tags: Iterable[str]) -> None:
    for tag in tags:
        session.add(TripTag(itinerary_id=itinerary.id, tag=tag))


def record_days(session: Session, itinerary: Itinerary, days: Iterable[dict]) -> List[Day]:
    """Add days and their activities. Expects ``itinerary.id`` to be assigned."""
    recorded: List[Day] = []
    for index, payload in enumerate(days):
        day = Day(
            itinerary_id=itinerary.id,
            day_number=payload.get("day_number") or index + 1,
            date=payload.get("date") or None,
            title=payload.get("title") or None,
        )
        session.add(day)
        session.flush()
        for activity in payload.get("activities") or []:
            session.add(
                Activity(
                    day_id=day.id,
                    title=activity["title"],
                    location=activity.get("location") or None,
                    start_time=activity.get("start_time") or None,
                    end_time=activity.get("end_time") or None,
                    notes=activity.get("notes") or None,
                )
            )
        recorded.append(day)
    return recorded


def _bulk_delete(session: Session, model, *criteria) -> None:
    statement = delete(model).where(*criteria).execution_options(synchronize_session=False)
    session.execute(statement)


def clear_tags(session: Session, itinerary_id: int) -> None:
    _bulk_delete(session, TripTag, col(TripTag.itinerary_id) == itinerary_id)


def clear_days(session: Session, itinerary_id: int) -> None:
    """Delete the days of an itinerary together with their activities."""
    day_ids = select(Day.id).where(Day.itinerary_id == itinerary_id)
    _bulk_delete(session, Activity, col(Activity.day_id).in_(day_ids))
    _bulk_delete(session, Day, col(Day.itinerary_id) == itinerary_id)


def load_tags(session: Session, itinerary_ids: List[int]) -> dict[int, List[str]]:
    tags: dict[int, List[str]] = {}
    if not itinerary_ids:
        return tags
    statement = (
        select(TripTag)
        .where(TripTag.itinerary_id.in_(itinerary_ids))
        .order_by(TripTag.id)
    )
    for row in session.exec(statement):
        tags.setdefault(row.itinerary_id, []).append(row.tag)
    return tags


def itinerary_tree(session: Session, itinerary: Itinerary, tags: List[str] | None = None) -> dict:
    days = session.exec(
        select(Day).where(Day.itinerary_id == itinerary.id).order_by(Day.day_number, Day.id)
    ).all()
    day_ids = [day.id for day in days]
    activities: dict[int, List[dict]] = {}
    if day_ids:
        statement = select(Activity).where(Activity.day_id.in_(day_ids)).order_by(Activity.id)
        for activity in session.exec(statement):
            activities.setdefault(activity.day_id, []).append(activity.model_dump(mode="json"))
    if tags is None:
        tags = load_tags(session, [itinerary.id]).get(itinerary.id, [])
    tree = itinerary.model_dump(mode="json")
    tree["days"] = [
        {**day.model_dump(mode="json"), "activities": activities.get(day.id, [])}
        for day in days
    ]
    tree["tags"] = list(tags)
    return tree
