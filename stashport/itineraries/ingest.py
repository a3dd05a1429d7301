from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ..config import DEFAULT_ITINERARY_TYPE
from ..models import Itinerary, ItineraryType, User, get_session, init_db, utcnow
from ..sharing.registry import DatabaseSlugRegistry, SlugRegistry
from ..sharing.slug import SlugAllocator
from ..storage import clear_days, clear_tags, itinerary_tree, record_days, record_tags
from .validate import validate_itinerary

logger = logging.getLogger(__name__)


def load_payload(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Payload not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Payload is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Payload must be a JSON object")
    return payload


def ensure_user(session: Session, user_id: str, email: Optional[str] = None) -> User:
    user = session.get(User, user_id)
    if user is not None:
        return user
    if not email:
        raise ValueError(f"Unknown user: {user_id}")
    user = User(id=user_id, email=email)
    session.add(user)
    session.flush()
    logger.info("Created profile for user %s", user_id)
    return user


def _owned_itinerary(session: Session, itinerary_id: int, user_id: str) -> Itinerary:
    itinerary = session.get(Itinerary, itinerary_id)
    if itinerary is None:
        raise ValueError(f"Itinerary not found: {itinerary_id}")
    if itinerary.user_id != user_id:
        raise PermissionError(f"User {user_id} does not own itinerary {itinerary_id}")
    return itinerary


def _validated(payload: dict) -> dict:
    errors = validate_itinerary(payload)
    if errors:
        raise ValueError(errors[0])
    return payload


def create_itinerary(
    payload: dict,
    user_id: str,
    email: Optional[str] = None,
    registry: Optional[SlugRegistry] = None,
) -> dict:
    """Validate ``payload`` and store it under a freshly reserved slug.

    The owner profile is resolved before any slug is reserved. If storing the
    itinerary fails afterwards the reservation is released again.
    """
    init_db()
    _validated(payload)
    title = payload["title"].strip()
    with get_session() as session:
        ensure_user(session, user_id, email)
        session.commit()
    allocator = SlugAllocator(registry if registry is not None else DatabaseSlugRegistry())
    slug = allocator.allocate(title)
    try:
        with get_session() as session:
            itinerary = Itinerary(
                user_id=user_id,
                title=title,
                description=payload.get("description") or None,
                destination=payload.get("destination") or None,
                slug=slug,
                is_public=payload.get("is_public", True),
                type=ItineraryType(payload.get("type") or DEFAULT_ITINERARY_TYPE),
                budget_level=payload.get("budget_level"),
                cover_photo_url=payload.get("cover_photo_url") or None,
            )
            session.add(itinerary)
            session.flush()
            record_tags(session, itinerary, payload.get("tags") or [])
            record_days(session, itinerary, payload.get("days") or [])
            session.commit()
            session.refresh(itinerary)
            tree = itinerary_tree(session, itinerary)
    except Exception:
        logger.exception("Failed to store itinerary %s", slug)
        allocator.release(slug)
        raise
    logger.info("Created itinerary %s with %d days", tree["slug"], len(tree["days"]))
    return tree


def update_itinerary(itinerary_id: int, payload: dict, user_id: str) -> dict:
    """Replace the details and tags of an itinerary owned by ``user_id``.

    Days and activities are replaced only when ``payload`` carries a ``days``
    list. The slug never changes.
    """
    init_db()
    try:
        with get_session() as session:
            itinerary = _owned_itinerary(session, itinerary_id, user_id)
            _validated(payload)
            itinerary.title = payload["title"].strip()
            itinerary.description = payload.get("description") or None
            itinerary.destination = payload.get("destination") or None
            itinerary.is_public = payload.get("is_public", True)
            itinerary.budget_level = payload.get("budget_level")
            itinerary.updated_at = utcnow()
            session.add(itinerary)
            clear_tags(session, itinerary.id)
            record_tags(session, itinerary, payload.get("tags") or [])
            days = payload.get("days")
            if isinstance(days, list):
                clear_days(session, itinerary.id)
                record_days(session, itinerary, days)
            session.commit()
            session.refresh(itinerary)
            tree = itinerary_tree(session, itinerary)
    except SQLAlchemyError:
        logger.exception("Failed to update itinerary %s", itinerary_id)
        raise
    logger.info("Updated itinerary %s", tree["slug"])
    return tree


def delete_itinerary(itinerary_id: int, user_id: str) -> None:
    init_db()
    with get_session() as session:
        itinerary = _owned_itinerary(session, itinerary_id, user_id)
        clear_days(session, itinerary.id)
        clear_tags(session, itinerary.id)
        session.delete(itinerary)
        session.commit()
    # The slug stays reserved so a public link is never reissued.
    logger.info("Deleted itinerary %s (%s)", itinerary_id, itinerary.slug)
