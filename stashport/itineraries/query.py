from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlmodel import col, select

from ..config import EXPLORE_DEFAULT_LIMIT, EXPLORE_MAX_LIMIT, ITINERARY_TYPES
from ..models import Day, Itinerary, ItineraryType, TripTag, User, get_session, init_db
from ..storage import itinerary_tree, load_tags

logger = logging.getLogger(__name__)


def list_itineraries(user_id: str) -> List[dict]:
    init_db()
    with get_session() as session:
        statement = (
            select(Itinerary)
            .where(Itinerary.user_id == user_id)
            .order_by(col(Itinerary.created_at).desc(), col(Itinerary.id).desc())
        )
        itineraries = list(session.exec(statement))
        tags = load_tags(session, [itinerary.id for itinerary in itineraries])
        return [
            itinerary_tree(session, itinerary, tags.get(itinerary.id, []))
            for itinerary in itineraries
        ]


def get_itinerary(itinerary_id: int) -> Optional[dict]:
    init_db()
    with get_session() as session:
        itinerary = session.get(Itinerary, itinerary_id)
        if itinerary is None:
            return None
        return itinerary_tree(session, itinerary)


def get_public_itinerary(slug: str) -> Optional[dict]:
    init_db()
    with get_session() as session:
        statement = select(Itinerary).where(
            Itinerary.slug == slug,
            col(Itinerary.is_public).is_(True),
        )
        itinerary = session.exec(statement).first()
        if itinerary is None:
            logger.info("Public itinerary not found: %s", slug)
            return None
        return itinerary_tree(session, itinerary)


def explore_itineraries(
    page: int = 1,
    limit: int = EXPLORE_DEFAULT_LIMIT,
    destination: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    type_filter: str = "all",
    exclude_user_id: Optional[str] = None,
) -> dict:
    """Page through public itineraries, newest first.

    Tag filtering matches any of the given tags, ignoring case, and is applied
    before pagination so the totals describe the filtered result.
    """
    if type_filter != "all" and type_filter not in ITINERARY_TYPES:
        raise ValueError(f"Unsupported itinerary type filter: {type_filter}")
    init_db()
    page = max(1, page)
    limit = min(EXPLORE_MAX_LIMIT, max(1, limit))
    offset = (page - 1) * limit

    statement = select(Itinerary).where(col(Itinerary.is_public).is_(True))
    if exclude_user_id:
        statement = statement.where(Itinerary.user_id != exclude_user_id)
    if destination:
        statement = statement.where(col(Itinerary.destination).ilike(f"%{destination}%"))
    if type_filter != "all":
        statement = statement.where(Itinerary.type == ItineraryType(type_filter))
    wanted = [tag.strip().lower() for tag in tags or [] if tag.strip()]
    if wanted:
        tagged = select(TripTag.itinerary_id).where(func.lower(TripTag.tag).in_(wanted))
        statement = statement.where(col(Itinerary.id).in_(tagged))

    with get_session() as session:
        total_count = session.exec(
            select(func.count()).select_from(statement.subquery())
        ).one()
        page_statement = (
            statement.order_by(col(Itinerary.created_at).desc(), col(Itinerary.id).desc())
            .offset(offset)
            .limit(limit)
        )
        itineraries = list(session.exec(page_statement))
        ids = [itinerary.id for itinerary in itineraries]
        tags_map = load_tags(session, ids)
        day_counts: dict[int, int] = {}
        creators: dict[str, User] = {}
        if ids:
            rows = session.exec(
                select(Day.itinerary_id, func.count(Day.id))
                .where(col(Day.itinerary_id).in_(ids))
                .group_by(Day.itinerary_id)
            )
            day_counts = {itinerary_id: count for itinerary_id, count in rows}
            user_ids = {itinerary.user_id for itinerary in itineraries}
            creators = {
                user.id: user
                for user in session.exec(select(User).where(col(User.id).in_(user_ids)))
            }

    results = []
    for itinerary in itineraries:
        creator = creators.get(itinerary.user_id)
        results.append(
            {
                "id": itinerary.id,
                "title": itinerary.title,
                "description": itinerary.description,
                "destination": itinerary.destination,
                "slug": itinerary.slug,
                "budget_level": itinerary.budget_level,
                "type": itinerary.type.value,
                "cover_photo_url": itinerary.cover_photo_url,
                "created_at": itinerary.created_at.isoformat(),
                "day_count": day_counts.get(itinerary.id, 0),
                "tags": tags_map.get(itinerary.id, []),
                "creator": {
                    "id": itinerary.user_id,
                    "display_name": (creator.display_name if creator else None) or "Anonymous",
                    "avatar_color": creator.avatar_color if creator else None,
                },
            }
        )
    total_pages = math.ceil(total_count / limit)
    logger.info("Explore page %d: %d of %d itineraries", page, len(results), total_count)
    return {
        "itineraries": results,
        "pagination": {
            "page": page,
            "limit": limit,
            "total_count": total_count,
            "total_pages": total_pages,
            "has_more": page < total_pages,
        },
    }
