from __future__ import annotations

import logging
from typing import Optional

from .config import DISPLAY_NAME_MAX
from .models import User, get_session, init_db, utcnow

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("id", "email", "display_name", "avatar_color")


def _profile(user: User) -> dict:
    return {field: getattr(user, field) for field in PROFILE_FIELDS}


def get_profile(user_id: str) -> Optional[dict]:
    init_db()
    with get_session() as session:
        user = session.get(User, user_id)
        return _profile(user) if user is not None else None


def update_profile(user_id: str, display_name: Optional[str]) -> dict:
    """Set or clear the public display name shown on shared itineraries."""
    name = (display_name or "").strip() or None
    if name is not None and len(name) > DISPLAY_NAME_MAX:
        raise ValueError(f"Display name must be less than {DISPLAY_NAME_MAX} characters")
    init_db()
    with get_session() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ValueError(f"Profile not found: {user_id}")
        user.display_name = name
        user.updated_at = utcnow()
        session.add(user)
        session.commit()
        session.refresh(user)
        profile = _profile(user)
    logger.info("Updated profile for user %s", user_id)
    return profile
