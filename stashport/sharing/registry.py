from __future__ import annotations

import logging
import threading
from typing import Iterable, Iterator, Protocol, Set

from sqlalchemy.exc import IntegrityError

from ..models import SlugReservation, get_session, init_db

logger = logging.getLogger(__name__)


class SlugRegistry(Protocol):
    def __contains__(self, slug: object) -> bool: ...

    def reserve(self, slug: str) -> bool: ...

    def release(self, slug: str) -> None: ...


class InMemorySlugRegistry:
    """Process-local registry. Tests and reserves under one lock."""

    def __init__(self, initial: Iterable[str] = ()) -> None:
        self._slugs: Set[str] = set(initial)
        self._lock = threading.Lock()

    def __contains__(self, slug: object) -> bool:
        with self._lock:
            return slug in self._slugs

    def __len__(self) -> int:
        with self._lock:
            return len(self._slugs)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(sorted(self._slugs))

    def reserve(self, slug: str) -> bool:
        with self._lock:
            if slug in self._slugs:
                return False
            self._slugs.add(slug)
            return True

    def release(self, slug: str) -> None:
        with self._lock:
            self._slugs.discard(slug)


class DatabaseSlugRegistry:
    """Registry stored in the ``slugreservation`` table.

    The primary key on the slug column makes the insert itself the
    uniqueness check, so concurrent writers cannot both win.
    """

    def __init__(self) -> None:
        init_db()

    def __contains__(self, slug: object) -> bool:
        if not isinstance(slug, str):
            return False
        with get_session() as session:
            return session.get(SlugReservation, slug) is not None

    def reserve(self, slug: str) -> bool:
        with get_session() as session:
            session.add(SlugReservation(slug=slug))
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.debug("Slug already reserved: %s", slug)
                return False
        return True

    def release(self, slug: str) -> None:
        with get_session() as session:
            reservation = session.get(SlugReservation, slug)
            if reservation is None:
                return
            session.delete(reservation)
            session.commit()
        logger.debug("Released slug %s", slug)
