"""Slug generation for public itinerary links.

A slug is built from the itinerary title plus a short random suffix, then
made unique against a registry of slugs that were already issued.
"""
from __future__ import annotations

import logging
import re
import secrets
from typing import Optional

from .. import config
from .registry import SlugRegistry

logger = logging.getLogger(__name__)

_STRIP_PATTERN = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_HYPHEN_PATTERN = re.compile(r"-+")


class SlugGenerationExhausted(RuntimeError):
    """Raised when no free variant of a slug was found within the retry ceiling."""

    def __init__(self, base_slug: str, attempts: int) -> None:
        super().__init__(f"No unique slug for {base_slug!r} after {attempts} attempts")
        self.base_slug = base_slug
        self.attempts = attempts


def normalize_title(title: str) -> str:
    # Truncation may leave a trailing hyphen; it is kept as-is.
    text = title.lower().strip()
    text = _STRIP_PATTERN.sub("", text)
    text = _WHITESPACE_PATTERN.sub("-", text)
    text = _HYPHEN_PATTERN.sub("-", text)
    return text[: config.SLUG_MAX_LENGTH]


def random_suffix(length: Optional[int] = None) -> str:
    size = config.SLUG_SUFFIX_LENGTH if length is None else length
    return "".join(secrets.choice(config.SLUG_SUFFIX_ALPHABET) for _ in range(size))


def generate_slug(title: str) -> str:
    return f"{normalize_title(title)}-{random_suffix()}"


def _slug_root(base_slug: str) -> str:
    parts = base_slug.split("-")
    return "-".join(parts[:-1]) or base_slug


def ensure_unique_slug(
    base_slug: str,
    registry: SlugRegistry,
    max_attempts: Optional[int] = None,
) -> str:
    """Reserve ``base_slug`` or the first free ``<root>-<n>`` variant of it.

    The root is the base slug without its last hyphen-separated segment, so
    ``rome-x1y2z3`` collides into ``rome-1``, ``rome-2`` and so on. Each
    candidate goes through ``registry.reserve`` which tests and records it in
    one atomic step.

    Raises:
        SlugGenerationExhausted: when ``max_attempts`` numbered variants were
            all taken.
    """
    limit = config.MAX_SLUG_ATTEMPTS if max_attempts is None else max_attempts
    if registry.reserve(base_slug):
        return base_slug
    root = _slug_root(base_slug)
    for counter in range(1, limit + 1):
        candidate = f"{root}-{counter}"
        if registry.reserve(candidate):
            logger.info("Slug %s taken, reserved %s", base_slug, candidate)
            return candidate
    logger.warning("Slug retries exhausted for %s after %d attempts", base_slug, limit)
    raise SlugGenerationExhausted(base_slug, limit)


class SlugAllocator:
    def __init__(self, registry: SlugRegistry, max_attempts: Optional[int] = None) -> None:
        self.registry = registry
        self.max_attempts = max_attempts

    def generate(self, title: str) -> str:
        return generate_slug(title)

    def ensure_unique(self, base_slug: str) -> str:
        return ensure_unique_slug(base_slug, self.registry, max_attempts=self.max_attempts)

    def allocate(self, title: str) -> str:
        return self.ensure_unique(self.generate(title))

    def release(self, slug: str) -> None:
        self.registry.release(slug)
