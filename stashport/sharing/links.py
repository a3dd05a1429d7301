from __future__ import annotations

from typing import Optional

from .. import config


def share_url(slug: str, base_url: Optional[str] = None) -> str:
    root = (base_url or config.SHARE_BASE_URL).rstrip("/")
    return f"{root}/t/{slug}"


def share_caption(title: str, slug: str, base_url: Optional[str] = None) -> str:
    return f"Check out my trip: {title} on Stashport!\n\n{share_url(slug, base_url)}"


def share_filename(slug: str, share_format: str) -> str:
    if share_format not in config.SHARE_FORMATS:
        raise ValueError(f"Unsupported share format: {share_format}")
    return f"{slug}-{share_format}.png"
