from __future__ import annotations

from pathlib import Path
from typing import Dict, List
import string


BASE_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = BASE_DIR / "data"
DB_PATH = DATA_DIR / "stashport.db"

SLUG_MAX_LENGTH = 50
SLUG_SUFFIX_LENGTH = 6
SLUG_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
MAX_SLUG_ATTEMPTS = 100

SHARE_BASE_URL = "https://stashport.app"
SHARE_FORMATS = {"story", "square", "portrait"}

ITINERARY_TYPES = {"daily", "guide"}
DEFAULT_ITINERARY_TYPE = "daily"

TRIP_TAGS: List[str] = [
    "Adventure",
    "Romantic",
    "Budget",
    "Luxury",
    "Family",
    "Solo",
    "Food Tour",
    "Road Trip",
]

BUDGET_LEVELS: Dict[int, str] = {
    1: "Budget",
    2: "Moderate",
    3: "Upscale",
    4: "Luxury",
}

DEFAULT_AVATAR_COLOR = "#f97316"
DISPLAY_NAME_MAX = 50

EXPLORE_DEFAULT_LIMIT = 12
EXPLORE_MAX_LIMIT = 50


def set_data_dir(path: Path) -> None:
    global DATA_DIR, DB_PATH
    DATA_DIR = path
    DB_PATH = DATA_DIR / "stashport.db"
