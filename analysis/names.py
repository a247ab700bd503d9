"""
Player name handling.

Rosters come from hand-typed spreadsheets, so the same person shows up as
"Alex Kim 8A", "alex  kim" or "Álex Kim". Player identity is matched on
`name_key`, never on the raw string.
"""

import re
import unicodedata

# trailing grade / classroom token: "8A", "11th", "10", "9B"
_GRADE_SUFFIX = re.compile(r"\s+\d{1,2}(?:st|nd|rd|th)?[a-z]?$", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """
    Display form: trailing grade tokens stripped, whitespace collapsed.
    Case and accents are kept.
    """
    cleaned = str(name or "").strip()
    while True:
        stripped = _GRADE_SUFFIX.sub("", cleaned)
        if stripped == cleaned:
            break
        cleaned = stripped.rstrip()
    return _WHITESPACE.sub(" ", cleaned).strip()


def strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def name_key(name: str) -> str:
    """Comparison key: display form, accents removed, lower-cased."""
    return normalize_name(strip_diacritics(str(name or ""))).lower()


def detect_player_type(name: str) -> str:
    lower = str(name or "").strip().lower()
    if lower.startswith("mr.") or lower.startswith("mrs."):
        return "teacher"
    return "student"
