import re
from datetime import date
from typing import Optional

from .dates import iso_date_from_any
from .vocab import (
    CLASS_SUFFIXES,
    INDICATION_CLASS_HINTS,
    INFECTION_SOURCES,
    MEDICATION_CLASSES,
    ROUTE_CODES,
    word_alternation,
)

_ROUTES = [(code, re.compile(p, re.IGNORECASE)) for code, p in ROUTE_CODES]
_SOURCES = [
    (source, re.compile("|".join(keywords), re.IGNORECASE)) for source, keywords in INFECTION_SOURCES
]
_CLASSES = [(name, word_alternation(words)) for name, words in MEDICATION_CLASSES]
_SUFFIXES = [(name, re.compile(p, re.IGNORECASE)) for name, p in CLASS_SUFFIXES]
_HINTS = [(name, re.compile(p, re.IGNORECASE)) for name, p in INDICATION_CLASS_HINTS]


def normalize_route(raw: Optional[str]) -> str:
    raw = (raw or "").strip()
    if not raw:
        return ""
    for code, pattern in _ROUTES:
        if pattern.search(raw):
            return code
    return raw.upper()[:8]


def detect_infection_source(text: Optional[str]) -> str:
    for source, pattern in _SOURCES:
        if pattern.search(text or ""):
            return source
    return "Other"


def medication_class(name: Optional[str], indication: Optional[str] = "") -> str:
    """Drug class for reporting, falling back to suffixes and then the indication."""
    value = (name or "").strip()
    if value:
        for class_name, pattern in _CLASSES:
            if pattern.search(value):
                return class_name
        for class_name, pattern in _SUFFIXES:
            if pattern.search(value):
                return class_name
    if indication:
        for class_name, pattern in _HINTS:
            if pattern.search(indication):
                return class_name
    return "Unclassified"


def derive_course_status(
    requested: str, end_date: Optional[str] = None, today: Optional[date] = None
) -> str:
    if requested == "discontinued":
        return "discontinued"
    end_iso = iso_date_from_any(end_date) if end_date else ""
    # future-dated or missing end dates never count as completed
    if end_iso and end_iso <= (today or date.today()).isoformat():
        return "completed"
    return "active"
