import re
from typing import List

from .vocab import ANTIBIOTIC_NAMES, MEDICATION_FORMS, word_alternation

SLASH_DATE_RE = re.compile(r"\b\d{1,2}/\d{1,2}/\d{2,4}\b")
ISO_DATE_RE = re.compile(r"\b\d{4}-\d{2}-\d{2}\b")
DATE_TOKEN_RE = re.compile(r"\b\d{1,2}/\d{1,2}/\d{2,4}\b|\b\d{4}-\d{2}-\d{2}\b")

MED_FORM_RE = word_alternation(MEDICATION_FORMS)
ANTIBIOTIC_RE = word_alternation(ANTIBIOTIC_NAMES)

PAREN_RE = re.compile(r"\(([^)]+)\)")

_ORDER_BANNERS = (
    re.compile(r"^order\s+listing\s+report", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^medication\s+class:", re.IGNORECASE | re.MULTILINE),
    re.compile(r"order\s+date\s+range", re.IGNORECASE),
    re.compile(r"order\s*summary", re.IGNORECASE),
)


def _split_lines(text: str) -> List[str]:
    return [line.strip() for line in re.split(r"\r\n|\n|\r", text or "") if line.strip()]


def _split_tokens(text: str) -> List[str]:
    return (text or "").split()


def has_date(text: str) -> bool:
    return DATE_TOKEN_RE.search(text or "") is not None


def has_med_keyword(text: str) -> bool:
    text = text or ""
    return MED_FORM_RE.search(text) is not None or ANTIBIOTIC_RE.search(text) is not None


def detect_document_kind(text: str) -> str:
    """Return 'ORDERS' or 'ROSTER'."""
    if any(p.search(text or "") for p in _ORDER_BANNERS):
        return "ORDERS"
    for line in _split_lines(text):
        if PAREN_RE.search(line) and has_med_keyword(line):
            return "ORDERS"
    return "ROSTER"
