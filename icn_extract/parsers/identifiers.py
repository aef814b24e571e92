import re
from typing import List, Optional

MAX_IDENTIFIER_LEN = 20

_PAREN_RE = re.compile(r"\(([^)]+)\)")
_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")
_NON_DIGIT_RE = re.compile(r"[^0-9]")

# Recovery chain for order-listing lines, most specific first
_PAREN_TOKEN_RE = re.compile(r"\(([A-Za-z0-9]+)\)")
IDENTIFIER_PATTERNS = (
    _PAREN_TOKEN_RE,
    re.compile(r"\bMRN[:\s#]*(\d+)", re.IGNORECASE),
    re.compile(r"\b(\d{6,10})\b"),
)


def canonical_identifier(raw: Optional[str]) -> str:
    """Canonical facility record number: A-Z0-9 only, upper-cased, max 20 chars.

    When the raw text carries a parenthesized segment (``"SMITH (LON2022)"``)
    only its contents are used.
    """
    text = str(raw or "")
    m = _PAREN_RE.search(text)
    candidate = m.group(1) if m else text
    return _NON_ALNUM_RE.sub("", candidate).upper()[:MAX_IDENTIFIER_LEN]


def identifier_match_keys(raw: Optional[str]) -> List[str]:
    """Keys for joining against sources that drop the facility prefix letters."""
    canonical = canonical_identifier(raw)
    if not canonical:
        return []
    keys = [canonical]
    digits = _NON_DIGIT_RE.sub("", canonical)
    if digits and digits != canonical:
        keys.append(digits)
    return keys


def find_identifier(line: str) -> Optional["re.Match[str]"]:
    """First identifier-looking match on ``line``, following the recovery chain."""
    for pattern in IDENTIFIER_PATTERNS:
        for m in pattern.finditer(line or ""):
            if len(canonical_identifier(m.group(1))) >= 4:
                return m
    return None


def extract_identifier(line: str) -> Optional[str]:
    m = find_identifier(line)
    return canonical_identifier(m.group(1)) if m else None
