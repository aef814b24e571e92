"""Date normalization for census and pharmacy exports.

Upstream systems print dates in whatever shape their report writer likes:
``20250304``, ``3/4/25``, ``2025.03.04``, ``Mar 4, 2025``, ``04-Mar-2025`` and
so on. :func:`iso_date_from_any` runs an ordered table of rules and returns the
first acceptable ``YYYY-MM-DD`` reading, or ``""`` when nothing fits.
"""
import re
from datetime import date, datetime
from typing import Callable, List, NamedTuple, Optional, Tuple

from dateutil import parser as date_parser

from .vocab import MONTHS

Ymd = Tuple[int, int, int]

_SEP = r"[/\-.\s]"


class DateRule(NamedTuple):
    name: str
    pattern: "re.Pattern[str]"
    to_ymd: Callable[["re.Match[str]"], Optional[Ymd]]


def _century(yy: int) -> int:
    # two-digit years are always 20xx in these exports
    return yy + 2000 if yy < 100 else yy


def _valid(yy: int, mm: int, dd: int) -> bool:
    return 1900 <= yy <= 2100 and 1 <= mm <= 12 and 1 <= dd <= 31


def _iso(yy: int, mm: int, dd: int) -> str:
    return f"{yy:04d}-{mm:02d}-{dd:02d}"


def _ymd(m) -> Ymd:
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def _compact_ymd(m) -> Ymd:
    s = m.group(0)
    return int(s[:4]), int(s[4:6]), int(s[6:8])


def _compact_mdy(m) -> Ymd:
    s = m.group(0)
    return _century(int(s[4:])), int(s[:2]), int(s[2:4])


def _mdy(m) -> Ymd:
    return _century(int(m.group(3))), int(m.group(1)), int(m.group(2))


def _month_first(m) -> Optional[Ymd]:
    mm = MONTHS.get(m.group(1).lower())
    if not mm:
        return None
    return _century(int(m.group(3))), mm, int(m.group(2))


def _day_first(m) -> Optional[Ymd]:
    mm = MONTHS.get(m.group(2).lower())
    if not mm:
        return None
    return _century(int(m.group(3))), mm, int(m.group(1))


DATE_RULES: List[DateRule] = [
    DateRule("iso", re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"), _ymd),
    DateRule("iso_datetime", re.compile(r"^(\d{4})-(\d{2})-(\d{2})T"), _ymd),
    DateRule("yyyymmdd", re.compile(r"^\d{8}$"), _compact_ymd),
    DateRule("mmddyy", re.compile(r"^\d{6,8}$"), _compact_mdy),
    DateRule("y_m_d", re.compile(rf"\b(\d{{4}}){_SEP}(\d{{1,2}}){_SEP}(\d{{1,2}})\b"), _ymd),
    DateRule("m_d_y", re.compile(rf"\b(\d{{1,2}}){_SEP}(\d{{1,2}}){_SEP}(\d{{2,4}})\b"), _mdy),
    DateRule(
        "month_name_first",
        re.compile(r"\b([a-z]+)[,.\s]+(\d{1,2})[,.\s]+(\d{2,4})\b", re.IGNORECASE),
        _month_first,
    ),
    DateRule(
        "day_first",
        re.compile(r"\b(\d{1,2})[/\-.\s]+([a-z]+)[/\-.\s]+(\d{2,4})\b", re.IGNORECASE),
        _day_first,
    ),
]


_FALLBACK_DEFAULTS = (datetime(1900, 1, 1), datetime(2000, 12, 28))


def _fallback(text: str) -> str:
    # dateutil fills missing parts from `default`; two different defaults
    # agreeing means year, month and day all came from the text
    try:
        first, second = (date_parser.parse(text, default=d) for d in _FALLBACK_DEFAULTS)
    except (ValueError, OverflowError):
        return ""
    ymd = (first.year, first.month, first.day)
    if ymd != (second.year, second.month, second.day) or not _valid(*ymd):
        return ""
    return _iso(*ymd)


def iso_date_from_any(value: Optional[str]) -> str:
    """Normalize ``value`` to ``YYYY-MM-DD``; ``""`` if no rule accepts it."""
    if not value:
        return ""
    text = re.sub(r"^[:\s]+|[:\s]+$", "", str(value)).strip()
    if not text:
        return ""

    for rule in DATE_RULES:
        m = rule.pattern.search(text)
        if not m:
            continue
        ymd = rule.to_ymd(m)
        if ymd and _valid(*ymd):
            return _iso(*ymd)

    return _fallback(text)


def _as_date(iso: str) -> Optional[date]:
    try:
        return datetime.strptime(iso, "%Y-%m-%d").date()
    except ValueError:
        return None


def compute_treatment_days(
    start: Optional[str], end: Optional[str], today: Optional[date] = None
) -> Optional[int]:
    """Days on therapy from ``start`` up to (not including) ``end``.

    An empty end date means the course is ongoing and is counted to ``today``.
    """
    start_day = _as_date(iso_date_from_any(start))
    if start_day is None:
        return None
    end_iso = iso_date_from_any(end)
    end_day = _as_date(end_iso) if end_iso else (today or date.today())
    if end_day is None:
        return None
    return max(0, (end_day - start_day).days)


def format_mdy(iso: Optional[str]) -> str:
    if not iso:
        return ""
    parsed = _as_date(str(iso)[:10])
    if parsed is None:
        return str(iso)
    return parsed.strftime("%m/%d/%Y")
