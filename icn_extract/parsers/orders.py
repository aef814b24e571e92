"""Pharmacy order-listing parser.

Order Listing Report exports interleave resident header lines
(``"SMITH, JOHN (123456)"``) with medication detail lines, or glue both onto one
line (``"Foster, Brian (148831)Cefpodoxime Proxetil Tablet 200 MG ..."``).
Parsing is a fold over the lines carrying a ``ResidentContext`` (``None`` until
the first resident is seen); every accepted medication line becomes one
``OrderRow`` attributed to the current context.
"""
import re
from datetime import date
from typing import List, Optional, Tuple

from icn_extract.commons.logger import logger

from .base import (
    ANTIBIOTIC_RE,
    DATE_TOKEN_RE,
    MED_FORM_RE,
    _split_lines,
    _split_tokens,
    has_date,
    has_med_keyword,
)
from .classify import detect_infection_source, medication_class, normalize_route
from .dates import compute_treatment_days, iso_date_from_any
from .identifiers import canonical_identifier, extract_identifier, find_identifier
from .models import OrderRow, ResidentContext
from .vocab import DOSE_UNITS, INSTRUCTION_VERBS, TOPICAL_ROUTE

_BOILERPLATE = (
    re.compile(r"^facility\s*#", re.IGNORECASE),
    re.compile(r"^facility\s*code", re.IGNORECASE),
    re.compile(r"^order\s+listing\s+report", re.IGNORECASE),
    re.compile(r"^user:", re.IGNORECASE),
    re.compile(r"^time:", re.IGNORECASE),
    re.compile(r"^date:", re.IGNORECASE),
    re.compile(r"^medication\s+class:", re.IGNORECASE),
    re.compile(r"resident:\s*all.*order\s+date\s+range|order\s+date\s+range.*resident:\s*all", re.IGNORECASE),
    re.compile(r"^resident\s*name.*order\s*summary", re.IGNORECASE),
)

_INLINE_RESIDENT_RE = re.compile(
    r"^\s*([A-Za-z][A-Za-z\-'.]+(?:\s+[A-Za-z][A-Za-z\-'.]*)*,\s*[A-Za-z][A-Za-z\-'.\s]*?)"
    r"\s*\(([A-Za-z0-9]+)\)\s*(.*)$"
)
_RESIDENT_FIELD_RE = re.compile(
    r"Resident[:\s]+([A-Z][A-Za-z\-]+(?:,\s*[A-Z][A-Za-z\-\s]+)?)", re.IGNORECASE
)

_INSTRUCTION_SPLIT_RE = re.compile(
    r"\s+(?:" + "|".join(INSTRUCTION_VERBS) + r")\s+", re.IGNORECASE
)
_STRENGTH = rf"\b\d+(?:\.\d+)?(?:[-/]\d+(?:\.\d+)?)*\s*(?:(?:{DOSE_UNITS})\b|%)"
_NAME_THROUGH_STRENGTH_RE = re.compile(rf"^(.*?{_STRENGTH})", re.IGNORECASE)
_LEADING_STRENGTH_RE = re.compile(rf"^\s*({_STRENGTH})", re.IGNORECASE)
_NAME_WORD_RE = re.compile(r"^[A-Za-z][A-Za-z\-/]*$")
_NAME_STOPWORDS = frozenset(
    {"by", "via", "for", "per", "every", "daily", "at", "in", "to", "until", "x", "q", "and", "then"}
)
_MAX_NAME_TOKENS = 12

DOSE_PATTERNS = (
    re.compile(rf"\b\d+[\-.]\d+(?:\.\d+)?\s*(?:{DOSE_UNITS})\b", re.IGNORECASE),
    re.compile(rf"\b\d+(?:\.\d+)?\s*(?:{DOSE_UNITS})\b", re.IGNORECASE),
)

ROUTE_RE = re.compile(
    r"\b(?:by\s*mouth|po|oral(?:ly)?|topical(?:ly)?|intravenous(?:ly)?|iv|via\s+g-?tube|g-?tube"
    r"|enteral|ophth?almic|oph|in\s+(?:both\s+|left\s+|right\s+)?eyes?"
    r"|intramuscular(?:ly)?|im|subcutaneous(?:ly)?|subcut|sc)\b",
    re.IGNORECASE,
)

_FOR_RE = re.compile(r"\bfor\s+([A-Za-z][A-Za-z\s\-/]*)", re.IGNORECASE)
_INDICATION_FIELD_RE = re.compile(r"\bindication[:\s]+([A-Za-z][A-Za-z\s\-/]*)", re.IGNORECASE)
_INDICATION_TRAILERS = frozenset(
    {"for", "x", "until", "times", "day", "days", "starting", "start", "through", "thru",
     "and", "then", "on", "from", "to", "at", "end"}
)
_NOT_AN_INDICATION = frozenset({"a", "an", "the", "total", "up"})

RECORD_ID_MAX = 220


def is_boilerplate(line: str) -> bool:
    return any(p.search(line) for p in _BOILERPLATE)


def is_medication_line(text: str) -> bool:
    return has_date(text) or has_med_keyword(text)


def is_resident_header(line: str) -> bool:
    return (
        find_identifier(line) is not None
        and "," in line
        and not has_med_keyword(line)
        and not has_date(line)
    )


def _collapse(text: str) -> str:
    return " ".join((text or "").split())


def _header_context(line: str) -> ResidentContext:
    m = find_identifier(line)
    return ResidentContext(canonical_identifier(m.group(1)), _collapse(line[: m.start()]))


# ---------------- field extractors ----------------


def _name_through_strength(segment: str) -> str:
    m = _NAME_THROUGH_STRENGTH_RE.match(segment)
    if m and not has_date(m.group(1)) and len(_split_tokens(m.group(1))) <= _MAX_NAME_TOKENS:
        return m.group(1).strip()

    words = []
    for tok in _split_tokens(segment)[:6]:
        if not _NAME_WORD_RE.match(tok) or tok.lower() in _NAME_STOPWORDS:
            break
        words.append(tok)
    return " ".join(words)


def _window_before_form(segment: str, form) -> str:
    words = []
    for tok in reversed(_split_tokens(segment[: form.start()])):
        if len(words) == 4 or has_date(tok) or "(" in tok or ")" in tok:
            break
        words.insert(0, tok)
    words.append(form.group(0))
    strength = _LEADING_STRENGTH_RE.match(segment[form.end():])
    if strength:
        words.append(strength.group(1))
    return " ".join(words)


def extract_medication_name(text: str) -> str:
    """Known antibiotic first, extended through form and strength; else a form-word window."""
    abx = ANTIBIOTIC_RE.search(text)
    if abx:
        segment = _INSTRUCTION_SPLIT_RE.split(text[abx.start():], maxsplit=1)[0]
        return _name_through_strength(segment)

    segment = _INSTRUCTION_SPLIT_RE.split(text, maxsplit=1)[0]
    form = MED_FORM_RE.search(segment)
    if form:
        return _window_before_form(segment, form)
    if MED_FORM_RE.search(text):
        # the form word only shows up inside the instructions ("Give 1 tablet")
        tail = []
        for tok in reversed(_split_tokens(segment)):
            if len(tail) == 6 or has_date(tok) or "(" in tok or ")" in tok:
                break
            tail.insert(0, tok)
        return " ".join(tail)
    return ""


def extract_dose(text: str) -> str:
    for pattern in DOSE_PATTERNS:
        m = pattern.search(text)
        if m:
            return m.group(0)
    return ""


def extract_route_raw(text: str) -> str:
    m = ROUTE_RE.search(text)
    return m.group(0) if m else ""


def _clean_indication(raw: str) -> str:
    words = _split_tokens(raw)
    while words and (words[-1].lower() in _INDICATION_TRAILERS or words[-1].isdigit()):
        words.pop()
    return " ".join(words)


def extract_indication(text: str) -> str:
    for m in _FOR_RE.finditer(text):
        candidate = _clean_indication(m.group(1))
        if candidate and candidate.split()[0].lower() not in _NOT_AN_INDICATION:
            return candidate
    m = _INDICATION_FIELD_RE.search(text)
    if m:
        return _clean_indication(m.group(1))
    return ""


def make_record_id(
    identifier: str,
    medication_name: str,
    start_date: str,
    end_date: str,
    route: str,
    indication: str,
) -> str:
    """Content-derived id; re-importing the same export yields the same ids."""
    parts = [
        canonical_identifier(identifier),
        _collapse(medication_name).upper(),
        start_date or "",
        end_date or "",
        (route or "").upper(),
        _collapse(indication).upper(),
    ]
    joined = re.sub(r"[^A-Za-z0-9|_-]", "", "|".join(parts))
    return "abx_" + joined[:RECORD_ID_MAX]


def build_order_row(text: str, context: ResidentContext, today: Optional[date] = None) -> OrderRow:
    medication_name = extract_medication_name(text)
    route_raw = extract_route_raw(text)
    route = normalize_route(route_raw)
    indication = extract_indication(text)
    dates = [m.group(0) for m in DATE_TOKEN_RE.finditer(text)][:2]
    start_date = iso_date_from_any(dates[0]) if dates else ""
    end_date = iso_date_from_any(dates[1]) if len(dates) > 1 else ""

    return OrderRow(
        record_id=make_record_id(
            context.identifier, medication_name, start_date, end_date, route, indication
        ),
        identifier=context.identifier,
        name=context.name,
        medication_name=medication_name,
        dose=extract_dose(text),
        route=route,
        route_raw=route_raw,
        indication=indication,
        infection_source=detect_infection_source(indication or medication_name),
        start_date=start_date,
        end_date=end_date,
        treatment_days=compute_treatment_days(start_date, end_date, today),
        include=route != TOPICAL_ROUTE,
        medication_class=medication_class(medication_name, indication),
    )


# ---------------- state machine ----------------


def _fill_context(context: ResidentContext, text: str) -> ResidentContext:
    name, identifier = context.name, context.identifier
    if not name:
        m = _RESIDENT_FIELD_RE.search(text)
        if m and m.group(1).strip().lower() != "all":
            name = _collapse(m.group(1))
    if not identifier:
        identifier = extract_identifier(text) or ""
    if (name, identifier) == (context.name, context.identifier):
        return context
    return ResidentContext(identifier, name)


def step(
    context: Optional[ResidentContext], raw_line: str, today: Optional[date] = None
) -> Tuple[Optional[ResidentContext], Optional[OrderRow]]:
    """Consume one line: returns the (possibly new) context and the order it carries."""
    line = (raw_line or "").replace("\u00a0", " ").strip()
    if not line or is_boilerplate(line):
        return context, None

    body = line
    inline = _INLINE_RESIDENT_RE.match(line)
    if inline:
        context = ResidentContext(canonical_identifier(inline.group(2)), _collapse(inline.group(1)))
        body = inline.group(3).strip()
        if not body:
            return context, None
    elif is_resident_header(line):
        return _header_context(line), None

    if not is_medication_line(body):
        return context, None

    if context is None:
        # over-capture: keep the medication even without a resident to link it to
        context = ResidentContext(extract_identifier(body) or "", "")
    context = _fill_context(context, body)
    return context, build_order_row(body, context, today)


def parse_order_listing(text: str, today: Optional[date] = None) -> List[OrderRow]:
    """Parse an Order Listing Report paste into order rows (``[]`` when nothing matches)."""
    rows: List[OrderRow] = []
    context: Optional[ResidentContext] = None
    lines = _split_lines(text)
    for line in lines:
        context, row = step(context, line, today)
        if row is None:
            logger.debug(f"Orders: no order on line {line!r}")
            continue
        logger.debug(
            f"Orders: {row.medication_name!r} | id={row.identifier} | dose={row.dose!r} "
            f"| indication={row.indication!r}"
        )
        rows.append(row)

    logger.info(f"Orders: {len(rows)} order(s) from {len(lines)} line(s)")
    return rows
