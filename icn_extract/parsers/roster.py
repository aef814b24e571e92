import re
from typing import Callable, Dict, List, NamedTuple, Tuple

from icn_extract.commons.logger import logger

from .base import ISO_DATE_RE, SLASH_DATE_RE, _split_lines, _split_tokens
from .identifiers import canonical_identifier
from .models import RosterRow
from .vocab import NON_RESIDENT_NAMES, VALID_UNITS

_EMPTY_RE = re.compile(r"EMPTY", re.IGNORECASE)
_IDENT_RE = re.compile(r"\(([^)]+)\)")
_ROOM_RE = re.compile(r"^\d{1,4}(?:-?[A-Za-z])?$")
_UNIT_RE = re.compile(r"^(?:unit\s*)?([0-9]+)$", re.IGNORECASE)
_TRAILING_DASH_RE = re.compile(r"[-–—]\s*$")

Shape = Tuple[str, str, str]  # unit, room, name part


class ShapeRule(NamedTuple):
    name: str
    applies: Callable[[List[str]], bool]
    extract: Callable[[List[str]], Shape]


def _looks_room(tok: str) -> bool:
    return bool(_ROOM_RE.match(tok or ""))


def derive_unit_from_room(room: str) -> str:
    m = re.match(r"^([234])", (room or "").strip())
    return f"Unit {m.group(1)}" if m else ""


def is_valid_unit(unit: str) -> bool:
    m = _UNIT_RE.match((unit or "").strip())
    return bool(m) and m.group(1) in VALID_UNITS


def _normalize_unit(unit: str, room: str) -> str:
    if not unit:
        return ""
    if is_valid_unit(unit):
        return f"Unit {_UNIT_RE.match(unit.strip()).group(1)}"
    return derive_unit_from_room(room)


def parse_resident_name(raw: str) -> str:
    """'MARY JANE SMITH' -> 'SMITH, MARY JANE'; comma names are kept as printed."""
    name = (raw or "").strip()
    if not name:
        return ""
    if "," in name:
        return _TRAILING_DASH_RE.sub("", name).strip()
    tokens = _split_tokens(name)
    if len(tokens) == 1:
        return tokens[0]
    return f"{tokens[-1]}, {' '.join(tokens[:-1])}"


def _room_first(tokens: List[str]) -> Shape:
    room = tokens[0]
    return derive_unit_from_room(room), room, " ".join(tokens[1:])


def _unit_first(tokens: List[str]) -> Shape:
    if tokens[0].lower() == "unit":
        return f"Unit {tokens[1]}", tokens[2], " ".join(tokens[3:])
    return f"Unit {tokens[0]}", tokens[1], " ".join(tokens[2:])


def _legacy(tokens: List[str]) -> Shape:
    return tokens[0], tokens[1], " ".join(tokens[2:])


def _is_unit_marker(tokens: List[str]) -> bool:
    if tokens[0].lower() == "unit":
        return len(tokens) >= 4
    return len(tokens) >= 3 and tokens[0] in VALID_UNITS and _looks_room(tokens[1])


SHAPE_RULES: List[ShapeRule] = [
    # "361-A KLETTNER, FRANCES"
    ShapeRule(
        "room_last_comma",
        lambda t: len(t) >= 2 and _looks_room(t[0]) and "," in t[1],
        _room_first,
    ),
    # "302 SMITH JOHN"; a bare unit digit before a room belongs to unit_marker
    ShapeRule(
        "room_name_parts",
        lambda t: len(t) >= 3 and _looks_room(t[0]) and not _is_unit_marker(t),
        _room_first,
    ),
    # "Unit 3 305 JOHNSON, WILLIAM" / "3 305 JOHNSON, WILLIAM"
    ShapeRule("unit_marker", _is_unit_marker, _unit_first),
    # "301 SMITHJOHN"
    ShapeRule(
        "room_concatenated",
        lambda t: len(t) == 2 and _looks_room(t[0]),
        _room_first,
    ),
    ShapeRule("legacy_unit_room", lambda t: len(t) >= 3, _legacy),
]


def classify_shape(before: str) -> Shape:
    tokens = _split_tokens(before)
    if tokens:
        for rule in SHAPE_RULES:
            if rule.applies(tokens):
                return rule.extract(tokens)
    return "", "", before.strip()


def _find_dob(before: str, after: str) -> Tuple[str, str]:
    """Return (dob_raw, before) with a DOB printed ahead of the identifier cut out."""
    for pattern in (SLASH_DATE_RE, ISO_DATE_RE):
        m = pattern.search(after)
        if m:
            return m.group(0), before
    m = SLASH_DATE_RE.search(before)
    if m:
        return m.group(0), (before[: m.start()] + " " + before[m.end():]).strip()
    return "", before


def parse_roster_line(line: str):
    if _EMPTY_RE.search(line):
        return None
    m = _IDENT_RE.search(line)
    if not m:
        return None
    identifier = canonical_identifier(m.group(1))
    if not identifier:
        return None

    before = line[: m.start()].strip()
    after = line[m.end():].strip()
    dob_raw, before = _find_dob(before, after)

    unit, room, name_part = classify_shape(before)
    name = parse_resident_name(name_part)
    unit = _normalize_unit(unit, room)

    # only a printed slash DOB vouches for a placeholder-named row
    has_dob = bool(SLASH_DATE_RE.fullmatch(dob_raw))
    if not room and not has_dob and re.sub(r"[\s,]", "", name_part).upper() in NON_RESIDENT_NAMES:
        return None

    rest = after.replace(dob_raw, "", 1) if dob_raw else after
    rest_tokens = _split_tokens(rest)
    return RosterRow(
        identifier=identifier,
        name=name,
        unit=unit,
        room=room,
        dob_raw=dob_raw,
        status=" ".join(rest_tokens[:2]),
        payor=" ".join(rest_tokens[2:]),
    )


def parse_roster_text(text: str) -> List[RosterRow]:
    """Parse a pasted census dump into resident rows.

    Rows are unique by identifier; a later line replaces an earlier one and the
    result follows the order of each identifier's last appearance.
    """
    by_identifier: Dict[str, RosterRow] = {}
    lines = _split_lines(text)
    for line in lines:
        row = parse_roster_line(line)
        if row is None:
            logger.debug(f"Roster: skipped line {line!r}")
            continue
        by_identifier.pop(row.identifier, None)
        by_identifier[row.identifier] = row

    logger.info(f"Roster: {len(by_identifier)} resident(s) from {len(lines)} line(s)")
    return list(by_identifier.values())
