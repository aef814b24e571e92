# flake8: noqa

from icn_extract.parsers.roster import (
    classify_shape,
    derive_unit_from_room,
    parse_resident_name,
    parse_roster_line,
    parse_roster_text,
)

CENSUS = """Resident Census - All Units
361-A KLETTNER, FRANCES (9981) 03/04/1945
Unit 2 204 JOHNSON, WILLIAM (LON202238) 11/02/1938 Active Medicare A
412 MARY JANE SMITH (556677) 1/1/1950
  MEDICARE ONLY (000123)
204-B EMPTY
"""


def test_room_then_comma_name():
    row = parse_roster_line("361-A KLETTNER, FRANCES (9981) 03/04/1945")
    assert row.room == "361-A"
    assert row.unit == "Unit 3"
    assert row.name == "KLETTNER, FRANCES"
    assert row.identifier == "9981"
    assert row.dob_raw == "03/04/1945"


def test_census_document():
    rows = parse_roster_text(CENSUS)
    assert [r.identifier for r in rows] == ["9981", "LON202238", "556677"]

    johnson = rows[1]
    assert johnson.unit == "Unit 2"
    assert johnson.room == "204"
    assert johnson.name == "JOHNSON, WILLIAM"
    assert johnson.status == "Active Medicare"
    assert johnson.payor == "A"

    smith = rows[2]
    assert smith.name == "SMITH, MARY JANE"
    assert smith.unit == "Unit 4"


def test_duplicates_keep_last_line():
    text = "301 DOE, JANE (123456) 01/01/1940 Active\n301 DOE, JANE (123456) 01/01/1940 Discharged\n"
    rows = parse_roster_text(text)
    assert len(rows) == 1
    assert rows[0].status == "Discharged"


def test_duplicates_ordered_by_last_occurrence():
    text = "\n".join(
        [
            "301 DOE, JANE (123456)",
            "302 ROE, RICHARD (654321)",
            "301 DOE, JANE (123456) Hospital",
        ]
    )
    assert [r.identifier for r in parse_roster_text(text)] == ["654321", "123456"]


def test_placeholder_kept_when_room_present():
    row = parse_roster_line("305 HOSPITAL (777777)")
    assert row is not None
    assert row.room == "305"
    assert parse_roster_line("HOSPITAL (777777)") is None


def test_shapes():
    assert classify_shape("3 305 JOHNSON, WILLIAM") == ("Unit 3", "305", "JOHNSON, WILLIAM")
    assert classify_shape("302 SMITH JOHN") == ("Unit 3", "302", "SMITH JOHN")
    assert classify_shape("301 SMITHJOHN") == ("Unit 3", "301", "SMITHJOHN")
    assert classify_shape("East 12 DOE JANE") == ("East", "12", "DOE JANE")


def test_invalid_unit_falls_back_to_room():
    row = parse_roster_line("East 212 DOE, JANE (123456)")
    assert row.unit == "Unit 2"
    row = parse_roster_line("East 112 DOE, JANE (123456)")
    assert row.unit == ""


def test_dob_before_identifier():
    row = parse_roster_line("310 DOE, JANE 02/03/1941 (123456) Active")
    assert row.dob_raw == "02/03/1941"
    assert row.name == "DOE, JANE"
    assert row.status == "Active"


def test_name_helpers():
    assert parse_resident_name("KLETTNER, FRANCES -") == "KLETTNER, FRANCES"
    assert parse_resident_name("MARY JANE SMITH") == "SMITH, MARY JANE"
    assert parse_resident_name("CHER") == "CHER"
    assert derive_unit_from_room("412") == "Unit 4"
    assert derive_unit_from_room("512") == ""


def test_placeholder_with_iso_date_is_still_skipped():
    assert parse_roster_line("ALL (1234) 2026-01-01") is None
    assert parse_roster_line("ALL (1234) 01/01/1940") is not None
    row = parse_roster_line("DOE, JANE (1234) 1940-01-01")
    assert row.dob_raw == "1940-01-01"
