from datetime import date

import pytest

from icn_extract.commons.types import ReviewHeuristics
from icn_extract.parsers.classify import (
    derive_course_status,
    detect_infection_source,
    medication_class,
    normalize_route,
)
from icn_extract.parsers.models import OrderRow
from icn_extract.validation.stewardship import review_order

TODAY = date(2026, 2, 1)


@pytest.mark.parametrize(
    "raw,code",
    [
        ("by mouth", "PO"),
        ("PO", "PO"),
        ("topically", "TOP"),
        ("intravenously", "IV"),
        ("via g-tube", "ENT"),
        ("in both eyes", "OPH"),
        ("intramuscularly", "IM"),
        ("subcutaneously", "SC"),
        ("per rectum", "PER RECT"),
        ("via", "VIA"),
        ("", ""),
    ],
)
def test_normalize_route(raw, code):
    assert normalize_route(raw) == code


def test_infection_source_priority():
    assert detect_infection_source("UTI") == "Urinary"
    assert detect_infection_source("aspiration pneumonia") == "Respiratory"
    assert detect_infection_source("C. diff colitis") == "GI"
    assert detect_infection_source("sacral wound") == "Skin/Soft Tissue"
    assert detect_infection_source("bacteremia") == "Bloodstream"
    # urinary outranks bloodstream
    assert detect_infection_source("urosepsis from UTI") == "Urinary"
    assert detect_infection_source("") == "Other"


def test_medication_class():
    assert medication_class("Cefuroxime Axetil Tablet 250 MG") == "Cephalosporins / Beta-lactams"
    assert medication_class("Ertapenem 1 GM") == "Carbapenems"
    assert medication_class("Newcillin 500 MG") == "Beta-lactam antibiotics"
    assert medication_class("Unknown Tablet", "UTI") == "Urinary antibiotics"
    assert medication_class("", "") == "Unclassified"


def test_course_status():
    assert derive_course_status("discontinued", "2020-01-01", TODAY) == "discontinued"
    assert derive_course_status("active", "01/20/2026", TODAY) == "completed"
    assert derive_course_status("active", "2026-02-01", TODAY) == "completed"
    assert derive_course_status("active", "2026-03-01", TODAY) == "active"
    assert derive_course_status("completed", None, TODAY) == "active"


def _order(**kw) -> OrderRow:
    base = dict(record_id="abx_1", identifier="123456", name="DOE, JANE", medication_name="Keflex")
    base.update(kw)
    return OrderRow(**base)


def test_review_missing_and_vague_indication():
    assert review_order(_order(indication=""), today=TODAY) == ["Missing indication"]
    assert review_order(_order(indication="Infection"), today=TODAY) == [
        "Vague indication - needs specific diagnosis"
    ]


def test_review_prophylaxis():
    issues = review_order(_order(indication="prophylaxis"), today=TODAY)
    assert "Prophylaxis without documented bacterial source" in issues
    assert review_order(_order(indication="UTI prophylaxis"), today=TODAY) == []
    assert review_order(_order(indication="surgical prophylaxis"), today=TODAY) == []


def test_review_duration_needs_reassessment():
    row = _order(indication="cellulitis", start_date="2026-01-01", end_date="2026-01-20")
    assert review_order(row, today=TODAY) == ["Duration 19 days - needs documented reassessment"]
    assert review_order(row, notes="Reassessed by MD on 1/14", today=TODAY) == []
    assert review_order(row, heuristics=ReviewHeuristics(reassessment_days=30), today=TODAY) == []


def test_review_ongoing_course_counts_to_today():
    row = _order(indication="pneumonia", start_date="2026-01-10")
    assert review_order(row, today=TODAY) == ["Duration 22 days - needs documented reassessment"]
