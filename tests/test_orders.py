# flake8: noqa

from datetime import date

from icn_extract.parsers.base import detect_document_kind
from icn_extract.parsers.orders import (
    extract_dose,
    extract_indication,
    extract_medication_name,
    make_record_id,
    parse_order_listing,
    step,
)
from icn_extract.parsers.models import ResidentContext

FOSTER = "Foster, Brian (148831)Cefpodoxime Proxetil Tablet 200 MG Give by mouth for Pneumonia 01/24/2026 01/31/2026"

LISTING = """Facility # 1234 Sunrise Care
Order Listing Report
User: jdoe
Date: 02/01/2026
Resident: All   Order Date Range: 01/01/2026 - 01/31/2026
Resident Name   Order Summary   Start Date   End Date
Foster, Brian (148831)Cefpodoxime Proxetil Tablet 200 MG Give by mouth for Pneumonia 01/24/2026 01/31/2026
SMITH, JOHN (LON202238)
Mupirocin Ointment 2 % Apply topically to left shin wound three times a day 01/10/2026 01/20/2026
Nitrofurantoin Macrocrystal Capsule 100 MG Give 1 capsule by mouth two times a day for UTI for 5 Days 01/15/2026
"""

TODAY = date(2026, 2, 1)


def test_foster_order_line():
    rows = parse_order_listing(FOSTER)
    assert len(rows) == 1
    row = rows[0]
    assert row.identifier == "148831"
    assert row.name == "Foster, Brian"
    assert "Cefpodoxime" in row.medication_name
    assert row.dose == "200 MG"
    assert row.route == "PO"
    assert row.indication == "Pneumonia"
    assert row.start_date == "2026-01-24"
    assert row.end_date == "2026-01-31"
    assert row.include is True
    assert row.infection_source == "Respiratory"
    assert row.treatment_days == 7
    assert row.medication_class == "Cephalosporins / Beta-lactams"


def test_listing_document():
    rows = parse_order_listing(LISTING, today=TODAY)
    assert [r.identifier for r in rows] == ["148831", "LON202238", "LON202238"]

    mupirocin = rows[1]
    assert mupirocin.name == "SMITH, JOHN"
    assert mupirocin.medication_name == "Mupirocin Ointment 2 %"
    assert mupirocin.route == "TOP"
    assert mupirocin.include is False

    macrobid = rows[2]
    assert macrobid.medication_name == "Nitrofurantoin Macrocrystal Capsule 100 MG"
    assert macrobid.dose == "100 MG"
    assert macrobid.indication == "UTI"
    assert macrobid.infection_source == "Urinary"
    assert macrobid.end_date == ""
    assert macrobid.treatment_days == 17


def test_record_ids_are_deterministic():
    first = [r.record_id for r in parse_order_listing(LISTING, today=TODAY)]
    second = [r.record_id for r in parse_order_listing(LISTING, today=TODAY)]
    assert first == second
    assert first[0] == "abx_148831|CEFPODOXIMEPROXETILTABLET200MG|2026-01-24|2026-01-31|PO|PNEUMONIA"


def test_record_id_is_capped():
    rid = make_record_id("148831", "X" * 400, "", "", "", "")
    assert rid.startswith("abx_")
    assert len(rid) == len("abx_") + 220


def test_order_without_resident_is_kept():
    rows = parse_order_listing("Keflex Capsule 500 MG Give by mouth for cellulitis 01/02/2026")
    assert len(rows) == 1
    assert rows[0].identifier == ""
    assert rows[0].infection_source == "Skin/Soft Tissue"


def test_boilerplate_and_noise_only():
    assert parse_order_listing("Order Listing Report\nUser: jdoe\nPage 1 of 3\n") == []
    assert parse_order_listing("") == []


def test_header_then_order_uses_context():
    context, row = step(None, "DOE, JANE (123456)")
    assert row is None
    assert context == ResidentContext("123456", "DOE, JANE")

    context, row = step(context, "Order Listing Report")
    assert context == ResidentContext("123456", "DOE, JANE")

    context, row = step(context, "Doxycycline Hyclate Capsule 100 MG Give by mouth 01/05/2026")
    assert row.identifier == "123456"
    assert row.medication_class == "Tetracyclines"


def test_nbsp_is_treated_as_space():
    _, row = step(None, "Keflex\u00a0Capsule 500 MG Give by mouth 01/02/2026")
    assert row.medication_name == "Keflex Capsule 500 MG"


def test_compound_dose_and_iv_route():
    line = (
        "Zosyn Solution Reconstituted 3-0.375 GM Use 3.375 gram intravenously every 8 hours "
        "for sepsis 01/05/2026 01/12/2026"
    )
    assert extract_dose(line) == "3-0.375 GM"
    assert extract_medication_name(line) == "Zosyn Solution Reconstituted 3-0.375 GM"
    row = parse_order_listing(line)[0]
    assert row.route == "IV"
    assert row.infection_source == "Bloodstream"


def test_indication_variants():
    assert extract_indication("Give by mouth for UTI for 5 Days") == "UTI"
    assert extract_indication("Give for a total of 7 days for cellulitis 01/02/2026") == "cellulitis"
    assert extract_indication("Apply daily. Indication: wound infection") == "wound infection"
    assert extract_indication("Give by mouth daily") == ""


def test_document_kind():
    assert detect_document_kind(LISTING) == "ORDERS"
    assert detect_document_kind(FOSTER) == "ORDERS"
    assert detect_document_kind("361-A KLETTNER, FRANCES (9981) 03/04/1945") == "ROSTER"


def test_name_from_form_word_without_known_antibiotic():
    line = "Hydrocortisone Cream 1 % Apply topically to rash two times a day 01/02/2026"
    assert extract_medication_name(line) == "Hydrocortisone Cream 1 %"
    row = parse_order_listing(line)[0]
    assert row.route == "TOP"
    assert row.include is False
    assert row.medication_class == "Unclassified"


def test_name_when_form_word_only_in_instructions():
    line = "Prednisone 20 MG Give 1 tablet by mouth one time a day 01/02/2026 01/07/2026"
    assert extract_medication_name(line) == "Prednisone 20 MG"
    row = parse_order_listing(line)[0]
    assert row.dose == "20 MG"
    assert row.route == "PO"
