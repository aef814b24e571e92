from icn_extract.parsers.identifiers import (
    canonical_identifier,
    extract_identifier,
    identifier_match_keys,
)


def test_canonical_from_parenthesized():
    assert canonical_identifier("(LON202238)") == "LON202238"
    assert canonical_identifier("SMITH, JOHN (lon-2022)") == "LON2022"


def test_canonical_is_idempotent_and_capped():
    raw = "abc-123-" + "9" * 30
    once = canonical_identifier(raw)
    assert len(once) == 20
    assert canonical_identifier(once) == once


def test_match_keys():
    assert identifier_match_keys("(LON202238)") == ["LON202238", "202238"]
    assert identifier_match_keys("148831") == ["148831"]
    assert identifier_match_keys("") == []


def test_extract_identifier_recovery_chain():
    assert extract_identifier("Foster, Brian (148831)Cefpodoxime") == "148831"
    # short parenthesized tokens such as "(PO)" are not identifiers
    assert extract_identifier("Keflex (PO) MRN: 556677 Give") == "556677"
    assert extract_identifier("Bactrim DS resident 20012345 for UTI") == "20012345"
    assert extract_identifier("Keflex 500 MG Give by mouth") is None
