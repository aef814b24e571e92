from dataclasses import asdict
from typing import Dict, List, Tuple, Union

from icn_extract.parsers.base import _split_lines, detect_document_kind
from icn_extract.parsers.models import OrderRow, RosterRow
from icn_extract.parsers.orders import parse_order_listing
from icn_extract.parsers.roster import parse_roster_text

Rows = Union[List[RosterRow], List[OrderRow]]


class RecordNormalizer:
    def __init__(self, autodetect: bool = True, override: str = ""):
        self.autodetect = autodetect
        self.override = (override or "").upper()

    def detect(self, text: str) -> str:
        return self.override or (detect_document_kind(text) if self.autodetect else "ROSTER")

    def normalize(self, text: str) -> Tuple[str, Rows]:
        kind = self.detect(text)
        if kind == "ORDERS":
            return kind, parse_order_listing(text)
        return kind, parse_roster_text(text)

    def to_payload(self, kind: str, rows: Rows, lines_seen: int, source: str = None) -> Dict:
        """Shape handed to the ingestion side: rows plus the yield so a human can sanity-check it."""
        return {
            "kind": kind,
            "summary": {
                "kind": kind,
                "lines_seen": lines_seen,
                "rows_extracted": len(rows),
                "source": source,
            },
            "rows": [asdict(r) for r in rows],
        }

    def count_lines(self, text: str) -> int:
        return len(_split_lines(text))
