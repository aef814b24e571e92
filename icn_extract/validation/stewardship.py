from datetime import date
from typing import List, Optional

from icn_extract.commons.types import ReviewHeuristics
from icn_extract.parsers.dates import compute_treatment_days
from icn_extract.parsers.models import OrderRow


def _mentions(text: str, terms: List[str]) -> bool:
    return any(t.lower() in text for t in terms)


def review_order(
    row: OrderRow,
    notes: str = "",
    heuristics: Optional[ReviewHeuristics] = None,
    today: Optional[date] = None,
) -> List[str]:
    """Documentation gaps for one antibiotic course; empty list when none.

    The prophylaxis and reassessment checks are heuristics; tune them through
    ``ReviewHeuristics`` rather than in code.
    """
    h = heuristics or ReviewHeuristics()
    indication = (row.indication or "").strip().lower()
    issues: List[str] = []

    if not indication:
        issues.append("Missing indication")

    if (
        _mentions(indication, h.prophylaxis_terms)
        and not _mentions(indication, h.prophylaxis_exempt_terms)
        and not _mentions(indication, h.documented_source_terms)
    ):
        issues.append("Prophylaxis without documented bacterial source")

    days = compute_treatment_days(row.start_date, row.end_date, today)
    if days is not None and days > h.reassessment_days:
        if not _mentions((notes or "").lower(), h.reassessment_terms):
            issues.append(f"Duration {days} days - needs documented reassessment")

    if indication in [v.lower() for v in h.vague_indications]:
        issues.append("Vague indication - needs specific diagnosis")

    return issues
