# ===============================
# File: icn_extract/parsers/models.py
# ===============================
from dataclasses import dataclass
from typing import Optional


@dataclass
class RosterRow:
    identifier: str
    name: str = ""
    unit: str = ""  # "" or "Unit 2" | "Unit 3" | "Unit 4"
    room: str = ""
    dob_raw: str = ""  # as printed, not normalized
    status: str = ""
    payor: str = ""


@dataclass
class OrderRow:
    record_id: str
    identifier: str
    name: str
    medication_name: str
    dose: str = ""
    route: str = ""  # PO | TOP | IV | ENT | OPH | IM | SC | raw fallback
    route_raw: str = ""
    indication: str = ""
    infection_source: str = "Other"
    start_date: str = ""  # YYYY-MM-DD
    end_date: str = ""  # YYYY-MM-DD, "" while ongoing
    treatment_days: Optional[int] = None
    include: bool = True
    medication_class: str = "Unclassified"
    unit: str = ""
    room: str = ""
    source: str = "order_listing_rawtext"


@dataclass(frozen=True)
class ResidentContext:
    identifier: str = ""
    name: str = ""
