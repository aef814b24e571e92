# icn_extract/validation/validators.py
import re
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, field_validator, model_validator

from icn_extract.commons.types import ImportSummary
from icn_extract.parsers.vocab import VALID_UNITS

_IDENT_RE = re.compile(r"^[A-Z0-9]{1,20}$")
_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_UNITS = {f"Unit {u}" for u in VALID_UNITS}


def _check_identifier(v: str, allow_empty: bool) -> str:
    if not v and allow_empty:
        return v
    if not _IDENT_RE.match(v or ""):
        raise ValueError(f"Invalid identifier: {v!r}")
    return v


def _check_canonical_date(v: str) -> str:
    if not v:
        return v
    m = _ISO_RE.match(v)
    if not m:
        raise ValueError(f"Date is not YYYY-MM-DD: {v!r}")
    yy, mm, dd = (int(x) for x in m.groups())
    if not (1900 <= yy <= 2100 and 1 <= mm <= 12 and 1 <= dd <= 31):
        raise ValueError(f"Date out of range: {v!r}")
    return v


class RosterRecord(BaseModel):
    identifier: str
    name: str = ""
    unit: str = ""
    room: str = ""
    dob_raw: str = ""
    status: str = ""
    payor: str = ""

    @field_validator("identifier")
    @classmethod
    def _identifier(cls, v: str):
        return _check_identifier(v, allow_empty=False)

    @field_validator("unit")
    @classmethod
    def _unit(cls, v: str):
        if v and v not in _UNITS:
            raise ValueError(f"Unit must be one of {sorted(_UNITS)}, got {v!r}")
        return v


class OrderRecord(BaseModel):
    record_id: str
    identifier: str = ""  # orders may be captured without a resident
    name: str = ""
    unit: str = ""
    room: str = ""
    medication_name: str = ""
    dose: str = ""
    route: str = ""
    route_raw: str = ""
    indication: str = ""
    infection_source: str = "Other"
    start_date: str = ""
    end_date: str = ""
    treatment_days: Optional[int] = None
    include: bool = True
    medication_class: str = "Unclassified"
    source: str = "order_listing_rawtext"

    @field_validator("record_id")
    @classmethod
    def _record_id(cls, v: str):
        if not v.startswith("abx_"):
            raise ValueError("record_id must start with 'abx_'")
        return v

    @field_validator("identifier")
    @classmethod
    def _identifier(cls, v: str):
        return _check_identifier(v, allow_empty=True)

    @field_validator("start_date", "end_date")
    @classmethod
    def _dates(cls, v: str):
        return _check_canonical_date(v)

    @model_validator(mode="after")
    def _topical_excluded(self):
        if self.include == (self.route == "TOP"):
            raise ValueError("include must be False exactly for topical orders")
        return self


class ImportPayload(BaseModel):
    kind: Literal["ROSTER", "ORDERS"]
    summary: ImportSummary
    rows: List[Union[RosterRecord, OrderRecord]]

    @model_validator(mode="before")
    @classmethod
    def _rows_by_kind(cls, data):
        if isinstance(data, dict):
            model = OrderRecord if data.get("kind") == "ORDERS" else RosterRecord
            data = {**data, "rows": [model.model_validate(r) for r in data.get("rows") or []]}
        return data


def validate_payload_or_raise(payload: dict) -> ImportPayload:
    """Raise pydantic.ValidationError when a payload breaks the record invariants."""
    return ImportPayload.model_validate(payload)
