from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import yaml

from icn_extract.commons.normalizer import RecordNormalizer, Rows
from icn_extract.commons.types import Settings
from icn_extract.parsers.classify import derive_course_status
from icn_extract.parsers.dates import format_mdy
from icn_extract.parsers.models import OrderRow
from icn_extract.validation.stewardship import review_order


class ExtractionEngine:
    """Facade over the census/order parsers, driven by settings.yaml.

    Accepts a path to the YAML file or an already loaded dict.
    """

    def __init__(self, config_path_or_obj: Any = None):
        if isinstance(config_path_or_obj, str):
            with open(config_path_or_obj, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        elif isinstance(config_path_or_obj, dict):
            raw = config_path_or_obj
        else:
            raw = {}

        self.cfg = Settings.model_validate(raw)
        parsers_cfg = self.cfg.parsers
        self.normalizer = RecordNormalizer(
            autodetect=parsers_cfg.autodetect, override=parsers_cfg.override
        )

    def normalize(self, text: str):
        return self.normalizer.normalize(text)

    def to_payload(self, kind: str, rows: Rows, lines_seen: int, source: str = None) -> Dict:
        return self.normalizer.to_payload(kind, rows, lines_seen, source)

    def parse_and_map(self, text: str, source: str = None) -> Dict:
        kind, rows = self.normalize(text)
        return self.to_payload(kind, rows, self.normalizer.count_lines(text), source)

    def review(
        self,
        rows: Iterable[OrderRow],
        notes: Optional[Dict[str, str]] = None,
        today: Optional[date] = None,
    ) -> List[Dict]:
        """Stewardship flags per order; ``notes`` maps record_id to free-text review notes."""
        notes = notes or {}
        out = []
        for row in rows:
            issues = review_order(row, notes.get(row.record_id, ""), self.cfg.review, today)
            if issues:
                out.append(
                    {
                        "record_id": row.record_id,
                        "identifier": row.identifier,
                        "name": row.name,
                        "medication_name": row.medication_name,
                        "start_date": format_mdy(row.start_date),
                        "end_date": format_mdy(row.end_date),
                        "status": derive_course_status("active", row.end_date, today),
                        "issues": issues,
                    }
                )
        return out
