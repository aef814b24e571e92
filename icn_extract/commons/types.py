from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class PathsCfg(BaseModel):
    logs_root: str = "logs"
    inbox: str = "inbox"
    archive: str = "archive"
    error: str = "error"


class WatchCfg(BaseModel):
    filename_glob: str = "*.txt"


class ParsersCfg(BaseModel):
    autodetect: bool = True
    override: Literal["", "ROSTER", "ORDERS"] = ""


class ReviewHeuristics(BaseModel):
    """Stewardship review thresholds.

    These approximate documentation expectations for antibiotic courses; they
    are settings so that clinical reviewers can tune them per facility.
    """

    reassessment_days: int = Field(14, ge=1)
    prophylaxis_terms: List[str] = ["prophylaxis"]
    prophylaxis_exempt_terms: List[str] = ["surg", "peri"]
    documented_source_terms: List[str] = ["uti", "wound", "pneumonia", "cellulitis", "sepsis"]
    reassessment_terms: List[str] = ["reassess", "reviewed", "continue per", "extended"]
    vague_indications: List[str] = ["infection", "prophylaxis", "prevention", "other"]


class Settings(BaseModel):
    app: Dict[str, Any] = {}
    paths: PathsCfg = PathsCfg()
    watch: WatchCfg = WatchCfg()
    parsers: ParsersCfg = ParsersCfg()
    review: ReviewHeuristics = ReviewHeuristics()


class ImportSummary(BaseModel):
    kind: Literal["ROSTER", "ORDERS"]
    lines_seen: int
    rows_extracted: int
    source: Optional[str] = None
