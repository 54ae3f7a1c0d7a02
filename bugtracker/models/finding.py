"""
Finding Model
=============
Pydantic model for one detected issue instance.
This is the contract between the scanner/classifier/linter layer and the
findings table.

Fields:
    file_name       — original upload name (no storage prefix)
    file_path       — storage path of the persisted upload
    file_url        — public URL of the upload, when the bucket exposes one
    line_number     — 1-based line; 0 when not line-addressable (classifier rows)
    bug_type        — pattern category (Syntax Error, Reference Error, ...)
    error_message   — trimmed source line for scanner rows, label/lint text otherwise
    confidence      — classifier score in [0, 1]
    suggested_fix   — remediation hint from the matching pattern
    created_at      — ISO-8601 UTC timestamp, stamped at creation
"""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_name: str
    file_path: Optional[str] = None
    file_url: Optional[str] = None
    line_number: int = Field(default=0, ge=0)
    bug_type: Optional[str] = None
    error_message: str = ""
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    suggested_fix: Optional[str] = None
    created_at: str = Field(default_factory=utc_timestamp)

    def to_row(self) -> dict:
        """Row payload for the findings table; unset columns are left to the DB."""
        return self.model_dump(exclude_none=True)


# Ordered output of one scan: line order, then pattern-registration order.
ScanResult = List[Finding]
