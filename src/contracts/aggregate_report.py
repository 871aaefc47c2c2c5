from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from contracts.probe_result import ProbeResult


class OverallStatus(str, Enum):
    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    DOWN = "down"


class AggregateReport(BaseModel):
    """
    Snapshot of one probe batch: every result plus the derived overall status.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    updated_at: datetime = Field(alias="updatedAt")
    overall: OverallStatus
    results: List[ProbeResult] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        """Return the wire representation (camelCase keys, absent errors dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
