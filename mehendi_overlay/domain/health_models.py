from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel


class HealthStatus(str, Enum):
    HEALTHY = "Healthy"
    UNHEALTHY = "Unhealthy"


class HealthEntryModel(BaseModel):
    data: Optional[dict] = None
    description: Optional[str] = None
    duration: str
    exception: Optional[str] = None
    status: HealthStatus
    tags: List[str]


class HealthReportModel(BaseModel):
    status: HealthStatus
    totalDuration: str
    entries: Dict[str, HealthEntryModel]

    @classmethod
    def from_entries(cls, entries: Dict[str, HealthEntryModel], total_duration: str) -> "HealthReportModel":
        """The report is healthy only when the self check and the rendering probe both are."""

        healthy = all(entry.status is HealthStatus.HEALTHY for entry in entries.values())
        return cls(
            status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
            totalDuration=total_duration,
            entries=entries,
        )
