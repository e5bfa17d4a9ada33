from __future__ import annotations

import base64
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class Category(str, Enum):
    WALK = "Walk"
    RUN = "Run"
    RIDE = "Ride"
    HIKE = "Hike"
    NO_ACTIVITY = "NoActivity"


@dataclass(frozen=True)
class ActivityRecord:
    distance: Optional[float]
    category: Optional[str]
    owner_id: str
    owner_name: str
    start_date: Optional[str] = None


@dataclass(frozen=True)
class MemberRecord:
    id: str
    name: str


@dataclass
class ReportData:
    """Everything the layout stage needs, fully fetched before rendering starts."""

    report_date: date
    activities: List[ActivityRecord] = field(default_factory=list)
    members: List[MemberRecord] = field(default_factory=list)
    logo: Optional[bytes] = None

    def to_dict(self) -> dict:
        return {
            "report_date": self.report_date.isoformat(),
            "activities": [
                {
                    "distance": a.distance,
                    "category": a.category,
                    "owner_id": a.owner_id,
                    "owner_name": a.owner_name,
                    "start_date": a.start_date,
                }
                for a in self.activities
            ],
            "members": [{"id": m.id, "name": m.name} for m in self.members],
            "logo": base64.b64encode(self.logo).decode("ascii") if self.logo else None,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "ReportData":
        logo = payload.get("logo")
        return cls(
            report_date=date.fromisoformat(payload["report_date"]),
            activities=[
                ActivityRecord(
                    distance=row.get("distance"),
                    category=row.get("category"),
                    owner_id=str(row.get("owner_id") or ""),
                    owner_name=str(row.get("owner_name") or ""),
                    start_date=row.get("start_date"),
                )
                for row in payload.get("activities", [])
            ],
            members=[
                MemberRecord(id=str(row.get("id") or ""), name=str(row.get("name") or ""))
                for row in payload.get("members", [])
            ],
            logo=base64.b64decode(logo) if logo else None,
        )
