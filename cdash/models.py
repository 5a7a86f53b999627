from __future__ import annotations

import datetime as dt
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

PRIORITIES: tuple[str, ...] = ("High", "Medium", "Low")
STATUSES: tuple[str, ...] = ("Pending", "In Progress", "Resolved")
RISK_TIERS: tuple[str, ...] = ("High", "Medium", "Low")

REQUIRED_FIELDS: tuple[str, ...] = ("id", "title", "location", "category", "priority", "status")


def _coord(v: Any) -> float | None:
    # Record-source exports carry missing coordinates as None, "" or NaN.
    if v is None or v == "":
        return None
    f = float(v)
    if math.isnan(f):
        return None
    return f


def _text(v: Any) -> str:
    if v is None or (isinstance(v, float) and math.isnan(v)):
        return ""
    return str(v)


@dataclass(frozen=True)
class ComplaintRecord:
    """
    One citizen-submitted complaint as materialized by the record source.
    Never mutated by analytics; derived views are built alongside it.
    """

    id: str
    title: str
    location: str
    category: str
    priority: str  # High/Medium/Low
    status: str  # Pending/In Progress/Resolved
    description: str = ""
    latitude: float | None = None
    longitude: float | None = None
    created_at: dt.datetime | str | None = None

    def is_geolocatable(self) -> bool:
        return all(v is not None and not math.isnan(v) for v in (self.latitude, self.longitude))

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "ComplaintRecord":
        missing = [k for k in REQUIRED_FIELDS if k not in row]
        if missing:
            raise ValueError(f"Complaint row is missing required fields: {missing}")
        return cls(
            id=_text(row["id"]),
            title=_text(row["title"]),
            location=_text(row["location"]),
            category=_text(row["category"]),
            priority=_text(row["priority"]),
            status=_text(row["status"]),
            description=_text(row.get("description")),
            latitude=_coord(row.get("latitude")),
            longitude=_coord(row.get("longitude")),
            created_at=row.get("created_at"),
        )


@dataclass(frozen=True)
class DistributionEntry:
    label: str
    count: int


@dataclass(frozen=True)
class AreaRiskEntry:
    area_label: str
    # Presentation-only; grouping and ranking always use area_label.
    display_label: str
    total_count: int
    high_priority_count: int
    risk_tier: str


@dataclass(frozen=True)
class MapMarker:
    latitude: float
    longitude: float
    label: str
    priority_tag: str
    popup_html: str = ""


@dataclass(frozen=True)
class RecentComplaint:
    id: str
    title: str
    location: str
    category: str
    priority: str
    status: str

    @classmethod
    def from_record(cls, r: ComplaintRecord) -> "RecentComplaint":
        return cls(id=r.id, title=r.title, location=r.location, category=r.category, priority=r.priority, status=r.status)


@dataclass(frozen=True)
class AnalyticsBundle:
    """Everything a dashboard renders for one snapshot + filter selection."""

    total: int
    high_priority: int
    pending: int
    in_progress: int
    resolved: int
    resolution_rate: int
    filtered_total: int
    status_distribution: list[DistributionEntry] = field(default_factory=list)
    priority_distribution: list[DistributionEntry] = field(default_factory=list)
    category_distribution: list[DistributionEntry] = field(default_factory=list)
    area_risk: list[AreaRiskEntry] = field(default_factory=list)
    markers: list[MapMarker] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    # Head of the snapshot as the record source ordered it (most recent first).
    recent: list[RecentComplaint] = field(default_factory=list)

    def as_dict(self) -> dict:
        return asdict(self)
