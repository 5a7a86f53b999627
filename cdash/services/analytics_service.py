from __future__ import annotations

import html
import logging
from collections import Counter
from dataclasses import dataclass
from operator import attrgetter
from typing import Callable, Iterable, Sequence

from cdash.config import Settings, settings
from cdash.models import (
    PRIORITIES,
    STATUSES,
    AnalyticsBundle,
    AreaRiskEntry,
    ComplaintRecord,
    DistributionEntry,
    MapMarker,
    RecentComplaint,
)

logger = logging.getLogger(__name__)

# Filter-selection surfaces send this for "no constraint".
ALL = "all"

by_status: Callable[[ComplaintRecord], str] = attrgetter("status")
by_priority: Callable[[ComplaintRecord], str] = attrgetter("priority")
by_category: Callable[[ComplaintRecord], str] = attrgetter("category")


def _constraint(v: str | None) -> str | None:
    if v is None or v == "" or v == ALL:
        return None
    return v


@dataclass(frozen=True)
class Filters:
    category: str | None = None
    priority: str | None = None
    status: str | None = None

    @classmethod
    def from_selection(
        cls,
        category: str | None = None,
        priority: str | None = None,
        status: str | None = None,
    ) -> "Filters":
        return cls(category=_constraint(category), priority=_constraint(priority), status=_constraint(status))

    def is_active(self) -> bool:
        return any(v is not None for v in (self.category, self.priority, self.status))


def filter_complaints(records: Iterable[ComplaintRecord], f: Filters) -> list[ComplaintRecord]:
    """
    Exact-match AND over the constrained fields. No constraint -> every record passes.
    Always returns a new list; the input is left untouched.
    """
    out: list[ComplaintRecord] = []
    for r in records:
        if f.category is not None and r.category != f.category:
            continue
        if f.priority is not None and r.priority != f.priority:
            continue
        if f.status is not None and r.status != f.status:
            continue
        out.append(r)
    return out


def group_count(
    records: Iterable[ComplaintRecord],
    key: Callable[[ComplaintRecord], str],
    *,
    order: Sequence[str] | None = None,
) -> list[DistributionEntry]:
    """
    Count records per key value, omitting empty buckets.

    With `order`, only those labels are emitted and in that order (values outside it are dropped);
    without it, labels come out in first-seen order.
    """
    counts: Counter[str] = Counter(key(r) for r in records)
    labels = list(order) if order is not None else list(counts)
    return [DistributionEntry(label=lbl, count=int(counts[lbl])) for lbl in labels if counts.get(lbl, 0) > 0]


@dataclass(frozen=True)
class RiskPolicy:
    """
    score = volume_weight * total + ratio_weight * (high / total)

    Non-negative weights keep the tier monotonic in both volume and high-priority share.
    """

    volume_weight: float = 1.0
    ratio_weight: float = 10.0
    high_threshold: float = 10.0
    medium_threshold: float = 5.0

    def __post_init__(self) -> None:
        if self.volume_weight < 0 or self.ratio_weight < 0:
            raise ValueError("Risk weights must be non-negative")
        if self.medium_threshold < 0 or self.high_threshold < 0:
            raise ValueError("Risk thresholds must be non-negative")
        if self.medium_threshold > self.high_threshold:
            raise ValueError("medium_threshold must be <= high_threshold")

    @classmethod
    def from_settings(cls, s: Settings = settings) -> "RiskPolicy":
        return cls(
            volume_weight=s.risk_volume_weight,
            ratio_weight=s.risk_ratio_weight,
            high_threshold=s.risk_high_threshold,
            medium_threshold=s.risk_medium_threshold,
        )

    def score(self, total: int, high: int) -> float:
        ratio = (high / total) if total else 0.0
        return self.volume_weight * total + self.ratio_weight * ratio


def classify_risk(total: int, high: int, policy: RiskPolicy | None = None) -> str:
    p = policy or RiskPolicy.from_settings()
    s = p.score(total, high)
    if s > p.high_threshold:
        return "High"
    if s > p.medium_threshold:
        return "Medium"
    return "Low"


def _display_label(name: str, max_chars: int) -> str:
    return name[:max_chars] + "…" if len(name) > max_chars else name


def rank_areas(
    records: Iterable[ComplaintRecord],
    top_n: int = 8,
    *,
    policy: RiskPolicy | None = None,
    label_max_chars: int = 18,
) -> list[AreaRiskEntry]:
    p = policy or RiskPolicy.from_settings()

    # dicts keep first-seen order, which is the tie-break for equal volumes
    totals: dict[str, int] = {}
    highs: dict[str, int] = {}
    for r in records:
        totals[r.location] = totals.get(r.location, 0) + 1
        if r.priority == "High":
            highs[r.location] = highs.get(r.location, 0) + 1

    out = [
        AreaRiskEntry(
            area_label=area,
            display_label=_display_label(area, label_max_chars),
            total_count=n,
            high_priority_count=highs.get(area, 0),
            risk_tier=classify_risk(n, highs.get(area, 0), p),
        )
        for area, n in totals.items()
    ]
    # list.sort is stable
    out.sort(key=lambda x: -x.total_count)
    return out[: max(0, int(top_n))]


def project_markers(records: Iterable[ComplaintRecord]) -> list[MapMarker]:
    out: list[MapMarker] = []
    for r in records:
        if not r.is_geolocatable():
            continue
        out.append(
            MapMarker(
                latitude=r.latitude,
                longitude=r.longitude,
                label=f"{r.title} ({r.category} • {r.priority})",
                priority_tag=r.priority,
                popup_html=f"<strong>{html.escape(r.title)}</strong><br/>{html.escape(r.category)} • {html.escape(r.priority)}",
            )
        )
    return out


def resolution_rate(resolved: int, total: int) -> int:
    """Resolved share as a whole percent, halves rounded up; 0 for an empty snapshot."""
    if total <= 0:
        return 0
    return (resolved * 200 + total) // (2 * total)


class AnalyticsService:
    def __init__(
        self,
        *,
        policy: RiskPolicy | None = None,
        area_top_n: int | None = None,
        label_max_chars: int | None = None,
        recent_limit: int | None = None,
    ) -> None:
        self.policy = policy or RiskPolicy.from_settings()
        self.area_top_n = settings.area_top_n if area_top_n is None else area_top_n
        self.label_max_chars = settings.area_label_max_chars if label_max_chars is None else label_max_chars
        self.recent_limit = settings.recent_limit if recent_limit is None else recent_limit

    def compute(self, snapshot: Iterable[ComplaintRecord], f: Filters | None = None) -> AnalyticsBundle:
        """
        Full dashboard bundle for one snapshot.

        Headline counts, resolution rate, area risk and recent complaints cover the whole snapshot;
        distributions and markers follow the filtered view.
        """
        # Materialize once so every stage sees the same snapshot.
        records = tuple(snapshot)
        f = f or Filters()
        view = filter_complaints(records, f) if f.is_active() else list(records)

        status_counts = Counter(r.status for r in records)
        total = len(records)
        resolved = status_counts.get("Resolved", 0)

        degraded = sum(1 for r in records if r.status not in STATUSES or r.priority not in PRIORITIES)
        if degraded:
            logger.warning("%d of %d complaints have an unknown status or priority", degraded, total)

        bundle = AnalyticsBundle(
            total=total,
            high_priority=sum(1 for r in records if r.priority == "High"),
            pending=status_counts.get("Pending", 0),
            in_progress=status_counts.get("In Progress", 0),
            resolved=resolved,
            resolution_rate=resolution_rate(resolved, total),
            filtered_total=len(view),
            status_distribution=group_count(view, by_status, order=STATUSES),
            priority_distribution=group_count(view, by_priority, order=PRIORITIES),
            category_distribution=group_count(view, by_category),
            area_risk=rank_areas(
                records,
                self.area_top_n,
                policy=self.policy,
                label_max_chars=self.label_max_chars,
            ),
            markers=project_markers(view),
            categories=list(dict.fromkeys(r.category for r in records)),
            recent=[RecentComplaint.from_record(r) for r in records[: max(0, int(self.recent_limit))]],
        )
        logger.debug(
            "computed dashboard: total=%d filtered=%d areas=%d markers=%d",
            bundle.total,
            bundle.filtered_total,
            len(bundle.area_risk),
            len(bundle.markers),
        )
        return bundle
