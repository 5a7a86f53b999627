from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from cdash.config import settings
from cdash.models import PRIORITIES, STATUSES, ComplaintRecord
from cdash.services.analytics_service import AnalyticsService, Filters
from cdash.services.snapshot_service import SnapshotService

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def _svc() -> AnalyticsService:
    return AnalyticsService()


def get_snapshot_path() -> str:
    return settings.snapshot_path


def _load_snapshot(path: str) -> list[ComplaintRecord]:
    try:
        return SnapshotService().load_records(path)
    except FileNotFoundError as ex:
        raise HTTPException(status_code=404, detail=f"Snapshot not found: {ex}") from ex
    except ValueError as ex:
        raise HTTPException(status_code=422, detail=str(ex)) from ex


@router.get("/dashboard")
def dashboard(
    snapshot_path: str = Depends(get_snapshot_path),
    category: str | None = None,
    priority: str | None = None,
    status: str | None = None,
):
    """
    Dashboard metrics bundle. Each filter is an exact match; "all" or empty means no constraint.
    Area risk always covers the full snapshot.
    """
    records = _load_snapshot(snapshot_path)
    f = Filters.from_selection(category=category, priority=priority, status=status)
    return _svc().compute(records, f).as_dict()


@router.get("/dimensions")
def dimensions(snapshot_path: str = Depends(get_snapshot_path)):
    records = _load_snapshot(snapshot_path)
    return {
        "categories": list(dict.fromkeys(r.category for r in records)),
        "priorities": list(PRIORITIES),
        "statuses": list(STATUSES),
    }
