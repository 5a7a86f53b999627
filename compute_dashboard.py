#!/usr/bin/env python3
from __future__ import annotations

import json
import sys


def main() -> int:
    if len(sys.argv) < 2:
        print("Usage: python compute_dashboard.py <snapshot.csv|snapshot.json> [category] [priority] [status]")
        return 2

    snapshot_path = sys.argv[1]
    category, priority, status = (sys.argv[2:5] + [None, None, None])[:3]

    from cdash.services.analytics_service import AnalyticsService, Filters
    from cdash.services.snapshot_service import SnapshotService

    records = SnapshotService().load_records(snapshot_path)
    f = Filters.from_selection(category=category, priority=priority, status=status)
    bundle = AnalyticsService().compute(records, f)
    print(json.dumps(bundle.as_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
