from __future__ import annotations

import logging
import re
from pathlib import Path

import pandas as pd

from cdash.models import REQUIRED_FIELDS, ComplaintRecord

TEXT_COLUMNS = ("id", "title", "description", "location", "category", "priority", "status")
COORD_COLUMNS = ("latitude", "longitude")
# Only coordinates may be blank/NA; text labels are taken verbatim.
COORD_NA_VALUES = ["", "NA", "N/A", "NaN", "nan", "null", "None"]

logger = logging.getLogger(__name__)


def _strip_cell_newlines(v):
    if isinstance(v, str):
        return re.sub(r"[\r\n]+", " ", v).strip()
    return v


class SnapshotService:
    """
    Complaint export (CSV/JSON) -> in-memory snapshot of ComplaintRecord, most recent first.
    Read-only: the export file is never modified.
    """

    def load_dataframe(self, path: str) -> pd.DataFrame:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(path)
        suffix = p.suffix.lower()
        if suffix == ".csv":
            header = pd.read_csv(p, nrows=0).columns
            df = pd.read_csv(
                p,
                dtype={c: str for c in TEXT_COLUMNS if c in header},
                keep_default_na=False,
                na_values={c: COORD_NA_VALUES for c in COORD_COLUMNS if c in header},
            )
        elif suffix == ".json":
            # dtype=False: no numeric coercion of string labels ("007" stays "007")
            df = pd.read_json(p, orient="records", dtype=False, convert_dates=["created_at"], keep_default_dates=False)
        else:
            raise ValueError(f"Unsupported snapshot format: {suffix}")

        missing = [c for c in REQUIRED_FIELDS if c not in df.columns]
        if missing:
            raise ValueError(f"Snapshot {p.name} is missing required columns: {missing}")
        return df

    def load_records(self, path: str) -> list[ComplaintRecord]:
        df = self.load_dataframe(path)
        # location is a grouping key and stays verbatim
        for col in ("title", "description"):
            if col in df.columns:
                df[col] = df[col].map(_strip_cell_newlines)

        if "created_at" in df.columns:
            df["created_at"] = pd.to_datetime(df["created_at"], errors="coerce", utc=True)
            df = df.sort_values("created_at", ascending=False, na_position="last", kind="stable")

        records = []
        for row in df.to_dict(orient="records"):
            ts = row.get("created_at")
            row["created_at"] = None if ts is None or pd.isna(ts) else ts.to_pydatetime()
            records.append(ComplaintRecord.from_mapping(row))
        logger.info("Loaded %d complaints from %s", len(records), path)
        return records
