"""
Tests for loading complaint snapshots from CSV / JSON exports.
"""

import json

import pytest

from cdash.services.snapshot_service import SnapshotService

CSV_HEADER = "id,title,description,location,latitude,longitude,category,priority,status,created_at\n"


@pytest.fixture
def csv_snapshot(tmp_path):
    path = tmp_path / "complaints.csv"
    path.write_text(
        CSV_HEADER
        + "a1,Pothole,Deep pothole,Zone A,19.07,72.87,Roads,High,Pending,2024-01-01T10:00:00Z\n"
        + "a2,No water,,Zone B,,,Water,Low,Resolved,2024-03-01T10:00:00Z\n"
        + "a3,Garbage pile,Smell,Zone A,19.08,,Garbage,Medium,In Progress,2024-02-01T10:00:00Z\n",
        encoding="utf-8",
    )
    return path


class TestLoadCsv:
    """Tests for CSV snapshots."""

    def test_loads_all_rows(self, csv_snapshot):
        records = SnapshotService().load_records(str(csv_snapshot))
        assert len(records) == 3

    def test_most_recent_first(self, csv_snapshot):
        records = SnapshotService().load_records(str(csv_snapshot))
        assert [r.id for r in records] == ["a2", "a3", "a1"]

    def test_missing_coordinates_become_none(self, csv_snapshot):
        by_id = {r.id: r for r in SnapshotService().load_records(str(csv_snapshot))}
        assert by_id["a1"].is_geolocatable()
        assert by_id["a1"].latitude == pytest.approx(19.07)
        assert by_id["a2"].latitude is None and by_id["a2"].longitude is None
        assert not by_id["a3"].is_geolocatable()

    def test_empty_description_is_blank(self, csv_snapshot):
        by_id = {r.id: r for r in SnapshotService().load_records(str(csv_snapshot))}
        assert by_id["a2"].description == ""


class TestLoadJson:
    """Tests for JSON snapshots."""

    def test_loads_records(self, tmp_path):
        path = tmp_path / "complaints.json"
        path.write_text(
            json.dumps(
                [
                    {"id": "1", "title": "Streetlight out", "location": "Ward 5", "latitude": None, "longitude": None,
                     "category": "Electricity", "priority": "Medium", "status": "Pending"},
                    {"id": "2", "title": "Open drain", "location": "Ward 6", "latitude": 18.5, "longitude": 73.8,
                     "category": "Drainage", "priority": "High", "status": "In Progress"},
                ]
            ),
            encoding="utf-8",
        )
        records = SnapshotService().load_records(str(path))
        assert [r.id for r in records] == ["1", "2"]
        assert not records[0].is_geolocatable()
        assert records[1].is_geolocatable()


class TestLoadErrors:
    """Tests for structurally invalid snapshots."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SnapshotService().load_records(str(tmp_path / "nope.csv"))

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "complaints.txt"
        path.write_text("x", encoding="utf-8")
        with pytest.raises(ValueError, match="Unsupported"):
            SnapshotService().load_records(str(path))

    def test_missing_required_columns(self, tmp_path):
        path = tmp_path / "complaints.csv"
        path.write_text("id,title\n1,Pothole\n", encoding="utf-8")
        with pytest.raises(ValueError, match="missing required columns"):
            SnapshotService().load_records(str(path))


class TestLabelsKeptVerbatim:
    """Text labels are grouping keys and must come through unchanged."""

    def test_numeric_location_with_blank_cell(self, tmp_path):
        path = tmp_path / "complaints.csv"
        path.write_text(
            "id,title,location,latitude,longitude,category,priority,status\n"
            "1,Pothole,101,,,Roads,High,Pending\n"
            "2,Leak,,,,Water,Low,Pending\n"
            "3,Garbage,101,,,Roads,Low,Resolved\n",
            encoding="utf-8",
        )
        records = SnapshotService().load_records(str(path))
        assert [r.location for r in records] == ["101", "", "101"]

    def test_na_literal_label(self, tmp_path):
        path = tmp_path / "complaints.csv"
        path.write_text(
            "id,title,location,latitude,longitude,category,priority,status\n"
            "1,NA,NA,NA,,NA,High,Pending\n",
            encoding="utf-8",
        )
        r = SnapshotService().load_records(str(path))[0]
        assert (r.title, r.location, r.category) == ("NA", "NA", "NA")
        assert r.latitude is None and r.longitude is None

    def test_leading_zero_labels_csv(self, tmp_path):
        path = tmp_path / "complaints.csv"
        path.write_text(
            "id,title,location,latitude,longitude,category,priority,status\n"
            "001,007,007,,,12,High,Pending\n"
            "002,7,7,,,12.0,Low,Pending\n",
            encoding="utf-8",
        )
        records = SnapshotService().load_records(str(path))
        assert [(r.id, r.title, r.location, r.category) for r in records] == [
            ("001", "007", "007", "12"),
            ("002", "7", "7", "12.0"),
        ]

    def test_leading_zero_labels_json(self, tmp_path):
        path = tmp_path / "complaints.json"
        path.write_text(
            json.dumps(
                [
                    {"id": "1", "title": "007", "location": "007", "category": "12", "priority": "High", "status": "Pending",
                     "latitude": None, "longitude": None},
                    {"id": "2", "title": "7", "location": "7", "category": "12", "priority": "Low", "status": "Pending",
                     "latitude": 18.5, "longitude": 73.8},
                ]
            ),
            encoding="utf-8",
        )
        records = SnapshotService().load_records(str(path))
        assert [r.location for r in records] == ["007", "7"]
        assert records[0].title == "007"
        assert records[0].category == "12"
        assert not records[0].is_geolocatable()
        assert records[1].latitude == pytest.approx(18.5)

    def test_location_whitespace_untouched(self, tmp_path):
        path = tmp_path / "complaints.csv"
        path.write_text(
            "id,title,location,latitude,longitude,category,priority,status\n"
            '1,Pothole," Zone A",,,Roads,High,Pending\n'
            "2,Leak,Zone A,,,Water,Low,Pending\n",
            encoding="utf-8",
        )
        records = SnapshotService().load_records(str(path))
        assert [r.location for r in records] == [" Zone A", "Zone A"]
