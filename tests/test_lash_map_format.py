"""Tests for lash map records and client files."""

import json
import logging
from pathlib import Path
import tempfile

import pytest

from lashmap.core.lash_map_format import LashMapRecord, LashMapStore
from lashmap.core.models import AnnotationSnapshot


@pytest.fixture
def snapshot(sample_snapshot_dict):
    return AnnotationSnapshot.from_dict(sample_snapshot_dict)


class TestLashMapRecord:
    """Tests for LashMapRecord."""

    def test_from_snapshot(self, snapshot):
        """Test building a record around a drawing."""
        record = LashMapRecord.from_snapshot(
            snapshot, appointment_id="appt-1", record_date="2026-10-19", notes="Classic set"
        )

        assert record.id.startswith("map-")
        assert record.appointment_id == "appt-1"
        assert record.date == "2026-10-19"
        assert record.image_url == "https://example.com/eyes.png"
        assert json.loads(record.map_data)["leftEye"][0]["templateId"] == "medium"

    def test_generated_appointment_id(self, snapshot):
        """Test that a missing appointment id is generated."""
        record = LashMapRecord.from_snapshot(snapshot)

        assert record.appointment_id.startswith("appt-")
        assert record.date

    def test_snapshot_round_trip(self, snapshot):
        """Test that the stored drawing decodes to the same structure."""
        record = LashMapRecord.from_snapshot(snapshot, appointment_id="appt-1")

        assert record.snapshot().to_dict() == snapshot.to_dict()

    def test_empty_map_data(self):
        """Test that a record without a drawing yields an empty one."""
        record = LashMapRecord(appointment_id="appt-1", date="2026-10-19")

        assert record.snapshot().is_empty

    def test_malformed_map_data(self, caplog):
        """Test that unreadable drawings are logged and replaced by an empty one."""
        record = LashMapRecord(appointment_id="appt-1", date="2026-10-19", map_data="{not json")

        with caplog.at_level(logging.ERROR):
            snapshot = record.snapshot()

        assert snapshot.is_empty
        assert "appt-1" in caplog.text

    def test_update_snapshot(self, snapshot):
        """Test replacing the stored drawing."""
        record = LashMapRecord(appointment_id="appt-1", date="2026-10-19")

        record.update_snapshot(snapshot)

        assert record.snapshot().path_count == 2
        assert record.image_url == "https://example.com/eyes.png"

    def test_matches(self):
        """Test addressing records by id or appointment id."""
        with_id = LashMapRecord(appointment_id="appt-1", date="", id="map-1")
        legacy = LashMapRecord(appointment_id="appt-2", date="")

        assert with_id.matches("map-1")
        assert not with_id.matches("appt-1")
        assert legacy.matches("appt-2")

    def test_to_dict_omits_unset_optionals(self):
        """Test the stored record structure."""
        record = LashMapRecord(appointment_id="appt-1", date="2026-10-19", map_data="{}")

        assert record.to_dict() == {
            "appointmentId": "appt-1",
            "date": "2026-10-19",
            "mapData": "{}",
        }

    def test_from_dict(self):
        """Test loading a stored record."""
        record = LashMapRecord.from_dict({
            "id": "map-1",
            "appointmentId": "appt-1",
            "date": "2026-10-19",
            "mapData": "{}",
            "notes": "Volume",
        })

        assert record.id == "map-1"
        assert record.notes == "Volume"
        assert record.image_url is None


class TestLashMapStore:
    """Tests for LashMapStore."""

    def test_missing_file(self):
        """Test that a missing client file starts empty."""
        with tempfile.TemporaryDirectory() as tmpdir:
            store = LashMapStore(Path(tmpdir) / "client.json")

            assert store.records == []

    def test_save_and_load(self, snapshot):
        """Test writing records and reading them back."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "clients" / "client.json"
            store = LashMapStore(path)
            record = LashMapRecord.from_snapshot(snapshot, appointment_id="appt-1")
            store.add(record)

            assert store.save() is True

            loaded = LashMapStore(path)
            assert len(loaded.records) == 1
            assert loaded.get(record.id).snapshot().label_count == 1

    def test_other_keys_preserved(self):
        """Test that unrelated client data survives a save."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "client.json"
            path.write_text(json.dumps({"name": "Ana", "lashMaps": []}))

            store = LashMapStore(path)
            store.add(LashMapRecord(appointment_id="appt-1", date="2026-10-19"))
            store.save()

            data = json.loads(path.read_text())
            assert data["name"] == "Ana"
            assert len(data["lashMaps"]) == 1

    def test_invalid_file(self):
        """Test that an unreadable file is treated as empty."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "client.json"
            path.write_text("not json")

            assert LashMapStore(path).records == []

    def test_add_assigns_id(self):
        """Test that records without an id get one when added."""
        with tempfile.TemporaryDirectory() as tmpdir:
            store = LashMapStore(Path(tmpdir) / "client.json")
            record = LashMapRecord(appointment_id="appt-1", date="")

            store.add(record)

            assert record.id.startswith("map-")

    def test_get_and_remove(self):
        """Test finding and removing records."""
        with tempfile.TemporaryDirectory() as tmpdir:
            store = LashMapStore(Path(tmpdir) / "client.json")
            store.add(LashMapRecord(appointment_id="appt-1", date="", id="map-1"))
            store.add(LashMapRecord(appointment_id="appt-2", date="", id="map-2"))

            assert store.get("map-2").appointment_id == "appt-2"
            assert store.get("map-3") is None

            assert store.remove("map-1") is True
            assert store.remove("map-1") is False
            assert [r.id for r in store.records] == ["map-2"]
