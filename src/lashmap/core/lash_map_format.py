"""Stored lash map records and the client file that holds them."""

from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import AnnotationSnapshot

logger = logging.getLogger(__name__)


@dataclass
class LashMapRecord:
    """
    One saved lash map of a client.

    The drawing itself is kept as a JSON string in map_data, exactly as
    the client records store it:

    {
        "id": "map-...",
        "appointmentId": "appt-1700000000000",
        "date": "2026-10-19",
        "mapData": "{\"leftEye\": [...], ...}",
        "imageUrl": "...",
        "notes": "..."
    }
    """

    appointment_id: str
    date: str
    map_data: str = ""
    id: Optional[str] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None

    @staticmethod
    def generate_id() -> str:
        return f"map-{uuid.uuid4().hex}"

    @staticmethod
    def generate_appointment_id() -> str:
        return f"appt-{int(time.time() * 1000)}"

    @classmethod
    def from_snapshot(
        cls,
        snapshot: AnnotationSnapshot,
        appointment_id: Optional[str] = None,
        record_date: Optional[str] = None,
        notes: Optional[str] = None,
        record_id: Optional[str] = None
    ) -> LashMapRecord:
        """
        Build a record around a snapshot.

        Args:
            snapshot: Drawing to store
            appointment_id: Appointment the map belongs to, generated if absent
            record_date: ISO date, today if absent
            notes: Free-form notes
            record_id: Existing record id, generated if absent

        Returns:
            New LashMapRecord instance
        """
        return cls(
            id=record_id or cls.generate_id(),
            appointment_id=appointment_id or cls.generate_appointment_id(),
            date=record_date or date.today().isoformat(),
            map_data=snapshot.to_json(),
            image_url=snapshot.background_image_ref,
            notes=notes,
        )

    def snapshot(self) -> AnnotationSnapshot:
        """Decode the stored drawing; empty or malformed data yields an empty snapshot."""
        if not self.map_data:
            return AnnotationSnapshot()
        try:
            return AnnotationSnapshot.from_json(self.map_data)
        except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Error decoding map data of {self.id or self.appointment_id}: {e}")
            return AnnotationSnapshot()

    def update_snapshot(self, snapshot: AnnotationSnapshot) -> None:
        """Replace the stored drawing."""
        self.map_data = snapshot.to_json()
        if snapshot.background_image_ref is not None:
            self.image_url = snapshot.background_image_ref

    def matches(self, key: str) -> bool:
        """Records are addressed by id, or by appointment id for older ones."""
        if self.id:
            return self.id == key
        return self.appointment_id == key

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "appointmentId": self.appointment_id,
            "date": self.date,
            "mapData": self.map_data,
        }
        if self.id is not None:
            data["id"] = self.id
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LashMapRecord:
        return cls(
            id=data.get("id"),
            appointment_id=data.get("appointmentId") or cls.generate_appointment_id(),
            date=data.get("date", ""),
            map_data=data.get("mapData", ""),
            image_url=data.get("imageUrl"),
            notes=data.get("notes"),
        )


class LashMapStore:
    """
    Reads and writes the lash maps of one client file.

    The file is a JSON object with a "lashMaps" list; other keys in the
    file are preserved on save.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._records: Optional[List[LashMapRecord]] = None
        self._other: Dict[str, Any] = {}

    @property
    def records(self) -> List[LashMapRecord]:
        """Get the records, loading if necessary."""
        if self._records is None:
            self._records = self.load()
        return self._records

    def load(self) -> List[LashMapRecord]:
        """
        Load records from file.

        Returns:
            List of records, empty if the file is missing or unreadable
        """
        if not self.path.exists():
            logger.info(f"Lash map file not found at {self.path}, starting empty")
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f) or {}
            self._other = {k: v for k, v in data.items() if k != "lashMaps"}
            records = [LashMapRecord.from_dict(r) for r in data.get("lashMaps") or []]
            logger.info(f"Loaded {len(records)} lash maps from {self.path}")
            return records
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing lash map file: {e}")
            return []
        except Exception as e:
            logger.error(f"Error loading lash maps: {e}")
            return []

    def save(self) -> bool:
        """
        Write all records to file.

        Returns:
            True if save was successful
        """
        data = dict(self._other)
        data["lashMaps"] = [r.to_dict() for r in self.records]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            logger.info(f"Saved {len(self.records)} lash maps to {self.path}")
            return True
        except Exception as e:
            logger.error(f"Error saving lash maps: {e}")
            return False

    def get(self, key: str) -> Optional[LashMapRecord]:
        """Find a record by id or appointment id."""
        for record in self.records:
            if record.matches(key):
                return record
        return None

    def add(self, record: LashMapRecord) -> None:
        if record.id is None:
            record.id = LashMapRecord.generate_id()
        self.records.append(record)

    def remove(self, key: str) -> bool:
        """
        Remove a record by id or appointment id.

        Returns:
            True if a record was removed
        """
        before = len(self.records)
        self._records = [r for r in self.records if not r.matches(key)]
        return len(self._records) < before
