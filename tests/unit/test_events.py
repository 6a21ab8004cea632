"""Mission event parsing and validation."""

from datetime import datetime, timedelta, timezone

import pytest

from sizemissions.missions.events import parse_mission_event
from sizemissions.missions.exceptions import EventValidationError


class TestParseMissionEvent:
    def test_minimal_payload_gets_defaults(self):
        event = parse_mission_event("ITEM_CREATED", "p1", {})
        assert event.type == "ITEM_CREATED"
        assert event.profile_id == "p1"
        assert event.payload.source == "other"
        assert event.payload.category == "other"
        assert event.payload.field_count == 0
        assert event.payload.critical_field_completed is False
        assert event.payload.created_at.tzinfo is not None

    def test_missing_payload_rejected(self):
        with pytest.raises(EventValidationError, match="Missing event payload"):
            parse_mission_event("ITEM_CREATED", "p1", None)

    def test_future_created_at_rejected(self):
        now = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)
        tomorrow = (now + timedelta(days=1)).isoformat()
        with pytest.raises(EventValidationError, match="future"):
            parse_mission_event("ITEM_CREATED", "p1", {"createdAt": tomorrow}, now=now)

    def test_small_clock_drift_accepted(self):
        now = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)
        drifted = (now + timedelta(minutes=2)).isoformat()
        event = parse_mission_event("ITEM_CREATED", "p1", {"createdAt": drifted}, now=now)
        assert event.payload.created_at == now + timedelta(minutes=2)

    def test_camel_case_payload(self):
        event = parse_mission_event("ITEM_CREATED", "p1", {
            "source": "wishlist",
            "category": "tops",
            "createdAt": "2026-03-04T10:00:00Z",
            "fieldCount": 4,
            "criticalFieldCompleted": True,
            "uniqueHash": "abc",
            "wishlistId": "w1",
            "matchedSize": "M",
        })
        payload = event.payload
        assert payload.source == "wishlist"
        assert payload.created_at == datetime(2026, 3, 4, 10, 0, tzinfo=timezone.utc)
        assert payload.field_count == 4
        assert payload.critical_field_completed is True
        assert payload.unique_hash == "abc"
        assert payload.matched_size == "M"

    def test_naive_created_at_is_utc(self):
        event = parse_mission_event("ITEM_CREATED", "p1", {"createdAt": "2026-03-04T10:00:00"})
        assert event.payload.created_at.tzinfo == timezone.utc

    def test_unknown_type_rejected(self):
        with pytest.raises(EventValidationError, match="Unsupported event type"):
            parse_mission_event("ITEM_DELETED", "p1", {})

    @pytest.mark.parametrize("payload", [
        {"source": "carrier_pigeon"},
        {"fieldCount": -1},
        {"createdAt": "yesterday"},
    ])
    def test_invalid_payload_rejected(self, payload):
        with pytest.raises(EventValidationError):
            parse_mission_event("ITEM_CREATED", "p1", payload)

    def test_non_object_payload_rejected(self):
        with pytest.raises(EventValidationError):
            parse_mission_event("ITEM_CREATED", "p1", ["not", "an", "object"])

    def test_log_payload_uses_wire_names(self):
        event = parse_mission_event("ITEM_CREATED", "p1", {"fieldCount": 3, "createdAt": "2026-03-04T10:00:00Z"})
        log = event.log_payload()
        assert log["fieldCount"] == 3
        assert "uniqueHash" not in log
