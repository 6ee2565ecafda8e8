"""
Tests for frontdesk/services/room_service.py
Covers: CRUD, manual maintenance transitions, cleaning completion
"""
import pytest
from decimal import Decimal

from conftest import make_room, make_stay
from frontdesk.models.events import EventType
from frontdesk.models.ontology import CleaningRecord, CleaningStatus, RoomCategory, RoomStatus
from frontdesk.models.schemas import RoomCreate, RoomUpdate
from frontdesk.services.room_service import RoomService


class TestRoomCrud:

    def test_create_and_filter(self, db_session, published):
        service = RoomService(db_session, event_publisher=published.append)
        service.create_room(RoomCreate(room_number="301", rate=Decimal("120"), room_type=RoomCategory.SUITE))
        service.create_room(RoomCreate(room_number="302", rate=Decimal("60")))
        assert [r.room_number for r in service.get_rooms(room_type=RoomCategory.SUITE)] == ["301"]
        assert len(service.get_rooms(status=RoomStatus.VACANT)) == 2

    def test_duplicate_number_rejected(self, db_session, room):
        with pytest.raises(ValueError, match="already exists"):
            RoomService(db_session).create_room(RoomCreate(room_number="101", rate=Decimal("80")))

    def test_update_rate(self, db_session, room):
        updated = RoomService(db_session).update_room(room.id, RoomUpdate(rate=Decimal("95")))
        assert updated.rate == Decimal("95")
        assert updated.room_type == RoomCategory.SINGLE

    def test_delete_vacant_room(self, db_session, room):
        assert RoomService(db_session).delete_room(room.id) is True
        assert RoomService(db_session).get_room(room.id) is None

    def test_delete_occupied_room_refused(self, db_session, stay, room):
        with pytest.raises(ValueError, match="occupied"):
            RoomService(db_session).delete_room(room.id)

    def test_current_guest_shown_for_occupied_room(self, db_session, stay, room):
        detail = RoomService(db_session).get_room_with_guest(room)
        assert detail['current_guest'] == "Alice Moyo"


class TestManualStatus:

    def test_vacant_to_maintenance_and_back(self, db_session, room, published):
        service = RoomService(db_session, event_publisher=published.append)
        service.update_room_status(room.id, RoomStatus.MAINTENANCE, "Manager", "broken geyser")
        assert room.status == RoomStatus.MAINTENANCE
        service.update_room_status(room.id, RoomStatus.VACANT)
        assert room.status == RoomStatus.VACANT
        assert [e.data['new_status'] for e in published] == ["maintenance", "vacant"]

    def test_same_status_is_noop(self, db_session, room, published):
        RoomService(db_session, event_publisher=published.append).update_room_status(room.id, RoomStatus.VACANT)
        assert published == []

    def test_occupied_room_cannot_change(self, db_session, stay, room):
        with pytest.raises(ValueError, match="Occupied rooms"):
            RoomService(db_session).update_room_status(room.id, RoomStatus.MAINTENANCE)

    def test_cleaning_room_needs_cleaning_completion(self, db_session):
        room = make_room(db_session, number="105", status=RoomStatus.CLEANING)
        with pytest.raises(ValueError, match="cleaned"):
            RoomService(db_session).update_room_status(room.id, RoomStatus.VACANT)

    def test_cannot_occupy_by_hand(self, db_session, room):
        with pytest.raises(ValueError, match="Cannot change room status"):
            RoomService(db_session).update_room_status(room.id, RoomStatus.OCCUPIED)


class TestCompleteCleaning:

    def test_completes_pending_record(self, db_session, published):
        room = make_room(db_session, number="110", status=RoomStatus.CLEANING)
        pending = CleaningRecord(room_id=room.id, status=CleaningStatus.PENDING)
        db_session.add(pending)
        db_session.commit()

        record = RoomService(db_session, event_publisher=published.append).complete_cleaning(
            room.id, " Rudo ", "Towels replaced"
        )
        assert record.id == pending.id
        assert record.status == CleaningStatus.COMPLETED
        assert record.cleaned_by == "Rudo"
        assert room.status == RoomStatus.VACANT
        assert room.cleaned_by == "Rudo"
        assert room.last_cleaned is not None
        assert EventType.CLEANING_COMPLETED in [e.event_type for e in published]

    def test_creates_record_when_none_pending(self, db_session):
        room = make_room(db_session, number="111", status=RoomStatus.CLEANING)
        record = RoomService(db_session).complete_cleaning(room.id, "Rudo")
        assert record.room_id == room.id
        assert db_session.query(CleaningRecord).count() == 1

    def test_cleaner_name_required(self, db_session):
        room = make_room(db_session, number="112", status=RoomStatus.CLEANING)
        with pytest.raises(ValueError, match="who cleaned"):
            RoomService(db_session).complete_cleaning(room.id, "   ")
        assert room.status == RoomStatus.CLEANING

    def test_room_must_be_waiting_for_cleaning(self, db_session, room):
        with pytest.raises(ValueError, match="not waiting for cleaning"):
            RoomService(db_session).complete_cleaning(room.id, "Rudo")
