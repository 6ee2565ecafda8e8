"""
Room service
Room inventory, manual maintenance state and the cleaning workflow
Publishes events when a room changes status
"""
from typing import List, Optional, Callable
from datetime import datetime
import logging
from sqlalchemy import or_
from sqlalchemy.orm import Session
from frontdesk.models.ontology import (
    Room, RoomStatus, RoomCategory, StayRecord,
    CleaningRecord, CleaningStatus
)
from frontdesk.models.schemas import RoomCreate, RoomUpdate
from frontdesk.services.event_bus import event_bus, Event
from frontdesk.services.stay_service import StayService
from frontdesk.models.events import EventType, RoomStatusChangedData, CleaningCompletedData

logger = logging.getLogger(__name__)

# Status changes staff may make by hand; the rest follow check-in, checkout and cleaning
MANUAL_TRANSITIONS = {
    (RoomStatus.VACANT, RoomStatus.MAINTENANCE),
    (RoomStatus.MAINTENANCE, RoomStatus.VACANT),
}


class RoomService:
    """Room service"""

    def __init__(self, db: Session, event_publisher: Callable[[Event], None] = None):
        self.db = db
        # injectable publisher for tests
        self._publish_event = event_publisher or event_bus.publish

    def get_rooms(self, status: Optional[RoomStatus] = None,
                  room_type: Optional[RoomCategory] = None) -> List[Room]:
        query = self.db.query(Room)
        if status is not None:
            query = query.filter(Room.status == status)
        if room_type is not None:
            query = query.filter(Room.room_type == room_type)
        return query.order_by(Room.room_number).all()

    def get_room(self, room_id: int) -> Optional[Room]:
        return self.db.query(Room).filter(Room.id == room_id).first()

    def get_room_by_number(self, room_number: str) -> Optional[Room]:
        return self.db.query(Room).filter(Room.room_number == room_number).first()

    def create_room(self, data: RoomCreate) -> Room:
        if self.get_room_by_number(data.room_number):
            raise ValueError(f"Room number '{data.room_number}' already exists")

        room = Room(**data.model_dump())
        self.db.add(room)
        self.db.commit()
        self.db.refresh(room)
        return room

    def update_room(self, room_id: int, data: RoomUpdate) -> Room:
        room = self.get_room(room_id)
        if not room:
            raise ValueError("Room not found")

        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(room, key, value)

        self.db.commit()
        self.db.refresh(room)
        return room

    def delete_room(self, room_id: int) -> bool:
        """Delete a room that has never been stayed in"""
        room = self.get_room(room_id)
        if not room:
            raise ValueError("Room not found")

        if room.status == RoomStatus.OCCUPIED:
            raise ValueError("Cannot delete an occupied room")

        stay_count = self.db.query(StayRecord).filter(
            or_(StayRecord.room_id == room_id, StayRecord.last_room_id == room_id)
        ).count()
        if stay_count > 0:
            raise ValueError("Room has stay history and cannot be deleted")

        self.db.query(CleaningRecord).filter(CleaningRecord.room_id == room_id).delete()
        self.db.delete(room)
        self.db.commit()
        return True

    def get_current_guest_name(self, room: Room) -> Optional[str]:
        if room.status != RoomStatus.OCCUPIED:
            return None
        stay = StayService(self.db).get_active_stay_by_room(room.id)
        return stay.guest.name if stay else None

    def get_room_with_guest(self, room: Room) -> dict:
        return {
            'id': room.id,
            'room_number': room.room_number,
            'room_type': room.room_type,
            'rate': room.rate,
            'status': room.status,
            'has_gas': bool(room.has_gas),
            'last_cleaned': room.last_cleaned,
            'cleaned_by': room.cleaned_by,
            'current_guest': self.get_current_guest_name(room),
        }

    def update_room_status(self, room_id: int, status: RoomStatus,
                           changed_by: Optional[str] = None, reason: str = "") -> Room:
        """
        Manual status change

        Only vacant <-> maintenance is allowed by hand. Occupied rooms change
        through checkout, cleaning rooms through complete_cleaning.
        """
        room = self.get_room(room_id)
        if not room:
            raise ValueError("Room not found")

        old_status = room.status
        if old_status == status:
            return room

        if old_status == RoomStatus.OCCUPIED:
            raise ValueError("Occupied rooms cannot be changed manually, check the guest out first")
        if old_status == RoomStatus.CLEANING and status == RoomStatus.VACANT:
            raise ValueError("Mark the room as cleaned to make it vacant")
        if (old_status, status) not in MANUAL_TRANSITIONS:
            raise ValueError(
                f"Cannot change room status from {old_status.value} to {status.value}"
            )

        room.status = status
        self.db.commit()
        self.db.refresh(room)
        logger.info(f"Room {room.room_number} status {old_status.value} -> {status.value}")

        self._publish_status_changed(room, old_status, status, changed_by or "", reason)
        return room

    def complete_cleaning(self, room_id: int, cleaned_by: str,
                          notes: Optional[str] = None) -> CleaningRecord:
        """
        Mark a room as cleaned

        The room goes cleaning -> vacant and the pending cleaning record is
        completed (a record is created when none is pending).
        """
        if not cleaned_by or not cleaned_by.strip():
            raise ValueError("Please enter who cleaned the room")

        room = self.get_room(room_id)
        if not room:
            raise ValueError("Room not found")
        if room.status != RoomStatus.CLEANING:
            raise ValueError(f"Room {room.room_number} is not waiting for cleaning")

        now = datetime.now()
        cleaner = cleaned_by.strip()

        record = self.db.query(CleaningRecord).filter(
            CleaningRecord.room_id == room_id,
            CleaningRecord.status == CleaningStatus.PENDING
        ).order_by(CleaningRecord.created_at.desc()).first()
        if record is None:
            record = CleaningRecord(room_id=room_id)
            self.db.add(record)

        record.status = CleaningStatus.COMPLETED
        record.cleaned_by = cleaner
        record.cleaned_at = now
        if notes:
            record.notes = notes

        old_status = room.status
        room.status = RoomStatus.VACANT
        room.last_cleaned = now
        room.cleaned_by = cleaner

        self.db.commit()
        self.db.refresh(record)
        logger.info(f"Room {room.room_number} cleaned by {cleaner}")

        self._publish_status_changed(room, old_status, RoomStatus.VACANT, cleaner, "cleaning completed")
        self._publish_event(Event(
            event_type=EventType.CLEANING_COMPLETED,
            timestamp=now,
            data=CleaningCompletedData(
                room_id=room.id,
                room_number=room.room_number,
                cleaning_record_id=record.id,
                cleaned_by=cleaner,
            ).to_dict(),
            source="room_service"
        ))
        return record

    def get_cleaning_records(self, room_id: int) -> List[CleaningRecord]:
        return self.db.query(CleaningRecord).filter(
            CleaningRecord.room_id == room_id
        ).order_by(CleaningRecord.created_at.desc()).all()

    def get_room_status_summary(self) -> dict:
        """Room counts by status"""
        summary = {s.value: 0 for s in RoomStatus}
        rooms = self.get_rooms()
        for room in rooms:
            summary[room.status.value] += 1
        summary['total'] = len(rooms)
        return summary

    def _publish_status_changed(self, room: Room, old_status: RoomStatus, new_status: RoomStatus,
                                changed_by: str, reason: str) -> None:
        self._publish_event(Event(
            event_type=EventType.ROOM_STATUS_CHANGED,
            timestamp=datetime.now(),
            data=RoomStatusChangedData(
                room_id=room.id,
                room_number=room.room_number,
                old_status=old_status.value,
                new_status=new_status.value,
                changed_by=changed_by,
                reason=reason
            ).to_dict(),
            source="room_service"
        ))
