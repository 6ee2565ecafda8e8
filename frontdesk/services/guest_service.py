"""
Guest service
Guest directory: list, search, detail and contact updates
Guests are identified by phone at check-in, so phone numbers stay unique
"""
from typing import List, Optional
import logging
from sqlalchemy import or_, desc
from sqlalchemy.orm import Session
from frontdesk.models.ontology import Guest, StayRecord, StayRecordStatus
from frontdesk.models.schemas import GuestUpdate

logger = logging.getLogger(__name__)


class GuestService:
    """Guest service"""

    def __init__(self, db: Session):
        self.db = db

    def get_guests(self, search: Optional[str] = None, limit: int = 100) -> List[Guest]:
        """Guests, newest first, optionally filtered by name, phone or ID number"""
        query = self.db.query(Guest)

        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Guest.name.ilike(pattern),
                    Guest.phone.like(pattern),
                    Guest.id_number.like(pattern)
                )
            )

        return query.order_by(desc(Guest.created_at), desc(Guest.id)).limit(limit).all()

    def get_guest(self, guest_id: int) -> Optional[Guest]:
        return self.db.query(Guest).filter(Guest.id == guest_id).first()

    def get_guest_by_phone(self, phone: str) -> Optional[Guest]:
        return self.db.query(Guest).filter(Guest.phone == phone).first()

    def update_guest(self, guest_id: int, data: GuestUpdate) -> Guest:
        guest = self.get_guest(guest_id)
        if not guest:
            raise ValueError("Guest not found")

        update_data = data.model_dump(exclude_unset=True)
        for key in ('name', 'phone'):
            if key in update_data and update_data[key] is None:
                raise ValueError(f"Guest {key} cannot be empty")

        phone = update_data.get('phone')
        if phone and phone != guest.phone:
            other = self.get_guest_by_phone(phone)
            if other and other.id != guest.id:
                raise ValueError(f"Phone number {phone} already belongs to another guest")

        for key, value in update_data.items():
            setattr(guest, key, value)

        self.db.commit()
        self.db.refresh(guest)
        logger.info(f"Guest {guest.id} updated: {', '.join(sorted(update_data))}")
        return guest

    def get_guest_stay_history(self, guest_id: int, limit: int = 10) -> List[dict]:
        """Stays newest first; the room is the last one occupied"""
        stays = self.db.query(StayRecord).filter(
            StayRecord.guest_id == guest_id
        ).order_by(desc(StayRecord.check_in_time)).limit(limit).all()

        return [
            {
                "id": s.id,
                "room_number": s.last_room.room_number,
                "check_in_time": s.check_in_time,
                "expected_check_out": s.expected_check_out,
                "check_out_time": s.check_out_time,
                "status": s.status
            }
            for s in stays
        ]

    def get_guest_detail(self, guest: Guest) -> dict:
        stays = self.db.query(StayRecord).filter(StayRecord.guest_id == guest.id)
        current = stays.filter(StayRecord.status == StayRecordStatus.ACTIVE).first()
        last = stays.filter(
            StayRecord.status == StayRecordStatus.CHECKED_OUT
        ).order_by(desc(StayRecord.check_out_time)).first()

        return {
            'id': guest.id,
            'name': guest.name,
            'phone': guest.phone,
            'email': guest.email,
            'address': guest.address,
            'id_number': guest.id_number,
            'created_at': guest.created_at,
            'total_stays': stays.count(),
            'current_stay_id': current.id if current else None,
            'current_room_number': current.last_room.room_number if current else None,
            'last_check_out': last.check_out_time if last else None,
        }
