"""
Stay service
Resolves stored stays into the inputs the settlement engine works on
"""
from typing import List, Optional
from datetime import date, datetime, time, timedelta
from sqlalchemy.orm import Session

from frontdesk.domain.charges import to_money
from frontdesk.domain.settlement import StayTerms
from frontdesk.models.ontology import StayRecord, StayRecordStatus


class StayService:
    """Stay record accessor"""

    def __init__(self, db: Session):
        self.db = db

    def get_stay(self, stay_record_id: int) -> Optional[StayRecord]:
        return self.db.query(StayRecord).filter(StayRecord.id == stay_record_id).first()

    def get_active_stays(self) -> List[StayRecord]:
        return self.db.query(StayRecord).filter(
            StayRecord.status == StayRecordStatus.ACTIVE
        ).order_by(StayRecord.expected_check_out).all()

    def get_active_stay_by_room(self, room_id: int) -> Optional[StayRecord]:
        return self.db.query(StayRecord).filter(
            StayRecord.room_id == room_id,
            StayRecord.status == StayRecordStatus.ACTIVE
        ).first()

    def get_expected_checkouts(self, day: Optional[date] = None) -> List[StayRecord]:
        """Active stays planned to leave on the given day (default today)"""
        start = datetime.combine(day or date.today(), time.min)
        end = start + timedelta(days=1)
        return self.db.query(StayRecord).filter(
            StayRecord.status == StayRecordStatus.ACTIVE,
            StayRecord.expected_check_out >= start,
            StayRecord.expected_check_out < end
        ).all()

    def get_overdue_stays(self, now: Optional[datetime] = None) -> List[StayRecord]:
        """Active stays past their planned checkout"""
        return self.db.query(StayRecord).filter(
            StayRecord.status == StayRecordStatus.ACTIVE,
            StayRecord.expected_check_out < (now or datetime.now())
        ).all()

    def resolve_terms(self, stay: StayRecord) -> StayTerms:
        """Build the settlement inputs for a stay; the rate comes from its room"""
        room = stay.room or stay.last_room
        if room is None:
            raise ValueError("Stay is not linked to a room")

        return StayTerms(
            check_in=stay.check_in_time,
            planned_check_out=stay.expected_check_out,
            room_rate=to_money(room.rate),
            deposit_amount=to_money(stay.deposit_amount),
            number_of_persons=stay.number_of_persons or 1,
            has_gas=bool(stay.has_gas),
            initial_gas_weight=(
                to_money(stay.initial_gas_weight) if stay.initial_gas_weight is not None else None
            ),
        )

    def get_stay_detail(self, stay: StayRecord) -> dict:
        room = stay.room or stay.last_room
        return {
            'id': stay.id,
            'guest_id': stay.guest_id,
            'guest_name': stay.guest.name,
            'guest_phone': stay.guest.phone,
            'room_id': stay.room_id,
            'room_number': room.room_number,
            'room_rate': room.rate,
            'check_in_time': stay.check_in_time,
            'expected_check_out': stay.expected_check_out,
            'check_out_time': stay.check_out_time,
            'deposit_amount': stay.deposit_amount or 0,
            'number_of_persons': stay.number_of_persons,
            'has_gas': bool(stay.has_gas),
            'initial_gas_weight': stay.initial_gas_weight,
            'final_gas_weight': stay.final_gas_weight,
            'status': stay.status,
        }
