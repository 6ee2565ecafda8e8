"""
Check-in service
Creates the StayRecord aggregate, records the deposit and occupies the room
"""
from typing import Callable
from datetime import datetime
import logging
from sqlalchemy.orm import Session

from frontdesk.config import settings as app_settings
from frontdesk.domain.charges import (
    ExtraPersonPolicy, billable_days, calculate_extra_person_charge,
    calculate_room_charge, to_money,
)
from frontdesk.models.ontology import (
    Guest, Room, RoomStatus, StayRecord, StayRecordStatus, PaymentMethod, PaymentType
)
from frontdesk.models.schemas import CheckInRequest, ChargeEstimateRequest
from frontdesk.models.events import EventType, GuestCheckedInData, RoomStatusChangedData
from frontdesk.services.event_bus import event_bus, Event
from frontdesk.services.guest_service import GuestService
from frontdesk.services.payment_service import PaymentService
from frontdesk.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


def intake_policy() -> ExtraPersonPolicy:
    return ExtraPersonPolicy(app_settings.INTAKE_EXTRA_PERSON_POLICY)


class CheckInService:
    """Check-in service"""

    def __init__(self, db: Session, event_publisher: Callable[[Event], None] = None):
        self.db = db
        self._publish_event = event_publisher or event_bus.publish
        self.payment_service = PaymentService(db, event_publisher=self._publish_event)
        self.settings_service = SettingsService(db, event_publisher=self._publish_event)
        self.guest_service = GuestService(db)

    def _get_or_create_guest(self, data: CheckInRequest) -> Guest:
        guest = self.guest_service.get_guest_by_phone(data.guest_phone)
        if guest:
            guest.name = data.guest_name
            if data.guest_email:
                guest.email = data.guest_email
            if data.guest_address:
                guest.address = data.guest_address
            if data.guest_id_number:
                guest.id_number = data.guest_id_number
            return guest

        guest = Guest(
            name=data.guest_name,
            phone=data.guest_phone,
            email=data.guest_email,
            address=data.guest_address,
            id_number=data.guest_id_number,
        )
        self.db.add(guest)
        self.db.flush()
        return guest

    def check_in(self, data: CheckInRequest) -> StayRecord:
        """
        Walk-in check-in
        Business rules:
        - the room must be vacant
        - planned checkout cannot be before check-in
        - gas tracking needs an initial cylinder weight
        - a deposit needs a collector, and a bank reference for bank transfers
        """
        room = self.db.query(Room).filter(Room.id == data.room_id).first()
        if not room:
            raise ValueError("Room not found")
        if room.status != RoomStatus.VACANT:
            raise ValueError(f"Room {room.room_number} is not available ({room.status.value})")

        check_in_time = data.check_in_time or datetime.now()
        if data.expected_check_out < check_in_time:
            raise ValueError("Expected check-out cannot be before check-in")

        has_gas = bool(data.has_gas)
        if has_gas and data.initial_gas_weight is None:
            raise ValueError("Please record the initial gas weight")

        deposit = to_money(data.deposit_amount)
        if deposit > 0:
            if not (data.deposit_collected_by or "").strip():
                raise ValueError("Please enter who collected the deposit")
            if data.deposit_method == PaymentMethod.BANK_TRANSFER and not (data.deposit_bank_ref or "").strip():
                raise ValueError("Please enter bank reference number")

        guest = self._get_or_create_guest(data)

        stay = StayRecord(
            guest_id=guest.id,
            room_id=room.id,
            last_room_id=room.id,
            check_in_time=check_in_time,
            expected_check_out=data.expected_check_out,
            deposit_amount=deposit,
            deposit_method=data.deposit_method if deposit > 0 else None,
            deposit_collected_by=data.deposit_collected_by,
            deposit_bank_ref=data.deposit_bank_ref,
            number_of_persons=data.number_of_persons,
            has_gas=has_gas,
            initial_gas_weight=data.initial_gas_weight if has_gas else None,
            status=StayRecordStatus.ACTIVE,
        )
        self.db.add(stay)
        self.db.flush()

        payment = None
        if deposit > 0:
            payment = self.payment_service.record_payment(
                amount=deposit,
                method=data.deposit_method,
                payment_type=PaymentType.DEPOSIT,
                collected_by=data.deposit_collected_by.strip(),
                stay_record_id=stay.id,
                guest_id=guest.id,
                room_id=room.id,
                bank_ref_no=data.deposit_bank_ref,
                notes=f"Deposit for room {room.room_number}",
                payment_time=check_in_time,
            )

        old_status = room.status
        room.status = RoomStatus.OCCUPIED

        self.db.commit()
        self.db.refresh(stay)
        logger.info(f"Guest {guest.name} checked in to room {room.room_number} (stay {stay.id})")

        self._publish_event(Event(
            event_type=EventType.GUEST_CHECKED_IN,
            timestamp=datetime.now(),
            data=GuestCheckedInData(
                stay_record_id=stay.id,
                guest_id=guest.id,
                guest_name=guest.name,
                room_id=room.id,
                room_number=room.room_number,
                expected_check_out=stay.expected_check_out.isoformat(),
                deposit_amount=float(deposit),
            ).to_dict(),
            source="checkin_service"
        ))
        self._publish_event(Event(
            event_type=EventType.ROOM_STATUS_CHANGED,
            timestamp=datetime.now(),
            data=RoomStatusChangedData(
                room_id=room.id,
                room_number=room.room_number,
                old_status=old_status.value,
                new_status=RoomStatus.OCCUPIED.value,
                changed_by=data.deposit_collected_by or "",
                reason="check-in"
            ).to_dict(),
            source="checkin_service"
        ))
        if payment is not None:
            self.payment_service.publish_received(payment)

        return stay

    def estimate_charges(self, data: ChargeEstimateRequest) -> dict:
        """Deposit estimate for a prospective stay"""
        room = self.db.query(Room).filter(Room.id == data.room_id).first()
        if not room:
            raise ValueError("Room not found")

        check_in_time = data.check_in_time or datetime.now()
        if data.expected_check_out < check_in_time:
            raise ValueError("Expected check-out cannot be before check-in")

        policy = intake_policy()
        nights = billable_days(check_in_time, data.expected_check_out)
        room_charge = calculate_room_charge(room.rate, check_in_time, data.expected_check_out)
        extra = calculate_extra_person_charge(
            data.number_of_persons,
            self.settings_service.get_charge_settings(),
            policy,
            nights,
        )
        return {
            'room_id': room.id,
            'nights': nights,
            'room_rate': to_money(room.rate),
            'room_charge': room_charge,
            'extra_person_charge': extra,
            'extra_person_policy': policy.value,
            'total': room_charge + extra,
        }
