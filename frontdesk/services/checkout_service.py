"""
Checkout service
Two-phase checkout: quote recomputes the settlement from stored data, check_out
and early_check_out recompute it again and persist everything in one transaction.
A checkout event is published afterwards and opens the cleaning task.
"""
from typing import Callable, List, Optional, Tuple
from datetime import datetime, date
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.domain.charges import ChargeSettings, as_datetime
from frontdesk.domain.errors import CheckoutValidationError
from frontdesk.domain.settlement import (
    Settlement, StayTerms, gas_charge_for, settle_checkout,
    settle_early_prorated, validate_checkout_inputs,
)
from frontdesk.models.ontology import (
    Payment, PaymentType, RoomStatus, StayRecord, StayRecordStatus
)
from frontdesk.models.schemas import CheckOutRequest
from frontdesk.models.events import EventType, GuestCheckedOutData, RoomStatusChangedData
from frontdesk.services.event_bus import event_bus, Event
from frontdesk.services.payment_service import PaymentService
from frontdesk.services.settings_service import SettingsService
from frontdesk.services.stay_service import StayService

logger = logging.getLogger(__name__)


class CheckOutService:
    """Checkout service"""

    def __init__(self, db: Session, event_publisher: Callable[[Event], None] = None,
                 clock: Callable[[], datetime] = None):
        self.db = db
        # injectable publisher and clock for tests
        self._publish_event = event_publisher or event_bus.publish
        self._clock = clock or datetime.now
        self.stay_service = StayService(db)
        self.settings_service = SettingsService(db, event_publisher=self._publish_event)
        self.payment_service = PaymentService(db, event_publisher=self._publish_event)

    # ============== Lookups ==============

    def _load_active_stay(self, stay_record_id: int) -> StayRecord:
        stay = self.stay_service.get_stay(stay_record_id)
        if not stay:
            raise ValueError("Stay record not found")
        if stay.status != StayRecordStatus.ACTIVE:
            raise ValueError("Stay already checked out")
        return stay

    def _prepare(self, stay_record_id: int, data: CheckOutRequest,
                 validate: bool) -> Tuple[StayRecord, StayTerms, Optional[ChargeSettings], datetime]:
        stay = self._load_active_stay(stay_record_id)
        terms = self.stay_service.resolve_terms(stay)
        actual = as_datetime(data.actual_check_out or self._clock())

        if actual < as_datetime(terms.check_in):
            raise CheckoutValidationError("Check-out time cannot be before check-in")

        if validate:
            validate_checkout_inputs(
                terms, data.collected_by, data.payment_method.value,
                data.bank_ref_no, data.final_gas_weight
            )

        # read per computation; settings may change between quote and persist
        settings = self.settings_service.get_charge_settings()
        return stay, terms, settings, actual

    @staticmethod
    def _ensure_early(terms: StayTerms, actual: datetime) -> None:
        if actual >= as_datetime(terms.planned_check_out):
            raise CheckoutValidationError(
                "Check-out is not before the planned date, use standard checkout"
            )

    # ============== Compute ==============

    def quote_checkout(self, stay_record_id: int, data: CheckOutRequest) -> Settlement:
        """
        Settlement for the standard checkout form

        Deposit-offset formula when the checkout is early, standard otherwise.
        Nothing is written.
        """
        stay, terms, settings, actual = self._prepare(stay_record_id, data, validate=False)
        gas = gas_charge_for(terms, settings, data.final_gas_weight)
        return settle_checkout(terms, settings, actual, gas)

    def quote_early_checkout(self, stay_record_id: int, data: CheckOutRequest) -> Settlement:
        """Day-proration refund for the early-checkout dialog. Nothing is written."""
        stay, terms, settings, actual = self._prepare(stay_record_id, data, validate=False)
        self._ensure_early(terms, actual)
        gas = gas_charge_for(terms, settings, data.final_gas_weight)
        return settle_early_prorated(terms, settings, actual, gas)

    # ============== Persist ==============

    def check_out(self, stay_record_id: int, data: CheckOutRequest) -> dict:
        """
        Standard checkout
        Business rules:
        1. validate collector, bank reference and final gas weight
        2. recompute the settlement from stored data
        3. record the rent payment or deposit refund
        4. room goes to cleaning, the stay is closed
        """
        stay, terms, settings, actual = self._prepare(stay_record_id, data, validate=True)
        gas = gas_charge_for(terms, settings, data.final_gas_weight)
        settlement = settle_checkout(terms, settings, actual, gas)
        return self._persist(stay, data, settlement, "Checkout")

    def early_check_out(self, stay_record_id: int, data: CheckOutRequest) -> dict:
        """Early checkout with a day-proration refund"""
        stay, terms, settings, actual = self._prepare(stay_record_id, data, validate=True)
        self._ensure_early(terms, actual)
        gas = gas_charge_for(terms, settings, data.final_gas_weight)
        settlement = settle_early_prorated(terms, settings, actual, gas)
        return self._persist(stay, data, settlement, "Early checkout")

    def _persist(self, stay: StayRecord, data: CheckOutRequest,
                 settlement: Settlement, label: str) -> dict:
        room = stay.room
        if room is None:
            raise ValueError("Stay is not linked to a room")

        collected_by = data.collected_by.strip()
        payment: Optional[Payment] = None

        try:
            if settlement.amount_due > 0:
                payment = self.payment_service.record_payment(
                    amount=settlement.amount_due,
                    method=data.payment_method,
                    payment_type=PaymentType.RENT,
                    collected_by=collected_by,
                    stay_record_id=stay.id,
                    guest_id=stay.guest_id,
                    room_id=room.id,
                    bank_ref_no=data.bank_ref_no,
                    gas_usage_charge=settlement.gas_charge,
                    extra_persons_charge=settlement.extra_person_charge,
                    notes=data.notes or f"{label} payment for room {room.room_number}",
                    payment_time=settlement.actual_check_out,
                )
            elif settlement.refund_amount > 0:
                payment = self.payment_service.record_payment(
                    amount=settlement.refund_amount,
                    method=data.payment_method,
                    payment_type=PaymentType.REFUND,
                    collected_by=collected_by,
                    stay_record_id=stay.id,
                    guest_id=stay.guest_id,
                    room_id=room.id,
                    bank_ref_no=data.bank_ref_no,
                    gas_usage_charge=settlement.gas_charge,
                    extra_persons_charge=settlement.extra_person_charge,
                    notes=data.notes or f"{label} refund for room {room.room_number}",
                    payment_time=settlement.actual_check_out,
                )

            old_status = room.status
            room.status = RoomStatus.CLEANING
            room.last_cleaned = None
            room.cleaned_by = None

            stay.check_out_time = settlement.actual_check_out
            stay.final_gas_weight = data.final_gas_weight
            stay.room = None
            stay.status = StayRecordStatus.CHECKED_OUT

            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(f"{label} of stay {stay.id} failed, nothing was saved", exc_info=True)
            raise

        self.db.refresh(stay)
        logger.info(
            f"{label}: stay {stay.id} room {room.room_number} kind={settlement.kind.value} "
            f"total={settlement.total_charges} due={settlement.amount_due} "
            f"refund={settlement.refund_amount}"
        )

        self._publish_event(Event(
            event_type=EventType.GUEST_CHECKED_OUT,
            timestamp=datetime.now(),
            data=GuestCheckedOutData(
                stay_record_id=stay.id,
                guest_id=stay.guest_id,
                guest_name=stay.guest.name,
                room_id=room.id,
                room_number=room.room_number,
                check_out_time=settlement.actual_check_out,
                settlement_kind=settlement.kind.value,
                total_charges=float(settlement.total_charges),
                amount_due=float(settlement.amount_due),
                refund_amount=float(settlement.refund_amount),
                collected_by=collected_by,
                payment_id=payment.id if payment else None,
            ).to_dict(),
            source="checkout_service"
        ))
        self._publish_event(Event(
            event_type=EventType.ROOM_STATUS_CHANGED,
            timestamp=datetime.now(),
            data=RoomStatusChangedData(
                room_id=room.id,
                room_number=room.room_number,
                old_status=old_status.value,
                new_status=RoomStatus.CLEANING.value,
                changed_by=collected_by,
                reason=label.lower()
            ).to_dict(),
            source="checkout_service"
        ))
        if payment is not None:
            self.payment_service.publish_received(payment)

        return {
            'message': f"{label} completed for room {room.room_number}",
            'stay_record_id': stay.id,
            'payment_id': payment.id if payment else None,
            'settlement': settlement,
        }

    # ============== Queries ==============

    def get_today_expected_checkouts(self, day: Optional[date] = None) -> List[StayRecord]:
        return self.stay_service.get_expected_checkouts(day or self._clock().date())

    def get_overdue_stays(self) -> List[StayRecord]:
        return self.stay_service.get_overdue_stays(self._clock())
