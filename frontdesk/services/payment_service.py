"""
Payment service
Deposits, rent, refunds and other money movements for stays
"""
from typing import Callable, List, Optional
from datetime import date, datetime, time, timedelta
from decimal import Decimal
import logging
from sqlalchemy.orm import Session

from frontdesk.domain.charges import ZERO
from frontdesk.models.ontology import Payment, PaymentMethod, PaymentStatus, PaymentType
from frontdesk.models.schemas import PaymentCreate
from frontdesk.models.events import EventType, PaymentReceivedData
from frontdesk.services.event_bus import event_bus, Event

logger = logging.getLogger(__name__)


def format_payment_notes(payment_type: PaymentType, notes: Optional[str]) -> str:
    """Prefix notes with the payment type unless they already mention it"""
    label = payment_type.value
    notes = (notes or "").strip()
    if label in notes.lower():
        return notes
    return f"{label}: {notes}".strip()


class PaymentService:
    """Payment service"""

    def __init__(self, db: Session, event_publisher: Callable[[Event], None] = None):
        self.db = db
        self._publish_event = event_publisher or event_bus.publish

    def record_payment(self, amount: Decimal, method: PaymentMethod, payment_type: PaymentType,
                       collected_by: str, stay_record_id: Optional[int] = None,
                       guest_id: Optional[int] = None, room_id: Optional[int] = None,
                       bank_ref_no: Optional[str] = None,
                       gas_usage_charge: Decimal = ZERO,
                       extra_persons_charge: Decimal = ZERO,
                       notes: Optional[str] = None,
                       payment_time: Optional[datetime] = None) -> Payment:
        """
        Add a payment to the current transaction without committing

        Callers that change other records in the same unit of work commit once
        for all of them.
        """
        if amount is None or amount <= 0:
            raise ValueError("Payment amount must be greater than zero")
        if method == PaymentMethod.BANK_TRANSFER and not (bank_ref_no or "").strip():
            raise ValueError("Please enter bank reference number")

        payment = Payment(
            stay_record_id=stay_record_id,
            guest_id=guest_id,
            room_id=room_id,
            amount=amount,
            method=method,
            status=PaymentStatus.COMPLETED,
            payment_type=payment_type,
            is_refund=payment_type == PaymentType.REFUND,
            collected_by=collected_by,
            bank_ref_no=bank_ref_no,
            gas_usage_charge=gas_usage_charge,
            extra_persons_charge=extra_persons_charge,
            notes=format_payment_notes(payment_type, notes),
            payment_time=payment_time or datetime.now(),
        )
        self.db.add(payment)
        self.db.flush()
        return payment

    def add_payment(self, data: PaymentCreate) -> Payment:
        """Record a standalone payment"""
        if not data.collected_by.strip():
            raise ValueError("Please enter who collected the payment")
        if data.method == PaymentMethod.BANK_TRANSFER and not (data.bank_ref_no or "").strip():
            raise ValueError("Please enter bank reference number")

        payment = Payment(
            stay_record_id=data.stay_record_id,
            guest_id=data.guest_id,
            room_id=data.room_id,
            amount=data.amount,
            method=data.method,
            status=data.status,
            payment_type=data.payment_type,
            is_refund=data.is_refund or data.payment_type == PaymentType.REFUND,
            collected_by=data.collected_by,
            bank_ref_no=data.bank_ref_no,
            gas_usage_charge=data.gas_usage_charge,
            extra_persons_charge=data.extra_persons_charge,
            notes=format_payment_notes(data.payment_type, data.notes),
        )
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        logger.info(
            f"Payment {payment.id} recorded: {payment.payment_type.value} "
            f"{payment.amount} by {payment.collected_by}"
        )

        self.publish_received(payment)
        return payment

    def publish_received(self, payment: Payment) -> None:
        self._publish_event(Event(
            event_type=EventType.PAYMENT_RECEIVED,
            timestamp=datetime.now(),
            data=PaymentReceivedData(
                payment_id=payment.id,
                stay_record_id=payment.stay_record_id,
                amount=float(payment.amount),
                method=payment.method.value,
                payment_type=payment.payment_type.value,
                is_refund=bool(payment.is_refund),
                collected_by=payment.collected_by,
            ).to_dict(),
            source="payment_service"
        ))

    def get_payments(self, stay_record_id: Optional[int] = None,
                     start: Optional[datetime] = None,
                     end: Optional[datetime] = None) -> List[Payment]:
        """Payments filtered by stay and/or a [start, end) time range"""
        query = self.db.query(Payment)
        if stay_record_id is not None:
            query = query.filter(Payment.stay_record_id == stay_record_id)
        if start is not None:
            query = query.filter(Payment.payment_time >= start)
        if end is not None:
            query = query.filter(Payment.payment_time < end)
        return query.order_by(Payment.payment_time.desc()).all()

    def get_payments_by_date(self, day: date) -> List[Payment]:
        start = datetime.combine(day, time.min)
        return self.get_payments(start=start, end=start + timedelta(days=1))

    @staticmethod
    def totals(payments: List[Payment]) -> tuple:
        """(money in, money out) for a list of payments"""
        total_in = sum((p.amount for p in payments if not p.is_refund), ZERO)
        total_out = sum((p.amount for p in payments if p.is_refund), ZERO)
        return total_in, total_out
