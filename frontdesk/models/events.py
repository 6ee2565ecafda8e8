"""
Domain events
Core front-desk business events published by the service layer
"""
from enum import Enum
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any


class EventType(str, Enum):
    """Event types"""
    # Rooms
    ROOM_STATUS_CHANGED = "room.status_changed"
    CLEANING_COMPLETED = "room.cleaning_completed"

    # Stays
    GUEST_CHECKED_IN = "guest.checked_in"
    GUEST_CHECKED_OUT = "guest.checked_out"

    # Money
    PAYMENT_RECEIVED = "payment.received"
    CHARGE_SETTINGS_UPDATED = "settings.charges_updated"


@dataclass
class BaseEventData:
    """Base class for event payloads"""
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        for key, value in result.items():
            if isinstance(value, datetime):
                result[key] = value.isoformat()
        return result


@dataclass
class RoomStatusChangedData(BaseEventData):
    room_id: int = 0
    room_number: str = ""
    old_status: str = ""
    new_status: str = ""
    changed_by: str = ""
    reason: str = ""


@dataclass
class CleaningCompletedData(BaseEventData):
    room_id: int = 0
    room_number: str = ""
    cleaning_record_id: int = 0
    cleaned_by: str = ""


@dataclass
class GuestCheckedInData(BaseEventData):
    stay_record_id: int = 0
    guest_id: int = 0
    guest_name: str = ""
    room_id: int = 0
    room_number: str = ""
    expected_check_out: str = ""
    deposit_amount: float = 0.0


@dataclass
class GuestCheckedOutData(BaseEventData):
    """Checkout payload; carries the settlement outcome"""
    stay_record_id: int = 0
    guest_id: int = 0
    guest_name: str = ""
    room_id: int = 0
    room_number: str = ""
    check_out_time: datetime = field(default_factory=datetime.now)
    settlement_kind: str = ""
    total_charges: float = 0.0
    amount_due: float = 0.0
    refund_amount: float = 0.0
    collected_by: str = ""
    payment_id: Optional[int] = None


@dataclass
class PaymentReceivedData(BaseEventData):
    payment_id: int = 0
    stay_record_id: Optional[int] = None
    amount: float = 0.0
    method: str = ""
    payment_type: str = ""
    is_refund: bool = False
    collected_by: str = ""


@dataclass
class ChargeSettingsUpdatedData(BaseEventData):
    price_per_kg: float = 0.0
    extra_person_charge: float = 0.0
    updated_by: str = ""
