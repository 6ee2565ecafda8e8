"""
Pydantic schemas
Request/response validation for the API
"""
from datetime import datetime, date
from decimal import Decimal
from typing import Annotated, Optional, List
from pydantic import AfterValidator, BaseModel, Field, ConfigDict
from frontdesk.domain.charges import to_local_naive
from frontdesk.domain.settlement import SettlementKind
from frontdesk.models.ontology import (
    RoomStatus, RoomCategory, StayRecordStatus,
    PaymentMethod, PaymentStatus, PaymentType, CleaningStatus
)

# Stays are stored as naive local time; offset-bearing input is converted on the way in
LocalDateTime = Annotated[datetime, AfterValidator(to_local_naive)]


# ============== Room Schemas ==============

class RoomCreate(BaseModel):
    room_number: str = Field(..., max_length=10)
    room_type: RoomCategory = RoomCategory.SINGLE
    rate: Decimal = Field(..., gt=0)
    has_gas: bool = False


class RoomUpdate(BaseModel):
    room_type: Optional[RoomCategory] = None
    rate: Optional[Decimal] = Field(None, gt=0)
    has_gas: Optional[bool] = None


class RoomResponse(BaseModel):
    id: int
    room_number: str
    room_type: RoomCategory
    rate: Decimal
    status: RoomStatus
    has_gas: bool
    last_cleaned: Optional[datetime] = None
    cleaned_by: Optional[str] = None
    current_guest: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class RoomStatusUpdate(BaseModel):
    status: RoomStatus
    changed_by: Optional[str] = None
    reason: str = ""


class CleaningComplete(BaseModel):
    cleaned_by: str
    notes: Optional[str] = None


class CleaningRecordResponse(BaseModel):
    id: int
    room_id: int
    status: CleaningStatus
    cleaned_by: Optional[str] = None
    cleaned_at: Optional[datetime] = None
    notes: Optional[str] = None
    verified: bool
    model_config = ConfigDict(from_attributes=True)


# ============== Guest Schemas ==============

class GuestUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, min_length=1, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    id_number: Optional[str] = Field(None, max_length=50)


class GuestResponse(BaseModel):
    id: int
    name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    id_number: Optional[str] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class GuestDetailResponse(GuestResponse):
    total_stays: int = 0
    current_stay_id: Optional[int] = None
    current_room_number: Optional[str] = None
    last_check_out: Optional[datetime] = None


class GuestStayHistoryItem(BaseModel):
    id: int
    room_number: str
    check_in_time: datetime
    expected_check_out: datetime
    check_out_time: Optional[datetime] = None
    status: StayRecordStatus


# ============== Check-in Schemas ==============

class CheckInRequest(BaseModel):
    guest_name: str = Field(..., min_length=1, max_length=100)
    guest_phone: str = Field(..., min_length=1, max_length=20)
    guest_email: Optional[str] = Field(None, max_length=100)
    guest_address: Optional[str] = None
    guest_id_number: Optional[str] = Field(None, max_length=50)
    room_id: int
    check_in_time: Optional[LocalDateTime] = None     # defaults to now
    expected_check_out: LocalDateTime
    deposit_amount: Decimal = Field(default=0, ge=0)
    deposit_method: PaymentMethod = PaymentMethod.CASH
    deposit_collected_by: Optional[str] = None
    deposit_bank_ref: Optional[str] = None
    number_of_persons: int = Field(default=1, ge=1)
    has_gas: bool = False
    initial_gas_weight: Optional[Decimal] = Field(None, ge=0)


class ChargeEstimateRequest(BaseModel):
    room_id: int
    check_in_time: Optional[LocalDateTime] = None
    expected_check_out: LocalDateTime
    number_of_persons: int = Field(default=1, ge=1)


class ChargeEstimateResponse(BaseModel):
    room_id: int
    nights: int
    room_rate: Decimal
    room_charge: Decimal
    extra_person_charge: Decimal
    extra_person_policy: str
    total: Decimal


class StayRecordResponse(BaseModel):
    id: int
    guest_id: int
    guest_name: str
    guest_phone: str
    room_id: Optional[int] = None
    room_number: str
    room_rate: Decimal
    check_in_time: datetime
    expected_check_out: datetime
    check_out_time: Optional[datetime] = None
    deposit_amount: Decimal
    number_of_persons: int
    has_gas: bool
    initial_gas_weight: Optional[Decimal] = None
    final_gas_weight: Optional[Decimal] = None
    status: StayRecordStatus


# ============== Checkout Schemas ==============

class CheckOutRequest(BaseModel):
    """
    Checkout form; the same body drives quote and persist
    actual_check_out defaults to now
    """
    actual_check_out: Optional[LocalDateTime] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    collected_by: str = ""
    bank_ref_no: Optional[str] = None
    final_gas_weight: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class EarlyCheckoutRefundResponse(BaseModel):
    actual_days_stayed: int
    original_days: int
    days_not_staying: int
    room_refund: Decimal
    original_extra_person_charge: Decimal
    prorated_extra_person_charge: Decimal
    extra_person_refund: Decimal
    gas_charge: Decimal
    total_refund: Decimal
    model_config = ConfigDict(from_attributes=True)


class SettlementResponse(BaseModel):
    kind: SettlementKind
    actual_check_out: datetime
    room_charge: Decimal
    extra_person_charge: Decimal
    gas_charge: Decimal
    total_charges: Decimal
    deposit_amount: Decimal
    amount_due: Decimal
    refund_amount: Decimal
    early_refund: Optional[EarlyCheckoutRefundResponse] = None
    model_config = ConfigDict(from_attributes=True)


class CheckOutResponse(BaseModel):
    message: str
    stay_record_id: int
    payment_id: Optional[int] = None
    settlement: SettlementResponse


# ============== Settings Schemas ==============

class ChargeSettingsUpdate(BaseModel):
    price_per_kg: Decimal = Field(..., ge=0)
    extra_person_charge: Decimal = Field(..., ge=0)
    updated_by: Optional[str] = None


class ChargeSettingsResponse(BaseModel):
    price_per_kg: Decimal
    extra_person_charge: Decimal
    is_default: bool = False


# ============== Payment Schemas ==============

class PaymentCreate(BaseModel):
    stay_record_id: Optional[int] = None
    guest_id: Optional[int] = None
    room_id: Optional[int] = None
    amount: Decimal = Field(..., gt=0)
    method: PaymentMethod
    payment_type: PaymentType = PaymentType.RENT
    status: PaymentStatus = PaymentStatus.COMPLETED
    is_refund: bool = False
    collected_by: str = Field(..., min_length=1)
    bank_ref_no: Optional[str] = None
    gas_usage_charge: Decimal = Field(default=0, ge=0)
    extra_persons_charge: Decimal = Field(default=0, ge=0)
    notes: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    stay_record_id: Optional[int] = None
    guest_id: Optional[int] = None
    room_id: Optional[int] = None
    amount: Decimal
    method: PaymentMethod
    status: PaymentStatus
    payment_type: PaymentType
    is_refund: bool
    collected_by: str
    bank_ref_no: Optional[str] = None
    gas_usage_charge: Decimal
    extra_persons_charge: Decimal
    notes: Optional[str] = None
    payment_time: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== Todo Schemas ==============

class TodoCreate(BaseModel):
    task: str = Field(..., min_length=1, max_length=500)


class TodoComplete(BaseModel):
    completed_by: str = Field(..., min_length=1, max_length=100)


class TodoResponse(BaseModel):
    id: int
    task: str
    is_completed: bool
    created_at: datetime
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


# ============== Report Schemas ==============

class DailyReportResponse(BaseModel):
    id: int
    report_date: date
    total_rooms: int
    occupied_rooms: int
    vacant_rooms: int
    rooms_need_cleaning: int
    expected_check_ins: int
    expected_check_outs: int
    cash_in: Decimal
    cash_out: Decimal
    total_revenue: Decimal
    model_config = ConfigDict(from_attributes=True)


class DailyReportRequest(BaseModel):
    report_date: Optional[date] = None


class PaymentListResponse(BaseModel):
    items: List[PaymentResponse]
    total_in: Decimal
    total_out: Decimal
