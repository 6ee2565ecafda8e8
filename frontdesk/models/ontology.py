"""
Ontology objects
Every front-desk entity is modelled as an object with properties and links
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, DateTime, Date,
    ForeignKey, Text, Enum as SQLEnum, Boolean, Numeric
)
from sqlalchemy.orm import relationship
from frontdesk.database import Base


# ============== Enums ==============

class RoomStatus(str, Enum):
    """Room status"""
    VACANT = "vacant"              # ready to sell
    OCCUPIED = "occupied"          # guest in house
    CLEANING = "cleaning"          # checked out, awaiting cleaning
    MAINTENANCE = "maintenance"    # manually taken out of service


class RoomCategory(str, Enum):
    """Room type"""
    SINGLE = "single"
    DOUBLE = "double"
    SUITE = "suite"
    DELUXE = "deluxe"


class StayRecordStatus(str, Enum):
    """Stay status"""
    ACTIVE = "active"
    CHECKED_OUT = "checked_out"


class PaymentMethod(str, Enum):
    """Payment method"""
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    OTHER = "other"


class PaymentStatus(str, Enum):
    """Payment status"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentType(str, Enum):
    """What the payment is for"""
    DEPOSIT = "deposit"
    RENT = "rent"
    DAMAGE = "damage"
    SERVICE = "service"
    REFUND = "refund"


class CleaningStatus(str, Enum):
    """Cleaning record status"""
    PENDING = "pending"
    COMPLETED = "completed"


# ============== Objects ==============

class Room(Base):
    """
    Room object
    rate is the nightly room charge used by settlement
    """
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(10), unique=True, nullable=False)
    room_type = Column(SQLEnum(RoomCategory), default=RoomCategory.SINGLE, nullable=False)
    rate = Column(Numeric(10, 2), nullable=False)                 # per night
    status = Column(SQLEnum(RoomStatus), default=RoomStatus.VACANT, nullable=False)
    has_gas = Column(Boolean, default=False)                      # gas cylinder installed
    last_cleaned = Column(DateTime)
    cleaned_by = Column(String(100))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Links
    stay_records = relationship("StayRecord", back_populates="room", foreign_keys="StayRecord.room_id")
    cleaning_records = relationship("CleaningRecord", back_populates="room")


class Guest(Base):
    """Guest object"""
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    email = Column(String(100))
    address = Column(Text)
    id_number = Column(String(50))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Links
    stay_records = relationship("StayRecord", back_populates="guest")


class StayRecord(Base):
    """
    Stay object - aggregate root for one guest's occupancy of one room
    room_id is cleared at checkout; last_room_id keeps the history
    """
    __tablename__ = "stay_records"

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=True)
    last_room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    check_in_time = Column(DateTime, nullable=False)
    expected_check_out = Column(DateTime, nullable=False)     # planned checkout
    check_out_time = Column(DateTime)                          # actual checkout
    deposit_amount = Column(Numeric(10, 2), default=0)
    deposit_method = Column(SQLEnum(PaymentMethod))
    deposit_collected_by = Column(String(100))
    deposit_bank_ref = Column(String(100))
    number_of_persons = Column(Integer, default=1, nullable=False)
    has_gas = Column(Boolean, default=False)
    initial_gas_weight = Column(Numeric(10, 2))                # kg
    final_gas_weight = Column(Numeric(10, 2))                  # kg, set at checkout
    status = Column(SQLEnum(StayRecordStatus), default=StayRecordStatus.ACTIVE)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Links
    guest = relationship("Guest", back_populates="stay_records")
    room = relationship("Room", back_populates="stay_records", foreign_keys=[room_id])
    last_room = relationship("Room", foreign_keys=[last_room_id])
    payments = relationship("Payment", back_populates="stay_record")


class Payment(Base):
    """
    Payment record
    Refunds are stored as positive amounts with is_refund set
    """
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    stay_record_id = Column(Integer, ForeignKey("stay_records.id"), nullable=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    method = Column(SQLEnum(PaymentMethod), nullable=False)
    status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.COMPLETED)
    payment_type = Column(SQLEnum(PaymentType), default=PaymentType.RENT)
    is_refund = Column(Boolean, default=False)
    collected_by = Column(String(100), nullable=False)
    bank_ref_no = Column(String(100))
    gas_usage_charge = Column(Numeric(10, 2), default=0)
    extra_persons_charge = Column(Numeric(10, 2), default=0)
    notes = Column(Text)
    payment_time = Column(DateTime, default=datetime.now)

    # Links
    stay_record = relationship("StayRecord", back_populates="payments")
    guest = relationship("Guest")
    room = relationship("Room")


class ChargeSettingsRecord(Base):
    """
    Charge settings - a single row consulted by every charge calculation
    """
    __tablename__ = "charge_settings"

    id = Column(Integer, primary_key=True, index=True)
    price_per_kg = Column(Numeric(10, 2), nullable=False)
    extra_person_charge = Column(Numeric(10, 2), nullable=False)
    updated_by = Column(String(100))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class CleaningRecord(Base):
    """
    Cleaning record
    Opened as pending on checkout, completed when housekeeping marks the room clean
    """
    __tablename__ = "cleaning_records"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    status = Column(SQLEnum(CleaningStatus), default=CleaningStatus.PENDING)
    cleaned_by = Column(String(100))
    cleaned_at = Column(DateTime)
    notes = Column(Text)
    verified = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Links
    room = relationship("Room", back_populates="cleaning_records")


class StaffTodo(Base):
    """
    Front-desk todo item
    Open items list first; completing one records who did it and when
    """
    __tablename__ = "staff_todos"

    id = Column(Integer, primary_key=True, index=True)
    task = Column(Text, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime)
    completed_by = Column(String(100))
    created_at = Column(DateTime, default=datetime.now)


class DailyReport(Base):
    """Daily front-desk report"""
    __tablename__ = "daily_reports"

    id = Column(Integer, primary_key=True, index=True)
    report_date = Column(Date, nullable=False)
    total_rooms = Column(Integer, default=0)
    occupied_rooms = Column(Integer, default=0)
    vacant_rooms = Column(Integer, default=0)
    rooms_need_cleaning = Column(Integer, default=0)
    expected_check_ins = Column(Integer, default=0)
    expected_check_outs = Column(Integer, default=0)
    cash_in = Column(Numeric(10, 2), default=0)
    cash_out = Column(Numeric(10, 2), default=0)
    total_revenue = Column(Numeric(10, 2), default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
