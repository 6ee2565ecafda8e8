"""
Pytest configuration and shared fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from frontdesk.database import Base, get_db
from frontdesk.models import ontology  # noqa
from frontdesk.models.ontology import Room, RoomStatus, RoomCategory, Guest, StayRecord, StayRecordStatus
from frontdesk.services.event_handlers import event_handlers
from frontdesk.main import app

CHECK_IN = datetime(2026, 3, 1, 12, 0)


@pytest.fixture(scope="function")
def db_engine():
    """In-memory database engine"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_engine, db_session, monkeypatch):
    """Test client; event handlers write to the test database"""
    def override_get_db():
        yield db_session

    monkeypatch.setattr(
        event_handlers, "_db_session_factory",
        sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    )
    # lifespan re-subscribes even if another test cleared the bus
    monkeypatch.setattr(event_handlers, "_registered", False)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def published():
    """Event sink for services under test"""
    return []


# ============== Sample data ==============

def make_room(db, number="101", rate="80", status=RoomStatus.VACANT, has_gas=False,
              room_type=RoomCategory.SINGLE):
    room = Room(room_number=number, room_type=room_type, rate=Decimal(rate),
                status=status, has_gas=has_gas)
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


def make_guest(db, name="Alice Moyo", phone="0771000001"):
    guest = Guest(name=name, phone=phone)
    db.add(guest)
    db.commit()
    db.refresh(guest)
    return guest


def make_stay(db, room, guest, check_in=CHECK_IN, expected_out=None, deposit="0",
              persons=1, has_gas=False, initial_gas=None):
    """Active stay occupying the room"""
    stay = StayRecord(
        guest_id=guest.id,
        room_id=room.id,
        last_room_id=room.id,
        check_in_time=check_in,
        expected_check_out=expected_out or datetime(2026, 3, 4, 12, 0),
        deposit_amount=Decimal(deposit),
        number_of_persons=persons,
        has_gas=has_gas,
        initial_gas_weight=Decimal(initial_gas) if initial_gas is not None else None,
        status=StayRecordStatus.ACTIVE,
    )
    room.status = RoomStatus.OCCUPIED
    db.add(stay)
    db.commit()
    db.refresh(stay)
    return stay


@pytest.fixture
def room(db_session):
    return make_room(db_session)


@pytest.fixture
def guest(db_session):
    return make_guest(db_session)


@pytest.fixture
def stay(db_session, room, guest):
    """Rate 80, three nights from 2026-03-01 12:00, deposit 100"""
    return make_stay(db_session, room, guest, deposit="100")
