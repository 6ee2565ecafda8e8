"""
Tests for frontdesk/services/checkout_service.py
Covers: quote (pure recompute), check_out, early_check_out, retries and queries
"""
import pytest
from datetime import datetime
from decimal import Decimal

from conftest import make_room, make_guest, make_stay
from frontdesk.domain.errors import CheckoutValidationError
from frontdesk.domain.settlement import SettlementKind
from frontdesk.models.events import EventType
from frontdesk.models.ontology import (
    ChargeSettingsRecord, Payment, PaymentType, RoomStatus, StayRecordStatus
)
from frontdesk.models.schemas import CheckOutRequest
from frontdesk.services.checkout_service import CheckOutService


# ── helpers ──────────────────────────────────────────────────────────

def _service(db, published, now=datetime(2026, 3, 4, 12, 0)):
    return CheckOutService(db, event_publisher=published.append, clock=lambda: now)


def _request(actual=None, **kwargs):
    kwargs.setdefault("collected_by", "Tendai")
    return CheckOutRequest(actual_check_out=actual, **kwargs)


def _settings(db, price_per_kg="100", extra="50"):
    db.add(ChargeSettingsRecord(price_per_kg=Decimal(price_per_kg), extra_person_charge=Decimal(extra)))
    db.commit()


# ── quote ────────────────────────────────────────────────────────────

class TestQuote:

    def test_quote_writes_nothing(self, db_session, stay, published):
        service = _service(db_session, published)
        s = service.quote_checkout(stay.id, _request(datetime(2026, 3, 4, 12, 0)))
        assert s.kind == SettlementKind.STANDARD
        assert s.amount_due == Decimal("140")
        db_session.refresh(stay)
        assert stay.status == StayRecordStatus.ACTIVE
        assert db_session.query(Payment).count() == 0
        assert published == []

    def test_quote_is_repeatable(self, db_session, stay, published):
        service = _service(db_session, published)
        data = _request(datetime(2026, 3, 5, 9, 0))
        assert service.quote_checkout(stay.id, data) == service.quote_checkout(stay.id, data)

    def test_quote_defaults_to_clock(self, db_session, stay, published):
        s = _service(db_session, published, now=datetime(2026, 3, 2, 10, 0)).quote_checkout(
            stay.id, _request()
        )
        assert s.kind == SettlementKind.EARLY_DEPOSIT_OFFSET
        assert s.actual_check_out == datetime(2026, 3, 2, 10, 0)

    def test_quote_does_not_need_collector(self, db_session, stay, published):
        s = _service(db_session, published).quote_checkout(stay.id, CheckOutRequest())
        assert s.total_charges == Decimal("240")

    def test_quote_reads_current_settings(self, db_session, room, guest, published):
        stay = make_stay(db_session, room, guest, persons=3)
        service = _service(db_session, published)
        assert service.quote_checkout(stay.id, _request()).extra_person_charge == Decimal("100")
        _settings(db_session, extra="70")
        assert service.quote_checkout(stay.id, _request()).extra_person_charge == Decimal("140")

    def test_early_quote(self, db_session, room, guest, published):
        stay = make_stay(db_session, room, guest, expected_out=datetime(2026, 3, 11, 12, 0), deposit="800")
        s = _service(db_session, published).quote_early_checkout(stay.id, _request(datetime(2026, 3, 5, 12, 0)))
        assert s.kind == SettlementKind.EARLY_PRORATED
        assert s.refund_amount == Decimal("480")
        assert s.early_refund.days_not_staying == 6

    def test_early_quote_rejects_on_time_checkout(self, db_session, stay, published):
        with pytest.raises(CheckoutValidationError, match="standard checkout"):
            _service(db_session, published).quote_early_checkout(stay.id, _request(datetime(2026, 3, 4, 12, 0)))

    def test_checkout_before_check_in_rejected(self, db_session, stay, published):
        with pytest.raises(CheckoutValidationError, match="before check-in"):
            _service(db_session, published).quote_early_checkout(stay.id, _request(datetime(2026, 2, 27)))

    def test_unknown_stay(self, db_session, published):
        with pytest.raises(ValueError, match="Stay record not found"):
            _service(db_session, published).quote_checkout(999, _request())


# ── persist ──────────────────────────────────────────────────────────

class TestCheckOut:

    def test_standard_checkout_records_rent(self, db_session, stay, room, published):
        result = _service(db_session, published).check_out(stay.id, _request(datetime(2026, 3, 4, 11, 0)))

        assert result['settlement'].amount_due == Decimal("140")
        payment = db_session.query(Payment).one()
        assert result['payment_id'] == payment.id
        assert payment.payment_type == PaymentType.RENT
        assert payment.amount == Decimal("140")
        assert payment.is_refund is False
        assert payment.collected_by == "Tendai"
        assert payment.notes.startswith("rent: ")

        db_session.refresh(stay)
        db_session.refresh(room)
        assert stay.status == StayRecordStatus.CHECKED_OUT
        assert stay.room_id is None
        assert stay.last_room_id == room.id
        assert stay.check_out_time == datetime(2026, 3, 4, 11, 0)
        assert room.status == RoomStatus.CLEANING

    def test_events_published_after_commit(self, db_session, stay, room, published):
        _service(db_session, published).check_out(stay.id, _request(datetime(2026, 3, 4, 12, 0)))
        types = [e.event_type for e in published]
        assert types[:2] == [EventType.GUEST_CHECKED_OUT, EventType.ROOM_STATUS_CHANGED]
        assert EventType.PAYMENT_RECEIVED in types
        checked_out = published[0].data
        assert checked_out['room_id'] == room.id
        assert checked_out['settlement_kind'] == "standard"
        assert checked_out['amount_due'] == 140.0

    def test_room_cleaning_fields_cleared(self, db_session, room, guest, published):
        room.last_cleaned = datetime(2026, 2, 28, 9, 0)
        room.cleaned_by = "Rudo"
        db_session.commit()
        stay = make_stay(db_session, room, guest)
        _service(db_session, published).check_out(stay.id, _request())
        db_session.refresh(room)
        assert room.last_cleaned is None
        assert room.cleaned_by is None

    def test_early_form_submission_refunds_deposit_balance(self, db_session, room, guest, published):
        stay = make_stay(db_session, room, guest, expected_out=datetime(2026, 3, 11, 12, 0), deposit="800")
        result = _service(db_session, published).check_out(stay.id, _request(datetime(2026, 3, 5, 12, 0)))
        assert result['settlement'].kind == SettlementKind.EARLY_DEPOSIT_OFFSET
        payment = db_session.query(Payment).one()
        assert payment.payment_type == PaymentType.REFUND
        assert payment.is_refund is True
        assert payment.amount == Decimal("480")

    def test_no_payment_when_deposit_covers_exactly(self, db_session, room, guest, published):
        stay = make_stay(db_session, room, guest, deposit="240")
        result = _service(db_session, published).check_out(stay.id, _request())
        assert result['payment_id'] is None
        assert db_session.query(Payment).count() == 0

    def test_gas_stay_needs_final_weight(self, db_session, room, guest, published):
        stay = make_stay(db_session, room, guest, has_gas=True, initial_gas="14.2")
        with pytest.raises(CheckoutValidationError, match="final gas weight"):
            _service(db_session, published).check_out(stay.id, _request())
        db_session.refresh(stay)
        assert stay.status == StayRecordStatus.ACTIVE

    def test_gas_and_extra_persons_on_payment(self, db_session, guest, published):
        room = make_room(db_session, number="201", rate="50", has_gas=True)
        stay = make_stay(db_session, room, guest, persons=3, has_gas=True, initial_gas="14.2")
        result = _service(db_session, published).check_out(
            stay.id, _request(final_gas_weight=Decimal("3.1"))
        )
        assert result['settlement'].total_charges == Decimal("1360")
        payment = db_session.query(Payment).one()
        assert payment.gas_usage_charge == Decimal("1110")
        assert payment.extra_persons_charge == Decimal("100")
        db_session.refresh(stay)
        assert stay.final_gas_weight == Decimal("3.1")

    def test_final_weight_above_initial_blocks_checkout(self, db_session, guest, published):
        room = make_room(db_session, number="202", has_gas=True)
        stay = make_stay(db_session, room, guest, has_gas=True, initial_gas="10")
        with pytest.raises(ValueError, match="cannot exceed"):
            _service(db_session, published).check_out(stay.id, _request(final_gas_weight=Decimal("15")))

    def test_collector_required(self, db_session, stay, published):
        with pytest.raises(CheckoutValidationError, match="who collected"):
            _service(db_session, published).check_out(stay.id, CheckOutRequest(collected_by=" "))

    def test_bank_transfer_needs_reference(self, db_session, stay, published):
        with pytest.raises(CheckoutValidationError, match="bank reference"):
            _service(db_session, published).check_out(
                stay.id, _request(payment_method="bank_transfer")
            )

    def test_retry_after_commit_rejected(self, db_session, stay, published):
        service = _service(db_session, published)
        service.check_out(stay.id, _request())
        with pytest.raises(ValueError, match="already checked out"):
            service.check_out(stay.id, _request())
        assert db_session.query(Payment).count() == 1

    def test_persisted_amount_matches_quote(self, db_session, room, guest, published):
        stay = make_stay(db_session, room, guest, persons=2, deposit="50")
        service = _service(db_session, published)
        data = _request(datetime(2026, 3, 6, 15, 0))
        quote = service.quote_checkout(stay.id, data)
        result = service.check_out(stay.id, data)
        assert result['settlement'] == quote


class TestEarlyCheckOut:

    def test_refund_recorded(self, db_session, room, guest, published):
        stay = make_stay(db_session, room, guest, expected_out=datetime(2026, 3, 11, 12, 0),
                         deposit="800", persons=3)
        result = _service(db_session, published).early_check_out(
            stay.id, _request(datetime(2026, 3, 6, 12, 0), notes="Early checkout refund")
        )
        s = result['settlement']
        assert s.kind == SettlementKind.EARLY_PRORATED
        # 5 unused nights at 80 plus half of the 100 extra-person charge
        assert s.refund_amount == Decimal("450")
        payment = db_session.query(Payment).one()
        assert payment.is_refund is True
        assert payment.amount == Decimal("450")
        assert payment.notes == "Early checkout refund"

        db_session.refresh(room)
        assert room.status == RoomStatus.CLEANING

    def test_zero_refund_records_no_payment(self, db_session, room, guest, published):
        stay = make_stay(db_session, room, guest, expected_out=datetime(2026, 3, 4, 12, 0),
                         has_gas=True, initial_gas="20")
        result = _service(db_session, published).early_check_out(
            stay.id, _request(datetime(2026, 3, 3, 12, 0), final_gas_weight=Decimal("10"))
        )
        assert result['settlement'].refund_amount == 0
        assert result['payment_id'] is None
        assert db_session.query(Payment).count() == 0

    def test_not_early_rejected(self, db_session, stay, published):
        with pytest.raises(CheckoutValidationError):
            _service(db_session, published).early_check_out(stay.id, _request(datetime(2026, 3, 5)))
        db_session.refresh(stay)
        assert stay.status == StayRecordStatus.ACTIVE


class TestQueries:

    def test_today_expected(self, db_session, room, guest, published):
        make_stay(db_session, room, guest, expected_out=datetime(2026, 3, 4, 11, 0))
        other = make_room(db_session, number="102")
        make_stay(db_session, other, make_guest(db_session, phone="0771000002"),
                  expected_out=datetime(2026, 3, 6, 11, 0))
        stays = _service(db_session, published).get_today_expected_checkouts()
        assert [s.room_id for s in stays] == [room.id]

    def test_overdue(self, db_session, room, guest, published):
        make_stay(db_session, room, guest, expected_out=datetime(2026, 3, 3, 11, 0))
        stays = _service(db_session, published).get_overdue_stays()
        assert len(stays) == 1
