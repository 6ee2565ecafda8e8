"""
Tests for frontdesk/domain/charges.py
"""
import logging
import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from frontdesk.domain.charges import (
    ChargeSettings, ExtraPersonPolicy, as_datetime, billable_days, calculate_extra_person_charge,
    calculate_gas_charge, calculate_room_charge, days_between, to_money,
)
from frontdesk.domain.errors import FrontDeskError, GasWeightError

CHECK_IN = datetime(2026, 3, 1, 12, 0)
SETTINGS = ChargeSettings.of(100, 50)


class TestDays:
    """Day counting"""

    def test_whole_days(self):
        assert days_between(CHECK_IN, CHECK_IN + timedelta(days=3)) == 3

    def test_partial_day_rounds_up(self):
        assert days_between(CHECK_IN, CHECK_IN + timedelta(days=2, hours=1)) == 3
        assert days_between(CHECK_IN, CHECK_IN + timedelta(minutes=1)) == 1

    def test_negative_when_end_before_start(self):
        assert days_between(CHECK_IN, CHECK_IN - timedelta(days=1)) == -1

    def test_plain_dates_are_midnight(self):
        assert days_between(date(2026, 3, 1), date(2026, 3, 4)) == 3
        assert days_between(date(2026, 3, 1), datetime(2026, 3, 1, 0, 30)) == 1

    def test_offset_aware_times_become_local_naive(self):
        aware = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)
        local = as_datetime(aware)
        assert local.tzinfo is None
        assert local == aware.astimezone().replace(tzinfo=None)
        # mixes with naive check-in times without raising
        assert days_between(CHECK_IN, aware) >= 2

    def test_billable_days_minimum_one(self):
        assert billable_days(CHECK_IN, CHECK_IN) == 1
        assert billable_days(CHECK_IN, CHECK_IN - timedelta(hours=5)) == 1


class TestRoomCharge:

    def test_three_nights(self):
        assert calculate_room_charge(Decimal("80"), CHECK_IN, CHECK_IN + timedelta(days=3)) == Decimal("240.00")

    def test_same_moment_bills_one_day(self):
        assert calculate_room_charge(80, CHECK_IN, CHECK_IN) == Decimal("80.00")

    def test_partial_day_is_full_day(self):
        end = CHECK_IN + timedelta(days=2, hours=1)
        assert calculate_room_charge("80", CHECK_IN, end) == Decimal("240.00")

    @pytest.mark.parametrize("rate", [0, -10])
    def test_rate_must_be_positive(self, rate):
        with pytest.raises(FrontDeskError):
            calculate_room_charge(rate, CHECK_IN, CHECK_IN + timedelta(days=1))

    def test_rate_error_is_value_error(self):
        with pytest.raises(ValueError, match="Room rate"):
            calculate_room_charge(0, CHECK_IN, CHECK_IN)

    def test_same_inputs_same_result(self):
        end = CHECK_IN + timedelta(days=4, hours=3)
        assert calculate_room_charge(75, CHECK_IN, end) == calculate_room_charge(75, CHECK_IN, end)


class TestExtraPersonCharge:

    def test_single_guest_pays_nothing(self):
        assert calculate_extra_person_charge(1, SETTINGS) == Decimal("0")

    def test_missing_persons_counts_as_one(self):
        assert calculate_extra_person_charge(None, SETTINGS) == Decimal("0")

    def test_per_stay(self):
        assert calculate_extra_person_charge(3, SETTINGS) == Decimal("100.00")

    def test_per_stay_ignores_days(self):
        assert calculate_extra_person_charge(3, SETTINGS, ExtraPersonPolicy.PER_STAY, days=5) == Decimal("100.00")

    def test_per_night(self):
        assert calculate_extra_person_charge(3, SETTINGS, ExtraPersonPolicy.PER_NIGHT, days=3) == Decimal("300.00")

    def test_per_night_minimum_one_day(self):
        assert calculate_extra_person_charge(2, SETTINGS, ExtraPersonPolicy.PER_NIGHT, days=0) == Decimal("50.00")

    def test_missing_settings_degrade_to_zero(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert calculate_extra_person_charge(4, None) == Decimal("0")
        assert "extra-person charge defaults to 0" in caplog.text


class TestGasCharge:

    def test_usage_times_price(self):
        assert calculate_gas_charge(Decimal("14.2"), Decimal("3.1"), SETTINGS) == Decimal("1110.00")

    def test_equal_weights_charge_nothing(self):
        assert calculate_gas_charge(10, 10, SETTINGS) == Decimal("0")

    def test_final_above_initial_rejected(self):
        with pytest.raises(GasWeightError, match="cannot exceed"):
            calculate_gas_charge(10, 15, SETTINGS)

    def test_final_above_initial_rejected_without_settings(self):
        with pytest.raises(GasWeightError):
            calculate_gas_charge(10, 15, None)

    def test_missing_settings_degrade_to_zero(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert calculate_gas_charge(10, 4, None) == Decimal("0")
        assert "gas charge defaults to 0" in caplog.text

    def test_float_weights_have_no_float_artefacts(self):
        assert calculate_gas_charge(0.3, 0.1, ChargeSettings.of("10", "0")) == Decimal("2.00")


class TestToMoney:

    def test_none_is_zero(self):
        assert to_money(None) == Decimal("0")

    def test_float_goes_through_str(self):
        assert to_money(0.1) == Decimal("0.1")
