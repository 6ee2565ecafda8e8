"""
Charge calculator

Pure functions for the three charge components of a stay:
- room charge: billable days x nightly rate, any part of a day counts as a full day
- extra-person charge: persons beyond the first x configured rate
- gas charge: kg used x configured price per kg

Rate settings are passed in explicitly as ChargeSettings. When they are missing
(None) the settings-dependent charges degrade to zero instead of blocking checkout.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union

from frontdesk.domain.errors import FrontDeskError, GasWeightError

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)
CENT = Decimal("0.01")
ZERO = Decimal("0")

DateLike = Union[date, datetime]
Money = Union[Decimal, int, float, str]


class ExtraPersonPolicy(str, Enum):
    """How the extra-person rate is applied"""
    PER_STAY = "per_stay"      # flat charge per extra person for the whole stay
    PER_NIGHT = "per_night"    # charge per extra person per billable day


@dataclass(frozen=True)
class ChargeSettings:
    """Rates consulted by the charge calculator"""
    price_per_kg: Decimal
    extra_person_charge: Decimal

    @classmethod
    def of(cls, price_per_kg: Money, extra_person_charge: Money) -> "ChargeSettings":
        return cls(price_per_kg=to_money(price_per_kg),
                   extra_person_charge=to_money(extra_person_charge))


def to_money(value: Optional[Money]) -> Decimal:
    """Coerce a numeric value to Decimal without float artefacts (None -> 0)"""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def as_datetime(value: DateLike) -> datetime:
    """
    Plain dates are treated as midnight

    Aware datetimes are converted to naive local time, the form stays are stored in.
    """
    if isinstance(value, datetime):
        return to_local_naive(value)
    return datetime.combine(value, time.min)


def days_between(start: DateLike, end: DateLike) -> int:
    """
    Whole days from start to end, rounding any partial day up

    The difference keeps sub-day precision, so 2 days and 1 hour is 3 days.
    May be zero or negative when end does not come after start.
    """
    return math.ceil((as_datetime(end) - as_datetime(start)) / ONE_DAY)


def billable_days(start: DateLike, end: DateLike) -> int:
    """Days charged for a stay; never less than one"""
    return max(1, days_between(start, end))


def calculate_room_charge(room_rate: Money, check_in: DateLike, end: DateLike) -> Decimal:
    """
    Room charge from check-in to end (planned or actual checkout)

    Args:
        room_rate: nightly rate, must be positive
        check_in: check-in timestamp
        end: planned or actual checkout timestamp

    Returns:
        billable_days x room_rate
    """
    rate = to_money(room_rate)
    if rate <= 0:
        raise FrontDeskError("Room rate must be greater than zero")
    return quantize(billable_days(check_in, end) * rate)


def calculate_extra_person_charge(number_of_persons: Optional[int],
                                  settings: Optional[ChargeSettings],
                                  policy: ExtraPersonPolicy = ExtraPersonPolicy.PER_STAY,
                                  days: int = 1) -> Decimal:
    """
    Charge for every person beyond the first

    Never raises: missing settings give a zero charge.
    """
    extra_persons = max(0, (number_of_persons or 1) - 1)
    if extra_persons == 0:
        return ZERO

    if settings is None:
        logger.warning("Charge settings unavailable, extra-person charge defaults to 0")
        return ZERO

    charge = extra_persons * settings.extra_person_charge
    if policy == ExtraPersonPolicy.PER_NIGHT:
        charge = charge * max(1, days)
    return quantize(max(ZERO, charge))


def calculate_gas_charge(initial_weight: Money, final_weight: Money,
                         settings: Optional[ChargeSettings]) -> Decimal:
    """
    Charge for gas used during the stay

    Raises:
        GasWeightError: final weight is greater than the initial weight
    """
    initial = to_money(initial_weight)
    final = to_money(final_weight)
    if final > initial:
        raise GasWeightError("Final weight cannot exceed initial weight")

    if settings is None:
        logger.warning("Charge settings unavailable, gas charge defaults to 0")
        return ZERO

    used = max(ZERO, initial - final)
    return quantize(used * settings.price_per_kg)
