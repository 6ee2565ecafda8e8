"""
Settlement engine

Combines the charge components with the deposit and decides between an amount
due and a refund. Three workflows use three distinct formulas:

- settle_standard: checkout on or after the planned date
- settle_early_deposit_offset: standard checkout form submitted before the
  planned date; refund = deposit - actual stay cost
- settle_early_prorated: early-checkout refund dialog; refund = unused nights
  + prorated extra-person charge - gas

The two early formulas give different amounts as soon as extra persons or gas
are involved. Each workflow keeps its own formula.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from frontdesk.domain.charges import (
    ZERO, ChargeSettings, DateLike, ExtraPersonPolicy, Money,
    as_datetime, calculate_extra_person_charge,
    calculate_gas_charge, calculate_room_charge, days_between, quantize, to_money,
)
from frontdesk.domain.errors import CheckoutValidationError

BANK_TRANSFER = "bank_transfer"

# Every checkout workflow bills extra persons as a flat charge for the stay
CHECKOUT_EXTRA_PERSON_POLICY = ExtraPersonPolicy.PER_STAY


class SettlementKind(str, Enum):
    STANDARD = "standard"
    EARLY_PRORATED = "early_prorated"
    EARLY_DEPOSIT_OFFSET = "early_deposit_offset"


@dataclass(frozen=True)
class StayTerms:
    """Fully resolved stay inputs for a settlement"""
    check_in: datetime
    planned_check_out: datetime
    room_rate: Decimal
    deposit_amount: Decimal = ZERO
    number_of_persons: int = 1
    has_gas: bool = False
    initial_gas_weight: Optional[Decimal] = None

    @property
    def tracks_gas(self) -> bool:
        return bool(self.has_gas) and self.initial_gas_weight is not None


@dataclass(frozen=True)
class EarlyCheckoutRefund:
    """Breakdown of the day-proration refund"""
    actual_days_stayed: int
    original_days: int
    days_not_staying: int
    room_refund: Decimal
    original_extra_person_charge: Decimal
    prorated_extra_person_charge: Decimal
    extra_person_refund: Decimal
    gas_charge: Decimal
    total_refund: Decimal


@dataclass(frozen=True)
class Settlement:
    """
    Result of a checkout computation

    At most one of amount_due / refund_amount is positive.
    """
    kind: SettlementKind
    actual_check_out: datetime
    room_charge: Decimal
    extra_person_charge: Decimal
    gas_charge: Decimal
    total_charges: Decimal
    deposit_amount: Decimal
    amount_due: Decimal
    refund_amount: Decimal
    early_refund: Optional[EarlyCheckoutRefund] = None


def _from_deposit(kind: SettlementKind, actual_check_out: DateLike,
                  room_charge: Decimal, extra_person_charge: Decimal,
                  gas_charge: Decimal, deposit_amount: Decimal) -> Settlement:
    total = room_charge + extra_person_charge + gas_charge
    return Settlement(
        kind=kind,
        actual_check_out=as_datetime(actual_check_out),
        room_charge=room_charge,
        extra_person_charge=extra_person_charge,
        gas_charge=gas_charge,
        total_charges=total,
        deposit_amount=deposit_amount,
        amount_due=max(ZERO, total - deposit_amount),
        refund_amount=max(ZERO, deposit_amount - total),
    )


def is_early_checkout(terms: StayTerms, actual_check_out: DateLike) -> bool:
    return as_datetime(actual_check_out) < as_datetime(terms.planned_check_out)


def settle_standard(terms: StayTerms, settings: Optional[ChargeSettings],
                    actual_check_out: DateLike, gas_charge: Money = ZERO) -> Settlement:
    """
    Standard or late checkout

    Room charge runs to the later of the planned and actual checkout, so the
    planned stay is always billed and late days are added on top.
    """
    end = max(as_datetime(terms.planned_check_out), as_datetime(actual_check_out))
    room_charge = calculate_room_charge(terms.room_rate, terms.check_in, end)
    extra = calculate_extra_person_charge(
        terms.number_of_persons, settings, CHECKOUT_EXTRA_PERSON_POLICY
    )
    return _from_deposit(
        SettlementKind.STANDARD, actual_check_out,
        room_charge, extra, quantize(to_money(gas_charge)), to_money(terms.deposit_amount),
    )


def settle_early_deposit_offset(terms: StayTerms, settings: Optional[ChargeSettings],
                                actual_check_out: DateLike, gas_charge: Money = ZERO) -> Settlement:
    """
    Early checkout through the standard checkout form

    Bills the nights actually used (minimum one) and offsets the deposit:
    refund = max(0, deposit - charges), amount_due = max(0, charges - deposit).
    """
    room_charge = calculate_room_charge(terms.room_rate, terms.check_in, actual_check_out)
    extra = calculate_extra_person_charge(
        terms.number_of_persons, settings, CHECKOUT_EXTRA_PERSON_POLICY
    )
    return _from_deposit(
        SettlementKind.EARLY_DEPOSIT_OFFSET, actual_check_out,
        room_charge, extra, quantize(to_money(gas_charge)), to_money(terms.deposit_amount),
    )


def calculate_early_refund(terms: StayTerms, actual_check_out: DateLike,
                           extra_person_charge: Money = ZERO,
                           gas_charge: Money = ZERO) -> EarlyCheckoutRefund:
    """
    Day-proration refund for an early checkout

    - unused nights are refunded at the room rate
    - the extra-person charge is prorated by actual/original days
    - gas is measured usage and is deducted in full
    An actual checkout before check-in is degenerate input and refunds nothing.
    """
    rate = to_money(terms.room_rate)
    extra = to_money(extra_person_charge)
    gas = quantize(to_money(gas_charge))

    actual_days = days_between(terms.check_in, actual_check_out)
    original_days = days_between(terms.check_in, terms.planned_check_out)
    days_not_staying = max(0, original_days - actual_days)
    room_refund = quantize(days_not_staying * rate)

    if original_days > 0:
        prorated = max(ZERO, extra * Decimal(actual_days) / Decimal(original_days))
    else:
        prorated = extra
    prorated = quantize(prorated)
    extra_person_refund = max(ZERO, extra - prorated)

    total_refund = max(ZERO, room_refund + extra_person_refund - gas)
    if as_datetime(actual_check_out) < as_datetime(terms.check_in):
        total_refund = ZERO

    return EarlyCheckoutRefund(
        actual_days_stayed=actual_days,
        original_days=original_days,
        days_not_staying=days_not_staying,
        room_refund=room_refund,
        original_extra_person_charge=quantize(extra),
        prorated_extra_person_charge=prorated,
        extra_person_refund=extra_person_refund,
        gas_charge=gas,
        total_refund=total_refund,
    )


def settle_early_prorated(terms: StayTerms, settings: Optional[ChargeSettings],
                          actual_check_out: DateLike, gas_charge: Money = ZERO) -> Settlement:
    """
    Early checkout through the refund dialog

    refund_amount follows the day-proration formula and does not consult the
    deposit; amount_due is always zero on this path.
    """
    extra = calculate_extra_person_charge(
        terms.number_of_persons, settings, CHECKOUT_EXTRA_PERSON_POLICY
    )
    breakdown = calculate_early_refund(terms, actual_check_out, extra, gas_charge)
    # at least one billable day; the refund breakdown keeps the raw day count
    room_charge = calculate_room_charge(terms.room_rate, terms.check_in, actual_check_out)
    total = room_charge + breakdown.prorated_extra_person_charge + breakdown.gas_charge
    return Settlement(
        kind=SettlementKind.EARLY_PRORATED,
        actual_check_out=as_datetime(actual_check_out),
        room_charge=room_charge,
        extra_person_charge=breakdown.prorated_extra_person_charge,
        gas_charge=breakdown.gas_charge,
        total_charges=total,
        deposit_amount=to_money(terms.deposit_amount),
        amount_due=ZERO,
        refund_amount=breakdown.total_refund,
        early_refund=breakdown,
    )


def settle_checkout(terms: StayTerms, settings: Optional[ChargeSettings],
                    actual_check_out: DateLike, gas_charge: Money = ZERO) -> Settlement:
    """Standard checkout form: deposit-offset when early, standard otherwise"""
    if is_early_checkout(terms, actual_check_out):
        return settle_early_deposit_offset(terms, settings, actual_check_out, gas_charge)
    return settle_standard(terms, settings, actual_check_out, gas_charge)


def gas_charge_for(terms: StayTerms, settings: Optional[ChargeSettings],
                   final_gas_weight: Optional[Money]) -> Decimal:
    """Gas charge for a stay; zero when the stay does not track gas"""
    if not terms.tracks_gas:
        return ZERO
    if final_gas_weight is None:
        raise CheckoutValidationError("Please record the final gas weight before checkout")
    return calculate_gas_charge(terms.initial_gas_weight, final_gas_weight, settings)


def validate_checkout_inputs(terms: StayTerms, collected_by: Optional[str],
                             method: Optional[str], bank_ref_no: Optional[str] = None,
                             final_gas_weight: Optional[Money] = None) -> None:
    """
    Reject checkout inputs staff must correct before settlement

    Raises:
        CheckoutValidationError: with a message suitable for the front desk
    """
    if not collected_by or not collected_by.strip():
        raise CheckoutValidationError("Please enter who collected the payment")

    if method == BANK_TRANSFER and not (bank_ref_no or "").strip():
        raise CheckoutValidationError("Please enter bank reference number")

    if terms.tracks_gas and final_gas_weight is None:
        raise CheckoutValidationError("Please record the final gas weight before checkout")
