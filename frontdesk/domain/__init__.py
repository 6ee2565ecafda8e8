# Stay billing domain: pure charge and settlement calculations
from frontdesk.domain.errors import FrontDeskError, CheckoutValidationError, GasWeightError
from frontdesk.domain.charges import (
    ChargeSettings, ExtraPersonPolicy,
    billable_days, days_between,
    calculate_room_charge, calculate_extra_person_charge, calculate_gas_charge,
)
from frontdesk.domain.settlement import (
    StayTerms, Settlement, SettlementKind, EarlyCheckoutRefund,
    is_early_checkout, settle_standard, settle_early_prorated,
    settle_early_deposit_offset, settle_checkout, calculate_early_refund,
    gas_charge_for, validate_checkout_inputs,
)

__all__ = [
    'FrontDeskError', 'CheckoutValidationError', 'GasWeightError',
    'ChargeSettings', 'ExtraPersonPolicy', 'billable_days', 'days_between',
    'calculate_room_charge', 'calculate_extra_person_charge', 'calculate_gas_charge',
    'StayTerms', 'Settlement', 'SettlementKind', 'EarlyCheckoutRefund',
    'is_early_checkout', 'settle_standard', 'settle_early_prorated',
    'settle_early_deposit_offset', 'settle_checkout', 'calculate_early_refund',
    'gas_charge_for', 'validate_checkout_inputs',
]
