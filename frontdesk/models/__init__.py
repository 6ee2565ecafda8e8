# Ontology Models
from frontdesk.models.ontology import (
    Room, Guest, StayRecord, Payment, ChargeSettingsRecord,
    CleaningRecord, DailyReport, StaffTodo
)

__all__ = [
    'Room', 'Guest', 'StayRecord', 'Payment', 'ChargeSettingsRecord',
    'CleaningRecord', 'DailyReport', 'StaffTodo'
]
