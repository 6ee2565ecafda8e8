# Business Services
from frontdesk.services.room_service import RoomService
from frontdesk.services.stay_service import StayService
from frontdesk.services.guest_service import GuestService
from frontdesk.services.checkin_service import CheckInService
from frontdesk.services.checkout_service import CheckOutService
from frontdesk.services.payment_service import PaymentService
from frontdesk.services.settings_service import SettingsService
from frontdesk.services.report_service import ReportService
from frontdesk.services.todo_service import TodoService

__all__ = [
    'RoomService', 'StayService', 'GuestService', 'CheckInService', 'CheckOutService',
    'PaymentService', 'SettingsService', 'ReportService', 'TodoService',
]
