"""
Event handlers
Follow-up bookkeeping triggered by front-desk events
"""
from typing import Callable
import logging

from frontdesk.database import SessionLocal
from frontdesk.models.events import EventType
from frontdesk.models.ontology import CleaningRecord, CleaningStatus
from frontdesk.services.event_bus import event_bus, Event

logger = logging.getLogger(__name__)


class EventHandlers:
    """
    Event handler collection

    db_session_factory is injectable so tests can point handlers at their own engine.
    """

    def __init__(self, db_session_factory: Callable = None):
        self._db_session_factory = db_session_factory or SessionLocal
        self._registered = False

    def _get_db(self):
        return self._db_session_factory()

    def handle_guest_checked_out(self, event: Event) -> None:
        """Open a pending cleaning record for the room the guest just left"""
        db = self._get_db()
        try:
            room_id = event.data.get('room_id')
            if not room_id:
                logger.warning("Invalid checkout event: missing room_id")
                return

            pending = db.query(CleaningRecord).filter(
                CleaningRecord.room_id == room_id,
                CleaningRecord.status == CleaningStatus.PENDING
            ).first()
            if pending:
                logger.info(f"Room {event.data.get('room_number')} already has a pending cleaning record")
                return

            record = CleaningRecord(
                room_id=room_id,
                status=CleaningStatus.PENDING,
                notes=f"Checkout of {event.data.get('guest_name', '')}".strip(),
            )
            db.add(record)
            db.commit()
            logger.info(f"Cleaning record {record.id} opened for room {event.data.get('room_number')}")
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to open cleaning record: {e}", exc_info=True)
        finally:
            db.close()

    def register_handlers(self, event_bus_instance=None) -> None:
        if self._registered:
            return

        bus = event_bus_instance or event_bus
        bus.subscribe(EventType.GUEST_CHECKED_OUT, self.handle_guest_checked_out)

        self._registered = True
        logger.info("Event handlers registered")

    def unregister_handlers(self, event_bus_instance=None) -> None:
        """Remove the subscriptions (tests)"""
        bus = event_bus_instance or event_bus
        bus.unsubscribe(EventType.GUEST_CHECKED_OUT, self.handle_guest_checked_out)

        self._registered = False
        logger.info("Event handlers unregistered")


# Global handler instance
event_handlers = EventHandlers()


def register_event_handlers():
    """Register all handlers (application startup)"""
    event_handlers.register_handlers()
