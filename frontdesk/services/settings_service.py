"""
Charge settings service
Single-row settings consulted by every charge calculation; never cached
"""
from typing import Callable, Optional
from datetime import datetime
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.config import settings as app_settings
from frontdesk.domain.charges import ChargeSettings
from frontdesk.models.ontology import ChargeSettingsRecord
from frontdesk.models.schemas import ChargeSettingsUpdate
from frontdesk.models.events import EventType, ChargeSettingsUpdatedData
from frontdesk.services.event_bus import event_bus, Event

logger = logging.getLogger(__name__)


def default_charge_settings() -> ChargeSettings:
    return ChargeSettings.of(
        app_settings.DEFAULT_PRICE_PER_KG,
        app_settings.DEFAULT_EXTRA_PERSON_CHARGE,
    )


class SettingsService:
    """Charge settings service"""

    def __init__(self, db: Session, event_publisher: Callable[[Event], None] = None):
        self.db = db
        self._publish_event = event_publisher or event_bus.publish

    def get_settings_record(self) -> Optional[ChargeSettingsRecord]:
        return self.db.query(ChargeSettingsRecord).order_by(ChargeSettingsRecord.id).first()

    def get_charge_settings(self) -> Optional[ChargeSettings]:
        """
        Load the charge settings

        Returns:
            the saved settings, the configured defaults when none were saved,
            or None when the store cannot be read (callers charge zero)
        """
        try:
            record = self.get_settings_record()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Charge settings unavailable: {e}")
            return None

        if record is None:
            logger.debug("No charge settings saved, using defaults")
            return default_charge_settings()

        return ChargeSettings.of(record.price_per_kg, record.extra_person_charge)

    def is_default(self) -> bool:
        """True while no settings row has been saved"""
        return self.get_settings_record() is None

    def save_charge_settings(self, data: ChargeSettingsUpdate) -> ChargeSettingsRecord:
        """Insert or update the settings row"""
        record = self.get_settings_record()
        if record is None:
            record = ChargeSettingsRecord(
                price_per_kg=data.price_per_kg,
                extra_person_charge=data.extra_person_charge,
                updated_by=data.updated_by,
            )
            self.db.add(record)
        else:
            record.price_per_kg = data.price_per_kg
            record.extra_person_charge = data.extra_person_charge
            record.updated_by = data.updated_by

        self.db.commit()
        self.db.refresh(record)
        logger.info(
            f"Charge settings updated: price_per_kg={record.price_per_kg}, "
            f"extra_person_charge={record.extra_person_charge}"
        )

        self._publish_event(Event(
            event_type=EventType.CHARGE_SETTINGS_UPDATED,
            timestamp=datetime.now(),
            data=ChargeSettingsUpdatedData(
                price_per_kg=float(record.price_per_kg),
                extra_person_charge=float(record.extra_person_charge),
                updated_by=record.updated_by or "",
            ).to_dict(),
            source="settings_service"
        ))
        return record
