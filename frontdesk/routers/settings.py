"""
Charge settings routes
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from frontdesk.database import get_db
from frontdesk.models.schemas import ChargeSettingsUpdate, ChargeSettingsResponse
from frontdesk.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/charges", response_model=ChargeSettingsResponse)
def get_charge_settings(db: Session = Depends(get_db)):
    service = SettingsService(db)
    charges = service.get_charge_settings()
    if charges is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Charge settings unavailable"
        )
    return {
        'price_per_kg': charges.price_per_kg,
        'extra_person_charge': charges.extra_person_charge,
        'is_default': service.is_default(),
    }


@router.put("/charges", response_model=ChargeSettingsResponse)
def update_charge_settings(data: ChargeSettingsUpdate, db: Session = Depends(get_db)):
    record = SettingsService(db).save_charge_settings(data)
    return {
        'price_per_kg': record.price_per_kg,
        'extra_person_charge': record.extra_person_charge,
        'is_default': False,
    }
