"""
Check-in routes
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from frontdesk.database import get_db
from frontdesk.models.schemas import (
    CheckInRequest, ChargeEstimateRequest, ChargeEstimateResponse, StayRecordResponse
)
from frontdesk.services.checkin_service import CheckInService
from frontdesk.services.stay_service import StayService

router = APIRouter(prefix="/checkin", tags=["checkin"])


@router.post("", response_model=StayRecordResponse, status_code=201)
def check_in(data: CheckInRequest, db: Session = Depends(get_db)):
    """Walk-in check-in"""
    service = CheckInService(db)
    try:
        stay = service.check_in(data)
        return StayService(db).get_stay_detail(stay)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/estimate", response_model=ChargeEstimateResponse)
def estimate_charges(data: ChargeEstimateRequest, db: Session = Depends(get_db)):
    """Deposit estimate for a prospective stay"""
    service = CheckInService(db)
    try:
        return service.estimate_charges(data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/active", response_model=List[StayRecordResponse])
def get_active_stays(db: Session = Depends(get_db)):
    service = StayService(db)
    return [service.get_stay_detail(s) for s in service.get_active_stays()]


@router.get("/{stay_id}", response_model=StayRecordResponse)
def get_stay(stay_id: int, db: Session = Depends(get_db)):
    service = StayService(db)
    stay = service.get_stay(stay_id)
    if not stay:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stay record not found")
    return service.get_stay_detail(stay)
