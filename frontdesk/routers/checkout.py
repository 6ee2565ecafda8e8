"""
Checkout routes
The quote endpoints compute without writing; the plain endpoints persist.
"""
from dataclasses import asdict
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from frontdesk.database import get_db
from frontdesk.models.schemas import (
    CheckOutRequest, CheckOutResponse, SettlementResponse, StayRecordResponse
)
from frontdesk.services.checkout_service import CheckOutService
from frontdesk.services.stay_service import StayService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.get("/today-expected", response_model=List[StayRecordResponse])
def get_today_expected_checkouts(db: Session = Depends(get_db)):
    stay_service = StayService(db)
    return [stay_service.get_stay_detail(s) for s in CheckOutService(db).get_today_expected_checkouts()]


@router.get("/overdue", response_model=List[StayRecordResponse])
def get_overdue_stays(db: Session = Depends(get_db)):
    stay_service = StayService(db)
    return [stay_service.get_stay_detail(s) for s in CheckOutService(db).get_overdue_stays()]


@router.post("/{stay_id}/quote", response_model=SettlementResponse)
def quote_checkout(stay_id: int, data: CheckOutRequest, db: Session = Depends(get_db)):
    """Settlement preview for the checkout form"""
    service = CheckOutService(db)
    try:
        return asdict(service.quote_checkout(stay_id, data))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{stay_id}/early/quote", response_model=SettlementResponse)
def quote_early_checkout(stay_id: int, data: CheckOutRequest, db: Session = Depends(get_db)):
    """Refund preview for the early-checkout dialog"""
    service = CheckOutService(db)
    try:
        return asdict(service.quote_early_checkout(stay_id, data))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{stay_id}", response_model=CheckOutResponse)
def check_out(stay_id: int, data: CheckOutRequest, db: Session = Depends(get_db)):
    service = CheckOutService(db)
    try:
        result = service.check_out(stay_id, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {**result, 'settlement': asdict(result['settlement'])}


@router.post("/{stay_id}/early", response_model=CheckOutResponse)
def early_check_out(stay_id: int, data: CheckOutRequest, db: Session = Depends(get_db)):
    service = CheckOutService(db)
    try:
        result = service.early_check_out(stay_id, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {**result, 'settlement': asdict(result['settlement'])}
