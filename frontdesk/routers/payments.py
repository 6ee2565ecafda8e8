"""
Payment routes
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from frontdesk.database import get_db
from frontdesk.models.schemas import PaymentCreate, PaymentResponse, PaymentListResponse
from frontdesk.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("", response_model=PaymentListResponse)
def list_payments(
    stay_record_id: Optional[int] = None,
    day: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """Payments for a stay and/or a day, with money in and out totals"""
    service = PaymentService(db)
    if day is not None:
        payments = service.get_payments_by_date(day)
        if stay_record_id is not None:
            payments = [p for p in payments if p.stay_record_id == stay_record_id]
    else:
        payments = service.get_payments(stay_record_id=stay_record_id)
    total_in, total_out = service.totals(payments)
    return {'items': payments, 'total_in': total_in, 'total_out': total_out}


@router.post("", response_model=PaymentResponse, status_code=201)
def add_payment(data: PaymentCreate, db: Session = Depends(get_db)):
    service = PaymentService(db)
    try:
        return service.add_payment(data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
