"""
Guest routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from frontdesk.database import get_db
from frontdesk.models.schemas import (
    GuestUpdate, GuestResponse, GuestDetailResponse, GuestStayHistoryItem
)
from frontdesk.services.guest_service import GuestService

router = APIRouter(prefix="/guests", tags=["guests"])


@router.get("", response_model=List[GuestResponse])
def list_guests(
    search: Optional[str] = None,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """Guest list, searchable by name, phone or ID number"""
    return GuestService(db).get_guests(search=search, limit=limit)


@router.get("/{guest_id}", response_model=GuestDetailResponse)
def get_guest(guest_id: int, db: Session = Depends(get_db)):
    service = GuestService(db)
    guest = service.get_guest(guest_id)
    if not guest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")
    return service.get_guest_detail(guest)


@router.put("/{guest_id}", response_model=GuestResponse)
def update_guest(guest_id: int, data: GuestUpdate, db: Session = Depends(get_db)):
    service = GuestService(db)
    if not service.get_guest(guest_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")
    try:
        return service.update_guest(guest_id, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{guest_id}/stay-history", response_model=List[GuestStayHistoryItem])
def get_stay_history(guest_id: int, limit: int = 10, db: Session = Depends(get_db)):
    service = GuestService(db)
    if not service.get_guest(guest_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")
    return service.get_guest_stay_history(guest_id, limit)
