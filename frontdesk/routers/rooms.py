"""
Room routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from frontdesk.database import get_db
from frontdesk.models.ontology import RoomStatus, RoomCategory
from frontdesk.models.schemas import (
    RoomCreate, RoomUpdate, RoomResponse, RoomStatusUpdate,
    CleaningComplete, CleaningRecordResponse
)
from frontdesk.services.room_service import RoomService

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    status: Optional[RoomStatus] = None,
    room_type: Optional[RoomCategory] = None,
    db: Session = Depends(get_db)
):
    service = RoomService(db)
    return [service.get_room_with_guest(r) for r in service.get_rooms(status, room_type)]


@router.get("/summary")
def get_room_status_summary(db: Session = Depends(get_db)):
    """Room counts by status"""
    return RoomService(db).get_room_status_summary()


@router.post("", response_model=RoomResponse, status_code=201)
def create_room(data: RoomCreate, db: Session = Depends(get_db)):
    service = RoomService(db)
    try:
        room = service.create_room(data)
        return service.get_room_with_guest(room)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, db: Session = Depends(get_db)):
    service = RoomService(db)
    room = service.get_room(room_id)
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return service.get_room_with_guest(room)


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(room_id: int, data: RoomUpdate, db: Session = Depends(get_db)):
    service = RoomService(db)
    try:
        room = service.update_room(room_id, data)
        return service.get_room_with_guest(room)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{room_id}")
def delete_room(room_id: int, db: Session = Depends(get_db)):
    service = RoomService(db)
    try:
        service.delete_room(room_id)
        return {"message": "Room deleted"}
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.patch("/{room_id}/status", response_model=RoomResponse)
def update_room_status(room_id: int, data: RoomStatusUpdate, db: Session = Depends(get_db)):
    """Manual maintenance on/off"""
    service = RoomService(db)
    try:
        room = service.update_room_status(room_id, data.status, data.changed_by, data.reason)
        return service.get_room_with_guest(room)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{room_id}/clean", response_model=CleaningRecordResponse)
def complete_cleaning(room_id: int, data: CleaningComplete, db: Session = Depends(get_db)):
    service = RoomService(db)
    try:
        return service.complete_cleaning(room_id, data.cleaned_by, data.notes)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{room_id}/cleaning", response_model=List[CleaningRecordResponse])
def list_cleaning_records(room_id: int, db: Session = Depends(get_db)):
    return RoomService(db).get_cleaning_records(room_id)
